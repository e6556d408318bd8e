"""
ComicShelf Backend — Archive Source Selection
===============================================

What:  Opens an archive with the reader matching its file suffix.
Who:   Called by the application lifespan with settings.archive_path.
"""

import logging
from pathlib import Path
from typing import Callable, Dict

from comicshelf.exceptions import ArchiveOpenError
from comicshelf.services.archive_base import ArchiveSource
from comicshelf.services.sevenzip_archive import SevenZipArchiveSource
from comicshelf.services.zip_archive import ZipArchiveSource

logger = logging.getLogger(__name__)

ARCHIVE_READERS: Dict[str, Callable[[str], ArchiveSource]] = {
    ".7z": SevenZipArchiveSource,
    ".zip": ZipArchiveSource,
    ".cbz": ZipArchiveSource,
}


def open_archive(path: str) -> ArchiveSource:
    """
    Open the archive at `path`.

    Raises:
        ArchiveOpenError: If the suffix is not supported, the file does not
            exist, or the reader fails to parse it.
    """
    suffix = Path(path).suffix.lower()
    reader = ARCHIVE_READERS.get(suffix)
    if reader is None:
        raise ArchiveOpenError(
            message=(
                f"Archive type '{suffix or path}' is not supported. "
                f"Supported types: {', '.join(sorted(ARCHIVE_READERS))}"
            ),
            path=path,
        )
    if not Path(path).is_file():
        raise ArchiveOpenError(message="Archive file does not exist", path=path)

    logger.info("Opening archive %s", path)
    return reader(path)
