"""
ComicShelf Backend — Zip Archive Source
=========================================

What:  ArchiveSource implementation for .zip archives using stdlib `zipfile`.
Why:   Zip members can be opened at random without decompressing anything
       else, which makes it the cheapest container to serve from.
How:   One ZipFile handle is kept open for the life of the process. zipfile
       allows several members to be open for reading at the same time from
       different threads, so every request opens its own member stream.
"""

import logging
import stat
import zipfile
import zlib
from typing import BinaryIO, Iterator

from comicshelf.exceptions import ArchiveOpenError
from comicshelf.services.archive_base import (
    ArchiveEntry,
    ArchiveSource,
    normalize_entry_path,
)

logger = logging.getLogger(__name__)


def _is_regular(info: zipfile.ZipInfo) -> bool:
    if info.is_dir():
        return False
    # Unix mode lives in the high 16 bits; writers that don't record a file
    # type (Windows tools, ZipFile.writestr) leave S_IFMT at zero
    mode = info.external_attr >> 16
    return stat.S_IFMT(mode) == 0 or stat.S_ISREG(mode)


class ZipArchiveEntry(ArchiveEntry):
    """A member of a ZipArchiveSource."""

    def __init__(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo):
        super().__init__(
            path=normalize_entry_path(info.filename),
            is_regular=_is_regular(info),
            size=info.file_size,
        )
        self._archive = archive
        self._info = info

    def open(self) -> BinaryIO:
        try:
            return self._archive.open(self._info, "r")
        except (zipfile.BadZipFile, zlib.error, RuntimeError, ValueError) as e:
            # RuntimeError: encrypted member; ValueError: archive already closed
            raise OSError(f"Unable to open zip member {self.path}: {e}") from e


class ZipArchiveSource(ArchiveSource):
    """
    Reads the member directory of a zip archive.

    Raises:
        ArchiveOpenError: If the file is missing, unreadable or not a zip.
    """

    def __init__(self, path: str):
        super().__init__(path)
        try:
            self._archive = zipfile.ZipFile(path, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveOpenError(
                message=f"Unable to open zip archive: {e}",
                path=path,
            ) from e
        logger.info("Opened zip archive %s (%d members)", path, len(self._archive.infolist()))

    def entries(self) -> Iterator[ArchiveEntry]:
        for info in self._archive.infolist():
            yield ZipArchiveEntry(self._archive, info)

    def close(self) -> None:
        self._archive.close()
