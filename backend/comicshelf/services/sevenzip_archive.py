"""
ComicShelf Backend — 7-Zip Archive Source
===========================================

What:  ArchiveSource implementation for .7z archives using `py7zr`.
Why:   The complete strip collection is distributed as a single 7z file.
How:   The member directory is read once at construction time. Each call to
       SevenZipArchiveEntry.open() opens its own SevenZipFile, decompresses
       the one requested member into memory and returns it as a BytesIO.

Why a fresh SevenZipFile per open:
    SevenZipFile keeps decompression state and is not safe to share across
    threads; a read also consumes it until reset(). Re-reading the archive
    header per request is cheap next to decompressing a solid block.
"""

import logging
import lzma
from typing import BinaryIO, Iterator, List, Optional

import py7zr
from py7zr.exceptions import ArchiveError, Bad7zFile, PasswordRequired

from comicshelf.exceptions import ArchiveOpenError
from comicshelf.services.archive_base import (
    ArchiveEntry,
    ArchiveSource,
    normalize_entry_path,
)

logger = logging.getLogger(__name__)

# Decompressors surface corrupt blocks as their own errors, not as py7zr ones.
_PY7ZR_ERRORS = (ArchiveError, Bad7zFile, PasswordRequired, lzma.LZMAError, EOFError)


class SevenZipArchiveEntry(ArchiveEntry):
    """A member of a SevenZipArchiveSource, reopened from disk on demand."""

    def __init__(
        self,
        archive_path: str,
        member_name: str,
        is_regular: bool,
        size: Optional[int] = None,
    ):
        super().__init__(
            path=normalize_entry_path(member_name),
            is_regular=is_regular,
            size=size,
        )
        self._archive_path = archive_path
        self._member_name = member_name

    def open(self) -> BinaryIO:
        try:
            with py7zr.SevenZipFile(self._archive_path, mode="r") as archive:
                contents = archive.read(targets=[self._member_name])
        except _PY7ZR_ERRORS as e:
            raise OSError(f"Unable to read 7z member {self.path}: {e}") from e

        stream = contents.get(self._member_name)
        if stream is None:
            raise OSError(f"7z member {self.path} is missing from {self._archive_path}")
        stream.seek(0)
        return stream


class SevenZipArchiveSource(ArchiveSource):
    """
    Reads the member directory of a 7z archive.

    Raises:
        ArchiveOpenError: If the file is missing, unreadable, encrypted or
            not a 7z archive.
    """

    def __init__(self, path: str):
        super().__init__(path)
        self._entries: List[SevenZipArchiveEntry] = []
        try:
            with py7zr.SevenZipFile(path, mode="r") as archive:
                symlinks = {f.filename for f in archive.files if f.is_symlink}
                for info in archive.list():
                    self._entries.append(
                        SevenZipArchiveEntry(
                            archive_path=path,
                            member_name=info.filename,
                            is_regular=not info.is_directory and info.filename not in symlinks,
                            size=info.uncompressed,
                        )
                    )
        except (OSError,) + _PY7ZR_ERRORS as e:
            raise ArchiveOpenError(
                message=f"Unable to open 7z archive: {e}",
                path=path,
            ) from e
        logger.info("Opened 7z archive %s (%d members)", path, len(self._entries))

    def entries(self) -> Iterator[ArchiveEntry]:
        return iter(self._entries)

