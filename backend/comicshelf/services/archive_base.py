"""
ComicShelf Backend — Abstract Archive Source Interface
=======================================================

What:  Abstract base classes describing an archive and the entries inside it.
Why:   The index builder and the query accessors only need "a path, a
       regular-file flag and a way to open the bytes". Hiding the container
       format behind this contract lets the same scan run over .7z and .zip
       archives, and over in-memory fakes in the tests.
How:   Concrete sources (ZipArchiveSource, SevenZipArchiveSource) subclass
       ArchiveSource and yield ArchiveEntry subclasses.
Who:   Consumed by `comicshelf.services.index_service.build_index`.

Contract summary:
    ArchiveSource.entries()  → every entry, in archive order, exactly once
    ArchiveEntry.path        → normalized, forward-slash separated, relative
    ArchiveEntry.is_regular  → False for directories, symlinks and the like
    ArchiveEntry.open()      → fresh readable binary stream; raises OSError
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Optional


def normalize_entry_path(name: str) -> str:
    """
    Normalize an archive member name to the forward-slash relative form.

    Archives written on Windows may store backslashes, and some writers
    prefix members with "./" or "/".
    """
    path = name.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


class ArchiveEntry(ABC):
    """
    One member of an archive.

    Entries are held by reference in the index for the life of the process,
    so implementations must keep whatever they need to reopen the member
    (the parent archive handle, or its path on disk).
    """

    def __init__(self, path: str, is_regular: bool, size: Optional[int] = None):
        self.path = path
        self.is_regular = is_regular
        self.size = size

    @abstractmethod
    def open(self) -> BinaryIO:
        """
        Open the entry's content for reading.

        Returns:
            A new binary stream positioned at the start of the content.
            The caller owns it and must close it.

        Raises:
            OSError: When the member cannot be read (corrupt data, I/O error,
                encrypted member). Format-specific errors are translated.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, is_regular={self.is_regular})"


class ArchiveSource(ABC):
    """
    An opened archive.

    Lifecycle:
        1. Constructed (opening may raise ArchiveOpenError)
        2. entries() iterated once by the index builder
        3. Entries opened any number of times while serving
        4. close() at shutdown
    """

    def __init__(self, path: str):
        self.path = path

    @abstractmethod
    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield every member of the archive in archive order."""
        ...

    def close(self) -> None:
        """Release any handle held on the archive file."""

    def __enter__(self) -> "ArchiveSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
