"""
ComicShelf Backend — Strip Index (Builder + Query Service)
============================================================

What:  Builds the in-memory index of comic strips from an archive and
       answers the three read queries the HTTP layer needs.
Why:   The archive is scanned once at startup; afterwards every request is
       a dictionary lookup instead of an archive walk.
How:   build_index() drives the classifier over every entry in a single
       sequential pass, then freezes the result into a StripIndex.
Who:   build_index() is called by the application lifespan; StripIndex is
       injected into route handlers via `comicshelf.routes.deps.get_index`.

Index structures:
    by_path:  archive path → ArchiveEntry       (accepted entries only)
    by_year:  year → tuple[StripRecord, ...]    (ascending by date, stable)
    years:    tuple[year, ...]                  (ascending, unique)

Concurrency:
    A StripIndex is never mutated after build_index() returns. Its maps are
    exposed through read-only MappingProxyType views, and per-year sequences
    are tuples, so any number of request handlers may read it without locks.
"""

import logging
from collections import Counter
from types import MappingProxyType
from typing import BinaryIO, Dict, List, Mapping, Optional, Sequence, Tuple

from comicshelf.exceptions import EmptyIndexError, NotFoundError, StreamOpenError
from comicshelf.models.strip import StripRecord, Year
from comicshelf.services.archive_base import ArchiveEntry, ArchiveSource
from comicshelf.services.classifier import Accepted, classify_entry

logger = logging.getLogger(__name__)


class StripIndex:
    """
    Immutable, read-only view over the strips found in one archive.

    Not-found policy:
        list_strips() and open_strip() raise NotFoundError for unknown keys.
        A year present in the index always has at least one strip, so an
        empty sequence is never returned.
    """

    def __init__(
        self,
        by_path: Mapping[str, ArchiveEntry],
        by_year: Mapping[Year, Tuple[StripRecord, ...]],
        years: Tuple[Year, ...],
        skipped: Optional[Mapping[str, int]] = None,
    ):
        self.by_path = MappingProxyType(dict(by_path))
        self.by_year = MappingProxyType(dict(by_year))
        self.years = years
        # rejection reason → number of entries skipped for it during the scan
        self.skipped = MappingProxyType(dict(skipped or {}))

    @property
    def strip_count(self) -> int:
        """Number of accepted archive entries."""
        return len(self.by_path)

    def list_years(self) -> Sequence[Year]:
        """Years with at least one strip, ascending."""
        return self.years

    def list_strips(self, year: str) -> Sequence[StripRecord]:
        """
        Strips of one year, ascending by date.

        Raises:
            NotFoundError: If the year has no strips in the archive.
        """
        strips = self.by_year.get(Year(year))
        if strips is None:
            raise NotFoundError(resource="year", resource_id=year)
        return strips

    def get_entry(self, path: str) -> ArchiveEntry:
        """
        Resolve an archive path to its indexed entry.

        Raises:
            NotFoundError: If the path was not accepted during the scan.
        """
        entry = self.by_path.get(path)
        if entry is None:
            raise NotFoundError(resource="comic strip", resource_id=path)
        return entry

    def open_strip(self, path: str) -> BinaryIO:
        """
        Open a fresh stream over an indexed strip's bytes.

        The caller owns the returned stream and must close it on every exit
        path, including a failed copy.

        Raises:
            NotFoundError:   Unknown path.
            StreamOpenError: The entry exists but could not be opened.
        """
        entry = self.get_entry(path)
        try:
            return entry.open()
        except OSError as e:
            logger.error("Unable to open comic strip %s: %s", path, e)
            raise StreamOpenError(context={"path": path, "reason": str(e)}) from e


def build_index(source: ArchiveSource) -> StripIndex:
    """
    Scan every entry of an archive once and build a StripIndex.

    What:    Classifies each entry; accepted ones are recorded by path and
             grouped by year. Rejections are logged by the classifier and
             tallied here for a one-line summary.
    After the pass:
             - years are sorted ascending (string order == numeric order,
               since every year is exactly 4 characters)
             - each year's strips are sorted by date with a stable sort, so
               equal dates keep archive order

    Raises:
        EmptyIndexError: If no entry was accepted.
    """
    by_path: Dict[str, ArchiveEntry] = {}
    by_year: Dict[Year, List[StripRecord]] = {}
    rejected: Counter = Counter()
    scanned = 0

    for entry in source.entries():
        scanned += 1
        result = classify_entry(entry)
        if not isinstance(result, Accepted):
            rejected[result.reason] += 1
            continue
        by_path[entry.path] = entry
        by_year.setdefault(result.year, []).append(result.record)

    years = tuple(sorted(by_year))
    frozen = {
        year: tuple(sorted(records, key=lambda record: record.date))
        for year, records in by_year.items()
    }

    logger.info(
        "Scanned %d archive entries from %s: %d strips in %d years, %d skipped",
        scanned,
        source.path,
        len(by_path),
        len(years),
        sum(rejected.values()),
    )
    for reason, count in rejected.most_common():
        logger.info("  skipped %d entries: %s", count, reason)

    if not by_path:
        raise EmptyIndexError(
            context={"path": source.path, "scanned": scanned, "rejected": dict(rejected)}
        )

    return StripIndex(by_path=by_path, by_year=frozen, years=years, skipped=rejected)
