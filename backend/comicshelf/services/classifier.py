"""
ComicShelf Backend — Archive Entry Classifier
===============================================

What:  Decides, for one archive entry, whether it is a comic strip and
       extracts its validated date and year.
Why:   The archive is a loose collection; only members following the
       <YYYY>/<YYYY-MM-DD><anything>.(jpg|gif) convention may be served.
How:   A fixed sequence of checks. The first failing check produces a
       Rejection; passing all of them produces an Accepted.
Who:   Called by build_index() once per archive entry.

Checks, in order:
    1. Regular file           → "not a regular file"
    2. .jpg / .gif extension  → "unmatched file type"
    3. 4-character year dir   → "year folder format mismatch"
       <year>/<file> layout   → "unexpected path depth"
    4. YYYY-MM-DD prefix      → "date format mismatch"
    5. Strict date parse      → "malformed date"
    6. Folder year == date    → "year folder does not match date"

Failure policy:
    classify_entry() never raises. A million well-formed entries mixed with
    arbitrarily malformed ones must be scanned in one pass.
"""

import logging
import posixpath
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union
from urllib.parse import quote

from comicshelf.models.strip import StripRecord, Year
from comicshelf.services.archive_base import ArchiveEntry

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".gif"}

DATE_FORMAT = "%Y-%m-%d"
DATE_PREFIX_LENGTH = len("YYYY-MM-DD")

URL_PREFIX = "/comics"

# ── Rejection reasons ─────────────────────────────────────────────────────
NOT_REGULAR = "not a regular file"
UNMATCHED_FILE_TYPE = "unmatched file type"
YEAR_FOLDER_MISMATCH = "year folder format mismatch"
UNEXPECTED_PATH_DEPTH = "unexpected path depth"
DATE_FORMAT_MISMATCH = "date format mismatch"
MALFORMED_DATE = "malformed date"
YEAR_DATE_MISMATCH = "year folder does not match date"


@dataclass(frozen=True)
class Accepted:
    year: Year
    record: StripRecord


@dataclass(frozen=True)
class Rejection:
    reason: str


Classification = Union[Accepted, Rejection]


def strip_url(year: Year, path: str) -> str:
    """
    Build the public URL of a strip.

    The filename is the second "/" segment of the archive path, escaped so
    that it is safe as a single URL path segment (spaces, "#", "?" and "/").
    """
    filename = path.split("/")[1]
    return f"{URL_PREFIX}/{year}/{quote(filename, safe='')}"


def parse_strip_date(filename: str) -> date:
    """
    Parse the YYYY-MM-DD prefix of a filename.

    Raises:
        ValueError: If the prefix is not a real, zero-padded calendar date.
    """
    prefix = filename[:DATE_PREFIX_LENGTH]
    parsed = datetime.strptime(prefix, DATE_FORMAT).date()
    # strptime also takes unpadded or space-padded fields ("1990-01- 2")
    if parsed.isoformat() != prefix:
        raise ValueError(f"date {prefix!r} is not zero-padded YYYY-MM-DD")
    return parsed


def _reject(entry: ArchiveEntry, reason: str, level: int = logging.INFO) -> Rejection:
    logger.log(level, "Skipping file in archive %s, %s", entry.path, reason)
    return Rejection(reason)


def classify_entry(entry: ArchiveEntry) -> Classification:
    """
    Classify one archive entry.

    Args:
        entry: Archive member with a normalized, "/"-separated path.

    Returns:
        Accepted(year, record) when every check passes, otherwise
        Rejection(reason) naming the first failing check.
    """
    path = entry.path

    if not entry.is_regular:
        return _reject(entry, NOT_REGULAR, logging.DEBUG)

    ext = posixpath.splitext(path)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        return _reject(entry, UNMATCHED_FILE_TYPE)

    directory, filename = posixpath.split(path)
    year = posixpath.basename(posixpath.normpath(directory))
    if len(year) != 4:
        return _reject(entry, YEAR_FOLDER_MISMATCH)

    # The public URL and the /comics route both assume <year>/<filename>
    if len(path.split("/")) != 2:
        return _reject(entry, UNEXPECTED_PATH_DEPTH)

    if (
        len(filename) < DATE_PREFIX_LENGTH
        or filename[4] != "-"
        or filename[7] != "-"
    ):
        return _reject(entry, DATE_FORMAT_MISMATCH)

    try:
        strip_date = parse_strip_date(filename)
    except ValueError:
        return _reject(entry, MALFORMED_DATE)

    if str(strip_date.year) != year:
        return _reject(entry, YEAR_DATE_MISMATCH)

    year = Year(year)
    return Accepted(
        year=year,
        record=StripRecord(date=strip_date, year=year, url=strip_url(year, path)),
    )
