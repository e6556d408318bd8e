"""
ComicShelf Backend — Strip Record Model
=========================================

What:  The validated metadata of one comic strip found in the archive.
Why:   Created exactly once per accepted archive entry and shared by every
       request afterwards, so it is frozen.
Who:   Built by the entry classifier, stored by the index, serialized by
       `comicshelf.schemas.strip.StripResponse`.

Year representation:
    The year is kept as the verbatim 4-character folder name rather than an
    int. The classifier compares it character-for-character against the
    parsed date's year, so leading zeros and formatting must survive.
"""

from dataclasses import dataclass
from datetime import date
from typing import NewType

# A folder name that passed the 4-character check and matches its strips' dates
Year = NewType("Year", str)


@dataclass(frozen=True)
class StripRecord:
    """
    Attributes:
        date: Calendar date parsed from the filename prefix (YYYY-MM-DD).
        year: Folder-derived year; always equals str(date.year).
        url:  Public path, /comics/<year>/<percent-encoded filename>.
    """

    date: date
    year: Year
    url: str
