# Models package init
"""
ComicShelf Backend — Domain Models
====================================

What:  Immutable in-memory records produced by the archive scan.
Why:   Separate from the Pydantic schemas in `comicshelf.schemas`, which
       describe the JSON contract; these describe what the index holds.
"""

from comicshelf.models.strip import StripRecord, Year

__all__ = ["StripRecord", "Year"]
