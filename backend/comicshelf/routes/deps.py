"""
ComicShelf Backend — Route Dependencies
=========================================

What:  FastAPI dependencies giving route handlers access to the strip index.
Why:   The index is an explicit value owned by the application (app.state),
       not a module-level global, so tests can inject their own.
"""

from fastapi import Request

from comicshelf.exceptions import ComicShelfError
from comicshelf.services.index_service import StripIndex


def get_index(request: Request) -> StripIndex:
    """Return the StripIndex built by the application lifespan."""
    index = getattr(request.app.state, "strip_index", None)
    if index is None:
        raise ComicShelfError(message="The strip index has not been loaded")
    return index
