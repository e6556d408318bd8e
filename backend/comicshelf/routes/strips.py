"""
ComicShelf Backend — Strip Listing Route Handlers
===================================================

What:  Handles GET /api/years and GET /api/strips/{year}.
Why:   The frontend picks a year first, then pages through its strips.
How:   Reads straight from the immutable StripIndex and returns JSON.

Caching Strategy:
    The index cannot change while the process runs, so both listings are
    cacheable for as long as the archive stays the same. A short max-age
    keeps a restarted server with a new archive visible within minutes.
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from comicshelf.routes.deps import get_index
from comicshelf.schemas.strip import ErrorResponse, StripResponse
from comicshelf.services.index_service import StripIndex

router = APIRouter(prefix="/api", tags=["Strips"])

LISTING_CACHE_CONTROL = "public, max-age=300"


@router.get(
    "/years",
    response_model=List[str],
    summary="List years that have strips",
    description="Returns every year with at least one strip, in ascending order.",
)
async def list_years(
    response: Response,
    index: StripIndex = Depends(get_index),
) -> List[str]:
    response.headers["Cache-Control"] = LISTING_CACHE_CONTROL
    return list(index.list_years())


@router.get(
    "/strips/{year}",
    response_model=List[StripResponse],
    responses={
        200: {"description": "Strips of the year, ascending by date"},
        404: {"description": "No strips for this year", "model": ErrorResponse},
    },
    summary="List the strips of one year",
    description=(
        "Returns date, year and image URL for every strip of the year, "
        "sorted by date. Unknown years return 404, never an empty list."
    ),
)
async def list_strips(
    year: str,
    response: Response,
    index: StripIndex = Depends(get_index),
) -> List[StripResponse]:
    strips = index.list_strips(year)
    response.headers["Cache-Control"] = LISTING_CACHE_CONTROL
    response.headers["X-Total-Count"] = str(len(strips))
    return [StripResponse.model_validate(strip) for strip in strips]
