"""
ComicShelf Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and container probes.
How:   Reports whether an index is loaded, plus its size. There are no
       external dependencies to probe: the archive was fully scanned at
       startup and a server with an empty index never starts.
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from comicshelf import __version__
from comicshelf.schemas.strip import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    index = getattr(request.app.state, "strip_index", None)
    archive = getattr(request.app.state, "archive_path", "")

    if index is None:
        response.status_code = 503
        return HealthResponse(
            status="unhealthy",
            version=__version__,
            archive=archive,
            strips=0,
            years=0,
            uptime_seconds=round(time.time() - _start_time, 2),
        )

    return HealthResponse(
        status="healthy",
        version=__version__,
        archive=archive,
        strips=index.strip_count,
        years=len(index.list_years()),
        skipped=dict(index.skipped),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
