"""
ComicShelf Backend — Comic Image Route Handler
================================================

What:  Handles GET /comics/{year}/{filename}: streams one strip image
       straight out of the archive.
How:   The URL path below /comics/ is the archive path of the strip. It is
       resolved against the index, the entry is opened in the threadpool
       (decompression blocks) and its bytes are copied in chunks.

Stream ownership:
    Every request opens its own stream. It is closed in the generator's
    finally block, which runs when the copy completes, when a read fails
    mid-copy, and when the iterator is discarded after a client
    disconnect.

Failure mapping:
    Unknown path            → NotFoundError   → 404
    Entry cannot be opened  → StreamOpenError → 500
    Read fails mid-copy     → StreamCopyError → logged, connection aborted
                              (status line and headers are already sent)
"""

import logging
import posixpath
from typing import BinaryIO, Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from comicshelf.config import settings
from comicshelf.exceptions import StreamCopyError
from comicshelf.routes.deps import get_index
from comicshelf.schemas.strip import ErrorResponse
from comicshelf.services.index_service import StripIndex

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Comics"])

MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
}

# Strip content never changes for a given archive path
IMAGE_CACHE_CONTROL = "public, max-age=86400"


def iter_strip(stream: BinaryIO, path: str, chunk_size: int) -> Iterator[bytes]:
    """
    Copy an open archive stream in chunks, closing it on every exit path.

    Raises:
        StreamCopyError: If reading the entry fails part-way through.
    """
    try:
        while True:
            try:
                chunk = stream.read(chunk_size)
            except Exception as e:
                logger.error("Unable to serve comic strip %s: %s", path, e)
                raise StreamCopyError(context={"path": path, "reason": str(e)}) from e
            if not chunk:
                return
            yield chunk
    finally:
        stream.close()


@router.get(
    "/comics/{strip_path:path}",
    response_class=StreamingResponse,
    responses={
        200: {"description": "Strip image", "content": {"image/jpeg": {}, "image/gif": {}}},
        404: {"description": "Strip not found", "model": ErrorResponse},
        500: {"description": "Strip could not be read", "model": ErrorResponse},
    },
    summary="Serve a strip image from the archive",
)
async def serve_comic(
    strip_path: str,
    index: StripIndex = Depends(get_index),
) -> StreamingResponse:
    entry = index.get_entry(strip_path)
    stream = await run_in_threadpool(index.open_strip, strip_path)

    headers = {"Cache-Control": IMAGE_CACHE_CONTROL}
    if entry.size is not None:
        headers["Content-Length"] = str(entry.size)

    ext = posixpath.splitext(strip_path)[1].lower()
    return StreamingResponse(
        iter_strip(stream, strip_path, settings.stream_chunk_size),
        media_type=MEDIA_TYPES.get(ext, "application/octet-stream"),
        headers=headers,
    )
