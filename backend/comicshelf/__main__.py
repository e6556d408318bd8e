"""
ComicShelf Backend — Process Entry Point
==========================================

What:  `python -m comicshelf` starts uvicorn with the configured settings.
How:   All options come from the environment (see comicshelf.config);
       the archive is scanned by the application lifespan, so a missing
       archive or an empty index aborts startup with a non-zero exit code.
"""

import uvicorn

from comicshelf.config import settings


def main() -> None:
    uvicorn.run(
        "comicshelf.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
