"""
ComicShelf Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Most tests need archive entries, a built index or an HTTP client.
How:   In-memory fake archives for index logic; real zip files in tmp_path
       for the archive readers; HTTPX AsyncClient over ASGITransport for
       endpoint tests.

Fixture Hierarchy (all function-scoped):
    ├── make_source:   Builds a FakeArchiveSource from member paths
    ├── make_zip:      Writes a real zip archive into tmp_path
    ├── sample_source: A small archive mixing valid and invalid members
    ├── sample_index:  StripIndex built from sample_source
    └── test_client:   HTTPX AsyncClient talking to an app serving sample_index
"""

import os
import zipfile
from typing import Iterable, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["ARCHIVE_PATH"] = "./does-not-exist.7z"
os.environ["LOG_LEVEL"] = "WARNING"

from comicshelf.services.index_service import build_index  # noqa: E402

from tests.fakes import GIF_BYTES, JPEG_BYTES, FakeArchiveEntry, FakeArchiveSource  # noqa: E402


@pytest.fixture
def make_source():
    """
    Factory for in-memory archives.

    Usage:
        source = make_source("1990/1990-01-02.jpg", "1990/readme.txt")
    """

    def _make(*paths: str) -> FakeArchiveSource:
        return FakeArchiveSource(FakeArchiveEntry(path) for path in paths)

    return _make


@pytest.fixture
def make_zip(tmp_path):
    """
    Factory writing a real zip archive to tmp_path.

    Usage:
        path = make_zip([("1990/1990-01-02.jpg", JPEG_BYTES)], name="strips.zip")
    """

    def _make(members: Iterable[Tuple[str, bytes]], name: str = "strips.zip") -> str:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as zf:
            for member, data in members:
                zf.writestr(member, data)
        return str(path)

    return _make


@pytest.fixture
def sample_source():
    """
    Two years of strips plus the kinds of clutter real archives carry.

    Archive order is deliberately not date order within 1990.
    """
    return FakeArchiveSource(
        [
            FakeArchiveEntry("1990/", data=b"", is_regular=False),
            FakeArchiveEntry("1990/1990-01-03.gif", data=GIF_BYTES),
            FakeArchiveEntry("1990/1990-01-02.jpg"),
            FakeArchiveEntry("1990/1990-01-04 sunday.jpg"),
            FakeArchiveEntry("1989/1989-04-16.jpg"),
            FakeArchiveEntry("1990/not-a-date.jpg"),
            FakeArchiveEntry("1990/1990-01-05.png"),
            FakeArchiveEntry("199/1990-01-02.jpg"),
            FakeArchiveEntry("1991/1990-01-02.jpg"),
            FakeArchiveEntry("1990/1990-13-01.jpg"),
            FakeArchiveEntry("1990/1990-01-06.jpg", fail_open=True),
            FakeArchiveEntry("1990/1990-01-07.jpg", data=JPEG_BYTES * 4, fail_after=8),
        ]
    )


@pytest.fixture
def sample_index(sample_source):
    return build_index(sample_source)


@pytest_asyncio.fixture
async def test_client(sample_index):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan, so the index is injected
    through create_app() instead of scanning ARCHIVE_PATH.
    """
    from comicshelf.main import create_app

    app = create_app(index=sample_index, archive_path="fake.7z")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
