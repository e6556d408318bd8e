"""
ComicShelf Backend — HTTP Endpoint Tests
==========================================

What:  Tests for /api/years, /api/strips/{year}, /comics/... and /health.
How:   HTTPX AsyncClient over ASGITransport against an app with the
       sample index injected (see conftest.test_client).

What we test:
    ✅ JSON shapes and date serialization (YYYY-MM-DD)
    ✅ 404 for unknown years and paths, 500 for unreadable entries
    ✅ Image bytes, media type and headers
    ✅ Streams are closed after success and after a mid-copy failure
    ✅ Request ID propagation
"""

import pytest
from httpx import ASGITransport, AsyncClient

from comicshelf.exceptions import StreamCopyError
from comicshelf.main import create_app
from comicshelf.routes.comics import iter_strip

from tests.fakes import GIF_BYTES, JPEG_BYTES, TrackingStream


class TestListingEndpoints:
    @pytest.mark.asyncio
    async def test_list_years(self, test_client):
        response = await test_client.get("/api/years")

        assert response.status_code == 200
        assert response.json() == ["1989", "1990"]

    @pytest.mark.asyncio
    async def test_list_strips(self, test_client):
        response = await test_client.get("/api/strips/1989")

        assert response.status_code == 200
        assert response.json() == [
            {"date": "1989-04-16", "year": "1989", "url": "/comics/1989/1989-04-16.jpg"}
        ]

    @pytest.mark.asyncio
    async def test_list_strips_sorted_with_encoded_urls(self, test_client):
        response = await test_client.get("/api/strips/1990")

        body = response.json()
        assert [s["date"] for s in body] == [
            "1990-01-02",
            "1990-01-03",
            "1990-01-04",
            "1990-01-06",
            "1990-01-07",
        ]
        assert body[2]["url"] == "/comics/1990/1990-01-04%20sunday.jpg"
        assert response.headers["X-Total-Count"] == "5"

    @pytest.mark.asyncio
    async def test_unknown_year_is_404(self, test_client):
        response = await test_client.get("/api/strips/1991")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestComicsEndpoint:
    @pytest.mark.asyncio
    async def test_serves_jpg(self, test_client):
        response = await test_client.get("/comics/1990/1990-01-02.jpg")

        assert response.status_code == 200
        assert response.content == JPEG_BYTES
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["content-length"] == str(len(JPEG_BYTES))

    @pytest.mark.asyncio
    async def test_serves_gif(self, test_client):
        response = await test_client.get("/comics/1990/1990-01-03.gif")

        assert response.status_code == 200
        assert response.content == GIF_BYTES
        assert response.headers["content-type"] == "image/gif"

    @pytest.mark.asyncio
    async def test_listed_url_is_servable(self, test_client):
        """Every URL handed out by the listing resolves to its strip."""
        strips = (await test_client.get("/api/strips/1990")).json()
        url = next(s["url"] for s in strips if "sunday" in s["url"])

        response = await test_client.get(url)

        assert response.status_code == 200
        assert response.content == JPEG_BYTES

    @pytest.mark.asyncio
    async def test_stream_closed_after_response(self, test_client, sample_index):
        await test_client.get("/comics/1989/1989-04-16.jpg")

        entry = sample_index.get_entry("1989/1989-04-16.jpg")
        assert entry.opened
        assert all(stream.was_closed for stream in entry.opened)

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, test_client):
        response = await test_client.get("/comics/1990/1990-12-25.jpg")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_rejected_entry_is_404(self, test_client):
        response = await test_client.get("/comics/1991/1990-01-02.jpg")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_open_failure_is_500(self, test_client):
        response = await test_client.get("/comics/1990/1990-01-06.jpg")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "1990-01-06" not in body["message"]


class TestIterStrip:
    def test_copies_in_chunks_and_closes(self):
        stream = TrackingStream(b"abcdefghij")

        chunks = list(iter_strip(stream, "1990/1990-01-02.jpg", chunk_size=4))

        assert chunks == [b"abcd", b"efgh", b"ij"]
        assert stream.was_closed

    def test_read_failure_raises_and_closes(self):
        stream = TrackingStream(b"abcdefghij", fail_after=4)
        chunks = iter_strip(stream, "1990/1990-01-02.jpg", chunk_size=4)

        assert next(chunks) == b"abcd"
        with pytest.raises(StreamCopyError) as exc_info:
            next(chunks)
        assert exc_info.value.context["path"] == "1990/1990-01-02.jpg"
        assert stream.was_closed

    def test_abandoned_iterator_closes_stream(self):
        stream = TrackingStream(b"abcdefghij")
        chunks = iter_strip(stream, "1990/1990-01-02.jpg", chunk_size=4)

        next(chunks)
        chunks.close()

        assert stream.was_closed


class TestHealthAndHeaders:
    @pytest.mark.asyncio
    async def test_health_reports_index(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["archive"] == "fake.7z"
        assert body["strips"] == 6
        assert body["years"] == 2
        assert body["skipped"]["unmatched file type"] == 1

    @pytest.mark.asyncio
    async def test_health_without_index(self):
        app = create_app()
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_api_without_index_is_500(self):
        app = create_app()
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/years")

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/years")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/strips/1991", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"
