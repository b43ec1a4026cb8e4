"""
Blog Backend — Application-Level Tests
========================================

What we test:
    ✅ Welcome document, /api smoke test, /health
    ✅ Error envelope for unknown routes and unsupported methods
    ✅ Error detail only in diagnostic mode
    ✅ CORS preflight, request IDs, body size ceiling (declared and chunked)
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.exceptions import DatabaseError


class TestIndexRoutes:

    @pytest.mark.asyncio
    async def test_welcome_document_lists_endpoints(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Welcome to the Blog API"
        assert body["endpoints"]["articles"]["create"] == "POST /api/articles"
        assert "articlesByCategory" in body["endpoints"]["categories"]

    @pytest.mark.asyncio
    async def test_api_hello(self, client):
        response = await client.get("/api")

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Hello, World!"}


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unreachable_database_is_503(self, client):
        with patch("app.routes.health.ping", AsyncMock(side_effect=OSError("refused"))):
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Not Found"}

    @pytest.mark.asyncio
    async def test_unsupported_method(self, client):
        response = await client.delete("/api/articles/1")

        assert response.status_code == 405
        assert response.json()["status"] == "error"

    @pytest.mark.asyncio
    async def test_database_error_hides_detail_outside_diagnostic_mode(self, client, monkeypatch):
        monkeypatch.setattr(settings, "debug", False)
        monkeypatch.setattr(settings, "app_env", "production")
        failure = DatabaseError(
            message="Error retrieving data from database",
            context={"detail": "password authentication failed"},
        )

        with patch(
            "app.routes.articles.article_service.list_articles",
            AsyncMock(side_effect=failure),
        ):
            response = await client.get("/api/articles")

        assert response.status_code == 500
        assert response.json() == {
            "status": "error",
            "message": "Error retrieving data from database",
            "error": "Internal server error",
        }

    @pytest.mark.asyncio
    async def test_database_error_shows_detail_in_diagnostic_mode(self, client, monkeypatch):
        monkeypatch.setattr(settings, "debug", True)
        failure = DatabaseError(
            message="Error retrieving data from database",
            context={"detail": "password authentication failed"},
        )

        with patch(
            "app.routes.articles.article_service.list_articles",
            AsyncMock(side_effect=failure),
        ):
            response = await client.get("/api/articles")

        assert response.status_code == 500
        assert response.json()["error"] == "password authentication failed"

    @pytest.mark.asyncio
    async def test_client_errors_never_carry_detail(self, client, monkeypatch):
        monkeypatch.setattr(settings, "debug", True)

        response = await client.get("/api/articles/abc")

        assert "error" not in response.json()


class TestMiddleware:

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client):
        response = await client.get("/api")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_cors_preflight_from_allowed_origin(self, client):
        response = await client.options(
            "/api/articles",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
        assert response.headers["access-control-allow-credentials"] == "true"

    @pytest.mark.asyncio
    async def test_cors_preflight_from_other_origin(self, client):
        response = await client.options(
            "/api/articles",
            headers={
                "Origin": "http://evil.test",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_api_requests_are_logged(self, client, caplog):
        with caplog.at_level("INFO", logger="blog.access"):
            await client.get("/api/articles", headers={"X-Request-ID": "log-1"})

        assert "GET /api/articles [log-1]" in caplog.text
        assert "GET /api/articles 200" in caplog.text

    @pytest.mark.asyncio
    async def test_non_api_requests_are_not_logged(self, client, caplog):
        with caplog.at_level("INFO", logger="blog.access"):
            await client.get("/health")

        assert "/health" not in caplog.text

    @pytest.mark.asyncio
    async def test_oversized_body_is_rejected(self, monkeypatch):
        from app.main import create_app

        monkeypatch.setattr(settings, "max_body_size", 1024)
        application = create_app()

        async with AsyncClient(
            transport=ASGITransport(app=application), base_url="http://test"
        ) as ac:
            response = await ac.post(
                "/api/articles",
                json={"title": "A", "content": "x" * 2048},
            )

        assert response.status_code == 413
        assert response.json()["status"] == "error"
        assert "1024" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_chunked_body_over_ceiling_is_rejected(self, client):
        chunk = b"x" * 65536

        async def body():
            yield b'{"title": "A", "content": "'
            for _ in range(48):
                yield chunk
            yield b'"}'

        response = await client.post(
            "/api/articles",
            content=body(),
            headers={"Content-Type": "application/json"},
        )

        assert "content-length" not in response.request.headers
        assert response.status_code == 413
        assert response.json()["status"] == "error"
        assert (await client.get("/api/articles")).json()["count"] == 0

    @pytest.mark.asyncio
    async def test_chunked_body_under_ceiling_is_accepted(self, client):
        async def body():
            yield b'{"title": "Streamed", '
            yield b'"content": "in two chunks"}'

        response = await client.post(
            "/api/articles",
            content=body(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["title"] == "Streamed"
