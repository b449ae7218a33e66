"""Tests for RFC 7807 error handling."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.api.core.errors import (
    PayloadTooLargeError,
    StatementParseError,
    ValidationError,
    register_error_handlers,
)


@pytest.fixture
def error_app():
    """Create a test app with error handlers registered."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/test/validation")
    async def raise_validation():
        raise ValidationError("File Excel mancante")

    @app.get("/test/too-large")
    async def raise_too_large():
        raise PayloadTooLargeError()

    @app.get("/test/parse")
    async def raise_parse():
        raise StatementParseError("Could not read Excel file")

    @app.get("/test/unhandled")
    async def raise_unhandled():
        raise RuntimeError("Unexpected crash")

    return app


@pytest.fixture
def client(error_app):
    return TestClient(error_app, raise_server_exceptions=False)


class TestRFC7807ErrorFormat:
    """All errors should return RFC 7807 Problem Details format."""

    def test_validation_error_body_members(self, client):
        response = client.get("/test/validation")
        assert response.json() == {
            "type": "about:blank",
            "title": "Bad Request",
            "status": 400,
            "detail": "File Excel mancante",
            "error": "File Excel mancante",
            "instance": "/test/validation",
        }

    def test_validation_error_returns_rfc7807(self, client):
        response = client.get("/test/validation")
        assert response.status_code == 400
        body = response.json()
        assert body["title"] == "Bad Request"
        assert body["detail"] == "File Excel mancante"

    def test_payload_too_large(self, client):
        response = client.get("/test/too-large")
        assert response.status_code == 413
        assert response.json()["title"] == "Payload Too Large"

    def test_parse_error_carries_error_member(self, client):
        response = client.get("/test/parse")
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Could not read Excel file"
        assert "transactions" not in body

    def test_unknown_route_uses_problem_format(self, client):
        response = client.get("/test/missing")
        assert response.status_code == 404
        assert response.json()["title"] == "Not Found"

    def test_unhandled_error_returns_rfc7807(self, client):
        response = client.get("/test/unhandled")
        assert response.status_code == 500
        body = response.json()
        assert body["title"] == "Internal Server Error"
        assert body["detail"] == "An unexpected error occurred"
