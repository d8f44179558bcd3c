"""Unit tests for the global error handlers."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from infrastructure.error_handlers import (
    build_validation_error_response,
    register_error_handlers,
)
from infrastructure.observability import RequestProbe
from notes.domain.exceptions import NoteLimitReachedError
from shared_kernel.exceptions import InternalError, NotFoundError


class _Payload(BaseModel):
    title: str = Field(..., min_length=1)


def _build_app(debug: bool, probe: MagicMock) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, debug=debug, probe=probe)

    @app.get("/limit")
    async def limit():
        raise NoteLimitReachedError()

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Note not found")

    @app.get("/internal")
    async def internal():
        raise InternalError("pool exhausted on db-1")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret stack detail")

    @app.post("/payload")
    async def payload(body: _Payload):
        return {"ok": True}

    return app


@pytest.fixture
def mock_probe() -> MagicMock:
    return MagicMock(spec=RequestProbe)


@pytest.fixture
def client(mock_probe) -> TestClient:
    return TestClient(_build_app(False, mock_probe), raise_server_exceptions=False)


@pytest.fixture
def debug_client(mock_probe) -> TestClient:
    return TestClient(_build_app(True, mock_probe), raise_server_exceptions=False)


class TestTaggedErrors:
    """Tagged application errors map to their status and code."""

    def test_limit_reached_is_403(self, client):
        response = client.get("/limit")

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "error": {
                "code": "LIMIT_REACHED",
                "message": "Note limit reached. Upgrade to Pro plan for unlimited notes.",
            },
        }

    def test_not_found_is_404(self, client, mock_probe):
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"
        mock_probe.domain_error_returned.assert_called_once_with(
            path="/missing", code="NOT_FOUND", http_status=404
        )

    def test_internal_error_message_is_hidden(self, client):
        response = client.get("/internal")

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "INTERNAL_ERROR",
            "message": "Internal server error",
        }

    def test_internal_error_message_is_exposed_in_debug(self, debug_client):
        response = debug_client.get("/internal")

        assert response.json()["error"]["message"] == "pool exhausted on db-1"


class TestUnexpectedErrors:
    """Unhandled exceptions never leak details outside debug mode."""

    def test_generic_error_is_500_without_detail(self, client, mock_probe):
        response = client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "secret" not in body["error"]["message"]
        mock_probe.unhandled_exception.assert_called_once()

    def test_generic_error_detail_in_debug(self, debug_client):
        response = debug_client.get("/boom")

        assert response.json()["error"]["message"] == "secret stack detail"


class TestValidationErrors:
    """Request validation failures become 400 VALIDATION_ERROR."""

    def test_body_validation_error(self, client, mock_probe):
        response = client.post("/payload", json={"title": ""})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"].startswith("title: ")
        assert error["details"][0]["field"] == "title"
        mock_probe.request_validation_failed.assert_called_once_with(
            path="/payload", error_count=1
        )

    def test_missing_body(self, client):
        response = client.post("/payload")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_build_response_without_errors(self):
        body = build_validation_error_response([])

        assert body["error"]["message"] == "Invalid request data"
        assert body["error"]["details"] == []


class TestFrameworkErrors:
    """Unknown routes and methods use the same envelope."""

    def test_unknown_route(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_wrong_method(self, client):
        response = client.delete("/missing")

        assert response.status_code == 405
        assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"
