"""Tests for ecohouse/core/exception_handlers.py and request logging."""

import json
import logging
import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from ecohouse.core.exception_handlers import register_exception_handlers
from ecohouse.core.exceptions import (
    AppException,
    ConflictError,
    NotFoundError,
    ProviderError,
    RateLimitError,
)
from ecohouse.core.logging import JsonFormatter
from ecohouse.core.request_logging import REQUEST_ID_HEADER, RequestLoggingMiddleware


class Item(BaseModel):
    name: str
    quantity: int


@pytest.fixture(name="error_app")
def error_app_fixture() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundError("Nothing here")

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("Already there")

    @app.get("/rate-limited")
    async def rate_limited():
        raise RateLimitError("Slow down", retry_after=30)

    @app.get("/provider")
    async def provider():
        raise ProviderError()

    @app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    @app.post("/items")
    async def create_item(item: Item):
        return item

    @app.get("/ok")
    async def ok():
        return {"ok": True}

    return app


@pytest.mark.parametrize(
    ("path", "status_code", "error_type"),
    [
        ("/not-found", 404, "not_found"),
        ("/conflict", 409, "conflict"),
        ("/provider", 502, "provider_error"),
    ],
)
def test_app_exceptions_render_type_and_message(error_app, path, status_code, error_type):
    client = TestClient(error_app)

    response = client.get(path)

    assert response.status_code == status_code
    body = response.json()
    assert body["type"] == error_type
    assert set(body) == {"type", "message"}


def test_rate_limit_sets_retry_after(error_app):
    client = TestClient(error_app)

    response = client.get("/rate-limited")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "30"


def test_validation_errors_are_flattened(error_app):
    client = TestClient(error_app)

    response = client.post("/items", json={"name": "lamp"})

    assert response.status_code == 422
    body = response.json()
    assert body["type"] == "validation_error"
    assert "quantity" in body["message"]


def test_unhandled_errors_become_500(error_app):
    client = TestClient(error_app, raise_server_exceptions=False)

    response = client.get("/crash")

    assert response.status_code == 500
    assert response.json() == {
        "type": "internal_error",
        "message": "An unexpected error occurred",
    }


def test_unknown_route_uses_error_shape(error_app):
    client = TestClient(error_app)

    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json()["type"] == "http_error"


def test_request_id_is_generated(error_app):
    client = TestClient(error_app)

    response = client.get("/ok")

    request_id = response.headers[REQUEST_ID_HEADER]
    assert uuid.UUID(hex=request_id)


def test_incoming_request_id_is_echoed(error_app):
    client = TestClient(error_app)

    response = client.get("/ok", headers={REQUEST_ID_HEADER: "trace-abc.123"})

    assert response.headers[REQUEST_ID_HEADER] == "trace-abc.123"


def test_malformed_request_id_is_replaced(error_app):
    client = TestClient(error_app)

    response = client.get("/ok", headers={REQUEST_ID_HEADER: "bad id with spaces"})

    assert response.headers[REQUEST_ID_HEADER] != "bad id with spaces"


def test_app_exception_keeps_message():
    exc = AppException("custom message")
    assert exc.message == "custom message"
    assert exc.status_code == 500


def test_json_formatter_lifts_known_extras():
    house_id = uuid.uuid4()
    record = logging.LogRecord(
        name="ecohouse.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="House %s created",
        args=("ECO-2026-ABC123",),
        exc_info=None,
    )
    record.house_id = house_id
    record.user_id = "acct-1"
    record.unrelated = "dropped"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "House ECO-2026-ABC123 created"
    assert payload["level"] == "INFO"
    assert payload["house_id"] == str(house_id)
    assert payload["user_id"] == "acct-1"
    assert "unrelated" not in payload
