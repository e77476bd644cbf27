"""Tests for normalized error responses."""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from streakmap.core.errors import (
    AppError,
    InvalidInputError,
    ValidationError,
    app_error_handler,
    http_error_handler,
    request_validation_error_handler,
    unhandled_exception_handler,
)
from streakmap.core.middleware.request_id import RequestIdMiddleware


def _make_app():
    test_app = FastAPI()
    test_app.add_middleware(RequestIdMiddleware)
    test_app.add_exception_handler(AppError, app_error_handler)
    test_app.add_exception_handler(StarletteHTTPException, http_error_handler)
    test_app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    test_app.add_exception_handler(Exception, unhandled_exception_handler)

    @test_app.get("/invalid")
    async def invalid():
        raise InvalidInputError("Unparseable date: 'x'", value="x")

    @test_app.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="nothing here")

    @test_app.get("/typed")
    async def typed(limit: int):
        return {"limit": limit}

    @test_app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return test_app


def test_invalid_input_is_a_validation_error():
    exc = InvalidInputError("bad")
    assert isinstance(exc, ValidationError)
    assert isinstance(exc, ValueError)
    assert exc.status_code == 400


def test_invalid_input_has_standard_shape():
    client = TestClient(_make_app())
    resp = client.get("/invalid")
    assert resp.status_code == 400
    body = resp.json()
    rid = resp.headers.get("x-request-id")
    assert body["error"]["code"] == "invalid_input"
    assert body["error"]["request_id"] == rid
    assert body["detail"] == "Unparseable date: 'x'"


def test_http_exception_normalized():
    client = TestClient(_make_app())
    resp = client.get("/missing")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


def test_unhandled_exception_hides_details():
    client = TestClient(_make_app(), raise_server_exceptions=False)
    resp = client.get("/boom")
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"]["code"] == "internal_error"
    assert "kaboom" not in body["error"]["message"]


def test_request_validation_normalized():
    client = TestClient(_make_app())
    resp = client.get("/typed", params={"limit": "many"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"]["code"] == "validation_error"
    assert body["error"]["message"].startswith("query.limit:")
    assert body["error"]["request_id"] == resp.headers.get("x-request-id")


def test_unknown_route_normalized(client):
    resp = client.get("/v1/streaks/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"
