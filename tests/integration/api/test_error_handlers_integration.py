"""
Integration tests for the FastAPI exception handlers.

These tests use TestClient against a small app wired with
install_error_handlers() and RequestTracingMiddleware.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from error_toolkit.api.error_handlers import exception_handlers, request_context
from error_toolkit.errors.exceptions import AppError
from error_toolkit.errors.models import ErrorDetails


def test_success_passes_through(client):
    response = client.get("/ok")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


def test_app_error_maps_status_and_body(client):
    response = client.get("/users/42")

    assert response.status_code == 404
    body = response.json()
    assert body["message"] == "User not found"
    assert body["code"] == "NOT_FOUND"
    assert body["statusCode"] == 404
    assert "timestamp" in body
    assert "stack" not in body


def test_request_fields_merged_into_context(client):
    response = client.get("/users/42", headers={"X-Request-ID": "req-123"})

    context = response.json()["context"]
    assert context["user_id"] == 42
    assert context["method"] == "GET"
    assert context["path"] == "/users/42"
    assert context["ip"] == "testclient"
    assert context["request_id"] == "req-123"
    assert context["service"] == "users-api"
    assert response.headers["X-Request-ID"] == "req-123"


def test_cause_chain_in_response(client):
    response = client.get("/wrapped")

    assert response.status_code == 503
    body = response.json()
    assert body["code"] == "PROFILE_UNAVAILABLE"
    assert body["cause"] == {"message": "redis unreachable"}


def test_falsy_status_becomes_500(client):
    response = client.get("/zero-status")

    assert response.status_code == 500
    assert response.json()["statusCode"] == 500
    assert response.json()["code"] == "ZERO"


def test_unclassified_error_becomes_500(client, error_log):
    response = client.get("/crash")

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "unexpected"
    assert "code" not in body
    assert "statusCode" not in body
    assert body["context"]["path"] == "/crash"
    error_log.assert_called_once()


def test_unknown_route_uses_catalog(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
    assert response.json()["message"] == "Not Found"


def test_http_exception_keeps_headers(client):
    response = client.get("/throttled")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "3"
    assert response.json()["message"] == "Slow down"
    assert response.json()["code"] == "TOO_MANY_REQUESTS"


def test_request_validation_error(client):
    response = client.post("/users", json={"name": "Ada", "age": "not a number"})

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["context"]["errors"][0]["loc"] == ["body", "age"]


def test_logger_receives_snapshot_once(client, error_log):
    client.get("/users/7")

    error_log.assert_called_once()
    details = error_log.call_args.args[0]
    assert isinstance(details, ErrorDetails)
    assert details.status_code == 404
    assert details.context["user_id"] == 7


def test_string_format(string_client):
    response = string_client.get("/users/42")

    assert response.status_code == 404
    assert response.text == "User not found"
    assert response.headers["content-type"].startswith("text/plain")


def test_include_stack(app_factory):
    app = app_factory(logger=MagicMock(), include_stack=True)
    response = TestClient(app).get("/users/1")

    assert "Traceback" in response.json()["stack"]


def test_logger_failure_propagates(app_factory):
    """A failing logger hook is not swallowed by the handler."""
    app = app_factory(logger=MagicMock(side_effect=RuntimeError("sink down")))
    client = TestClient(app)

    with pytest.raises(RuntimeError, match="sink down"):
        client.get("/users/1")


def test_exception_handlers_mapping():
    handlers = exception_handlers(logger=MagicMock())

    assert AppError in handlers
    assert Exception in handlers


def test_request_context_without_tracing_middleware():
    app = FastAPI()
    captured = {}

    @app.get("/ctx")
    async def ctx(request: Request):
        captured.update(request_context(request))
        return {}

    TestClient(app).get("/ctx")

    assert captured == {"method": "GET", "path": "/ctx", "ip": "testclient"}


def test_unencodable_context_keeps_status(client, error_log):
    response = client.get("/opaque-context")

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "BAD_CURSOR"
    assert body["context"]["cursor"] == "CursorHandle(7)"
    error_log.assert_called_once()


def test_default_sink_handles_unencodable_context(app_factory):
    app = app_factory()
    response = TestClient(app).get("/opaque-context")

    assert response.status_code == 400
    assert response.json()["context"]["cursor"] == "CursorHandle(7)"


def test_request_id_on_unhandled_error(client):
    response = client.get("/crash", headers={"X-Request-ID": "req-500"})

    assert response.status_code == 500
    assert response.headers["X-Request-ID"] == "req-500"
    assert response.json()["context"]["request_id"] == "req-500"
