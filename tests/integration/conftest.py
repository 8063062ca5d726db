"""Integration test fixtures (FastAPI app wired with the toolkit)."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from error_toolkit.api import RequestTracingMiddleware, install_error_handlers
from error_toolkit.errors import catalog
from error_toolkit.errors.exceptions import AppError, wrap_error


class CursorHandle:
    """Context value with no JSON encoding."""

    def __repr__(self) -> str:
        return "CursorHandle(7)"


class CreateUser(BaseModel):
    name: str
    age: int


def build_app(**handler_options) -> FastAPI:
    """Small app exposing one route per failure mode."""
    app = FastAPI()
    app.add_middleware(RequestTracingMiddleware)
    install_error_handlers(app, **handler_options)

    @app.get("/ok")
    async def ok():
        return {"status": "ok"}

    @app.get("/users/{user_id}")
    async def get_user(user_id: int):
        raise catalog.not_found("User not found", {"user_id": user_id})

    @app.get("/wrapped")
    async def wrapped():
        try:
            raise ConnectionError("redis unreachable")
        except ConnectionError as exc:
            raise wrap_error(exc, "Profile unavailable", 503, "PROFILE_UNAVAILABLE")

    @app.get("/opaque-context")
    async def opaque_context():
        raise AppError("Bad cursor", 400, "BAD_CURSOR", {"cursor": CursorHandle()})

    @app.get("/zero-status")
    async def zero_status():
        raise AppError("No status", status_code=0, code="ZERO")

    @app.get("/crash")
    async def crash():
        raise RuntimeError("unexpected")

    @app.get("/throttled")
    async def throttled():
        from starlette.exceptions import HTTPException

        raise HTTPException(status_code=429, detail="Slow down", headers={"Retry-After": "3"})

    @app.post("/users")
    async def create_user(user: CreateUser):
        return user

    return app


@pytest.fixture
def error_log() -> MagicMock:
    """Logger hook capturing every handled error snapshot."""
    return MagicMock()


@pytest.fixture
def client(error_log) -> TestClient:
    """TestClient for the app with JSON responses.

    Server exceptions are not re-raised so unclassified errors can be
    asserted on their 500 response.
    """
    app = build_app(logger=error_log, context={"service": "users-api"})
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def string_client(error_log) -> TestClient:
    """TestClient for the app with plain-text error responses."""
    app = build_app(logger=error_log, response_format="string")
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def app_factory():
    """build_app() for tests that need custom handler options."""
    return build_app
