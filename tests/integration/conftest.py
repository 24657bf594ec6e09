"""Shared fixtures for integration tests.

The application under test is built with ``create_app`` and extended with the
routes a service would register, so requests run through the real exception
handlers, response class and decoding dependency.
"""

import logging
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Annotated

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient
from loguru import logger
from pydantic import BaseModel
from starlette.types import Receive, Scope, Send

from respondwithjson import (
    EnvelopeResponse,
    StrictBody,
    decode_strict,
    describe_field_types,
    respond_with_message_error,
    respond_with_success,
    validate_fields,
    write_error,
    write_success,
)
from respondwithjson.api.main import create_app
from respondwithjson.core.config import Settings, get_settings
from respondwithjson.core.exceptions import RespondWithJsonError
from respondwithjson.core.logging import _state


class User(BaseModel):
    """Request body for the user routes."""

    name: str
    age: int


@dataclass
class Product:
    """Dataclass described by the schema route."""

    sku: str = field(metadata={"json": "sku_code"})
    price: float = 0.0
    tags: list[str] = field(default_factory=list)


def _add_routes(app: FastAPI) -> None:
    @app.post("/users")
    async def create_user(
        user: Annotated[User, Depends(StrictBody(User))],
    ) -> EnvelopeResponse:
        validate_fields(user.name, user.age)
        return respond_with_success(user)

    @app.put("/users/{name}")
    async def replace_user(name: str, request: Request) -> EnvelopeResponse:
        if name == "taken":
            return respond_with_message_error(409, "user already exists")
        user = decode_strict(await request.body(), User)
        return respond_with_success({"name": name, "age": user.age})

    @app.post("/profiles")
    async def create_profile(profile: User) -> EnvelopeResponse:
        return respond_with_success(profile)

    @app.get("/schema/{kind}")
    async def schema(kind: str) -> EnvelopeResponse:
        shape: object = Product if kind == "product" else kind
        return respond_with_success(describe_field_types(shape))

    @app.get("/unserializable")
    async def unserializable() -> EnvelopeResponse:
        return respond_with_success({"values": {1, 2}})

    @app.get("/boom")
    async def boom() -> EnvelopeResponse:
        raise RuntimeError("database password rejected")


async def raw_asgi_app(scope: Scope, receive: Receive, send: Send) -> None:
    """Plain ASGI application writing envelopes straight to ``send``."""
    body = b""
    more_body = True
    while more_body:
        message = await receive()
        body += message.get("body", b"")
        more_body = message.get("more_body", False)

    try:
        user = decode_strict(body or None, User)
    except RespondWithJsonError as exc:
        await write_error(send, 400, exc)
        return
    await write_success(send, {"greeting": f"hello {user.name}"})


@pytest.fixture(autouse=True)
def clean_logging() -> Generator[None]:
    """Let each application configure logging and restore defaults afterwards."""
    get_settings.cache_clear()
    _state.configured = False
    yield
    _state.configured = False
    get_settings.cache_clear()
    logger.remove()
    logging.basicConfig(handlers=[], force=True)


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    """Application with service routes on top of the factory defaults."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    application = create_app(Settings(environment="development", debug=False))
    _add_routes(application)
    return application


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient]:
    """Test client that turns unhandled errors into 500 responses."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def production_client(monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient]:
    """Test client for an application running in production."""
    monkeypatch.setenv("ENVIRONMENT", "production")
    application = create_app(Settings(environment="production", debug=False))
    _add_routes(application)
    with TestClient(application, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def raw_client() -> TestClient:
    """Test client for the plain ASGI application."""
    return TestClient(raw_asgi_app)
