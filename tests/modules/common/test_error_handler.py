"""Tests for the central error mapping."""

import asyncio

import pytest
from fastapi import APIRouter, HTTPException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError

from docvault.infrastructure.app_factory import create_application
from docvault.infrastructure.config.settings import EnvironmentOption
from docvault.modules.common.exceptions import (
    DocumentNotFoundError,
    EmptyUpdateError,
    InvalidReferenceError,
    PermissionDeniedError,
    ResourceExistsError,
    UnauthorizedError,
    ValidationError,
)
from docvault.modules.common.utils.error_handler import (
    ErrorResolution,
    render_error,
    resolve_exception,
    sqlstate_of,
)


class FakeDriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def integrity_error(message: str, sqlstate: str | None = None) -> IntegrityError:
    return IntegrityError("INSERT INTO documents ...", {}, FakeDriverError(message, sqlstate))


@pytest.mark.parametrize(
    ("exc", "status_code", "error"),
    [
        (ValidationError("bad input"), 400, "Validation failed"),
        (EmptyUpdateError(), 400, "No valid fields to update"),
        (UnauthorizedError("no token"), 401, "Unauthorized"),
        (PermissionDeniedError("not yours"), 403, "Forbidden"),
        (DocumentNotFoundError("abc"), 404, "Document not found"),
        (ResourceExistsError("dup"), 409, "Resource already exists"),
        (InvalidReferenceError("dangling"), 400, "Invalid reference"),
        (RuntimeError("boom"), 500, "Internal Server Error"),
    ],
)
def test_resolve_domain_errors(exc, status_code, error):
    resolution = resolve_exception(exc)

    assert resolution.status_code == status_code
    assert resolution.error == error


@pytest.mark.parametrize(
    ("sqlstate", "status_code", "error"),
    [
        ("23505", 409, "Resource already exists"),
        ("23503", 400, "Invalid reference"),
        ("23502", 400, "Missing required field"),
        ("23514", 400, "Invalid field value"),
    ],
)
def test_resolve_postgres_integrity_errors(sqlstate, status_code, error):
    resolution = resolve_exception(integrity_error("violation", sqlstate))

    assert (resolution.status_code, resolution.error) == (status_code, error)


def test_resolve_sqlite_integrity_errors():
    exc = integrity_error("UNIQUE constraint failed: documents.id")

    assert sqlstate_of(exc) == "23505"
    assert resolve_exception(exc).status_code == 409


def test_unmapped_database_error_is_server_error():
    exc = OperationalError("SELECT 1", {}, FakeDriverError("connection refused"))

    assert resolve_exception(exc).status_code == 500


def test_not_found_message_names_the_id():
    resolution = resolve_exception(DocumentNotFoundError("550e8400-e29b-41d4-a716-446655440001"))

    assert resolution.message == "Document with ID 550e8400-e29b-41d4-a716-446655440001 does not exist"


def test_production_hides_server_error_details():
    exc = RuntimeError("password=hunter2")
    resolution = ErrorResolution(status_code=500, error="Internal Server Error", message=str(exc))

    body = render_error(resolution, exc, EnvironmentOption.PRODUCTION)

    assert body["message"] == "Internal Server Error"
    assert "hunter2" not in str(body)
    assert "stack" not in body
    assert "timestamp" in body


def test_development_includes_stack():
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        resolution = resolve_exception(exc)
        body = render_error(resolution, exc, EnvironmentOption.DEVELOPMENT)

    assert body["message"] == "boom"
    assert any("RuntimeError: boom" in line for line in body["stack"])


def test_client_errors_keep_message_in_production():
    exc = DocumentNotFoundError("abc")

    body = render_error(resolve_exception(exc), exc, EnvironmentOption.PRODUCTION)

    assert body["error"] == "Document not found"
    assert body["message"] == "Document with ID abc does not exist"


def build_app(request_timeout: float = 5.0):
    router = APIRouter()

    @router.get("/explode")
    async def explode():
        raise RuntimeError("boom")

    @router.get("/duplicate")
    async def duplicate():
        raise integrity_error("duplicate key value violates unique constraint", "23505")

    @router.get("/forbidden")
    async def forbidden():
        raise PermissionDeniedError("Not allowed")

    @router.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="I'm a teapot")

    @router.get("/slow")
    async def slow():
        await asyncio.sleep(1)
        return {"ok": True}

    return create_application(router=router, request_timeout=request_timeout, create_tables_on_startup=False)


@pytest.mark.asyncio
async def test_unhandled_exception_becomes_500_envelope():
    app = build_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/explode")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal Server Error"
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_storage_errors_are_mapped_over_http():
    app = build_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        duplicate = await client.get("/duplicate")
        forbidden = await client.get("/forbidden")
        teapot = await client.get("/teapot")

    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "Resource already exists"
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "Not allowed"
    assert teapot.status_code == 418
    assert teapot.json()["error"] == "I'm a teapot"


@pytest.mark.asyncio
async def test_slow_handler_times_out():
    app = build_app(request_timeout=0.05)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/slow")

    assert response.status_code == 504
    body = response.json()
    assert body["error"] == "Gateway Timeout"
    assert "timestamp" in body
