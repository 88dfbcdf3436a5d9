"""Tests for the error taxonomy and response bodies."""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from reviewdesk.core.errors import (
    ErrorType,
    build_error_body,
    register_error_handlers,
    validation_error,
)


def test_production_body_hides_detail():
    body = build_error_body(ErrorType.DATABASE, "relation missing", detail="stack", production=True)
    assert body["error"] == "Database operation failed"
    assert body["type"] == "DATABASE_ERROR"
    assert "timestamp" in body
    assert "detail" not in body
    assert "message" not in body


def test_development_body_includes_detail():
    body = build_error_body(ErrorType.SERVER, detail="boom", production=False)
    assert body["detail"] == "boom"


def test_validation_message_and_field_always_returned():
    body = build_error_body(ErrorType.VALIDATION, "Slug too short", field="slug", code="x", production=True)
    assert body["message"] == "Slug too short"
    assert body["field"] == "slug"
    assert body["code"] == "x"


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/validation")
    async def raise_validation():
        raise validation_error("Bad slug", field="slug")

    @app.get("/database")
    async def raise_database():
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    @app.get("/crash")
    async def crash():
        raise RuntimeError("unexpected")

    @app.get("/typed/{item_id}")
    async def typed(item_id: int):
        return {"item_id": item_id}

    return app


def test_handlers_shape_responses():
    client = TestClient(_app(), raise_server_exceptions=False)

    validation = client.get("/validation")
    assert validation.status_code == 400
    assert validation.json()["field"] == "slug"

    database = client.get("/database")
    assert database.status_code == 500
    assert database.json()["type"] == "DATABASE_ERROR"

    crash = client.get("/crash")
    assert crash.status_code == 500
    assert crash.json()["error"] == "Internal server error"

    typed = client.get("/typed/abc")
    assert typed.status_code == 400
    assert typed.json()["field"] == "item_id"

    missing = client.get("/nowhere")
    assert missing.status_code == 404
    assert missing.json()["type"] == "NOT_FOUND_ERROR"
