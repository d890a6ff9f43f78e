from __future__ import annotations

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from core.errors import register_exception_handlers


@pytest.fixture
def error_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def boom() -> dict:
        raise RuntimeError("kaput")

    @app.get("/missing")
    def missing() -> dict:
        raise HTTPException(status_code=404, detail="Car not found")

    @app.get("/typed")
    def typed(page: int) -> dict:
        return {"page": page}

    return app


def test_http_exception_uses_error_shape(error_app: FastAPI) -> None:
    response = TestClient(error_app).get("/missing")

    assert response.status_code == 404
    assert response.json() == {"success": False, "statusCode": 404, "message": "Car not found"}


def test_request_validation_maps_to_400(error_app: FastAPI) -> None:
    response = TestClient(error_app).get("/typed", params={"page": "first"})

    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid request: query.page")


def test_unhandled_error_hides_stack_outside_development(error_app: FastAPI, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")

    response = TestClient(error_app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 500
    assert response.json() == {"success": False, "statusCode": 500, "message": "kaput"}


def test_unhandled_error_includes_stack_in_development(error_app: FastAPI, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "development")

    response = TestClient(error_app, raise_server_exceptions=False).get("/boom")

    body = response.json()
    assert body["statusCode"] == 500
    assert "RuntimeError: kaput" in body["stack"]
