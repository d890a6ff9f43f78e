from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import asyncpg
import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from cars.schemas import CAR_COLUMNS
from core import db

CSV_HEADER = (
    "Make Name,Model Name,Trim Name,Trim Description,Engine Type,Engine Fuel Type,"
    "Engine Cylinders,Engine Size,Engine Horsepower Hp,Engine Horsepower Rpm,"
    "Engine Drive Type,Body Type,Body Doors,Body Seats"
)


def stored_car(**overrides: Any) -> dict[str, Any]:
    car = {column: None for column in CAR_COLUMNS}
    car.update(
        make_name="Toyota",
        model_name="Corolla",
        engine_type="gas",
        body_type="Sedan",
    )
    car.update(overrides)
    return car


class FakeStore:
    """
    In-memory stand-in for the asyncpg pool, understanding the two statements
    the import pipeline sends to the `cars` table.
    """

    def __init__(self, cars: list[dict[str, Any]] | None = None) -> None:
        self.cars: list[dict[str, Any]] = []
        self.statements: list[str] = []
        self.failing_makes: set[str] = set()
        self.in_flight = 0
        self.max_in_flight = 0
        for car in cars or []:
            self._insert(dict(car))

    def _insert(self, values: dict[str, Any]) -> int:
        values["id"] = len(self.cars) + 1
        self.cars.append(values)
        return values["id"]

    @staticmethod
    def _key(car: dict[str, Any]) -> tuple:
        return (car["make_name"], car["model_name"], car["trim_name"], car["engine_type"], car["body_type"])

    async def fetchrow(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            # Give other tasks a chance to interleave if the caller allowed it.
            await asyncio.sleep(0)
            return self._fetchrow(" ".join(sql.split()), args)
        finally:
            self.in_flight -= 1

    def _fetchrow(self, sql: str, args: tuple) -> dict[str, Any] | None:
        if sql.startswith("SELECT id FROM cars"):
            self.statements.append("select")
            if "trim_name IS NULL" in sql:
                make, model, engine, body = args
                key = (make, model, None, engine, body)
            else:
                key = tuple(args)
            for car in self.cars:
                if self._key(car) == key:
                    return {"id": car["id"]}
            return None

        if sql.startswith("INSERT INTO cars"):
            self.statements.append("insert")
            values = dict(zip(CAR_COLUMNS, args))
            if values["make_name"] in self.failing_makes:
                raise asyncpg.UniqueViolationError(
                    'duplicate key value violates unique constraint "cars_natural_key_idx"'
                )
            return {"id": self._insert(values)}

        raise AssertionError(f"unexpected SQL: {sql}")


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def write_csv(tmp_path: Path):
    def _write(text: str | bytes, name: str = "cars.csv") -> Path:
        path = tmp_path / name
        if isinstance(text, bytes):
            path.write_bytes(text)
        else:
            path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def app(store: FakeStore, upload_dir: Path):
    from main import create_app

    application = create_app()
    application.dependency_overrides[db.get_pool] = lambda: store
    application.dependency_overrides[auth_dependencies.get_current_user] = lambda: {
        "id": 1,
        "email": "admin@example.com",
    }
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
