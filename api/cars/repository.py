"""
Car catalog persistence (raw SQL).

Functions take the store handle (an asyncpg pool or connection) as their
first argument; callers get it from `core.db.get_pool` and pass it down.
"""

from __future__ import annotations

from typing import Any

from .schemas import CAR_COLUMNS, CarRecord


class CarInsertError(RuntimeError):
    pass


# `trim_name = NULL` is never true in SQL, so a missing trim gets its own query.
_EXISTS_WITH_TRIM_SQL = """
    SELECT id
    FROM cars
    WHERE make_name = $1
      AND model_name = $2
      AND trim_name = $3
      AND engine_type = $4
      AND body_type = $5
    LIMIT 1
"""

_EXISTS_WITHOUT_TRIM_SQL = """
    SELECT id
    FROM cars
    WHERE make_name = $1
      AND model_name = $2
      AND trim_name IS NULL
      AND engine_type = $3
      AND body_type = $4
    LIMIT 1
"""

_INSERT_SQL = """
    INSERT INTO cars ({columns})
    VALUES ({placeholders})
    RETURNING id
""".format(
    columns=", ".join(CAR_COLUMNS),
    placeholders=", ".join(f"${i}" for i in range(1, len(CAR_COLUMNS) + 1)),
)


async def find_existing_car_id(store: Any, car: CarRecord) -> int | None:
    """
    Return the id of a stored car with the same natural key, if any.
    """
    make, model, trim, engine, body = car.natural_key()
    if trim is None:
        row = await store.fetchrow(_EXISTS_WITHOUT_TRIM_SQL, make, model, engine, body)
    else:
        row = await store.fetchrow(_EXISTS_WITH_TRIM_SQL, make, model, trim, engine, body)
    if row is None:
        return None
    return int(row["id"])


async def car_exists(store: Any, car: CarRecord) -> bool:
    return await find_existing_car_id(store, car) is not None


async def insert_car(store: Any, car: CarRecord) -> int:
    row = await store.fetchrow(_INSERT_SQL, *car.column_values())
    if row is None or "id" not in row:
        raise CarInsertError("Failed to insert car: no id returned.")
    return int(row["id"])
