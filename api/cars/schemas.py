"""
Car catalog schemas.
"""

from __future__ import annotations

from pydantic import BaseModel

REQUIRED_FIELDS = ("make_name", "model_name", "engine_type", "body_type")

# Trimmed; empty becomes None.
OPTIONAL_TEXT_FIELDS = ("trim_name", "trim_description", "engine_fuel_type", "engine_drive_type")

INTEGER_FIELDS = (
    "engine_cylinders",
    "engine_horsepower_hp",
    "engine_horsepower_rpm",
    "body_doors",
    "body_seats",
)

DECIMAL_FIELDS = ("engine_size",)

# Column order of the `cars` table (minus id/timestamps).
CAR_COLUMNS = (
    "make_name",
    "model_name",
    "trim_name",
    "trim_description",
    "engine_type",
    "engine_fuel_type",
    "engine_cylinders",
    "engine_size",
    "engine_horsepower_hp",
    "engine_horsepower_rpm",
    "engine_drive_type",
    "body_type",
    "body_doors",
    "body_seats",
)


class CarRecord(BaseModel):
    make_name: str
    model_name: str
    trim_name: str | None = None
    trim_description: str | None = None
    engine_type: str
    engine_fuel_type: str | None = None
    engine_cylinders: int | None = None
    engine_size: float | None = None
    engine_horsepower_hp: int | None = None
    engine_horsepower_rpm: int | None = None
    engine_drive_type: str | None = None
    body_type: str
    body_doors: int | None = None
    body_seats: int | None = None

    def natural_key(self) -> tuple[str, str, str | None, str, str]:
        """
        Identity used for duplicate detection.
        """
        return (self.make_name, self.model_name, self.trim_name, self.engine_type, self.body_type)

    def column_values(self) -> list:
        return [getattr(self, column) for column in CAR_COLUMNS]
