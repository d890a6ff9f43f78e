"""
Import report: one per upload, filled in while the file is processed.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cars.schemas import CarRecord

DUPLICATE_REASON = "Car already exists in database"


class InvalidRowDetail(BaseModel):
    row: int
    error: str
    data: dict[str, Any]


class DuplicateDetail(BaseModel):
    row: int
    data: CarRecord
    reason: str = DUPLICATE_REASON


class InsertErrorDetail(BaseModel):
    row: int
    car: CarRecord
    error: str


class ImportReport(BaseModel):
    """
    Counts plus per-row detail for invalid, duplicate and failed rows.

    `totalRows == validRows + invalidRows` always holds, and every valid row
    ends up in exactly one of inserted/duplicate/insert error.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_rows: int = 0
    valid_rows: int = 0
    inserted_rows: int = 0
    duplicate_rows: int = 0
    invalid_rows: int = 0
    errors: int = 0
    invalid_row_details: list[InvalidRowDetail] = Field(default_factory=list)
    duplicate_details: list[DuplicateDetail] = Field(default_factory=list)
    insert_errors: list[InsertErrorDetail] = Field(default_factory=list)

    def record_seen(self) -> int:
        self.total_rows += 1
        return self.total_rows

    def record_valid(self) -> None:
        self.valid_rows += 1

    def record_invalid(self, row_number: int, error: str, raw_row: dict[str, Any]) -> None:
        self.invalid_rows += 1
        self.invalid_row_details.append(InvalidRowDetail(row=row_number, error=error, data=raw_row))

    def record_inserted(self) -> None:
        self.inserted_rows += 1

    def record_duplicate(self, row_number: int, car: CarRecord) -> None:
        self.duplicate_rows += 1
        self.duplicate_details.append(DuplicateDetail(row=row_number, data=car))

    def record_insert_error(self, row_number: int, car: CarRecord, error: str) -> None:
        self.errors += 1
        self.insert_errors.append(InsertErrorDetail(row=row_number, car=car, error=error))

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
