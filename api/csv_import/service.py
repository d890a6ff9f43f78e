"""
CSV import orchestration.

Flow for one upload:
1) Save the upload to a temp file (size-capped)
2) Stream rows: normalize headers, validate, queue valid rows with their
   1-based row number, record invalid rows immediately
3) End of stream: delete the temp file
4) Drain the queue in row order, one row at a time: duplicate check, then
   insert when new
5) Return the report

Rows are persisted strictly one after another. Two rows in the same file
with the same natural key therefore cannot both pass the duplicate check.
Separate concurrent imports are not serialized against each other; the
unique index in `db/schema.sql` turns that race into an insert error.
Any store failure for one row lands in `insertErrors` and the remaining
rows still run.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import HTTPException, UploadFile, status

from cars import repository as cars_repository
from cars.schemas import CarRecord

from . import normalizer, parser, uploads, validator
from .report import ImportReport

logger = logging.getLogger(__name__)


class RowOutcome(enum.Enum):
    INSERTED = "inserted"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class PendingRow:
    row_number: int
    car: CarRecord


async def insert_unless_duplicate(store: Any, car: CarRecord) -> RowOutcome:
    """
    Insert `car` unless a car with the same natural key is already stored.

    The check and the insert are one unit: callers must not start another
    row's unit before this one returns.
    """
    if await cars_repository.car_exists(store, car):
        return RowOutcome.DUPLICATE
    await cars_repository.insert_car(store, car)
    return RowOutcome.INSERTED


async def collect_rows(path: Path, report: ImportReport) -> deque[PendingRow]:
    """
    Stream the file and classify every row. Raises `parser.CsvParseError`.
    """
    pending: deque[PendingRow] = deque()
    async for raw_row in parser.iter_csv_rows(path):
        row_number = report.record_seen()
        result = validator.validate_row(normalizer.normalize_row(raw_row))
        if result.valid and result.data is not None:
            report.record_valid()
            pending.append(PendingRow(row_number=row_number, car=result.data))
        else:
            report.record_invalid(row_number, result.error or "Invalid row", dict(raw_row))
    return pending


def _describe_error(exc: Exception) -> str:
    # TimeoutError and friends often carry no message.
    return str(exc) or type(exc).__name__


async def persist_rows(store: Any, pending: deque[PendingRow], report: ImportReport) -> None:
    """
    Drain the queue in row order. A failing row is recorded and the next one runs;
    cancellation still propagates.
    """
    while pending:
        item = pending.popleft()
        try:
            outcome = await insert_unless_duplicate(store, item.car)
        except Exception as exc:
            logger.warning(
                "CSV import row %d failed to insert: %s",
                item.row_number,
                _describe_error(exc),
                exc_info=True,
            )
            report.record_insert_error(item.row_number, item.car, _describe_error(exc))
            continue

        if outcome is RowOutcome.DUPLICATE:
            report.record_duplicate(item.row_number, item.car)
        else:
            report.record_inserted()


async def import_csv_file(path: Path, *, store: Any) -> ImportReport:
    """
    Run the import for a saved CSV file. The file is deleted on every exit path.
    """
    report = ImportReport()
    try:
        pending = await collect_rows(path, report)
        uploads.remove_upload(path)
        await persist_rows(store, pending, report)
    finally:
        uploads.remove_upload(path)

    logger.info(
        "CSV import finished: total=%d valid=%d inserted=%d duplicate=%d invalid=%d errors=%d",
        report.total_rows,
        report.valid_rows,
        report.inserted_rows,
        report.duplicate_rows,
        report.invalid_rows,
        report.errors,
    )
    return report


async def import_upload(file: UploadFile | None, *, store: Any) -> ImportReport:
    """
    High-level import step for one uploaded file.

    This is what the FastAPI router should call.
    """
    file = uploads.validate_upload(file)
    path = await uploads.save_upload(
        file,
        max_bytes=uploads.max_upload_bytes_from_env(),
        upload_dir=uploads.upload_dir_from_env(),
    )
    logger.info("CSV import started: filename=%r size=%d", file.filename, path.stat().st_size)

    try:
        return await import_csv_file(path, store=store)
    except parser.CsvParseError as exc:
        logger.warning("CSV import aborted for %r: %s", file.filename, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error parsing CSV: {exc}",
        ) from exc
