"""
FastAPI router for bulk CSV import of catalog cars.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends, File, UploadFile

from auth import dependencies as auth_dependencies
from core import db

from . import service

router = APIRouter(prefix="/cars")


@router.post("/upload-csv")
async def upload_csv(
    file: UploadFile | None = File(default=None),
    store: asyncpg.Pool = Depends(db.get_pool),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    """
    Import cars from a CSV upload (multipart field `file`).

    Row-level problems never fail the request; inspect the counts and the
    detail lists in `data`. Only a missing/non-CSV file, an oversized upload
    or an unreadable file body produce an error response.
    """
    report = await service.import_upload(file, store=store)
    return {
        "success": True,
        "message": "CSV import completed",
        "data": report.to_payload(),
    }
