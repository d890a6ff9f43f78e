"""
Upload handling for CSV imports.

- Validate that the upload is a CSV
- Stream it to a temp file with a size limit
- Remove the temp file once the import is done with it
"""

from __future__ import annotations

import logging
import os
import secrets
import time
from pathlib import Path

from fastapi import HTTPException, UploadFile, status

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".csv"}
ALLOWED_CONTENT_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_UPLOAD_DIR = "uploads"
CHUNK_SIZE = 1024 * 1024  # 1 MiB


def max_upload_bytes_from_env() -> int:
    """
    Read MAX_UPLOAD_BYTES from env, falling back to the 10 MiB default.
    """
    raw = os.environ.get("MAX_UPLOAD_BYTES", "").strip()
    if not raw:
        return DEFAULT_MAX_UPLOAD_BYTES

    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Invalid MAX_UPLOAD_BYTES. It must be an integer.",
        )

    if value <= 0:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Invalid MAX_UPLOAD_BYTES. It must be > 0.",
        )

    return value


def upload_dir_from_env() -> Path:
    return Path(os.environ.get("UPLOAD_DIR", "").strip() or DEFAULT_UPLOAD_DIR)


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def _content_type(file: UploadFile) -> str:
    return (file.content_type or "").split(";", 1)[0].strip().lower()


def validate_upload(file: UploadFile | None) -> UploadFile:
    """
    Accept the upload when it declares a CSV content type or has a .csv name.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    if _content_type(file) in ALLOWED_CONTENT_TYPES or _file_ext(file.filename) in ALLOWED_EXTENSIONS:
        return file

    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only CSV files are allowed")


def temp_upload_path(upload_dir: Path) -> Path:
    suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return upload_dir / f"csv-{suffix}.csv"


def remove_upload(path: Path) -> None:
    """
    Delete a temp upload. Missing files are fine; the pipeline may call this twice.
    """
    path.unlink(missing_ok=True)


async def save_upload(file: UploadFile, *, max_bytes: int, upload_dir: Path) -> Path:
    """
    Stream the upload to a new temp file, enforcing `max_bytes`.

    Returns the temp file path. The caller owns it and must remove it.
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = temp_upload_path(upload_dir)
    written = 0

    try:
        with open(path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=f"File too large. Max is {max_bytes} bytes.",
                    )
                out.write(chunk)
    except BaseException:
        remove_upload(path)
        raise

    logger.debug("Saved upload %r to %s (%d bytes)", file.filename, path, written)
    return path
