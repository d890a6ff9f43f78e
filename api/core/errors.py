"""
Error rendering for the HTTP layer.

Every non-success response uses one body shape:

    {"success": false, "statusCode": 400, "message": "..."}

Feature code keeps raising `HTTPException`; the handlers registered here only
change how those errors look on the wire. Tracebacks are added to 500 bodies
only when APP_ENV=development.
"""

from __future__ import annotations

import logging
import os
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get("APP_ENV", "production").strip().lower() or "production"


def include_stack() -> bool:
    return app_env() == "development"


def error_payload(status_code: int, message: str) -> dict[str, Any]:
    return {
        "success": False,
        "statusCode": int(status_code),
        "message": message,
    }


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = str(first.get("msg") or "is invalid")
    if location:
        return f"Invalid request: {location} {detail}"
    return f"Invalid request: {detail}"


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(status.HTTP_400_BAD_REQUEST, _validation_message(exc)),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    payload = error_payload(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal Server Error")
    if include_stack():
        payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
