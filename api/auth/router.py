"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter(prefix="/auth")


@router.post("/login")
async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    return await service.login(payload)
