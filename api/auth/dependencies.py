"""
Auth dependencies for protected FastAPI routes.

Catalog routes only need to know that the caller holds a valid access token;
`get_current_user` resolves the token to the stored user row.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from . import service

_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_CHALLENGE,
    )


def parse_authorization_header(authorization: str | None) -> str:
    """
    Return the token from an `Authorization: Bearer <token>` header value.
    """
    raw = (authorization or "").strip()
    if not raw:
        raise _unauthorized("Unauthorized request: missing access token.")

    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Authorization must be: Bearer <token>.")
    return token.strip()


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return parse_authorization_header(authorization)


async def get_current_user(access_token: str = Depends(get_bearer_token)) -> dict:
    return await service.get_user_from_access_token(access_token)
