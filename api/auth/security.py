"""
Password hashing (bcrypt) and access tokens (PyJWT).

Token settings come from the environment on every call so tests and
deployments can change them without a restart:

- JWT_SECRET               signing key
- JWT_ALG                  signing algorithm (HS256)
- ACCESS_TOKEN_EXPIRE_MIN  lifetime in minutes (7 days)
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

ACCESS_TOKEN_TYPE = "access"
DEFAULT_SECRET = "dev-change-this-secret"
DEFAULT_EXPIRE_MINUTES = 7 * 24 * 60


class AuthSecurityError(RuntimeError):
    pass


def _env(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    algorithm: str
    expire_minutes: int

    @classmethod
    def from_env(cls) -> "TokenSettings":
        raw_expiry = _env("ACCESS_TOKEN_EXPIRE_MIN", str(DEFAULT_EXPIRE_MINUTES))
        try:
            expire_minutes = int(raw_expiry)
        except ValueError:
            expire_minutes = DEFAULT_EXPIRE_MINUTES
        return cls(
            secret=_env("JWT_SECRET", DEFAULT_SECRET),
            algorithm=_env("JWT_ALG", "HS256"),
            expire_minutes=expire_minutes,
        )


def _utf8(value: str | None) -> bytes:
    return (value or "").encode("utf-8")


def hash_password(plain_password: str) -> str:
    password = _utf8(plain_password)
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password, hashed = _utf8(plain_password), _utf8(password_hash)
    if not (password and hashed):
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def build_access_token(*, user_id: int, email: str, settings: TokenSettings | None = None) -> str:
    settings = settings or TokenSettings.from_env()
    issued_at = int(time.time())
    claims = {
        "sub": str(user_id),
        "email": email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + settings.expire_minutes * 60,
    }
    return jwt.encode(claims, settings.secret, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: TokenSettings | None = None) -> dict[str, Any]:
    """
    Verify signature and expiry, and check the token is an access token.

    Every failure is raised as `AuthSecurityError` with a client-safe message.
    """
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    settings = settings or TokenSettings.from_env()
    try:
        claims = jwt.decode(raw, settings.secret, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if str(claims.get("type") or "").lower() != ACCESS_TOKEN_TYPE:
        raise AuthSecurityError("Token is not an access token.")
    return claims
