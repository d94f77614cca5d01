"""Secret generation, hashing and session token helpers."""
from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.hash import bcrypt

from traderfm.core.errors import Unauthorized
from traderfm.core.settings import settings

SECRET_KEY_BYTES = 32


def generate_secret_key() -> str:
    """Return a new random URL-safe secret for a handle."""
    return secrets.token_urlsafe(SECRET_KEY_BYTES)


def hash_secret_key(secret_key: str) -> str:
    """Return a bcrypt hash of the provided secret."""
    return bcrypt.using(rounds=settings.bcrypt_rounds).hash(secret_key)


def verify_secret_key(secret_key: str, secret_key_hash: str | None) -> bool:
    """Return True if ``secret_key`` matches the stored hash."""
    if not secret_key or not secret_key_hash:
        return False
    try:
        return bcrypt.verify(secret_key, secret_key_hash)
    except ValueError:
        # Malformed stored hash.
        return False


def create_access_token(user_id: int, handle: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT binding ``(user_id, handle)`` with a fixed expiry."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "handle": handle,
        "exp": expire,
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> tuple[int, str]:
    """Verify a session token and return its ``(user_id, handle)`` claims.

    Raises:
        Unauthorized: If the signature, expiry or payload is invalid.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise Unauthorized("Invalid token") from err

    subject = payload.get("sub")
    handle = payload.get("handle")
    if subject is None or not isinstance(handle, str):
        raise Unauthorized("Invalid token payload")
    try:
        return int(subject), handle
    except (TypeError, ValueError) as err:
        raise Unauthorized("Invalid token payload") from err
