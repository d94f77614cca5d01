"""Handle registration, authentication and public profile lookups."""
from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass
from itertools import count
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from traderfm.core import security
from traderfm.core.errors import Conflict, NotFound, Unauthorized, ValidationError
from traderfm.models import AUTH_TYPE_EXTERNAL, AUTH_TYPE_SECRET_KEY, Answer, User
from traderfm.services.validation import (
    HANDLE_MAX_LENGTH,
    normalize_handle,
    validate_handle,
)

__all__ = [
    "ExternalProfile",
    "authenticate",
    "derive_external_handle",
    "external_login",
    "get_user_by_handle",
    "list_directory",
    "public_profile",
    "register",
    "resolve_token_user",
]

logger = logging.getLogger(__name__)

DIRECTORY_LIMIT = 50
EXTERNAL_SUFFIX_LENGTH = 8
_NON_HANDLE_CHARS = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class ExternalProfile:
    """Identity asserted by the external provider."""

    external_id: str
    username: str
    display_name: str | None = None
    profile_image_url: str | None = None


def _find_by_handle(db: Session, handle: str) -> User | None:
    return db.execute(
        select(User).where(User.handle == normalize_handle(handle))
    ).scalar_one_or_none()


def _find_by_external_id(db: Session, external_id: str) -> User | None:
    return db.execute(
        select(User).where(User.external_id == external_id)
    ).scalar_one_or_none()


def get_user_by_handle(db: Session, handle: str) -> User:
    """Return the user owning ``handle`` or raise NotFound."""
    user = _find_by_handle(db, handle)
    if user is None:
        raise NotFound("Handle not found")
    return user


def register(db: Session, handle: str) -> tuple[User, str]:
    """Claim ``handle`` and return the new user with its plaintext secret.

    The plaintext secret is never stored; only its bcrypt hash is persisted.

    Raises:
        ValidationError: If the handle is malformed or reserved.
        Conflict: If the handle (in any letter case) is already taken.
    """
    errors = validate_handle(handle)
    if errors:
        raise ValidationError(errors)

    normalized = normalize_handle(handle)
    if _find_by_handle(db, normalized) is not None:
        raise Conflict("Handle already exists")

    secret_key = security.generate_secret_key()
    user = User(
        handle=normalized,
        secret_key_hash=security.hash_secret_key(secret_key),
        auth_type=AUTH_TYPE_SECRET_KEY,
        questions_received=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise Conflict("Handle already exists") from err
    db.refresh(user)

    logger.info("Created handle %s (user %s)", user.handle, user.id)
    return user, secret_key


def authenticate(db: Session, handle: str, secret_key: str) -> tuple[User, str]:
    """Verify a handle's secret and issue a session token.

    Raises:
        Unauthorized: Unknown handle, externally managed handle, or wrong secret.
    """
    user = _find_by_handle(db, handle)
    if user is None:
        logger.info("Login attempt for unknown handle %s", normalize_handle(handle))
        raise Unauthorized("Invalid credentials")

    if user.auth_type == AUTH_TYPE_EXTERNAL:
        logger.info("Secret-key login refused for externally managed handle %s", user.handle)
        raise Unauthorized(
            "This account uses external sign-in. Please sign in with your linked account."
        )

    if not security.verify_secret_key(secret_key, user.secret_key_hash):
        logger.info("Invalid secret key for handle %s", user.handle)
        raise Unauthorized("Invalid credentials")

    return user, security.create_access_token(user.id, user.handle)


def resolve_token_user(db: Session, token: str) -> User:
    """Return the live user row behind a session token.

    The row is always re-read, so tokens for removed or renamed handles stop
    working even while their signature is still valid.
    """
    user_id, handle = security.decode_access_token(token)
    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("User not found")
    if user.handle != handle:
        raise Unauthorized("Token no longer matches this handle")
    return user


def _handle_base(username: str) -> str:
    base = _NON_HANDLE_CHARS.sub("", username.lower())
    if not any(ch.isalpha() for ch in base):
        base = f"user{base}"
    return base[:HANDLE_MAX_LENGTH]


def derive_external_handle(db: Session, username: str, external_id: str) -> str:
    """Pick a free, valid handle for a new external identity.

    Tries the sanitized provider username first, then appends a suffix taken
    from a hash of the external id. The result depends only on the inputs and
    the handles already taken.
    """
    base = _handle_base(username)
    if not validate_handle(base) and _find_by_handle(db, base) is None:
        return base

    stem = base[: HANDLE_MAX_LENGTH - EXTERNAL_SUFFIX_LENGTH]
    for attempt in count():
        digest = hashlib.sha256(f"{external_id}:{attempt}".encode()).hexdigest()
        candidate = f"{stem}{digest[:EXTERNAL_SUFFIX_LENGTH]}"
        if not validate_handle(candidate) and _find_by_handle(db, candidate) is None:
            return candidate
    raise AssertionError("unreachable")  # pragma: no cover


def external_login(db: Session, profile: ExternalProfile) -> tuple[User, bool]:
    """Return the user for an external identity, creating it on first login.

    Returns:
        ``(user, created)``.
    """
    user = _find_by_external_id(db, profile.external_id)
    if user is not None:
        user.external_username = profile.username
        user.display_name = profile.display_name
        user.profile_image_url = profile.profile_image_url
        db.commit()
        db.refresh(user)
        return user, False

    handle = derive_external_handle(db, profile.username, profile.external_id)
    user = User(
        handle=handle,
        external_id=profile.external_id,
        external_username=profile.username,
        display_name=profile.display_name,
        profile_image_url=profile.profile_image_url,
        auth_type=AUTH_TYPE_EXTERNAL,
        questions_received=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        # A concurrent login for the same identity may have won the insert.
        existing = _find_by_external_id(db, profile.external_id)
        if existing is not None:
            return existing, False
        raise Conflict("Could not allocate a handle, please retry") from err
    db.refresh(user)

    if handle != _handle_base(profile.username):
        logger.info("Handle collision for %s, assigned %s", profile.username, handle)
    logger.info("Created external user %s (user %s)", user.handle, user.id)
    return user, True


def _answer_count(db: Session, user_id: int) -> int:
    return int(
        db.execute(
            select(func.count()).select_from(Answer).where(Answer.user_id == user_id)
        ).scalar()
        or 0
    )


def public_profile(db: Session, user: User) -> dict[str, Any]:
    """Return the fields of ``user`` that anyone may see."""
    return {
        "handle": user.handle,
        "auth_type": user.auth_type,
        "display_name": user.display_name,
        "profile_image_url": user.profile_image_url,
        "created_at": user.created_at,
        "answer_count": _answer_count(db, user.id),
    }


def list_directory(db: Session, limit: int = DIRECTORY_LIMIT) -> list[dict[str, Any]]:
    """Return public profiles of the newest users with their answer counts."""
    answer_counts = (
        select(Answer.user_id, func.count(Answer.id).label("answer_count"))
        .group_by(Answer.user_id)
        .subquery()
    )
    rows = db.execute(
        select(User, func.coalesce(answer_counts.c.answer_count, 0))
        .outerjoin(answer_counts, answer_counts.c.user_id == User.id)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
    ).all()
    return [
        {
            "handle": user.handle,
            "auth_type": user.auth_type,
            "display_name": user.display_name,
            "profile_image_url": user.profile_image_url,
            "created_at": user.created_at,
            "answer_count": int(answers),
        }
        for user, answers in rows
    ]
