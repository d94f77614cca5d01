"""Shared API dependencies for authentication and rate limiting."""

from typing import Annotated

from fastapi import Depends, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from traderfm.core.errors import RateLimited, Unauthorized
from traderfm.db.session import MAX_INTEGER_ID, get_db
from traderfm.models import User
from traderfm.services.rate_limit import RateLimiter, get_rate_limiter
from traderfm.services.user_service import resolve_token_user

# HTTP Bearer scheme for JWT authentication; missing headers are reported as 401 below.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]

# Row ids in the path; anything above the INTEGER range cannot exist.
RecordIdPath = Annotated[int, Path(ge=1, le=MAX_INTEGER_ID)]


def client_ip(request: Request) -> str:
    """Return the caller's IP address as seen by the server."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        Unauthorized: If the token is missing, invalid, expired or stale.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("No token provided")
    return resolve_token_user(db, credentials.credentials)


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def enforce_global_rate_limit(request: Request, limiter: RateLimiterDep) -> None:
    """Count the request against the caller's global window."""
    decision = limiter.check_global(client_ip(request))
    if not decision.allowed:
        raise RateLimited("Too many requests from this IP", retry_after=decision.retry_after)


def enforce_question_rate_limit(handle: str, request: Request, limiter: RateLimiterDep) -> None:
    """Count a question submission against the ``(ip, handle)`` window."""
    decision = limiter.check_question(client_ip(request), handle)
    if not decision.allowed:
        raise RateLimited(
            "Too many questions. Please wait before asking again.",
            retry_after=decision.retry_after,
        )
