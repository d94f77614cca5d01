"""Operator endpoints for the TraderFM API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from traderfm.api.v1.dependencies import CurrentUserDep
from traderfm.core.errors import Forbidden
from traderfm.core.logging import RecentLogBuffer
from traderfm.core.settings import settings
from traderfm.models import User
from traderfm.schemas.common import RecentLogsResponse
from traderfm.services.validation import normalize_handle

router = APIRouter(prefix="/system", tags=["system"])


def require_admin(current_user: CurrentUserDep) -> User:
    """Allow only handles listed in ``ADMIN_HANDLES``."""
    admins = {normalize_handle(handle) for handle in settings.admin_handles}
    if current_user.handle not in admins:
        raise Forbidden("Admin access required")
    return current_user


AdminDep = Annotated[User, Depends(require_admin)]


@router.get("/logs", response_model=RecentLogsResponse)
def get_recent_logs(
    request: Request,
    _admin: AdminDep,
    limit: int = Query(100, ge=1, le=1000, description="Number of most recent lines"),
) -> RecentLogsResponse:
    """Return the tail of the in-memory log buffer."""
    buffer: RecentLogBuffer | None = getattr(request.app.state, "log_buffer", None)
    lines = buffer.lines(limit) if buffer is not None else []
    return RecentLogsResponse(lines=lines)
