# src/traderfm/api/v1/endpoints/stats.py
"""Owner statistics and public activity feed endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Query

from traderfm.api.v1.dependencies import CurrentUserDep, SessionDep
from traderfm.schemas.stats import ActivityResponse, StatsResponse
from traderfm.services import stats_service

router = APIRouter(tags=["stats"])


@router.get("/stats/{handle}", response_model=StatsResponse)
def get_stats(handle: str, db: SessionDep, current_user: CurrentUserDep) -> dict[str, Any]:
    """Return question and answer counts for the caller's own handle."""
    return stats_service.get_owner_stats(db, handle, current_user)


@router.get("/activity", response_model=ActivityResponse)
def get_activity(
    db: SessionDep,
    since: datetime | None = Query(
        None,
        description="ISO-8601 timestamp; pass the previous response's timestamp",
    ),
) -> dict[str, Any]:
    """Poll for questions, answers and users created after ``since``."""
    return stats_service.get_activity(db, since)
