# src/traderfm/api/v1/endpoints/users.py
"""Handle registration, login and public profile endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from traderfm.api.v1.dependencies import SessionDep
from traderfm.schemas.user import (
    AuthRequest,
    DirectoryResponse,
    HandleCheckResponse,
    HandleCreateRequest,
    HandleCreateResponse,
    TokenResponse,
)
from traderfm.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/directory", response_model=DirectoryResponse)
def get_directory(db: SessionDep) -> dict[str, Any]:
    """List the newest handles with their public profiles."""
    return {"users": user_service.list_directory(db)}


@router.get("/check/{handle}", response_model=HandleCheckResponse)
def check_handle(handle: str, db: SessionDep) -> dict[str, Any]:
    """Return whether a handle exists, with its public profile."""
    user = user_service.get_user_by_handle(db, handle)
    return {"exists": True, **user_service.public_profile(db, user)}


@router.post(
    "/create",
    summary="Claim a new handle",
    status_code=status.HTTP_201_CREATED,
    response_model=HandleCreateResponse,
)
def create_handle(payload: HandleCreateRequest, db: SessionDep) -> HandleCreateResponse:
    """Create a handle and return its secret key exactly once."""
    user, secret_key = user_service.register(db, payload.handle)
    return HandleCreateResponse(handle=user.handle, secret_key=secret_key)


@router.post("/auth", summary="Log in with a handle's secret key", response_model=TokenResponse)
def authenticate(payload: AuthRequest, db: SessionDep) -> TokenResponse:
    """Exchange a handle and secret key for a session token."""
    user, token = user_service.authenticate(db, payload.handle, payload.secret_key)
    return TokenResponse(token=token, handle=user.handle, auth_type=user.auth_type)
