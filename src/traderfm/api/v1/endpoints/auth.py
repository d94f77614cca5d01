# src/traderfm/api/v1/endpoints/auth.py
"""External identity login for the trusted identity gateway."""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import APIRouter, Header

from traderfm.api.v1.dependencies import SessionDep
from traderfm.core.errors import NotFound, Unauthorized
from traderfm.core.security import create_access_token
from traderfm.core.settings import settings
from traderfm.schemas.user import ExternalLoginRequest, TokenResponse
from traderfm.services import user_service

router = APIRouter(prefix="/auth", tags=["authentication"])


def _require_gateway(secret: str | None) -> None:
    if not settings.external_auth_enabled:
        raise NotFound("Not found")
    expected = settings.external_auth_shared_secret or ""
    if not secret or not secrets.compare_digest(secret.encode(), expected.encode()):
        raise Unauthorized("Invalid identity gateway credentials")


@router.post("/external", summary="Log in with an external identity", response_model=TokenResponse)
def external_login(
    payload: ExternalLoginRequest,
    db: SessionDep,
    x_identity_gateway_secret: Annotated[str | None, Header()] = None,
) -> TokenResponse:
    """Create or fetch the handle bound to a verified external profile."""
    _require_gateway(x_identity_gateway_secret)
    user, _created = user_service.external_login(
        db,
        user_service.ExternalProfile(
            external_id=payload.external_id,
            username=payload.username,
            display_name=payload.display_name,
            profile_image_url=payload.profile_image_url,
        ),
    )
    return TokenResponse(
        token=create_access_token(user.id, user.handle),
        handle=user.handle,
        auth_type=user.auth_type,
    )
