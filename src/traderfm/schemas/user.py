"""User-related Pydantic schemas."""

from pydantic import Field

from .common import CamelModel, UtcDatetime


class HandleCreateRequest(CamelModel):
    """Schema for claiming a new handle."""

    handle: str = Field(..., max_length=64, description="Requested public handle")


class HandleCreateResponse(CamelModel):
    """Registration response; the only time the secret key is ever returned."""

    message: str = "Handle created successfully"
    handle: str
    secret_key: str = Field(..., description="Plaintext secret, shown exactly once")


class AuthRequest(CamelModel):
    """Schema for secret-key login."""

    handle: str = Field(..., max_length=64)
    secret_key: str = Field(..., max_length=256)


class ExternalLoginRequest(CamelModel):
    """Verified profile forwarded by the trusted identity gateway."""

    external_id: str = Field(..., min_length=1, max_length=64)
    username: str = Field(..., min_length=1, max_length=64)
    display_name: str | None = Field(None, max_length=100)
    profile_image_url: str | None = Field(None, max_length=500)


class TokenResponse(CamelModel):
    """Response returned after a successful login."""

    message: str = "Authentication successful"
    token: str = Field(..., description="JWT access token")
    token_type: str = "bearer"
    handle: str
    auth_type: str


class UserProfile(CamelModel):
    """Public view of a handle."""

    handle: str
    auth_type: str
    display_name: str | None = None
    profile_image_url: str | None = None
    created_at: UtcDatetime
    answer_count: int = 0


class HandleCheckResponse(UserProfile):
    """Existence check for a handle, with its public profile."""

    exists: bool = True


class DirectoryResponse(CamelModel):
    users: list[UserProfile]
