# src/traderfm/models/user.py
"""SQLAlchemy model for public handles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from traderfm.db.session import Base
from traderfm.db.time import utcnow

AUTH_TYPE_SECRET_KEY = "secret_key"
AUTH_TYPE_EXTERNAL = "external"


class User(Base):
    """One public handle and the single credential path that controls it."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "auth_type IN ('secret_key', 'external')",
            name="ck_users_auth_type",
        ),
        CheckConstraint(
            "(auth_type = 'secret_key' AND secret_key_hash IS NOT NULL AND external_id IS NULL)"
            " OR (auth_type = 'external' AND external_id IS NOT NULL AND secret_key_hash IS NULL)",
            name="ck_users_credential_path",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    handle: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    secret_key_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    external_id: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    external_username: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    auth_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default=AUTH_TYPE_SECRET_KEY
    )

    # Increment-only; answered and discarded questions are deleted, so the
    # lifetime total cannot be derived from live rows.
    questions_received: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def is_external(self) -> bool:
        """Return True if the handle is controlled by an external identity."""
        return self.auth_type == AUTH_TYPE_EXTERNAL
