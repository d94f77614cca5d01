"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from traderfm.db.time import as_utc

UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON while keeping snake_case attributes.

    Every request and response schema derives from this class so that the wire
    naming is declared once instead of translated per handler.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement payload."""

    message: str = Field(..., description="Human-readable outcome")


class RecentLogsResponse(CamelModel):
    """Most recent buffered log lines, oldest first."""

    lines: list[str]
