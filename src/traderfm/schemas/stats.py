"""Stats and activity feed schemas."""

from pydantic import Field

from .common import CamelModel, UtcDatetime


class StatsResponse(CamelModel):
    """Owner-only counters for a handle."""

    handle: str
    total_questions: int = Field(..., description="Questions ever received; never decreases")
    total_answers: int
    unanswered_questions: int
    pending_questions: int = Field(..., description="Questions currently awaiting an answer")


class ActivityQuestion(CamelModel):
    id: int
    text: str
    created_at: UtcDatetime
    user_handle: str


class ActivityAnswer(CamelModel):
    id: int
    question_text: str
    answer_text: str
    created_at: UtcDatetime
    user_handle: str
    user_profile_image_url: str | None = None


class ActivityUser(CamelModel):
    id: int
    handle: str
    display_name: str | None = None
    profile_image_url: str | None = None
    auth_type: str
    created_at: UtcDatetime


class ActivityResponse(CamelModel):
    """Rows created in ``(since, timestamp]``; pass ``timestamp`` back as the next ``since``."""

    questions: list[ActivityQuestion]
    answers: list[ActivityAnswer]
    users: list[ActivityUser]
    timestamp: UtcDatetime
