"""Answer-related Pydantic schemas."""

from pydantic import Field

from .common import CamelModel, UtcDatetime


class AnswerCreate(CamelModel):
    """Answer text submitted by the owner, for both answering and editing."""

    answer_text: str = Field(..., max_length=5000, description="Answer text (1-1000 characters)")


class AnswerCreated(CamelModel):
    message: str = "Answer posted successfully"
    answer_id: int


class AnswerResponse(CamelModel):
    """Published answer with its frozen question text."""

    id: int
    question_id: int
    user_id: int
    question_text: str
    answer_text: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AnswerDetail(AnswerResponse):
    """Single answer enriched with the owner's public profile."""

    user_handle: str
    user_display_name: str | None = None
    user_profile_image_url: str | None = None
    user_auth_type: str


class AnswerPage(CamelModel):
    """Page of answers for a handle."""

    answers: list[AnswerResponse]
    total: int
    page: int
    pages: int
