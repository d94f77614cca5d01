"""Question-related Pydantic schemas."""

from pydantic import Field

from .common import CamelModel, UtcDatetime


class QuestionCreate(CamelModel):
    """Anonymous question submission."""

    text: str = Field(..., max_length=2000, description="Question text (5-280 characters)")


class QuestionCreated(CamelModel):
    message: str = "Question sent successfully"
    question_id: int


class QuestionResponse(CamelModel):
    """Pending question as seen by its owner. The sender's IP is never included."""

    id: int
    user_id: int
    text: str
    created_at: UtcDatetime
