# src/traderfm/api/v1/endpoints/questions.py
"""Anonymous question endpoints for the TraderFM API."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, Depends, Request, status

from traderfm.api.v1.dependencies import (
    CurrentUserDep,
    RecordIdPath,
    SessionDep,
    client_ip,
    enforce_question_rate_limit,
)
from traderfm.models import Question
from traderfm.schemas.answer import AnswerCreate, AnswerCreated
from traderfm.schemas.common import MessageResponse
from traderfm.schemas.question import QuestionCreate, QuestionCreated, QuestionResponse
from traderfm.services import question_service

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("/{handle}/unanswered", response_model=list[QuestionResponse])
def list_unanswered(
    handle: str,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> Sequence[Question]:
    """List pending questions in the caller's own inbox."""
    return question_service.list_unanswered(db, handle, current_user)


@router.post(
    "/{handle}",
    status_code=status.HTTP_201_CREATED,
    response_model=QuestionCreated,
    dependencies=[Depends(enforce_question_rate_limit)],
)
def ask_question(
    handle: str,
    payload: QuestionCreate,
    request: Request,
    db: SessionDep,
) -> QuestionCreated:
    """Send an anonymous question to a handle."""
    question = question_service.submit_question(db, handle, payload.text, client_ip(request))
    return QuestionCreated(question_id=question.id)


@router.post(
    "/{question_id}/answer",
    status_code=status.HTTP_201_CREATED,
    response_model=AnswerCreated,
)
def answer_question(
    question_id: RecordIdPath,
    payload: AnswerCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> AnswerCreated:
    """Answer one of the caller's questions; the question leaves the inbox."""
    answer = question_service.answer_question(db, question_id, payload.answer_text, current_user)
    return AnswerCreated(answer_id=answer.id)


@router.delete("/{question_id}", response_model=MessageResponse)
def delete_question(
    question_id: RecordIdPath,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    """Discard one of the caller's questions without answering it."""
    question_service.discard_question(db, question_id, current_user)
    return MessageResponse(message="Question deleted successfully")
