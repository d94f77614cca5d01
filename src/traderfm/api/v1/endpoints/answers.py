# src/traderfm/api/v1/endpoints/answers.py
"""Public answer listing and owner edit endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from traderfm.api.v1.dependencies import CurrentUserDep, RecordIdPath, SessionDep
from traderfm.models import Answer
from traderfm.schemas.answer import AnswerCreate, AnswerDetail, AnswerPage, AnswerResponse
from traderfm.schemas.common import MessageResponse
from traderfm.services import answer_service

router = APIRouter(prefix="/answers", tags=["answers"])


@router.get("/single/{answer_id}", response_model=AnswerDetail)
def get_answer(answer_id: RecordIdPath, db: SessionDep) -> dict[str, Any]:
    """Return one answer with its owner's public profile."""
    return answer_service.get_answer_detail(db, answer_id)


@router.get("/{handle}", response_model=AnswerPage)
def list_answers(
    handle: str,
    db: SessionDep,
    page: int = Query(
        1,
        ge=1,
        le=answer_service.MAX_PAGE,
        description="1-based page number",
    ),
    limit: int = Query(
        answer_service.DEFAULT_PAGE_SIZE,
        ge=1,
        description=f"Page size (capped at {answer_service.MAX_PAGE_SIZE})",
    ),
) -> dict[str, Any]:
    """List a handle's answers, newest first."""
    return answer_service.list_answers(db, handle, page=page, limit=limit)


@router.put("/{answer_id}", response_model=AnswerResponse)
def edit_answer(
    answer_id: RecordIdPath,
    payload: AnswerCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> Answer:
    """Edit the text of one of the caller's answers."""
    return answer_service.edit_answer(db, answer_id, payload.answer_text, current_user)


@router.delete("/{answer_id}", response_model=MessageResponse)
def delete_answer(
    answer_id: RecordIdPath,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    """Delete one of the caller's answers."""
    answer_service.delete_answer(db, answer_id, current_user)
    return MessageResponse(message="Answer deleted successfully")
