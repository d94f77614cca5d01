"""Published answers: public listing and owner edits."""
from __future__ import annotations

import logging
import math
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from traderfm.core.errors import Forbidden, NotFound, ValidationError
from traderfm.db.session import MAX_INTEGER_ID
from traderfm.db.time import utcnow
from traderfm.models import Answer, User
from traderfm.services.user_service import get_user_by_handle
from traderfm.services.validation import validate_answer_text

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE",
    "MAX_PAGE_SIZE",
    "delete_answer",
    "edit_answer",
    "get_answer_detail",
    "list_answers",
]

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# Keeps the row offset within a 64-bit INTEGER at the largest page size.
MAX_PAGE = MAX_INTEGER_ID // MAX_PAGE_SIZE


def list_answers(
    db: Session,
    handle: str,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> dict[str, Any]:
    """Return one page of a handle's answers, newest first."""
    owner = get_user_by_handle(db, handle)
    page = min(max(page, 1), MAX_PAGE)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    total = int(
        db.execute(
            select(func.count()).select_from(Answer).where(Answer.user_id == owner.id)
        ).scalar()
        or 0
    )
    answers = db.execute(
        select(Answer)
        .where(Answer.user_id == owner.id)
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).scalars().all()

    return {
        "answers": list(answers),
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit),
    }


def get_answer_detail(db: Session, answer_id: int) -> dict[str, Any]:
    """Return a single answer with its owner's public profile fields."""
    row = db.execute(
        select(Answer, User).join(User, User.id == Answer.user_id).where(Answer.id == answer_id)
    ).first()
    if row is None:
        raise NotFound("Answer not found")
    answer, owner = row
    return {
        "id": answer.id,
        "question_id": answer.question_id,
        "user_id": answer.user_id,
        "question_text": answer.question_text,
        "answer_text": answer.answer_text,
        "created_at": answer.created_at,
        "updated_at": answer.updated_at,
        "user_handle": owner.handle,
        "user_display_name": owner.display_name,
        "user_profile_image_url": owner.profile_image_url,
        "user_auth_type": owner.auth_type,
    }


def _owned_answer(db: Session, answer_id: int, caller: User) -> Answer:
    answer = db.get(Answer, answer_id)
    if answer is None:
        raise NotFound("Answer not found")
    if answer.user_id != caller.id:
        raise Forbidden("You do not own this answer")
    return answer


def edit_answer(db: Session, answer_id: int, answer_text: str, caller: User) -> Answer:
    """Replace the text of one of the caller's answers."""
    answer = _owned_answer(db, answer_id, caller)

    errors = validate_answer_text(answer_text)
    if errors:
        raise ValidationError(errors)

    answer.answer_text = answer_text.strip()
    answer.updated_at = utcnow()
    db.commit()
    db.refresh(answer)
    logger.info("Answer %s edited by %s", answer_id, caller.handle)
    return answer


def delete_answer(db: Session, answer_id: int, caller: User) -> None:
    """Hard-delete one of the caller's answers."""
    answer = _owned_answer(db, answer_id, caller)
    db.delete(answer)
    db.commit()
    logger.info("Answer %s deleted by %s", answer_id, caller.handle)
