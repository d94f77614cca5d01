"""Anonymous question lifecycle: submit, list, answer and discard."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from traderfm.core.errors import Forbidden, NotFound, ValidationError
from traderfm.db.time import utcnow
from traderfm.models import Answer, Question, User
from traderfm.services.profanity import ProfanityFilter, get_profanity_filter
from traderfm.services.user_service import get_user_by_handle
from traderfm.services.validation import (
    normalize_handle,
    validate_answer_text,
    validate_question_text,
)

__all__ = [
    "answer_question",
    "discard_question",
    "list_unanswered",
    "submit_question",
]

logger = logging.getLogger(__name__)


def submit_question(
    db: Session,
    handle: str,
    text: str,
    ip_address: str | None,
    profanity: ProfanityFilter | None = None,
) -> Question:
    """Store an anonymous question for ``handle``.

    The owner's lifetime ``questions_received`` counter is bumped in the same
    transaction as the insert.

    Raises:
        NotFound: If the handle does not exist.
        ValidationError: If the text is malformed or profane.
    """
    owner = get_user_by_handle(db, handle)

    errors = validate_question_text(text)
    if errors:
        raise ValidationError(errors)

    profanity = profanity or get_profanity_filter()
    if profanity.check(text):
        message = profanity.message()
        raise ValidationError([message], detail=message)

    question = Question(user_id=owner.id, text=text.strip(), ip_address=ip_address)
    db.add(question)
    db.execute(
        update(User)
        .where(User.id == owner.id)
        .values(questions_received=User.questions_received + 1)
    )
    db.commit()
    db.refresh(question)

    logger.info("Question %s submitted to %s", question.id, owner.handle)
    return question


def list_unanswered(db: Session, handle: str, caller: User) -> Sequence[Question]:
    """Return the caller's pending questions, newest first.

    Raises:
        Forbidden: If ``handle`` is not the caller's own handle.
    """
    if normalize_handle(handle) != caller.handle:
        raise Forbidden("You can only view your own inbox")
    return db.execute(
        select(Question)
        .where(Question.user_id == caller.id)
        .order_by(Question.created_at.desc(), Question.id.desc())
    ).scalars().all()


def _owned_question(db: Session, question_id: int, caller: User) -> Question:
    question = db.get(Question, question_id)
    if question is None:
        raise NotFound("Question not found")
    if question.user_id != caller.id:
        raise Forbidden("You do not own this question")
    return question


def answer_question(db: Session, question_id: int, answer_text: str, caller: User) -> Answer:
    """Publish an answer and retire the question in one transaction.

    The answer insert and question delete commit together. If the delete finds
    no row (another request answered or discarded it first) the insert is
    rolled back, so a question can never produce two answers.

    Raises:
        NotFound: If the question no longer exists.
        Forbidden: If the caller does not own the question.
        ValidationError: If the answer text is malformed.
    """
    question = _owned_question(db, question_id, caller)

    errors = validate_answer_text(answer_text)
    if errors:
        raise ValidationError(errors)

    now = utcnow()
    answer = Answer(
        question_id=question.id,
        user_id=caller.id,
        question_text=question.text,
        answer_text=answer_text.strip(),
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(answer)
        db.flush()
        result = db.execute(
            delete(Question)
            .where(Question.id == question.id, Question.user_id == caller.id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFound("Question not found")
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expunge(question)
    db.refresh(answer)
    logger.info("Question %s answered by %s as answer %s", question_id, caller.handle, answer.id)
    return answer


def discard_question(db: Session, question_id: int, caller: User) -> None:
    """Delete a pending question without answering it."""
    question = _owned_question(db, question_id, caller)
    db.delete(question)
    db.commit()
    logger.info("Question %s discarded by %s", question_id, caller.handle)
