"""Owner statistics and the public activity feed."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from traderfm.core.errors import Forbidden
from traderfm.core.settings import settings
from traderfm.db.time import as_utc, utcnow
from traderfm.models import Answer, Question, User
from traderfm.services.validation import normalize_handle

__all__ = ["get_activity", "get_owner_stats"]


def _count(db: Session, model: type[Question] | type[Answer], user_id: int) -> int:
    return int(
        db.execute(
            select(func.count()).select_from(model).where(model.user_id == user_id)
        ).scalar()
        or 0
    )


def get_owner_stats(db: Session, handle: str, caller: User) -> dict[str, Any]:
    """Return question/answer counters for the caller's own handle.

    ``total_questions`` comes from the increment-only counter on the user row,
    so it keeps counting questions that were later answered or discarded.
    """
    if normalize_handle(handle) != caller.handle:
        raise Forbidden("You can only view your own stats")

    db.refresh(caller)
    total_questions = int(caller.questions_received or 0)
    total_answers = _count(db, Answer, caller.id)
    return {
        "handle": caller.handle,
        "total_questions": total_questions,
        "total_answers": total_answers,
        "unanswered_questions": max(total_questions - total_answers, 0),
        "pending_questions": _count(db, Question, caller.id),
    }


def get_activity(
    db: Session,
    since: datetime | None = None,
    *,
    page_size: int | None = None,
) -> dict[str, Any]:
    """Return questions, answers and users created in ``(since, now]``.

    ``now`` is fixed before querying and returned as ``timestamp``; feeding it
    back as the next ``since`` gives adjacent, non-overlapping windows.
    """
    until = utcnow()
    if since is None:
        since = until - timedelta(seconds=settings.activity_default_lookback_seconds)
    since = as_utc(since)
    limit = page_size or settings.activity_page_size

    question_rows = db.execute(
        select(Question.id, Question.text, Question.created_at, User.handle)
        .join(User, User.id == Question.user_id)
        .where(Question.created_at > since, Question.created_at <= until)
        .order_by(Question.created_at.desc(), Question.id.desc())
        .limit(limit)
    ).all()
    answer_rows = db.execute(
        select(
            Answer.id,
            Answer.question_text,
            Answer.answer_text,
            Answer.created_at,
            User.handle,
            User.profile_image_url,
        )
        .join(User, User.id == Answer.user_id)
        .where(Answer.created_at > since, Answer.created_at <= until)
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .limit(limit)
    ).all()
    users = db.execute(
        select(User)
        .where(User.created_at > since, User.created_at <= until)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
    ).scalars().all()

    return {
        "questions": [
            {"id": qid, "text": text, "created_at": created_at, "user_handle": handle}
            for qid, text, created_at, handle in question_rows
        ],
        "answers": [
            {
                "id": aid,
                "question_text": question_text,
                "answer_text": answer_text,
                "created_at": created_at,
                "user_handle": handle,
                "user_profile_image_url": image,
            }
            for aid, question_text, answer_text, created_at, handle, image in answer_rows
        ],
        "users": list(users),
        "timestamp": until,
    }
