# src/traderfm/models/question.py
"""SQLAlchemy model for pending anonymous questions."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from traderfm.db.session import Base
from traderfm.db.time import utcnow


class Question(Base):
    """Anonymous message addressed to a handle.

    The row existing is the pending state. Answering or discarding deletes it,
    so there is no status column.
    """

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    # Rate-limit accounting only; never returned to the owner.
    ip_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
