# src/traderfm/models/__init__.py
"""SQLAlchemy models for the TraderFM application."""

from .answer import Answer
from .question import Question
from .user import AUTH_TYPE_EXTERNAL, AUTH_TYPE_SECRET_KEY, User

__all__ = [
    "Answer",
    "Question",
    "User", "AUTH_TYPE_EXTERNAL", "AUTH_TYPE_SECRET_KEY",
]
