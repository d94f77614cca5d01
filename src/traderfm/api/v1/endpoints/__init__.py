# src/traderfm/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .answers import router as answers_router
from .auth import router as auth_router
from .questions import router as questions_router
from .stats import router as stats_router
from .system import router as system_router
from .users import router as users_router

__all__ = [
    "answers_router",
    "auth_router",
    "questions_router",
    "stats_router",
    "system_router",
    "users_router",
]
