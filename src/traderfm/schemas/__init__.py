# src/traderfm/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .answer import AnswerCreate, AnswerCreated, AnswerDetail, AnswerPage, AnswerResponse
from .common import CamelModel, MessageResponse, RecentLogsResponse
from .question import QuestionCreate, QuestionCreated, QuestionResponse
from .stats import ActivityResponse, StatsResponse
from .user import (
    AuthRequest,
    DirectoryResponse,
    ExternalLoginRequest,
    HandleCheckResponse,
    HandleCreateRequest,
    HandleCreateResponse,
    TokenResponse,
    UserProfile,
)

__all__ = [
    "AnswerCreate", "AnswerCreated", "AnswerDetail", "AnswerPage", "AnswerResponse",
    "CamelModel", "MessageResponse", "RecentLogsResponse",
    "QuestionCreate", "QuestionCreated", "QuestionResponse",
    "ActivityResponse", "StatsResponse",
    "AuthRequest", "DirectoryResponse", "ExternalLoginRequest", "HandleCheckResponse",
    "HandleCreateRequest", "HandleCreateResponse", "TokenResponse", "UserProfile",
]
