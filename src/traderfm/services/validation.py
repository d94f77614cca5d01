"""Stateless input validation.

Each validator returns every violation it finds as a human-readable string;
an empty list means the input is valid.
"""

from __future__ import annotations

import re

HANDLE_MIN_LENGTH = 3
HANDLE_MAX_LENGTH = 20
QUESTION_MIN_LENGTH = 5
QUESTION_MAX_LENGTH = 280
ANSWER_MIN_LENGTH = 1
ANSWER_MAX_LENGTH = 1000

RESERVED_HANDLES: frozenset[str] = frozenset(
    {"api", "admin", "inbox", "login", "signup", "about", "help", "support"}
)

_HANDLE_CHARS = re.compile(r"^[a-z0-9]+$")
_ALL_DIGITS = re.compile(r"^\d+$")
_REPEATED_CHAR = re.compile(r"^(.)\1+$", re.DOTALL)
_HAS_ALNUM = re.compile(r"[a-zA-Z0-9]")


def normalize_handle(handle: str | None) -> str:
    """Return the canonical (trimmed, lowercase) form of a handle."""
    return (handle or "").strip().lower()


def validate_handle(handle: str | None) -> list[str]:
    """Validate a requested handle after case normalization."""
    value = normalize_handle(handle)
    if not value:
        return ["Handle is required"]

    errors: list[str] = []
    if len(value) < HANDLE_MIN_LENGTH or len(value) > HANDLE_MAX_LENGTH:
        errors.append(
            f"Handle must be between {HANDLE_MIN_LENGTH} and {HANDLE_MAX_LENGTH} characters"
        )
    if not _HANDLE_CHARS.match(value):
        errors.append("Handle can only contain lowercase letters and numbers")
    if _ALL_DIGITS.match(value):
        errors.append("Handle cannot be only numbers")
    if value in RESERVED_HANDLES:
        errors.append("This handle is reserved")
    return errors


def validate_question_text(text: str | None) -> list[str]:
    """Validate anonymous question text."""
    value = (text or "").strip()
    if not value:
        return ["Question text is required"]

    errors: list[str] = []
    if len(value) < QUESTION_MIN_LENGTH or len(value) > QUESTION_MAX_LENGTH:
        errors.append(
            f"Question must be between {QUESTION_MIN_LENGTH} and {QUESTION_MAX_LENGTH} characters"
        )
    if _REPEATED_CHAR.match(value):
        errors.append("Please ask a real question")
    if not _HAS_ALNUM.search(value):
        errors.append("Question must contain some text")
    return errors


def validate_answer_text(text: str | None) -> list[str]:
    """Validate answer text for both new answers and edits."""
    value = (text or "").strip()
    if len(value) < ANSWER_MIN_LENGTH:
        return ["Answer text is required"]
    if len(value) > ANSWER_MAX_LENGTH:
        return [f"Answer must be between {ANSWER_MIN_LENGTH} and {ANSWER_MAX_LENGTH} characters"]
    return []
