"""Profanity screening for anonymous questions."""

from __future__ import annotations

import random
import re
from collections.abc import Sequence
from threading import Lock

PROFANITY_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        # Common profanity with stretched letters
        r"\bf+[u*]+c+k+",
        r"\bs+h+[i*]+t+",
        r"\ba+s+s+h+o+l+e+",
        r"\bb+[i*]+t+c+h+",
        r"\bd+a+m+n+",
        r"\bh+e+l+l+\b",
        r"\bc+r+a+p+",
        r"\bp+[i*]+s+s+",
        # Slurs
        r"\bn+[i*]+g+g+[ae]+r*",
        r"\bf+a+g+g*[oi]+t*",
        r"\br+e+t+a+r+d+",
        # Sexual terms
        r"\bd+[i*]+c+k+",
        r"\bc+o+c+k+",
        r"\bp+u+s+s+y+",
        r"\bc+u+n+t+",
        # Abbreviations
        r"\bw+t+f+",
        r"\bs+t+f+u+",
    )
)

_STRIP_SYMBOLS = re.compile(r"[@#$%&*]")
_LEET_DIGITS = str.maketrans({"0": "o", "1": "i", "3": "e", "4": "a", "5": "s", "7": "t"})

PROFANITY_MESSAGES: tuple[str, ...] = (
    "Please keep it respectful!",
    "Let's keep things civil.",
    "That language isn't allowed here.",
    "Please rephrase without profanity.",
    "Keep it clean, please!",
)


def normalize_obfuscation(text: str) -> str:
    """Undo common filter-evasion tricks (symbol padding and leet digits)."""
    return _STRIP_SYMBOLS.sub("", text).translate(_LEET_DIGITS)


def contains_profanity(text: str | None) -> bool:
    """Return True if ``text`` matches any blocked pattern, raw or de-obfuscated."""
    if not text:
        return False
    candidates = (text, normalize_obfuscation(text))
    return any(pattern.search(candidate) for candidate in candidates for pattern in PROFANITY_PATTERNS)


class ProfanityFilter:
    """Blocks profane questions and varies the rejection message."""

    def __init__(
        self,
        messages: Sequence[str] = PROFANITY_MESSAGES,
        rng: random.Random | None = None,
    ) -> None:
        if not messages:
            raise ValueError("at least one message is required")
        self._messages = tuple(messages)
        self._rng = rng or random.Random()
        self._last: str | None = None
        self._lock = Lock()

    def check(self, text: str | None) -> bool:
        return contains_profanity(text)

    def message(self) -> str:
        """Return a random message, never the same as the previous call's."""
        with self._lock:
            choices = [m for m in self._messages if m != self._last] or list(self._messages)
            picked = self._rng.choice(choices)
            self._last = picked
            return picked


_PROFANITY_FILTER = ProfanityFilter()


def get_profanity_filter() -> ProfanityFilter:
    """Return the shared profanity filter."""
    return _PROFANITY_FILTER
