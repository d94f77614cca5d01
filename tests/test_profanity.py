"""Tests for the question profanity filter."""

import random

import pytest

from traderfm.services.profanity import (
    PROFANITY_MESSAGES,
    ProfanityFilter,
    contains_profanity,
    normalize_obfuscation,
)


@pytest.mark.parametrize(
    "text",
    [
        "what the fuck",
        "FFFUUUCK this market",
        "you are full of shit",
        "h3ll no",
        "sh1t happens",
        "go to hell",
        "wtf was that trade",
        "d4mn son",
    ],
)
def test_blocks_profanity(text: str) -> None:
    assert contains_profanity(text)


@pytest.mark.parametrize(
    "text",
    [
        "Hello there, how are you?",
        "What is your favorite asset class?",
        "Any thoughts on the Dell earnings?",
        "Passionate about options?",
        "",
        None,
    ],
)
def test_allows_clean_text(text) -> None:
    assert not contains_profanity(text)


def test_normalize_obfuscation() -> None:
    assert normalize_obfuscation("$h1t") == "hit"
    assert normalize_obfuscation("h3ll0 w0rld") == "hello world"
    assert normalize_obfuscation("f*ck") == "fck"


def test_message_comes_from_pool() -> None:
    profanity = ProfanityFilter(rng=random.Random(7))
    assert profanity.message() in PROFANITY_MESSAGES


def test_message_never_repeats_back_to_back() -> None:
    profanity = ProfanityFilter(rng=random.Random(1))
    previous = profanity.message()
    for _ in range(50):
        current = profanity.message()
        assert current != previous
        previous = current


def test_single_message_pool_repeats() -> None:
    profanity = ProfanityFilter(messages=["nope"])
    assert profanity.message() == "nope"
    assert profanity.message() == "nope"


def test_empty_pool_rejected() -> None:
    with pytest.raises(ValueError):
        ProfanityFilter(messages=[])


def test_check_delegates_to_patterns() -> None:
    profanity = ProfanityFilter()
    assert profanity.check("stfu")
    assert not profanity.check("What moves you?")
