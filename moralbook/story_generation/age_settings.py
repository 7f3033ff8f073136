"""
Age-bracket settings that tune page count, vocabulary, and themes to the reader.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Vocabulary = Literal["simple", "basic", "intermediate", "advanced"]

PAGE_COUNT_RANGE = (4, 16)


@dataclass(frozen=True)
class AgeSettings:
    page_count: int
    words_per_page: tuple[int, int]
    vocabulary: Vocabulary
    themes: tuple[str, ...]
    sentence_structure: str


AGE_SETTINGS: dict[str, AgeSettings] = {
    "2-3": AgeSettings(
        page_count=4,
        words_per_page=(20, 30),
        vocabulary="simple",
        themes=("colors", "animals", "family", "bedtime"),
        sentence_structure="very short, repetitive sentences with familiar words",
    ),
    "4-5": AgeSettings(
        page_count=4,
        words_per_page=(40, 50),
        vocabulary="basic",
        themes=("friendship", "sharing", "bravery", "helping"),
        sentence_structure="short sentences with some simple dialogue",
    ),
    "6-7": AgeSettings(
        page_count=6,
        words_per_page=(60, 80),
        vocabulary="intermediate",
        themes=("adventure", "problem-solving", "kindness", "curiosity"),
        sentence_structure="varied sentence lengths with engaging dialogue",
    ),
    "8-10": AgeSettings(
        page_count=6,
        words_per_page=(100, 120),
        vocabulary="advanced",
        themes=("perseverance", "honesty", "empathy", "responsibility"),
        sentence_structure="complex sentences with rich descriptions and dialogue",
    ),
}


def get_age_group(age: int) -> str:
    if age <= 3:
        return "2-3"
    if age <= 5:
        return "4-5"
    if age <= 7:
        return "6-7"
    return "8-10"


def get_age_settings(age: int) -> AgeSettings:
    return AGE_SETTINGS[get_age_group(age)]


def validate_page_count(page_count: int) -> int:
    """
    Ensure an explicit page count falls inside :data:`PAGE_COUNT_RANGE`.
    """
    lower, upper = PAGE_COUNT_RANGE
    if isinstance(page_count, bool) or not isinstance(page_count, int):
        raise ValueError(f"page_count must be an integer, received {page_count!r}.")
    if not lower <= page_count <= upper:
        raise ValueError(
            f"page_count must fall between {lower} and {upper}, received {page_count}."
        )
    return page_count
