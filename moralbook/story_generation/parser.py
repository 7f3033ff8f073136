"""
Parse the flat ``TITLE:`` / ``PAGE n:`` story text returned by the LLM.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

DEFAULT_TITLE = "A Magical Adventure"
FILLER_TEXT = "The End."

_TITLE_PREFIX = "TITLE:"
_PAGE_MARKER = re.compile(r"^PAGE\s*(\d+):", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedPage:
    page_number: int
    text: str


@dataclass(frozen=True)
class ParsedStory:
    title: str
    pages: list[ParsedPage] = field(default_factory=list)


def parse_story_text(raw_text: str, expected_page_count: int) -> ParsedStory:
    """
    Split the model output into a title and exactly ``expected_page_count`` pages.

    Pages keep the order in which their markers appear. Markers without any text are
    dropped, missing pages are padded with "The End.", extra pages are truncated, and
    the surviving pages are numbered 1..N by position.
    """
    if expected_page_count < 0:
        raise ValueError(
            f"expected_page_count must be zero or positive, received {expected_page_count}."
        )

    lines = [line.strip() for line in (raw_text or "").splitlines()]
    lines = [line for line in lines if line]

    title = next(
        (line[len(_TITLE_PREFIX):].strip() for line in lines if line.startswith(_TITLE_PREFIX)),
        "",
    ) or DEFAULT_TITLE

    texts: list[str] = []
    current_page: int | None = None
    buffer = ""

    for line in lines:
        match = _PAGE_MARKER.match(line)
        if match:
            if current_page is not None and buffer.strip():
                texts.append(buffer.strip())
            current_page = int(match.group(1))
            buffer = line[match.end():].strip()
        elif current_page is not None and not line.startswith(_TITLE_PREFIX):
            buffer += " " + line

    if current_page is not None and buffer.strip():
        texts.append(buffer.strip())

    while len(texts) < expected_page_count:
        texts.append(FILLER_TEXT)

    pages = [
        ParsedPage(page_number=index, text=text)
        for index, text in enumerate(texts[:expected_page_count], start=1)
    ]
    return ParsedStory(title=title, pages=pages)
