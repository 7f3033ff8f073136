"""
Prompt construction utilities for MoralBook illustration generation.

Every page of a story is illustrated by an independent image-model call, so visual
continuity comes entirely from repeating the same character and style blocks in each
prompt.
"""

from __future__ import annotations

from typing import Sequence

from moralbook.story_generation.parser import ParsedPage
from moralbook.story_generation.profile import ChildProfile

SCENE_EXCERPT_LENGTH = 250

NEGATIVE_PROMPT = (
    "text, letters, words, numbers, captions, speech bubbles, signs, watermark, logo, "
    "inconsistent character, outfit change, harsh shadows, photorealism, cluttered background"
)

NO_TEXT_REQUIREMENTS = (
    "ABSOLUTELY NO TEXT, letters, words, numbers, signs, labels, captions, titles, or any written content anywhere in the image",
    "No speech bubbles, no banners, no signs with writing",
    "Pure illustration only - let the visuals tell the story without any text elements",
)

_STYLE_LINES = (
    "Technique: Watercolor with soft brushstrokes, translucent washes",
    "Colors: Soft pastel palette - sky blues, soft pinks, mint greens, gentle lavenders",
    "Background: Light, airy watercolor washes (same style in all pages)",
    "Mood: Whimsical, gentle, dreamy",
)

_CONSISTENCY_RULES = (
    "SAME character design in every image (same face, same hair, same body)",
    "SAME outfit in every image (same clothes, same colors, same design)",
    "SAME watercolor style in every image",
    "SAME color palette in every image",
    "SAME background treatment in every image",
    "SAME lighting style in every image",
)


def _gender_term(child: ChildProfile) -> str:
    gender = child.gender.strip().lower()
    if child.is_female:
        return "girl"
    if gender in {"male", "boy", "m"}:
        return "boy"
    return "child"


def _outfit_convention(child: ChildProfile) -> str:
    if child.is_female:
        return "dress"
    return "shirt and pants"


def build_character_reference(child: ChildProfile) -> str:
    """
    Describe the child's fixed appearance so every page renders the same character.
    """
    hair_description = (
        f"{child.hair_color} {child.hair_style} hair" if child.hair_style else f"{child.hair_color} hair"
    )
    lines = [
        f"Face: {child.skin_tone} skin, {child.eye_color} eyes, button nose, warm friendly smile",
        f"Hair: {hair_description} (exact same style and color in EVERY image)",
        "Body: Same proportions in every image",
        f"Outfit: {_outfit_convention(child)} (exact same outfit in every image - SAME colors, SAME design)",
        "Expression: Always happy and engaged, same expression style",
    ]
    header = (
        "CHARACTER CONSISTENCY - MUST FOLLOW EXACTLY IN ALL PAGES:\n"
        f"Main Character: {child.name}, a {child.age}-year-old {_gender_term(child)}"
    )
    return (
        f"{header}\n{_format_bullets(lines)}\n\n"
        "CRITICAL: The character MUST look like the same person in every single page "
        "with the exact same clothes."
    )


def build_style_reference() -> str:
    """Return the constant art-style block shared by every page of every story."""
    return (
        _format_bullet_section("ART STYLE FOR ALL PAGES (MUST BE CONSISTENT):", _STYLE_LINES)
        + "\n\n"
        + _format_bullet_section("CONSISTENCY RULES (VERY IMPORTANT):", _CONSISTENCY_RULES)
    )


def get_page_mood(page_number: int, total_pages: int) -> str:
    if page_number == 1:
        return "warm, welcoming, full of wonder"
    if page_number == total_pages:
        return "triumphant, heartwarming, satisfying"
    if page_number == total_pages // 2:
        return "magical, pivotal"
    return "cheerful, engaging"


def build_illustration_prompt(
    character_reference: str,
    style_reference: str,
    page: ParsedPage,
    total_pages: int,
    mood: str | None = None,
) -> str:
    """
    Build the image prompt for a single page.

    Parameters
    ----------
    character_reference:
        Output of :func:`build_character_reference`, embedded verbatim.
    style_reference:
        Output of :func:`build_style_reference`, embedded verbatim.
    page:
        The page to illustrate. Only the first 250 characters of its text are used.
    total_pages:
        Number of pages in the story; used for the position-based mood.
    mood:
        Optional mood override.
    """
    resolved_mood = mood or get_page_mood(page.page_number, total_pages)
    scene = page.text[:SCENE_EXCERPT_LENGTH]

    return f"""{style_reference}

{character_reference}

PAGE {page.page_number} of {total_pages}:
Scene: {scene}

Mood: {resolved_mood}

{_format_bullet_section("CRITICAL REQUIREMENTS:", NO_TEXT_REQUIREMENTS)}

REMEMBER: This is part of a {total_pages}-page story. The main character MUST look exactly the same in this image as in all other pages with the exact same clothes."""


def _format_bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"- {line}" for line in lines if line.strip())


def _format_bullet_section(title: str, lines: Sequence[str]) -> str:
    return f"{title}\n{_format_bullets(lines)}"
