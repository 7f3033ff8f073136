"""
Prompt construction utilities for the MoralBook story text generation step.
"""

from __future__ import annotations

import random

from .age_settings import AgeSettings
from .morals import MoralDefinition
from .profile import ChildProfile

DEFAULT_SETTING = "a magical world"


def _output_format_contract(page_count: int) -> str:
    # The parser relies on this exact TITLE/PAGE layout.
    return f"""Format your response EXACTLY as follows:
TITLE: [Story Title]

PAGE 1:
[Text for page 1]

PAGE 2:
[Text for page 2]

... and so on for all {page_count} pages."""


def build_character_description(child: ChildProfile) -> str:
    """
    One-sentence description of the child used to condition the story text.
    """
    hair = child.hair_style or "hair"
    if child.is_female:
        subject = "She loves"
    elif child.gender.strip().lower() in {"male", "boy", "m"}:
        subject = "He loves"
    else:
        subject = "They love"

    description = (
        f"A {child.age}-year-old {child.gender} child named {child.name} with "
        f"{child.skin_tone} skin, {child.eye_color} eyes, and {child.hair_color} {hair}."
    )
    if child.interests:
        description += f" {subject} {', '.join(child.interests)}."
    return description


def pick_theme(
    age_settings: AgeSettings,
    custom_theme: str | None = None,
    *,
    rng: random.Random | None = None,
) -> str:
    if custom_theme and custom_theme.strip():
        return custom_theme.strip()
    chooser = rng or random
    return chooser.choice(age_settings.themes)


def build_story_prompt(
    child: ChildProfile,
    moral: MoralDefinition,
    age_settings: AgeSettings,
    *,
    custom_setting: str | None = None,
    custom_theme: str | None = None,
    page_count: int | None = None,
    rng: random.Random | None = None,
) -> str:
    """
    Build the instruction that asks the LLM for a paged children's story.

    Parameters
    ----------
    child:
        The child starring in the story.
    moral:
        Resolved moral definition the story should teach.
    age_settings:
        Settings of the child's age bracket (word budget, vocabulary, themes).
    custom_setting:
        Optional setting; falls back to "a magical world".
    custom_theme:
        Optional theme; otherwise one is picked from the age bracket's theme pool.
    page_count:
        Explicit page count; falls back to the age bracket default.
    rng:
        Optional random source for the theme pick.
    """
    setting = custom_setting.strip() if custom_setting and custom_setting.strip() else DEFAULT_SETTING
    theme = pick_theme(age_settings, custom_theme, rng=rng)
    effective_page_count = page_count if page_count is not None else age_settings.page_count
    words_min, words_max = age_settings.words_per_page
    interests = ", ".join(child.interests) if child.interests else "playing and exploring"

    return f"""Write a children's story for a {child.age}-year-old child.

Main Character: {build_character_description(child)}

Story Requirements:
- Number of pages: {effective_page_count}
- Words per page: {words_min}-{words_max} words
- Vocabulary level: {age_settings.vocabulary}
- Sentence structure: {age_settings.sentence_structure}
- Moral of the story: {moral.label} - {moral.description}
- Setting: {setting}
- Theme: {theme}

Instructions:
1. Make {child.name} the main character who learns about {moral.label.lower()}
2. Include {child.name}'s interests ({interests}) naturally in the story
3. Use engaging, age-appropriate language
4. End with a clear but not preachy moral lesson
5. Make the story fun and imaginative

{_output_format_contract(effective_page_count)}"""
