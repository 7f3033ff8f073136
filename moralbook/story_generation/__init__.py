"""
Story text utilities: child profiles, catalogs, prompting, and parsing.
"""

from .age_settings import (
    AGE_SETTINGS,
    PAGE_COUNT_RANGE,
    AgeSettings,
    get_age_group,
    get_age_settings,
    validate_page_count,
)
from .morals import MORALS, InvalidMoralError, MoralDefinition, get_moral_by_id, require_moral
from .parser import ParsedPage, ParsedStory, parse_story_text
from .profile import ChildProfile
from .prompting import build_character_description, build_story_prompt
from .story_service import StoryTextGenerator

__all__ = [
    "AGE_SETTINGS",
    "PAGE_COUNT_RANGE",
    "AgeSettings",
    "get_age_group",
    "get_age_settings",
    "validate_page_count",
    "MORALS",
    "InvalidMoralError",
    "MoralDefinition",
    "get_moral_by_id",
    "require_moral",
    "ParsedPage",
    "ParsedStory",
    "parse_story_text",
    "ChildProfile",
    "build_character_description",
    "build_story_prompt",
    "StoryTextGenerator",
]
