"""
MoralBook package exposing story generation, illustration pipeline, and PDF tooling.
"""

from .pdf_generation import StorybookPDFBuilder
from .pipeline import (
    PLACEHOLDER_IMAGE_URL,
    GeneratedStory,
    IllustrationPipeline,
    StoryAssembler,
    StoryPage,
    generate_story,
)
from .story_generation import ChildProfile, InvalidMoralError

__all__ = [
    "PLACEHOLDER_IMAGE_URL",
    "ChildProfile",
    "GeneratedStory",
    "IllustrationPipeline",
    "InvalidMoralError",
    "StoryAssembler",
    "StoryPage",
    "StorybookPDFBuilder",
    "generate_story",
]
