"""
End-to-end orchestration for MoralBook story and illustration generation.
"""

from .illustration import PLACEHOLDER_IMAGE_URL, IllustrationPipeline, is_accepted_image_reference
from .pipeline import StoryAssembler, generate_story, load_profile_file
from .review import ReviewImageStore
from .story import GeneratedStory, StoryPage

__all__ = [
    "PLACEHOLDER_IMAGE_URL",
    "IllustrationPipeline",
    "is_accepted_image_reference",
    "StoryAssembler",
    "generate_story",
    "load_profile_file",
    "ReviewImageStore",
    "GeneratedStory",
    "StoryPage",
]
