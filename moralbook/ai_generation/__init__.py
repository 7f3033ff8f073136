"""
Illustration prompting, image generation, and image download for MoralBook.
"""

from .downloader import ImageDownloader, is_accepted_image_reference
from .image_service import ReplicateImageGenerator, normalize_image_outputs
from .prompting import (
    build_character_reference,
    build_illustration_prompt,
    build_style_reference,
    get_page_mood,
)

__all__ = [
    "ImageDownloader",
    "is_accepted_image_reference",
    "ReplicateImageGenerator",
    "normalize_image_outputs",
    "build_character_reference",
    "build_illustration_prompt",
    "build_style_reference",
    "get_page_mood",
]
