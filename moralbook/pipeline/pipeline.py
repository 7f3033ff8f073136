"""
Orchestrates the MoralBook pipeline from child profile to illustrated story.
"""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

import yaml

from moralbook.ai_generation import (
    ImageDownloader,
    ReplicateImageGenerator,
    build_character_reference,
    build_style_reference,
)
from moralbook.common import DEFAULT_MAX_CONCURRENT, CompletionCallable
from moralbook.story_generation import (
    ChildProfile,
    StoryTextGenerator,
    build_story_prompt,
    get_age_settings,
    parse_story_text,
    require_moral,
    validate_page_count,
)

from .illustration import (
    IllustrationCallable,
    IllustrationPipeline,
    ImageDownloadCallable,
    ProgressCallback,
    notify_progress,
)
from .review import ReviewImageStore
from .story import GeneratedStory

logger = logging.getLogger(__name__)

StoryTextCallable = Callable[[str], Awaitable[str]]


class StoryAssembler:
    """
    High-level coordinator that chains story text, parsing, and illustration.

    Holds no per-story state, so a single instance can serve concurrent requests.
    Collaborators default to the LiteLLM text generator, the Replicate image
    generator, and the HTTP image downloader; tests inject plain coroutine functions.
    """

    def __init__(
        self,
        *,
        generate_story_text: StoryTextCallable | None = None,
        generate_illustration: IllustrationCallable | None = None,
        download_image: ImageDownloadCallable | None = None,
        story_model: str | None = None,
        story_api_key: str | None = None,
        completion_fn: CompletionCallable | None = None,
        image_model: str | None = None,
        image_api_token: str | None = None,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        review_store: ReviewImageStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, received {max_concurrent}.")
        if review_store is None:
            review_store = ReviewImageStore.from_env()

        if generate_story_text is None:
            generate_story_text = StoryTextGenerator(
                api_key=story_api_key,
                model=story_model,
                completion_fn=completion_fn,
            ).generate_story_text
        if generate_illustration is None:
            generate_illustration = ReplicateImageGenerator(
                api_token=image_api_token,
                model_identifier=image_model,
            ).generate_illustration
        if download_image is None:
            download_image = ImageDownloader().download_image_as_base64

        self._generate_story_text = generate_story_text
        self._illustrations = IllustrationPipeline(
            generate_illustration,
            download_image,
            max_concurrent_generations=max_concurrent,
            max_concurrent_downloads=max_concurrent,
            review_store=review_store,
        )
        self._rng = rng

    async def generate_story(
        self,
        child: ChildProfile,
        moral_id: str,
        custom_setting: str | None = None,
        custom_theme: str | None = None,
        page_count: int | None = None,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> GeneratedStory:
        """
        Generate a complete illustrated story for ``child``.

        Raises
        ------
        InvalidMoralError
            If ``moral_id`` is not in the catalog. Raised before any model call.
        ValueError
            If an explicit ``page_count`` is outside the allowed range.
        Exception
            Whatever the text-generation call raises; no story can be built without it.
        """
        moral = require_moral(moral_id)
        if page_count is not None:
            validate_page_count(page_count)

        age_settings = get_age_settings(child.age)
        effective_page_count = page_count if page_count is not None else age_settings.page_count

        prompt = build_story_prompt(
            child,
            moral,
            age_settings,
            custom_setting=custom_setting,
            custom_theme=custom_theme,
            page_count=effective_page_count,
            rng=self._rng,
        )

        self._notify(progress_callback, "story:generating", child_name=child.name, moral=moral.id)
        story_text = await self._generate_story_text(prompt)
        self._notify(
            progress_callback,
            "story:generated",
            word_count=len(story_text.split()),
        )

        parsed_story = parse_story_text(story_text, effective_page_count)
        logger.info(
            "Parsed story %r into %d pages for %s",
            parsed_story.title,
            len(parsed_story.pages),
            child.name,
        )
        self._notify(
            progress_callback,
            "story:parsed",
            title=parsed_story.title,
            total_pages=len(parsed_story.pages),
        )

        pages = await self._illustrations.illustrate(
            parsed_story,
            build_character_reference(child),
            build_style_reference(),
            progress_callback=progress_callback,
            review_metadata={"child_name": child.name, "moral": moral.label},
        )

        story = GeneratedStory(title=parsed_story.title, pages=pages)
        self._notify(
            progress_callback,
            "pipeline:complete",
            title=story.title,
            total_pages=len(story.pages),
        )
        return story

    async def generate_story_from_mapping(
        self,
        profile_data: Mapping[str, Any],
        moral_id: str,
        **kwargs: Any,
    ) -> GeneratedStory:
        """Parse a raw child profile mapping and generate a story for it."""
        return await self.generate_story(ChildProfile.from_mapping(profile_data), moral_id, **kwargs)

    @staticmethod
    def _notify(
        callback: ProgressCallback | None,
        stage: str,
        **payload: Any,
    ) -> None:
        notify_progress(callback, stage, **payload)


async def generate_story(
    child: ChildProfile,
    moral_id: str,
    custom_setting: str | None = None,
    custom_theme: str | None = None,
    page_count: int | None = None,
    **assembler_kwargs: Any,
) -> GeneratedStory:
    """
    One-shot convenience wrapper around :meth:`StoryAssembler.generate_story`.
    """
    progress_callback = assembler_kwargs.pop("progress_callback", None)
    assembler = StoryAssembler(**assembler_kwargs)
    return await assembler.generate_story(
        child,
        moral_id,
        custom_setting,
        custom_theme,
        page_count,
        progress_callback=progress_callback,
    )


def load_profile_file(path: str | Path) -> ChildProfile:
    """
    Load a child profile from a YAML or JSON file.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    elif path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        raise ValueError("Unsupported profile file format. Use YAML or JSON.")

    if not isinstance(data, Mapping):
        raise ValueError("Profile file must deserialize to a mapping.")
    return ChildProfile.from_mapping(data)
