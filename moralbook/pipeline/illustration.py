"""
Two-phase, bounded-concurrency illustration of a parsed story.

Phase A asks the image model for one illustration per page, Phase B downloads every
successful result into an embeddable data URI, and the merge step gives each page the
best image it has: embedded data, then the raw reference, then the placeholder.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping

from moralbook.ai_generation.downloader import is_accepted_image_reference
from moralbook.ai_generation.prompting import build_illustration_prompt
from moralbook.common import DEFAULT_MAX_CONCURRENT, run_bounded
from moralbook.story_generation.parser import ParsedPage, ParsedStory

from .review import ReviewImageStore
from .story import StoryPage

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_URL = "/placeholder-illustration.svg"

IllustrationCallable = Callable[[str], Awaitable[str]]
ImageDownloadCallable = Callable[[str], Awaitable[str]]
ProgressCallback = Callable[[str, dict[str, Any]], None]


def notify_progress(callback: ProgressCallback | None, stage: str, **payload: Any) -> None:
    """
    Report a progress event. A failing callback is logged and never fails the story.
    """
    if callback is None:
        return
    try:
        callback(stage, payload)
    except Exception:
        logger.exception("Progress callback failed for stage %s", stage)


class IllustrationPipeline:
    """
    Illustrates every page of a story while isolating per-page failures.

    Parameters
    ----------
    generate_illustration:
        Coroutine function taking a prompt and returning an image reference.
    download_image:
        Coroutine function turning an image reference into an embeddable encoding.
    max_concurrent_generations, max_concurrent_downloads:
        Caps on in-flight calls for each phase.
    placeholder_url:
        Image reference used for pages whose illustration could not be generated.
    review_store:
        Optional store that receives a copy of every downloaded page image.
    """

    def __init__(
        self,
        generate_illustration: IllustrationCallable,
        download_image: ImageDownloadCallable,
        *,
        max_concurrent_generations: int = DEFAULT_MAX_CONCURRENT,
        max_concurrent_downloads: int = DEFAULT_MAX_CONCURRENT,
        placeholder_url: str = PLACEHOLDER_IMAGE_URL,
        review_store: ReviewImageStore | None = None,
    ) -> None:
        self._generate_illustration = generate_illustration
        self._download_image = download_image
        self._max_concurrent_generations = max_concurrent_generations
        self._max_concurrent_downloads = max_concurrent_downloads
        self._placeholder_url = placeholder_url
        self._review_store = review_store

    @property
    def placeholder_url(self) -> str:
        return self._placeholder_url

    async def illustrate(
        self,
        parsed_story: ParsedStory,
        character_reference: str,
        style_reference: str,
        *,
        progress_callback: ProgressCallback | None = None,
        review_metadata: Mapping[str, Any] | None = None,
    ) -> list[StoryPage]:
        """
        Return one :class:`StoryPage` per parsed page, in page order.
        """
        pages = list(parsed_story.pages)
        total_pages = len(pages)
        started = time.perf_counter()

        prompts = [
            build_illustration_prompt(character_reference, style_reference, page, total_pages)
            for page in pages
        ]

        self._notify(progress_callback, "images:generating", total_pages=total_pages)
        generated_count = 0

        async def _generate(index: int) -> str:
            nonlocal generated_count
            page = pages[index]
            logger.debug("Generating illustration for page %d", page.page_number)
            reference = await self._generate_illustration(prompts[index])
            generated_count += 1
            self._notify(
                progress_callback,
                "image:generated",
                page_number=page.page_number,
                completed=generated_count,
                total_pages=total_pages,
            )
            return reference

        generation_results = await run_bounded(
            range(total_pages), _generate, self._max_concurrent_generations
        )
        generation_elapsed = time.perf_counter() - started
        logger.info("Generated %d illustrations in %.2fs", total_pages, generation_elapsed)

        raw_references: dict[int, str] = {}
        failed_pages: list[int] = []
        for index, result in enumerate(generation_results):
            page_number = pages[index].page_number
            if not result.ok:
                logger.error(
                    "Illustration failed for page %d: %r", page_number, result.reason
                )
                failed_pages.append(page_number)
            elif not is_accepted_image_reference(result.value):
                logger.error(
                    "Illustration for page %d returned an invalid reference: %r",
                    page_number,
                    str(result.value)[:40],
                )
                failed_pages.append(page_number)
            else:
                raw_references[index] = result.value

        if failed_pages:
            logger.warning(
                "Using placeholder art for pages: %s", ", ".join(map(str, failed_pages))
            )

        self._notify(
            progress_callback, "images:downloading", total_images=len(raw_references)
        )
        download_started = time.perf_counter()
        download_indexes = list(raw_references)

        async def _download(index: int) -> str:
            encoded = await self._download_image(raw_references[index])
            self._notify(
                progress_callback, "image:downloaded", page_number=pages[index].page_number
            )
            return encoded

        download_results = await run_bounded(
            download_indexes, _download, self._max_concurrent_downloads
        )
        logger.info(
            "Downloaded %d illustrations in %.2fs",
            len(download_indexes),
            time.perf_counter() - download_started,
        )

        encoded_images: dict[int, str] = {}
        for index, result in zip(download_indexes, download_results):
            if result.ok and result.value:
                encoded_images[index] = result.value
            else:
                logger.error(
                    "Image download failed for page %d: %r",
                    pages[index].page_number,
                    result.reason,
                )

        story_pages = [
            self._merge_page(
                page,
                raw_reference=raw_references.get(index),
                encoded_image=encoded_images.get(index),
            )
            for index, page in enumerate(pages)
        ]

        if self._review_store is not None and encoded_images:
            await self._save_for_review(parsed_story.title, story_pages, review_metadata or {})

        logger.info("Illustration pipeline finished in %.2fs", time.perf_counter() - started)
        return story_pages

    def _merge_page(
        self,
        page: ParsedPage,
        *,
        raw_reference: str | None,
        encoded_image: str | None,
    ) -> StoryPage:
        return StoryPage(
            page_number=page.page_number,
            text=page.text,
            image_url=raw_reference or self._placeholder_url,
            image_base64=encoded_image if raw_reference else None,
        )

    async def _save_for_review(
        self,
        title: str,
        story_pages: list[StoryPage],
        metadata: Mapping[str, Any],
    ) -> None:
        store = self._review_store
        folder_name = store.folder_name_for(title, str(metadata.get("child_name") or "child"))
        to_save = [
            page
            for page in story_pages
            if page.image_base64 and page.image_base64.startswith("data:image/")
        ]

        async def _save(page: StoryPage) -> None:
            page_metadata = {"title": title, **metadata} if page.page_number == 1 else None
            await asyncio.to_thread(
                store.save_page_image,
                page.image_base64,
                folder_name,
                page.page_number,
                page_metadata,
            )

        results = await run_bounded(to_save, _save, self._max_concurrent_downloads)
        for page, result in zip(to_save, results):
            if not result.ok:
                logger.warning(
                    "Skipping review save for page %d: %s", page.page_number, result.reason
                )
        logger.info("Saved %d review images to %s", len(to_save), folder_name)

    @staticmethod
    def _notify(
        callback: ProgressCallback | None,
        stage: str,
        **payload: Any,
    ) -> None:
        notify_progress(callback, stage, **payload)
