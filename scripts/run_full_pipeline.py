"""
CLI example to run the complete MoralBook pipeline end-to-end.

Usage:
    python scripts/run_full_pipeline.py \
        --profile child_profile.yaml \
        --moral kindness \
        --output story.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from tqdm.auto import tqdm

# Ensure project root is on the Python path when running as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from moralbook import StoryAssembler  # noqa: E402
from moralbook.pipeline import ReviewImageStore, load_profile_file  # noqa: E402
from moralbook.story_generation import MORALS, PAGE_COUNT_RANGE  # noqa: E402


class ProgressTracker:
    """
    Provides user-friendly command-line progress updates for the MoralBook pipeline.
    """

    def __init__(self) -> None:
        self._image_bar: tqdm | None = None
        self._download_bar: tqdm | None = None

    def __call__(self, stage: str, payload: Dict[str, Any]) -> None:
        match stage:
            case "story:generating":
                name = payload.get("child_name", "the child")
                self._write(f"[1/4] Writing a {payload.get('moral')} story for {name}...")
            case "story:generated":
                word_count = payload.get("word_count")
                summary = (
                    f" (~{word_count} words)." if isinstance(word_count, int) and word_count > 0 else "."
                )
                self._write(f"[1/4] Story drafting complete{summary}")
            case "story:parsed":
                self._write(f"[2/4] \"{payload.get('title')}\" split into {payload.get('total_pages')} pages.")
            case "images:generating":
                total = payload.get("total_pages", 0)
                self._write("[3/4] Painting illustrations...")
                self._image_bar = tqdm(total=total, desc="Illustrations", unit="page")
            case "image:generated":
                if self._image_bar is not None:
                    self._image_bar.update(1)
            case "images:downloading":
                self._close_bar("_image_bar")
                total = payload.get("total_images", 0)
                self._write("[4/4] Downloading illustrations...")
                self._download_bar = tqdm(total=total, desc="Downloads", unit="image")
            case "image:downloaded":
                if self._download_bar is not None:
                    self._download_bar.update(1)
            case "pipeline:complete":
                self.close()
                self._write("Pipeline complete.")

    def close(self) -> None:
        self._close_bar("_image_bar")
        self._close_bar("_download_bar")

    def _close_bar(self, attribute: str) -> None:
        bar = getattr(self, attribute)
        if bar is not None:
            bar.close()
            setattr(self, attribute, None)

    @staticmethod
    def _write(message: str) -> None:
        tqdm.write(message)


def parse_args() -> argparse.Namespace:
    lower, upper = PAGE_COUNT_RANGE
    parser = argparse.ArgumentParser(description="Run the full MoralBook generation pipeline.")
    parser.add_argument(
        "--profile",
        required=True,
        help="Path to the child profile YAML/JSON file.",
    )
    parser.add_argument(
        "--moral",
        required=True,
        choices=[moral.id for moral in MORALS],
        help="Moral lesson the story should teach.",
    )
    parser.add_argument("--setting", default=None, help="Optional custom story setting.")
    parser.add_argument("--theme", default=None, help="Optional custom story theme.")
    parser.add_argument(
        "--pages",
        type=int,
        default=None,
        help=f"Optional page count override (must fall within {lower}-{upper}).",
    )
    parser.add_argument(
        "--output",
        default="story.yaml",
        help="Output YAML file to store the story and its illustrations.",
    )
    parser.add_argument(
        "--review-dir",
        default=None,
        help="Folder that receives a copy of each illustration for manual review.",
    )
    parser.add_argument(
        "--max-concurrent",
        type=int,
        default=5,
        help="Maximum simultaneous image generations/downloads (default: 5).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    child = load_profile_file(args.profile)
    review_store = ReviewImageStore(args.review_dir) if args.review_dir else ReviewImageStore.from_env()

    assembler = StoryAssembler(max_concurrent=args.max_concurrent, review_store=review_store)
    tracker = ProgressTracker()

    try:
        story = asyncio.run(
            assembler.generate_story(
                child,
                args.moral,
                args.setting,
                args.theme,
                args.pages,
                progress_callback=tracker,
            )
        )
    finally:
        tracker.close()

    output_path = Path(args.output)
    output_path.write_text(story.to_yaml(), encoding="utf-8")
    print(f"Saved story to {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
