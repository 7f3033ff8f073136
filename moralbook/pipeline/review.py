"""
Local folder store for reviewing the illustrations of generated stories by hand.
"""

from __future__ import annotations

import base64
import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

_DATA_URI_PATTERN = re.compile(r"^data:image/([a-zA-Z0-9.+-]+);base64,(.+)$", re.DOTALL)
_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")

_EXTENSIONS = {"jpeg": "jpg", "svg+xml": "svg"}


def _slugify(value: str, *, max_length: int = 40) -> str:
    slug = _SLUG_PATTERN.sub("-", value.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "story"


class ReviewImageStore:
    """
    Writes each story's page images to ``<root>/<folder>/page-NN.<ext>``.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir = Path(root_dir).expanduser()

    @classmethod
    def from_env(cls) -> "ReviewImageStore | None":
        """Build a store from ``MORALBOOK_REVIEW_DIR``, or return None when unset."""
        root = os.getenv("MORALBOOK_REVIEW_DIR")
        return cls(root) if root else None

    @staticmethod
    def folder_name_for(title: str, child_name: str, *, now: datetime | None = None) -> str:
        timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
        return f"{timestamp}_{_slugify(child_name, max_length=20)}_{_slugify(title)}"

    def save_page_image(
        self,
        data_uri: str,
        folder_name: str,
        page_number: int,
        metadata: Mapping[str, Any] | None = None,
    ) -> Path:
        match = _DATA_URI_PATTERN.match(data_uri)
        if match is None:
            raise ValueError("Only base64 image data URIs can be saved for review.")

        subtype, payload = match.groups()
        extension = _EXTENSIONS.get(subtype.lower(), subtype.lower())

        folder = self.root_dir / folder_name
        folder.mkdir(parents=True, exist_ok=True)

        image_path = folder / f"page-{page_number:02d}.{extension}"
        image_path.write_bytes(base64.b64decode(payload))

        if metadata is not None:
            info = dict(metadata)
            info.setdefault("saved_at", datetime.now().isoformat(timespec="seconds"))
            (folder / "story.yaml").write_text(
                yaml.safe_dump(info, sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )

        logger.debug("Saved review image %s", image_path)
        return image_path
