"""
Result types produced by the story pipeline, with dict/YAML persistence helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml


@dataclass(frozen=True)
class StoryPage:
    """
    A finished page: its text plus the best available illustration.

    ``image_url`` is the model's original reference, or the placeholder when image
    generation failed. ``image_base64`` is the embeddable data URI, present only when
    the download succeeded.
    """

    page_number: int
    text: str
    image_url: str
    image_base64: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "pageNumber": self.page_number,
            "text": self.text,
            "imageUrl": self.image_url,
        }
        if self.image_base64 is not None:
            payload["imageBase64"] = self.image_base64
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StoryPage":
        try:
            page_number = int(payload.get("pageNumber", payload.get("page_number")))
            text = str(payload["text"]).strip()
            image_url = str(payload.get("imageUrl") or payload.get("image_url") or "").strip()
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid page entry: {payload}") from exc

        image_base64 = payload.get("imageBase64", payload.get("image_base64"))
        return cls(
            page_number=page_number,
            text=text,
            image_url=image_url,
            image_base64=str(image_base64) if image_base64 else None,
        )


@dataclass
class GeneratedStory:
    """Aggregated output of one story generation run."""

    title: str
    pages: list[StoryPage] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "pages": [page.to_dict() for page in self.pages],
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GeneratedStory":
        if "pages" not in payload:
            raise ValueError("Story payload must include 'pages'.")

        title = str(payload.get("title", "")).strip()
        pages = [StoryPage.from_dict(entry) for entry in payload.get("pages") or []]
        return cls(title=title, pages=pages)

    @classmethod
    def from_yaml(cls, source: str | Path) -> "GeneratedStory":
        path = Path(source)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(data, Mapping):
            raise ValueError("Story YAML must deserialize to a mapping.")
        return cls.from_dict(data)
