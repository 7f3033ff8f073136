"""
Structured representation of the child profile a story is personalised for.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence


def _normalize_interests(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()

    if isinstance(value, str):
        parts = [item.strip() for item in value.split(",")]
    elif isinstance(value, Sequence):
        parts = [str(item).strip() for item in value]
    else:
        raise TypeError("interests must be a string or sequence of strings.")

    return tuple(filter(None, parts))


def _coerce_optional_str(value: Any) -> str | None:
    if value is None:
        return None

    text = str(value).strip()
    return text or None


def _coerce_age(value: Any) -> int:
    if value is None or value == "":
        raise ValueError("Profile data must include the child's 'age'.")

    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected an integer-compatible value for age, got {value!r}") from exc


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) not in (None, ""):
            return data[key]
    return None


@dataclass(frozen=True)
class ChildProfile:
    """
    Read-only description of the child starring in the story.

    Attributes
    ----------
    id:
        Identifier of the stored child record (may be empty for ad-hoc profiles).
    name:
        Child's name (required).
    age:
        Age in years. Selects the age bracket settings.
    gender:
        Gender as entered by the parent. Drives pronouns and the outfit convention.
    skin_tone, eye_color, hair_color:
        Visual attributes repeated in every illustration prompt.
    hair_style:
        Optional hair style (e.g., "curly", "braided").
    interests:
        Tuple of interests woven into the story.
    """

    name: str
    age: int
    gender: str
    skin_tone: str
    eye_color: str
    hair_color: str
    hair_style: str | None = None
    interests: tuple[str, ...] = ()
    id: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ChildProfile":
        """
        Build a profile from a dict-like object (e.g., parsed JSON/YAML or a DB row).

        Both ``snake_case`` and ``camelCase`` keys are accepted.
        """
        if "name" not in data or not str(data["name"]).strip():
            raise ValueError("Profile data must include a non-empty 'name' field.")

        return cls(
            id=str(data.get("id") or "").strip(),
            name=str(data["name"]).strip(),
            age=_coerce_age(data.get("age")),
            gender=_coerce_optional_str(_pick(data, "gender", "sex")) or "child",
            skin_tone=_coerce_optional_str(_pick(data, "skin_tone", "skinTone")) or "fair",
            eye_color=_coerce_optional_str(_pick(data, "eye_color", "eyeColor")) or "brown",
            hair_color=_coerce_optional_str(_pick(data, "hair_color", "hairColor")) or "brown",
            hair_style=_coerce_optional_str(_pick(data, "hair_style", "hairStyle")),
            interests=_normalize_interests(_pick(data, "interests", "hobbies")),
        )

    @property
    def is_female(self) -> bool:
        return self.gender.strip().lower() in {"female", "girl", "f"}
