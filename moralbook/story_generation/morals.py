"""
Fixed catalog of the moral lessons a story can be built around.
"""

from __future__ import annotations

from dataclasses import dataclass


class InvalidMoralError(ValueError):
    """Raised when a story is requested for a moral id outside the catalog."""


@dataclass(frozen=True)
class MoralDefinition:
    id: str
    label: str
    description: str


MORALS: tuple[MoralDefinition, ...] = (
    MoralDefinition("kindness", "Kindness", "Being kind to others makes the world a better place"),
    MoralDefinition("sharing", "Sharing", "The joy of sharing with friends and family"),
    MoralDefinition("bravery", "Bravery", "Having courage to overcome fears"),
    MoralDefinition("honesty", "Honesty", "Always telling the truth, even when it's hard"),
    MoralDefinition("friendship", "Friendship", "The value of true friends"),
    MoralDefinition("perseverance", "Perseverance", "Never giving up, even when things are difficult"),
    MoralDefinition("gratitude", "Gratitude", "Being thankful for what we have"),
    MoralDefinition("respect", "Respect", "Treating others the way we want to be treated"),
    MoralDefinition("responsibility", "Responsibility", "Taking responsibility for our actions"),
    MoralDefinition("creativity", "Creativity", "Using imagination to solve problems and create"),
)

_MORALS_BY_ID = {moral.id: moral for moral in MORALS}


def get_moral_by_id(moral_id: str) -> MoralDefinition | None:
    return _MORALS_BY_ID.get(moral_id)


def require_moral(moral_id: str) -> MoralDefinition:
    """
    Look up a moral, raising :class:`InvalidMoralError` for unknown ids.
    """
    moral = get_moral_by_id(moral_id)
    if moral is None:
        raise InvalidMoralError(f"Invalid moral selected: {moral_id!r}")
    return moral
