import random

import pytest

from moralbook.story_generation import ChildProfile

FOUR_PAGE_STORY = """TITLE: Mia and the Moonlit Garden

PAGE 1:
Mia found a tiny snail stuck on the garden path.

PAGE 2:
She carried it gently to a cool, leafy spot.

PAGE 3:
The next night the snail brought all its friends
to say thank you.

PAGE 4:
Mia smiled. Being kind made the whole garden glow.
"""

FOUR_PAGE_TEXTS = [
    "Mia found a tiny snail stuck on the garden path.",
    "She carried it gently to a cool, leafy spot.",
    "The next night the snail brought all its friends to say thank you.",
    "Mia smiled. Being kind made the whole garden glow.",
]


@pytest.fixture
def child() -> ChildProfile:
    return ChildProfile(
        id="child-1",
        name="Mia",
        age=5,
        gender="female",
        skin_tone="light brown",
        eye_color="green",
        hair_color="black",
        hair_style="curly",
        interests=("gardening", "snails"),
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


class RecordingCollaborators:
    """Stub text/image/download collaborators that record every call."""

    def __init__(self, story_text: str = FOUR_PAGE_STORY) -> None:
        self.story_text = story_text
        self.text_prompts: list[str] = []
        self.image_prompts: list[str] = []
        self.downloads: list[str] = []

    async def generate_story_text(self, prompt: str) -> str:
        self.text_prompts.append(prompt)
        return self.story_text

    async def generate_illustration(self, prompt: str) -> str:
        self.image_prompts.append(prompt)
        return f"https://images.example.com/{len(self.image_prompts)}.png"

    async def download_image(self, reference: str) -> str:
        self.downloads.append(reference)
        return "data:image/png;base64,ZmFrZQ=="


@pytest.fixture
def collaborators() -> RecordingCollaborators:
    return RecordingCollaborators()


@pytest.fixture(autouse=True)
def _no_review_dir(monkeypatch):
    monkeypatch.delenv("MORALBOOK_REVIEW_DIR", raising=False)
