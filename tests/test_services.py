from types import SimpleNamespace
from unittest import mock

import pytest

from moralbook.ai_generation import ReplicateImageGenerator, normalize_image_outputs
from moralbook.ai_generation.image_service import ILLUSTRATION_PREAMBLE
from moralbook.common import ChatResult
from moralbook.story_generation import StoryTextGenerator
from moralbook.story_generation.story_service import STORY_SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_story_text_generator_sends_system_and_user_prompt():
    completion = mock.AsyncMock(return_value=ChatResult(text="TITLE: Hi", raw={}))
    generator = StoryTextGenerator(api_key="key", model="gpt-test", completion_fn=completion)

    text = await generator.generate_story_text("Write a story.")

    assert text == "TITLE: Hi"
    kwargs = completion.await_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["api_key"] == "key"
    assert kwargs["max_tokens"] == 2000
    assert kwargs["messages"] == [
        {"role": "system", "content": STORY_SYSTEM_PROMPT},
        {"role": "user", "content": "Write a story."},
    ]


@pytest.mark.asyncio
async def test_story_text_generator_rejects_empty_response():
    completion = mock.AsyncMock(return_value=ChatResult(text="", raw={}))
    generator = StoryTextGenerator(api_key="key", model="gpt-test", completion_fn=completion)

    with pytest.raises(RuntimeError):
        await generator.generate_story_text("Write a story.")


def test_story_model_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("MORALBOOK_STORY_MODEL", "env-model")

    assert StoryTextGenerator(api_key="key").model == "env-model"


@pytest.mark.asyncio
async def test_replicate_generator_returns_first_reference():
    client = mock.MagicMock()
    client.async_run = mock.AsyncMock(
        return_value=["https://replicate.delivery/a.png", "https://replicate.delivery/b.png"]
    )
    generator = ReplicateImageGenerator(client=client, model_identifier="black-forest-labs/flux-schnell")

    reference = await generator.generate_illustration("A fox in the woods.", seed=42)

    assert reference == "https://replicate.delivery/a.png"
    model, = client.async_run.await_args.args
    payload = client.async_run.await_args.kwargs["input"]
    assert model == "black-forest-labs/flux-schnell"
    assert payload["prompt"] == f"{ILLUSTRATION_PREAMBLE}\n\nA fox in the woods."
    assert payload["seed"] == 42


@pytest.mark.asyncio
async def test_replicate_generator_raises_on_empty_output():
    client = mock.MagicMock()
    client.async_run = mock.AsyncMock(return_value=[])
    generator = ReplicateImageGenerator(client=client)

    with pytest.raises(RuntimeError):
        await generator.generate_illustration("A fox.")


def test_replicate_generator_requires_token_or_client(monkeypatch):
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)

    with pytest.raises(ValueError):
        ReplicateImageGenerator()


@pytest.mark.asyncio
async def test_unknown_model_is_rejected():
    generator = ReplicateImageGenerator(client=mock.MagicMock(), model_identifier="someone/unknown")

    with pytest.raises(ValueError, match="not configured"):
        await generator.generate_illustration("A fox.")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, []),
        ("https://a.png", ["https://a.png"]),
        ("", []),
        (["https://a.png", None, "https://b.png"], ["https://a.png", "https://b.png"]),
        (iter("https://a.png"), ["https://a.png"]),
        (SimpleNamespace(url="https://file.png"), ["https://file.png"]),
        ([SimpleNamespace(url="https://file.png")], ["https://file.png"]),
    ],
)
def test_normalize_image_outputs(raw, expected):
    assert normalize_image_outputs(raw) == expected
