"""
Service layer for producing story text via LiteLLM-compatible models.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from moralbook.common import ChatResult, CompletionCallable, call_chat_completion

logger = logging.getLogger(__name__)

STORY_SYSTEM_PROMPT = (
    "You are a children's book author who writes engaging, age-appropriate stories "
    "with moral lessons. Your stories are vivid, imaginative, and always have happy endings."
)


class StoryTextGenerator:
    """
    Sends a story prompt to the configured LLM and returns the raw story text.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        completion_fn: CompletionCallable | None = None,
        system_prompt: str = STORY_SYSTEM_PROMPT,
    ) -> None:
        self._api_key = api_key or os.getenv("OPENAI_API_KEY") or os.getenv("LITELLM_API_KEY")
        self._model = (
            model
            or os.getenv("MORALBOOK_STORY_MODEL")
            or os.getenv("LITELLM_STORY_MODEL")
            or os.getenv("LITELLM_MODEL")
            or "gpt-4o-mini"
        )
        self._completion_fn: CompletionCallable = completion_fn or call_chat_completion
        self._system_prompt = system_prompt

    @property
    def model(self) -> str:
        """Return the model identifier in use."""
        return self._model

    async def generate_story_text(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_output_tokens: int = 2000,
        **response_kwargs: Any,
    ) -> str:
        """
        Invoke the configured LLM once and return the story text.
        """
        messages = [
            {"role": "system", "content": self._system_prompt},
            {"role": "user", "content": prompt},
        ]

        logger.info("Requesting story text from %s", self._model)
        result: ChatResult = await self._completion_fn(
            model=self._model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_output_tokens,
            api_key=self._api_key,
            **response_kwargs,
        )

        if not result.text:
            raise RuntimeError("LLM response did not contain any text content.")

        return result.text
