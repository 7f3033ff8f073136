"""
Integration with Replicate for storybook illustration generation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable as IterableABC
from typing import Any, Callable

import replicate

from .prompting import NEGATIVE_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "black-forest-labs/flux-1.1-pro"

ILLUSTRATION_PREAMBLE = (
    "Children's book watercolor illustration. Soft brushstrokes, delicate watercolor style."
)


def _build_flux_pro_input(*, prompt: str, negative_prompt: str) -> dict[str, Any]:
    return {
        "prompt": prompt,
        "aspect_ratio": "1:1",
        "output_format": "png",
        "safety_tolerance": 2,
        "prompt_upsampling": False,
    }


def _build_flux_schnell_input(*, prompt: str, negative_prompt: str) -> dict[str, Any]:
    return {
        "prompt": prompt,
        "aspect_ratio": "1:1",
        "output_format": "png",
        "num_outputs": 1,
    }


def _build_sdxl_input(*, prompt: str, negative_prompt: str) -> dict[str, Any]:
    return {
        "prompt": prompt,
        "negative_prompt": negative_prompt,
        "width": 1024,
        "height": 1024,
        "num_outputs": 1,
    }


_MODEL_INPUT_BUILDERS: dict[str, Callable[..., dict[str, Any]]] = {
    "black-forest-labs/flux-1.1-pro": _build_flux_pro_input,
    "black-forest-labs/flux-schnell": _build_flux_schnell_input,
    "stability-ai/sdxl": _build_sdxl_input,
}


def _build_replicate_input_payload(
    *,
    model_identifier: str,
    prompt: str,
    negative_prompt: str,
) -> dict[str, Any]:
    normalized_identifier = model_identifier.strip().lower()
    builder = _MODEL_INPUT_BUILDERS.get(normalized_identifier)
    if builder is None and ":" in normalized_identifier:
        base_identifier = normalized_identifier.split(":", maxsplit=1)[0]
        builder = _MODEL_INPUT_BUILDERS.get(base_identifier)
    if builder is None:
        supported_models = ", ".join(sorted(_MODEL_INPUT_BUILDERS))
        raise ValueError(
            "Model identifier "
            f"'{model_identifier}' is not configured with a default input payload. "
            f"Supported models: {supported_models}."
        )

    return builder(prompt=prompt, negative_prompt=negative_prompt)


class ReplicateImageGenerator:
    """
    Convenience wrapper around the Replicate client for page illustrations.

    Parameters
    ----------
    api_token:
        Replicate API token. Falls back to ``REPLICATE_API_TOKEN`` environment variable.
    model_identifier:
        Model string in the ``owner/model`` or ``owner/model:version`` format. Falls back
        to ``REPLICATE_MODEL`` and then to FLUX 1.1 Pro.
    client:
        Optional pre-configured :class:`replicate.Client`. Mainly useful for testing.
    """

    def __init__(
        self,
        *,
        api_token: str | None = None,
        model_identifier: str | None = None,
        client: replicate.Client | None = None,
    ) -> None:
        self._api_token = api_token or os.getenv("REPLICATE_API_TOKEN")
        if not self._api_token and not client:
            raise ValueError(
                "Replicate API token is required. Set REPLICATE_API_TOKEN or pass api_token."
            )

        self._model_identifier = model_identifier or os.getenv("REPLICATE_MODEL") or DEFAULT_MODEL
        self._client = client or replicate.Client(api_token=self._api_token)

    @property
    def model_identifier(self) -> str:
        """Return the model identifier currently used."""
        return self._model_identifier

    async def generate_illustration(self, prompt: str, **model_kwargs: Any) -> str:
        """
        Generate one illustration and return its reference (remote URL or data URI).

        Raises
        ------
        RuntimeError
            If the model finished without producing a usable image reference.
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt must be a non-empty string.")

        replicate_input = _build_replicate_input_payload(
            model_identifier=self._model_identifier,
            prompt=f"{ILLUSTRATION_PREAMBLE}\n\n{prompt}",
            negative_prompt=NEGATIVE_PROMPT,
        )
        # Allow the caller to tweak model-specific knobs (e.g., seed, guidance_scale).
        replicate_input.update(model_kwargs)

        outputs = await self._client.async_run(self._model_identifier, input=replicate_input)
        references = normalize_image_outputs(outputs)
        if not references:
            raise RuntimeError("Image model returned no usable image reference.")

        logger.debug("Replicate returned %d image reference(s)", len(references))
        return references[0]


def normalize_image_outputs(raw: Any) -> list[str]:
    """
    Normalize the image outputs returned by Replicate into a list of reference strings.
    """

    if raw is None:
        return []

    # FileOutput objects are iterable over their bytes, so check for a URL first.
    url = getattr(raw, "url", None)
    if isinstance(url, str):
        return [url] if url else []

    if isinstance(raw, str):
        return [raw] if raw.strip() else []

    if isinstance(raw, bytes):
        text = raw.decode("utf-8", errors="ignore")
        return [text] if text.strip() else []

    if isinstance(raw, IterableABC):
        collected = list(raw)
        if not collected:
            return []

        if all(isinstance(item, str) and len(item) == 1 for item in collected):
            return ["".join(collected)]

        normalized: list[str] = []
        for item in collected:
            normalized.extend(normalize_image_outputs(item))
        return normalized

    return [str(raw)]
