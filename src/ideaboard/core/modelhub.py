"""ModelHub client helpers.

Centralizes construction of the external text generation provider
(currently OpenAI-compatible) and exposes it behind the small
``TextGenerator`` interface the idea generation service depends on. This
isolates credential handling and maps every transport level failure onto
``GenerationUnavailable``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Protocol

import openai
from openai import AsyncOpenAI

from .config import get_settings
from .errors import GenerationUnavailable

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str, max_tokens: int, temperature: float) -> str:
        """Return the raw completion text for ``prompt``.

        Raises ``GenerationUnavailable`` when the provider cannot be reached.
        """
        ...


@lru_cache
def get_modelhub_client() -> Any:
    """Return a cached OpenAI-compatible async client if configuration present.

    Returns
    -------
    AsyncOpenAI | None
        An instantiated client or None if no API key is configured.
    """
    settings = get_settings()
    if not (settings.modelhub_api_key and settings.modelhub_base_url):
        return None
    return AsyncOpenAI(
        api_key=settings.modelhub_api_key.get_secret_value(),
        base_url=settings.modelhub_base_url,
        timeout=settings.generation_timeout_seconds,
        max_retries=0,
    )


class OpenAITextGenerator:
    """Chat-completion backed ``TextGenerator``.

    One call per ``generate``; the client is built with ``max_retries=0`` so
    a failing provider is reported immediately instead of being retried
    behind the caller's back.
    """

    def __init__(self, client: Any = None, model: str | None = None, system_prompt: str | None = None):
        settings = get_settings()
        self._client = client
        self.model = model or settings.chat_completion_model
        self.system_prompt = system_prompt or settings.generation_system_prompt

    @property
    def client(self) -> Any:
        client = self._client if self._client is not None else get_modelhub_client()
        if client is None:
            raise GenerationUnavailable("provider not configured")
        return client

    async def generate(self, prompt: str, max_tokens: int, temperature: float) -> str:
        client = self.client
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.APIError as e:
            logger.warning(
                "text generation call failed",
                extra={"model": self.model, "error": e.__class__.__name__},
            )
            raise GenerationUnavailable(e.__class__.__name__) from e
        choices = getattr(completion, "choices", None) or []
        if not choices:
            return ""
        return (choices[0].message.content or "").strip()


@lru_cache
def get_text_generator() -> TextGenerator:
    return OpenAITextGenerator()


__all__ = [
    "TextGenerator",
    "OpenAITextGenerator",
    "get_modelhub_client",
    "get_text_generator",
]
