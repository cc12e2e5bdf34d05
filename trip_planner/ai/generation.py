from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from trip_planner.core.errors import GenerationEmpty, GenerationUnavailable

logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


class OpenAIGenerationClient:
    """Sends one prompt to the chat completions API and returns the reply text untouched."""

    def __init__(self, client: Optional[AsyncOpenAI], model: str, timeout: Optional[float] = None):
        self.client = client
        self.model = model
        self.timeout = timeout

    async def generate(self, prompt: str) -> str:
        if self.client is None:
            raise GenerationUnavailable("Itinerary generation is not configured", {"reason": "missing OpenAI API key"})

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as exc:
            logger.warning("Itinerary generation failed: %s", exc)
            raise GenerationUnavailable(details={"reason": exc.__class__.__name__}) from exc

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            raise GenerationEmpty()
        return text


class StaticGenerationClient:
    """Returns a fixed reply; used for offline runs and tests."""

    def __init__(self, text: Optional[str]):
        self.text = text
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.text or not self.text.strip():
            raise GenerationEmpty()
        return self.text
