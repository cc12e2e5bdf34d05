from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from trip_planner.core.config import settings

_client: Optional[AsyncOpenAI] = None

if settings.openai_api_key:
    # Failures surface to the caller as-is; nothing in this service retries.
    _client = AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0)


def get_client() -> Optional[AsyncOpenAI]:
    """Returns AsyncOpenAI client if api key is configured."""
    return _client
