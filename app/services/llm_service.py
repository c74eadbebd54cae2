"""Language model client for transcript analysis.

Uses the OpenAI Python SDK; any OpenAI-compatible endpoint can be targeted
through ``OPENAI_BASE_URL``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from openai import AsyncOpenAI

from app.core.config import (
    LLM_MAX_TOKENS,
    LLM_TEMPERATURE,
    LLM_TIMEOUT_SECONDS,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_MODEL,
)

logger = logging.getLogger(__name__)


class LLMService:
    """Single-shot chat completions with a hard timeout.

    Every failure (missing key, provider error, timeout, empty answer) is
    logged and reported as ``None``; callers decide how to degrade.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = OPENAI_BASE_URL,
        model: str = OPENAI_MODEL,
        timeout: float = LLM_TIMEOUT_SECONDS,
    ) -> None:
        # Strip to avoid hidden whitespace/newlines from .env files.
        self.api_key = (api_key or OPENAI_API_KEY or "").strip()
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client: AsyncOpenAI | None = None

    @property
    def is_configured(self) -> bool:
        """Check if the API key is configured."""
        return bool(self.api_key)

    def _get_client(self) -> AsyncOpenAI:
        """Get or create SDK client."""
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def close(self) -> None:
        """Close SDK client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def chat_completion(
        self,
        *,
        messages: list[dict[str, Any]],
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
    ) -> str | None:
        if not self.api_key:
            logger.warning("LLM API key not configured")
            return None

        try:
            client = self._get_client()
            resp = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"LLM request timed out after {self.timeout}s")
            return None
        except Exception as e:
            logger.exception(f"LLM request failed: {e}")
            return None

        if not resp.choices:
            logger.warning("LLM returned no choices")
            return None
        return (resp.choices[0].message.content or "").strip() or None
