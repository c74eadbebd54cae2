"""Client for the conversation vendor's transcript API.

The vendor mostly delivers transcripts to the browser as conversation
events, so a server-side transcript is a best-effort extra source. Any
failure or absence is reported as ``None``.

Expected endpoint: ``GET {base_url}/sessions/{session_id}/transcript``
returning either ``{"transcript": "..."}`` or
``{"messages": [{"role": "...", "content": "..."}]}``.
"""

from __future__ import annotations

import logging

import httpx

from app.core.config import (
    TRANSCRIPT_SERVICE_API_KEY,
    TRANSCRIPT_SERVICE_TIMEOUT_SECONDS,
    TRANSCRIPT_SERVICE_URL,
)
from app.services.turn_parser import format_turns, turns_from_messages

logger = logging.getLogger(__name__)


class TranscriptServiceClient:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        *,
        timeout: float = TRANSCRIPT_SERVICE_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else TRANSCRIPT_SERVICE_URL).rstrip("/")
        self.api_key = (api_key if api_key is not None else TRANSCRIPT_SERVICE_API_KEY).strip()
        self.timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with auth headers."""
        if self._http_client is None or self._http_client.is_closed:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch(self, session_id: str) -> str | None:
        """Fetch the transcript text for a session, or None if unavailable."""
        if not self.is_configured:
            logger.debug("Transcript service not configured, skipping")
            return None

        logger.info(f"Attempting to fetch transcript for session {session_id} from transcript service")
        try:
            client = await self._get_client()
            response = await client.get(f"/sessions/{session_id}/transcript")
            if response.status_code == 404:
                logger.info(f"Transcript service has no transcript for session {session_id}")
                return None
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Transcript service request failed for session {session_id}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Transcript service returned invalid JSON for session {session_id}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        transcript = data.get("transcript")
        if isinstance(transcript, str) and transcript.strip():
            return transcript
        messages = data.get("messages")
        if isinstance(messages, list):
            text = format_turns(turns_from_messages(m for m in messages if isinstance(m, dict)))
            return text or None
        return None
