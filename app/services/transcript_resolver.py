"""Best-available transcript resolution for a session.

Sources are tried in priority order and the first one yielding text wins:

1. ``stored``  - transcript file already saved for the session
2. ``service`` - the vendor transcript API
3. ``record``  - turns of a previously saved documentation record

Text found by a lower-priority source is written back as the session's
transcript, so later resolutions return the same text from ``stored``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from app.models import BackfillResult, InterviewSession
from app.repositories.transcript_store import TranscriptStore
from app.services.transcript_service_client import TranscriptServiceClient
from app.services.turn_parser import format_turns

logger = logging.getLogger(__name__)

TranscriptSource = Callable[[str, InterviewSession | None], Awaitable[str | None]]


@dataclass(frozen=True)
class ResolvedTranscript:
    text: str
    source: str | None

    @property
    def is_empty(self) -> bool:
        return not self.text


class TranscriptResolver:
    def __init__(
        self,
        store: TranscriptStore,
        transcript_service: TranscriptServiceClient | None = None,
    ) -> None:
        self.store = store
        self.transcript_service = transcript_service
        self.sources: list[tuple[str, TranscriptSource]] = [
            ("stored", self._from_store),
            ("service", self._from_service),
            ("record", self._from_record),
        ]

    async def resolve(
        self,
        session_id: str,
        session: InterviewSession | None = None,
        *,
        persist: bool = True,
    ) -> ResolvedTranscript:
        resolved = await self._first_available(session_id, session, self.sources)
        if resolved.is_empty:
            logger.info(f"No transcript source available for session {session_id}")
            return resolved

        logger.info(
            f"Resolved transcript for session {session_id} from {resolved.source} "
            f"({len(resolved.text)} chars)"
        )
        if persist and resolved.source != "stored":
            self.store.write_transcript(session_id, resolved.text)
        return resolved

    async def backfill_missing(self) -> BackfillResult:
        """Write transcripts for every stored record that has none yet."""
        result = BackfillResult()
        fallback_sources = [s for s in self.sources if s[0] != "stored"]

        for session_id in self.store.list_record_session_ids():
            try:
                if self.store.read_transcript(session_id) is None:
                    resolved = await self._first_available(session_id, None, fallback_sources)
                    if resolved.is_empty:
                        logger.info(f"No transcript data available for session {session_id}")
                        continue
                    self.store.write_transcript(session_id, resolved.text)
                    result.generated += 1
                result.processed += 1
            except Exception as e:
                logger.error(f"Error backfilling transcript for session {session_id}: {e}")
                result.errors.append({"sessionId": session_id, "error": str(e)})

        logger.info(f"Backfill processed {result.processed} sessions, generated {result.generated}")
        return result

    async def _first_available(
        self,
        session_id: str,
        session: InterviewSession | None,
        sources: list[tuple[str, TranscriptSource]],
    ) -> ResolvedTranscript:
        for name, source in sources:
            text = await source(session_id, session)
            if text and text.strip():
                return ResolvedTranscript(text=text, source=name)
        return ResolvedTranscript(text="", source=None)

    async def _from_store(self, session_id: str, session: InterviewSession | None) -> str | None:
        return self.store.read_transcript(session_id)

    async def _from_service(self, session_id: str, session: InterviewSession | None) -> str | None:
        if self.transcript_service is None:
            return None
        return await self.transcript_service.fetch(session_id)

    async def _from_record(self, session_id: str, session: InterviewSession | None) -> str | None:
        candidate_name = session.candidate_name if session else None
        record = self.store.read_record(session_id, candidate_name)
        if record is None:
            return None
        return format_turns(record.full_responses)
