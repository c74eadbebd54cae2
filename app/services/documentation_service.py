"""Assembly and persistence of exit interview documentation."""

from __future__ import annotations

import logging
from typing import Protocol

from app.exceptions import PersistenceError, SessionNotFoundError
from app.models import (
    DocumentationInsights,
    DocumentationRecord,
    DocumentationResult,
    DocumentationSummary,
    InterviewSession,
    SummaryResult,
)
from app.repositories.transcript_store import TranscriptStore
from app.services.report_renderer import ReportRenderer
from app.services.summarizer import Summarizer
from app.services.transcript_resolver import TranscriptResolver
from app.services.turn_parser import TurnParser

logger = logging.getLogger(__name__)

UNAVAILABLE_KEY_POINTS = "No transcript was captured for this interview; analysis unavailable."
UNAVAILABLE_RECOMMENDATIONS = "Review the transcript for knowledge transfer insights and successor guidance."
UNAVAILABLE_ORGANIZATIONAL_VALUE = (
    "The transcript contains valuable insights for organizational knowledge preservation."
)


class SessionLookup(Protocol):
    def get(self, session_id: str) -> InterviewSession | None: ...


def build_summary(total_responses: int, result: SummaryResult | None) -> DocumentationSummary:
    if result is None:
        return DocumentationSummary(
            total_responses=total_responses,
            key_points=UNAVAILABLE_KEY_POINTS,
            insights=DocumentationInsights(),
            recommendations=UNAVAILABLE_RECOMMENDATIONS,
            organizational_value=UNAVAILABLE_ORGANIZATIONAL_VALUE,
        )
    return DocumentationSummary(
        total_responses=total_responses,
        key_points=result.key_points,
        insights=DocumentationInsights(
            knowledge_transfer=result.knowledge_transfer,
            documentation_gaps=result.documentation_gaps,
        ),
        recommendations=result.successor_recommendations,
        organizational_value=result.organizational_value,
    )


class DocumentationAssembler:
    """Builds the documentation record for one session and persists it.

    Args:
        store: Destination for the record and the rendered report.
        resolver: Transcript source cascade.
        parser: Splits transcript text into turns.
        summarizer: Produces the knowledge transfer analysis.
        renderer: Turns a record into a report document.
        sessions: Live session lookup; sessions not found there fall back
            to metadata of a previously stored record.
    """

    def __init__(
        self,
        *,
        store: TranscriptStore,
        resolver: TranscriptResolver,
        parser: TurnParser,
        summarizer: Summarizer,
        renderer: ReportRenderer,
        sessions: SessionLookup | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.parser = parser
        self.summarizer = summarizer
        self.renderer = renderer
        self.sessions = sessions

    def find_session(self, session_id: str) -> InterviewSession | None:
        if self.sessions is not None:
            session = self.sessions.get(session_id)
            if session is not None:
                return session

        record = self.store.read_record(session_id)
        if record is None:
            return None
        logger.info(f"Using stored documentation record as metadata for session {session_id}")
        return InterviewSession(
            session_id=session_id,
            candidate_name=record.candidate_name,
            position=record.position,
            start_time=record.interview_date,
            status="completed",
        )

    async def assemble(self, session_id: str) -> DocumentationResult:
        session = self.find_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        resolved = await self.resolver.resolve(session_id, session)

        turns = []
        analysis = None
        if not resolved.is_empty:
            turns = self.parser.parse(resolved.text)
            analysis = await self.summarizer.summarize(
                resolved.text, session.candidate_name, session.position
            )

        record = DocumentationRecord(
            candidate_name=session.candidate_name,
            position=session.position,
            interview_date=session.start_time,
            summary=build_summary(len(turns), analysis),
            full_responses=turns,
            transcript=resolved.text,
        )

        report = self.renderer.render(record)
        json_file, pdf_file = self._persist(session_id, record, report)

        return DocumentationResult(
            session_id=session_id,
            record=record,
            json_file_name=json_file,
            pdf_file_name=pdf_file,
            transcript_source=resolved.source,
        )

    def _persist(self, session_id: str, record: DocumentationRecord, report: bytes) -> tuple[str, str]:
        previous_report = self.store.read_report(session_id, record.candidate_name)
        pdf_file = self.store.write_report(session_id, record.candidate_name, report)
        try:
            json_file = self.store.write_record(session_id, record)
        except PersistenceError:
            logger.error(f"Failed to save documentation record for session {session_id}, rolling back report")
            self._rollback_report(session_id, record.candidate_name, previous_report)
            raise
        return json_file, pdf_file

    def _rollback_report(self, session_id: str, candidate_name: str, previous: bytes | None) -> None:
        """Put back the report that matched the record still on disk, if any."""
        if previous is None:
            self.store.delete_report(session_id, candidate_name)
            return
        try:
            self.store.write_report(session_id, candidate_name, previous)
        except PersistenceError as e:
            logger.error(f"Could not restore previous report for session {session_id}: {e}")
