"""File-backed storage for transcripts, documentation records and reports.

Layout inside the interviews directory::

    transcript-{session_id}.txt
    interview_{Candidate_Name}_{session_id}.json
    interview_{Candidate_Name}_{session_id}.pdf

Every write replaces the whole file atomically so a concurrent reader sees
either the previous or the new content, never a partial file.
"""

from __future__ import annotations

import glob
import json
import logging
import os
import re
import tempfile
from pathlib import Path

from pydantic import ValidationError

from app.exceptions import PersistenceError
from app.models import DocumentationRecord

logger = logging.getLogger(__name__)

RECORD_PREFIX = "interview_"


def candidate_slug(candidate_name: str) -> str:
    """Reduce a name to a single safe file name segment.

    Runs of anything other than word characters, dots and hyphens (spaces,
    path separators) become one underscore.
    """
    slug = re.sub(r"[^\w.-]+", "_", candidate_name.strip()).strip("._")
    return slug or "candidate"


class TranscriptStore:
    def __init__(self, base_dir: str | os.PathLike[str]) -> None:
        self.base_dir = Path(base_dir)

    def transcript_path(self, session_id: str) -> Path:
        return self.base_dir / f"transcript-{session_id}.txt"

    def record_file_name(self, session_id: str, candidate_name: str) -> str:
        return f"{RECORD_PREFIX}{candidate_slug(candidate_name)}_{session_id}.json"

    def report_file_name(self, session_id: str, candidate_name: str) -> str:
        return f"{RECORD_PREFIX}{candidate_slug(candidate_name)}_{session_id}.pdf"

    def read_transcript(self, session_id: str) -> str | None:
        path = self.transcript_path(session_id)
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read transcript {path.name}: {e}")
            return None

    def write_transcript(self, session_id: str, text: str) -> str:
        path = self.transcript_path(session_id)
        self._atomic_write(path, text.encode("utf-8"))
        logger.info(f"Saved transcript for session {session_id} ({len(text)} chars)")
        return path.name

    def read_record(
        self, session_id: str, candidate_name: str | None = None
    ) -> DocumentationRecord | None:
        """Load the documentation record for a session.

        With a candidate name the exact file is tried first; otherwise (or if
        that file is missing) any record whose name ends in the session id is
        used. Corrupt records are logged and reported as absent.
        """
        path = self._find_record_path(session_id, candidate_name)
        if path is None:
            return None
        try:
            return DocumentationRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.error(f"Could not load documentation record {path.name}: {e}")
            return None

    def write_record(self, session_id: str, record: DocumentationRecord) -> str:
        file_name = self.record_file_name(session_id, record.candidate_name)
        payload = json.dumps(record.model_dump(mode="json"), indent=2)
        self._atomic_write(self.base_dir / file_name, payload.encode("utf-8"))
        logger.info(f"Saved documentation record {file_name}")
        return file_name

    def write_report(self, session_id: str, candidate_name: str, content: bytes) -> str:
        file_name = self.report_file_name(session_id, candidate_name)
        self._atomic_write(self.base_dir / file_name, content)
        logger.info(f"Saved report {file_name}")
        return file_name

    def read_report(self, session_id: str, candidate_name: str) -> bytes | None:
        path = self.base_dir / self.report_file_name(session_id, candidate_name)
        if not path.is_file():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error(f"Could not read report {path.name}: {e}")
            return None

    def delete_report(self, session_id: str, candidate_name: str) -> None:
        path = self.base_dir / self.report_file_name(session_id, candidate_name)
        path.unlink(missing_ok=True)

    def list_record_session_ids(self) -> list[str]:
        """Session ids of every stored record, in file name order."""
        if not self.base_dir.is_dir():
            return []
        session_ids = []
        for path in sorted(self.base_dir.glob(f"{RECORD_PREFIX}*.json")):
            # interview_{Name}_{session_id}.json -> the last segment is the id
            session_ids.append(path.stem.rsplit("_", 1)[-1])
        return session_ids

    def _find_record_path(self, session_id: str, candidate_name: str | None) -> Path | None:
        if candidate_name:
            exact = self.base_dir / self.record_file_name(session_id, candidate_name)
            if exact.is_file():
                return exact
        if not self.base_dir.is_dir():
            return None
        matches = sorted(self.base_dir.glob(f"{RECORD_PREFIX}*_{glob.escape(session_id)}.json"))
        return matches[0] if matches else None

    def _atomic_write(self, path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {path.name}: {e}") from e
