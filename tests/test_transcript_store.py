"""Tests for the file-backed transcript and documentation store."""

import logging
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from app.exceptions import PersistenceError
from app.models import ConversationTurn, DocumentationRecord, DocumentationSummary
from app.repositories.transcript_store import TranscriptStore, candidate_slug


def make_record(name="Jane Doe", turns=None):
    return DocumentationRecord(
        candidate_name=name,
        position="Release Engineer",
        interview_date=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        summary=DocumentationSummary(
            total_responses=len(turns or []),
            key_points="Built the pipeline",
            recommendations="Shadow a release",
            organizational_value="High",
        ),
        full_responses=turns or [],
        transcript="",
    )


class TestTranscripts:
    """Test raw transcript persistence."""

    def test_missing_transcript_is_none(self, store):
        assert store.read_transcript("abc123") is None

    def test_write_creates_directory_lazily(self, tmp_path):
        store = TranscriptStore(tmp_path / "nested" / "interviews")
        assert not store.base_dir.exists()

        file_name = store.write_transcript("abc123", "Interviewer: Hi")

        assert file_name == "transcript-abc123.txt"
        assert store.read_transcript("abc123") == "Interviewer: Hi"

    def test_write_overwrites_whole_file(self, store):
        store.write_transcript("abc123", "a much longer first version of the text")
        store.write_transcript("abc123", "short")

        assert store.read_transcript("abc123") == "short"

    def test_no_temp_files_left_behind(self, store):
        store.write_transcript("abc123", "text")
        assert [p.name for p in store.base_dir.iterdir()] == ["transcript-abc123.txt"]

    def test_write_logs_session_and_size(self, store, caplog):
        with caplog.at_level(logging.INFO, logger="app.repositories.transcript_store"):
            store.write_transcript("abc123", "text")

        assert "Saved transcript for session abc123 (4 chars)" in caplog.text

    def test_undecodable_transcript_is_none(self, store):
        store.base_dir.mkdir(parents=True)
        store.transcript_path("abc123").write_bytes(b"Candidate: caf\xe9")

        assert store.read_transcript("abc123") is None

    def test_write_failure_raises_persistence_error(self, store):
        with patch("app.repositories.transcript_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                store.write_transcript("abc123", "text")
        assert store.read_transcript("abc123") is None


class TestRecords:
    """Test documentation record persistence."""

    def test_candidate_slug(self):
        assert candidate_slug("  Jane   Q  Doe ") == "Jane_Q_Doe"

    @pytest.mark.parametrize(
        "name, slug",
        [
            ("AC/DC Ops", "AC_DC_Ops"),
            ("x/../../escaped", "x_.._.._escaped"),
            ("..", "candidate"),
            ("José O'Neil", "José_O_Neil"),
        ],
    )
    def test_candidate_slug_is_one_path_segment(self, name, slug):
        assert candidate_slug(name) == slug

    def test_record_with_separator_in_name_is_found(self, store):
        file_name = store.write_record("abc123", make_record(name="AC/DC Ops"))

        assert (store.base_dir / file_name).parent == store.base_dir
        assert store.read_record("abc123").candidate_name == "AC/DC Ops"
        assert store.list_record_session_ids() == ["abc123"]

    def test_undecodable_record_is_none(self, store):
        store.base_dir.mkdir(parents=True)
        (store.base_dir / "interview_Jane_Doe_abc123.json").write_bytes(b'{"candidateName": "caf\xe9"}')

        assert store.read_record("abc123") is None

    def test_round_trip_with_camel_case_keys(self, store):
        turns = [ConversationTurn(role="candidate", content="I built it.")]
        file_name = store.write_record("abc123", make_record(turns=turns))

        assert file_name == "interview_Jane_Doe_abc123.json"
        raw = (store.base_dir / file_name).read_text()
        assert '"candidateName": "Jane Doe"' in raw
        assert '"fullResponses"' in raw
        assert '"totalResponses": 1' in raw

        loaded = store.read_record("abc123")
        assert loaded.full_responses == turns
        assert loaded.candidate_name == "Jane Doe"

    def test_read_record_by_exact_name(self, store):
        store.write_record("abc123", make_record())
        assert store.read_record("abc123", "Jane Doe") is not None

    def test_read_record_falls_back_to_suffix_match(self, store):
        store.write_record("abc123", make_record(name="Jane Doe"))
        assert store.read_record("abc123", "Someone Else").candidate_name == "Jane Doe"

    def test_read_record_does_not_match_longer_ids(self, store):
        store.write_record("0abc123", make_record())
        assert store.read_record("abc123") is None

    def test_missing_record_is_none(self, store):
        assert store.read_record("abc123") is None

    def test_corrupt_record_is_none(self, store):
        store.base_dir.mkdir(parents=True)
        (store.base_dir / "interview_Jane_Doe_abc123.json").write_text("{not json")

        assert store.read_record("abc123") is None

    def test_list_record_session_ids(self, store):
        store.write_record("s1", make_record(name="Jane Doe"))
        store.write_record("s2", make_record(name="John Q Public"))
        store.write_transcript("s3", "text")

        assert sorted(store.list_record_session_ids()) == ["s1", "s2"]

    def test_list_without_directory(self, store):
        assert store.list_record_session_ids() == []


class TestReports:
    """Test report persistence."""

    def test_write_and_delete_report(self, store):
        file_name = store.write_report("abc123", "Jane Doe", b"%PDF-1.4")

        assert file_name == "interview_Jane_Doe_abc123.pdf"
        assert (store.base_dir / file_name).read_bytes() == b"%PDF-1.4"

        store.delete_report("abc123", "Jane Doe")
        assert not (store.base_dir / file_name).exists()

    def test_read_report(self, store):
        assert store.read_report("abc123", "Jane Doe") is None
        store.write_report("abc123", "Jane Doe", b"%PDF-1.4")
        assert store.read_report("abc123", "Jane Doe") == b"%PDF-1.4"

    def test_delete_missing_report_is_noop(self, store):
        store.delete_report("abc123", "Jane Doe")
