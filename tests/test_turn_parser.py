"""Tests for speaker-turn parsing of interview transcripts."""

import pytest

from app.models import ConversationTurn
from app.services.turn_parser import (
    SPEAKER_CONVENTIONS,
    SpeakerConvention,
    TurnParser,
    detect_convention,
    format_turns,
    parse_turns,
    turns_from_messages,
)


class TestConventionDetection:
    """Test selection of the speaker-label convention."""

    def test_detects_interviewer_candidate(self):
        text = "Interviewer: Hi\nCandidate: Hello"
        assert detect_convention(text).name == "interviewer_candidate"

    def test_detects_persona_user(self):
        text = "Cara: Welcome\nUser: Thanks"
        assert detect_convention(text).name == "persona_user"

    def test_requires_both_labels(self):
        assert detect_convention("Interviewer: only one side speaks") is None

    def test_first_matching_convention_wins(self):
        text = "Cara: hi\nUser: hello\nInterviewer: hi\nCandidate: hello"
        assert detect_convention(text) is SPEAKER_CONVENTIONS[0]

    def test_custom_conventions_are_additive(self):
        extra = SpeakerConvention("panel", "Host:", "Guest:")
        parser = TurnParser([*SPEAKER_CONVENTIONS, extra])

        turns = parser.parse("Host: Why are you leaving?\nGuest: New challenge.")

        assert turns == [
            ConversationTurn(role="interviewer", content="Why are you leaving?"),
            ConversationTurn(role="candidate", content="New challenge."),
        ]


class TestParseTurns:
    """Test splitting transcript text into turns."""

    def test_parses_two_turn_transcript(self, sample_transcript):
        turns = parse_turns(sample_transcript)

        assert turns == [
            ConversationTurn(role="candidate", content="I built the deploy pipeline."),
            ConversationTurn(role="interviewer", content="What should a successor know?"),
        ]

    def test_persona_user_roles(self):
        turns = parse_turns("Cara: What did you own?\n\nUser: The billing service.")

        assert [t.role for t in turns] == ["interviewer", "candidate"]
        assert turns[1].content == "The billing service."

    def test_continuation_lines_join_with_single_space(self):
        text = (
            "Interviewer: Tell me about the release process.\n"
            "Candidate: We tag on Mondays.\n"
            "   Then the pipeline builds artifacts.   \n"
            "\n"
            "QA signs off on Wednesday.\n"
            "Interviewer: Thanks."
        )

        turns = parse_turns(text)

        assert len(turns) == 3
        assert turns[1].content == (
            "We tag on Mondays. Then the pipeline builds artifacts. QA signs off on Wednesday."
        )

    def test_turn_count_equals_labelled_lines(self):
        text = "\n".join(
            f"{'Interviewer' if i % 2 == 0 else 'Candidate'}: line {i}" for i in range(7)
        )
        assert len(parse_turns(text)) == 7

    def test_content_reconstructs_non_label_text(self):
        text = (
            "Interviewer: What systems do you maintain?\n"
            "Candidate: The payroll export\n"
            "and the nightly reconciliation job.\n"
            "Interviewer: Who else knows them?"
        )
        turns = parse_turns(text)

        joined = " ".join(t.content for t in turns)
        expected = text
        for label in ("Interviewer:", "Candidate:"):
            expected = expected.replace(label, "")
        assert joined.split() == expected.split()

    def test_label_inside_line_keeps_leading_text(self):
        turns = parse_turns("[00:01] Interviewer: Hello\n[00:03] Candidate: Hi there")

        assert turns[0] == ConversationTurn(role="interviewer", content="[00:01] Hello")
        assert turns[1] == ConversationTurn(role="candidate", content="[00:03] Hi there")

    def test_earliest_label_on_line_decides_role(self):
        turns = parse_turns("Candidate: I told the Interviewer: no\nInterviewer: ok")

        assert turns[0].role == "candidate"
        assert turns[0].content == "I told the Interviewer: no"

    def test_text_before_first_label_is_ignored(self):
        turns = parse_turns("Exported 2024-05-01\nInterviewer: Hi\nCandidate: Hello")

        assert len(turns) == 2
        assert turns[0].content == "Hi"

    def test_label_without_content_still_counts(self):
        turns = parse_turns("Interviewer:\nWhat is next?\nCandidate:")

        assert turns == [
            ConversationTurn(role="interviewer", content="What is next?"),
            ConversationTurn(role="candidate", content=""),
        ]

    @pytest.mark.parametrize(
        "text",
        ["", "   \n\n  ", "Just some notes without speakers.", "Speaker 1: hi\nSpeaker 2: hello"],
    )
    def test_unknown_convention_returns_empty(self, text):
        assert parse_turns(text) == []

    def test_parse_is_pure(self, sample_transcript):
        parser = TurnParser()
        assert parser.parse(sample_transcript) == parser.parse(sample_transcript)


class TestFormatTurns:
    """Test re-joining turns into transcript text."""

    def test_format_uses_blank_line_separators(self):
        turns = [
            ConversationTurn(role="interviewer", content="Hi"),
            ConversationTurn(role="candidate", content="Hello"),
        ]
        assert format_turns(turns) == "Interviewer: Hi\n\nCandidate: Hello"

    def test_parse_of_formatted_output_is_idempotent(self):
        text = (
            "Cara: Walk me through on-call.\n"
            "User: Pager rotates weekly,\n"
            "handover on Fridays.\n"
            "Cara: Anything undocumented?\n"
            "User: The DNS failover steps."
        )
        turns = parse_turns(text)

        assert parse_turns(format_turns(turns)) == turns

    def test_format_empty(self):
        assert format_turns([]) == ""


class TestTurnsFromMessages:
    """Test mapping captured chat messages onto interview turns."""

    def test_user_is_candidate_everything_else_interviewer(self):
        turns = turns_from_messages(
            [
                {"role": "assistant", "content": "Why are you leaving?"},
                {"role": "user", "content": "Relocating."},
                {"role": "persona", "content": "Thanks."},
            ]
        )
        assert [t.role for t in turns] == ["interviewer", "candidate", "interviewer"]

    def test_blank_messages_are_skipped(self):
        turns = turns_from_messages([{"role": "user", "content": "  "}, {"role": "user"}])
        assert turns == []
