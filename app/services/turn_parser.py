"""Speaker-turn parsing for free-text interview transcripts.

Transcripts arrive labelled in more than one convention depending on where
they were captured. Conventions are tried in order and the first one whose
interviewer and candidate labels both occur in the text is used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from app.models import ConversationTurn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeakerConvention:
    name: str
    interviewer_label: str
    candidate_label: str

    def matches(self, text: str) -> bool:
        return self.interviewer_label in text and self.candidate_label in text

    def label_for(self, role: str) -> str:
        return self.interviewer_label if role == "interviewer" else self.candidate_label


SPEAKER_CONVENTIONS: tuple[SpeakerConvention, ...] = (
    SpeakerConvention("interviewer_candidate", "Interviewer:", "Candidate:"),
    # Avatar exports label the interviewer persona and the human user.
    SpeakerConvention("persona_user", "Cara:", "User:"),
)

DEFAULT_CONVENTION = SPEAKER_CONVENTIONS[0]


def detect_convention(
    text: str, conventions: Iterable[SpeakerConvention] = SPEAKER_CONVENTIONS
) -> SpeakerConvention | None:
    for convention in conventions:
        if convention.matches(text):
            return convention
    return None


def _find_label(line: str, convention: SpeakerConvention) -> tuple[str, int, int] | None:
    """Return (role, label_start, label_end) for the earliest label on a line."""
    found = []
    for role, label in (
        ("interviewer", convention.interviewer_label),
        ("candidate", convention.candidate_label),
    ):
        idx = line.find(label)
        if idx != -1:
            found.append((idx, role, label))
    if not found:
        return None
    idx, role, label = min(found)
    return role, idx, idx + len(label)


def parse_turns(
    text: str, conventions: Iterable[SpeakerConvention] = SPEAKER_CONVENTIONS
) -> list[ConversationTurn]:
    """Split a transcript into ordered speaker turns.

    A line containing a speaker label starts a new turn, keeping any text in
    front of the label; unlabelled lines are folded into the current turn
    separated by a single space. Blank lines are ignored, as is anything
    before the first labelled line. Text matching no known convention yields
    an empty list.
    """
    if not text or not text.strip():
        return []

    convention = detect_convention(text, conventions)
    if convention is None:
        logger.info("No known speaker convention found in transcript")
        return []

    turns: list[ConversationTurn] = []
    role: str | None = None
    parts: list[str] = []

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        label = _find_label(line, convention)
        if label is not None:
            if role is not None:
                turns.append(ConversationTurn(role=role, content=" ".join(parts)))
            role, start, end = label
            # text around the label (e.g. a timestamp) stays with the turn
            parts = [p for p in (line[:start].strip(), line[end:].strip()) if p]
        elif role is not None:
            parts.append(line)

    if role is not None:
        turns.append(ConversationTurn(role=role, content=" ".join(parts)))

    logger.info(f"Parsed {len(turns)} turns using {convention.name} convention")
    return turns


def format_turns(
    turns: Iterable[ConversationTurn], convention: SpeakerConvention = DEFAULT_CONVENTION
) -> str:
    """Render turns as labelled lines separated by blank lines."""
    return "\n\n".join(
        f"{convention.label_for(turn.role)} {turn.content}".rstrip() for turn in turns
    )


class TurnParser:
    """Stateless wrapper so the parser can be injected and swapped."""

    def __init__(self, conventions: Iterable[SpeakerConvention] = SPEAKER_CONVENTIONS) -> None:
        self.conventions = tuple(conventions)

    def parse(self, text: str) -> list[ConversationTurn]:
        return parse_turns(text, self.conventions)


def turns_from_messages(messages: Iterable[dict]) -> list[ConversationTurn]:
    """Map chat-style ``{role, content}`` messages onto interview turns.

    The human side of a captured conversation is the ``user``; every other
    role (assistant, persona) is the interviewer.
    """
    turns = []
    for msg in messages:
        content = str(msg.get("content") or "").strip()
        if not content:
            continue
        role = "candidate" if msg.get("role") == "user" else "interviewer"
        turns.append(ConversationTurn(role=role, content=content))
    return turns
