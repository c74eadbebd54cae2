"""Knowledge transfer summarization of exit interview transcripts.

The model is asked for a JSON object with five fields. Its answer is parsed
into a tagged outcome: either a usable ``ParsedSummary`` or an
``UnparsedSummary`` carrying the raw text and the reason it was rejected.
Rejected outcomes select the fixed fallback summary, so ``summarize`` always
returns a fully populated result and never raises.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.models import SummaryResult
from app.services.llm_service import LLMService

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = (
    "keyPoints",
    "knowledgeTransfer",
    "documentationGaps",
    "successorRecommendations",
    "organizationalValue",
)

FALLBACK_SUMMARY = SummaryResult(
    key_points=(
        "Unable to generate detailed analysis due to processing error. Transcript contains "
        "employee responses about their work history and knowledge."
    ),
    knowledge_transfer=(
        "Review transcript for critical knowledge that needs to be documented for "
        "organizational continuity."
    ),
    documentation_gaps="Additional documentation may be needed in areas where responses were incomplete.",
    successor_recommendations=(
        "Successors should review the full transcript to understand processes and knowledge areas."
    ),
    organizational_value=(
        "The transcript contains valuable insights for knowledge transfer and organizational continuity."
    ),
)

SYSTEM_PROMPT = (
    "You are an expert knowledge management analyst evaluating exit interview transcripts "
    "for organizational knowledge transfer. Always respond with valid JSON only, no "
    "additional text."
)


class ParseFailureKind(str, Enum):
    EMPTY_TRANSCRIPT = "empty_transcript"
    NO_RESPONSE = "no_response"
    INVALID_JSON = "invalid_json"
    NOT_AN_OBJECT = "not_an_object"


@dataclass(frozen=True)
class ParsedSummary:
    result: SummaryResult


@dataclass(frozen=True)
class UnparsedSummary:
    raw: str
    reason: ParseFailureKind


SummaryOutcome = ParsedSummary | UnparsedSummary


def build_summary_prompt(transcript: str, candidate_name: str, position: str) -> str:
    return f'''Analyze the following exit interview transcript for knowledge transfer documentation. The employee {candidate_name} held the position of {position} and is leaving the company.

Transcript:
{transcript}

Please provide a detailed analysis in the following JSON format focused on knowledge transfer and documentation. Make sure the JSON is valid and properly formatted:

{{
  "keyPoints": "A comprehensive summary of the employee's work history, projects, technical knowledge, processes, and undocumented insights that should be preserved for the organization. Use bullet points or numbered list format.",
  "knowledgeTransfer": "Identify critical knowledge, processes, and insights that need to be documented or transferred to successors. Include any unique skills, workarounds, or institutional knowledge mentioned.",
  "documentationGaps": "Highlight areas where additional documentation or clarification would be valuable for knowledge preservation. Note any incomplete explanations or areas needing further detail.",
  "successorRecommendations": "Provide recommendations for successors taking over this role, including training needs, key contacts, and important processes to learn.",
  "organizationalValue": "Assess the value of the knowledge shared and its importance for organizational continuity and future projects."
}}

Respond ONLY with valid JSON. Do not include any text before or after the JSON.'''


def _strip_code_fences(text: str) -> str:
    """Drop markdown code fence lines around a JSON answer."""
    text = text.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.startswith("```")]
        text = "\n".join(lines)
    return text.strip()


def first_json_object(text: str) -> dict[str, Any] | None:
    """Find the first balanced JSON object embedded in free text."""
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)
    return None


def _to_summary(data: dict[str, Any]) -> SummaryResult:
    """Build a summary, filling blank or missing fields from the fallback."""
    values: dict[str, Any] = {}
    for alias, field_name in zip(SUMMARY_FIELDS, SummaryResult.model_fields):
        value = data.get(alias, data.get(field_name))
        if isinstance(value, list):
            value = "\n".join(str(v).strip() for v in value if str(v).strip())
        elif value is not None and not isinstance(value, str):
            value = json.dumps(value)
        if not value or not value.strip():
            logger.warning(f"Summary field {alias} missing from model output, using fallback")
            value = getattr(FALLBACK_SUMMARY, field_name)
        values[field_name] = value.strip()
    return SummaryResult(**values)


def parse_summary(raw: str | None) -> SummaryOutcome:
    if not raw:
        return UnparsedSummary(raw="", reason=ParseFailureKind.NO_RESPONSE)

    text = _strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Summary response is not plain JSON, searching for an embedded object")
        data = first_json_object(text)
        if data is None:
            return UnparsedSummary(raw=raw, reason=ParseFailureKind.INVALID_JSON)

    if not isinstance(data, dict):
        # e.g. the object wrapped in an array
        data = first_json_object(text)
        if data is None:
            return UnparsedSummary(raw=raw, reason=ParseFailureKind.NOT_AN_OBJECT)
    return ParsedSummary(result=_to_summary(data))


def select_summary(outcome: SummaryOutcome) -> SummaryResult:
    if isinstance(outcome, ParsedSummary):
        return outcome.result
    logger.error(f"Summary unavailable ({outcome.reason.value}), using fallback analysis")
    return FALLBACK_SUMMARY


class Summarizer:
    def __init__(self, llm: LLMService) -> None:
        self.llm = llm

    async def analyze(self, transcript: str, candidate_name: str, position: str) -> SummaryOutcome:
        """Run one model round trip and classify the answer. No retries."""
        if not transcript or not transcript.strip():
            return UnparsedSummary(raw="", reason=ParseFailureKind.EMPTY_TRANSCRIPT)

        raw = await self.llm.chat_completion(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_summary_prompt(transcript, candidate_name, position)},
            ],
        )
        if raw:
            logger.debug(f"LLM summary response: {raw}")
        return parse_summary(raw)

    async def summarize(self, transcript: str, candidate_name: str, position: str) -> SummaryResult:
        outcome = await self.analyze(transcript, candidate_name, position)
        return select_summary(outcome)
