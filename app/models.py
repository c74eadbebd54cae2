"""Pydantic models for the exit interview documentation pipeline.

Models serialize with camelCase aliases so the persisted documentation
records keep the field names the report tooling and the browser client read.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class InterviewSession(BaseModel):
    """Metadata for one exit interview.

    Attributes:
        session_id: Opaque identifier shared by every stored artifact.
        candidate_name: Name of the departing employee.
        position: Role the employee held.
        start_time: When the interview started.
        status: ``active`` until documentation has been generated.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        from_attributes=True,
    )

    session_id: str = Field(..., min_length=1, max_length=64)
    candidate_name: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    start_time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: Literal["active", "completed"] = "active"


class ConversationTurn(BaseModel):
    """One attributed utterance in the interview."""

    model_config = ConfigDict(frozen=True)

    role: Literal["interviewer", "candidate"]
    content: str


class SummaryResult(BaseModel):
    """Knowledge transfer analysis of a transcript.

    The model sometimes answers with lists instead of prose; those are
    joined with line breaks so the report can bullet them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    key_points: str
    knowledge_transfer: str
    documentation_gaps: str
    successor_recommendations: str
    organizational_value: str

    @field_validator("*", mode="before")
    @classmethod
    def join_list_values(cls, v):
        if isinstance(v, list):
            return "\n".join(str(item).strip() for item in v if str(item).strip())
        return v


class DocumentationInsights(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    knowledge_transfer: str | None = None
    documentation_gaps: str | None = None


class DocumentationSummary(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    total_responses: int = Field(..., ge=0)
    key_points: str
    insights: DocumentationInsights = Field(default_factory=DocumentationInsights)
    recommendations: str
    organizational_value: str


class DocumentationRecord(BaseModel):
    """The persisted artifact of record for one documentation request.

    Denormalizes the session metadata so a report can be regenerated
    without the session store.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        frozen=True,
    )

    candidate_name: str
    position: str
    interview_date: datetime
    summary: DocumentationSummary
    full_responses: list[ConversationTurn] = Field(default_factory=list)
    transcript: str = ""


class DocumentationResult(BaseModel):
    """What a documentation run produced and where it was written."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    session_id: str
    record: DocumentationRecord
    json_file_name: str
    pdf_file_name: str
    transcript_source: str | None = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class BackfillResult(BaseModel):
    """Outcome of regenerating missing transcripts from stored records."""

    processed: int = 0
    generated: int = 0
    errors: list[dict[str, str]] = Field(default_factory=list)
