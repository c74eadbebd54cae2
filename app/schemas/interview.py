from pydantic import BaseModel, ConfigDict, Field

from app.models import DocumentationRecord, to_camel

# Session ids end up in file names; keep them to a safe alphabet.
SESSION_ID_PATTERN = r"^[A-Za-z0-9-]{1,64}$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class StartInterviewRequest(_CamelModel):
    candidate_name: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)


class StartInterviewResponse(_CamelModel):
    session_id: str
    message: str


class InterviewResponseRequest(_CamelModel):
    question: str = Field(..., min_length=1)
    response: str = Field(..., min_length=1)


class TranscriptMessage(BaseModel):
    role: str
    content: str


class SaveTranscriptRequest(BaseModel):
    transcript: list[TranscriptMessage] = Field(default_factory=list)


class SaveTranscriptResponse(_CamelModel):
    message: str
    file_name: str
    turns: int


class DocumentationResponse(_CamelModel):
    message: str
    pdf_file_name: str
    json_file_name: str
    transcript_source: str | None = None
    documentation: DocumentationRecord


class BackfillResponse(BaseModel):
    message: str
    processed: int
    generated: int
    errors: list[dict[str, str]]
