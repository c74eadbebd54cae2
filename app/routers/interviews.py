import logging
import uuid
from datetime import datetime, timezone
from io import BytesIO
from typing import Annotated

from docx import Document
from fastapi import APIRouter, Depends, File, HTTPException, Path, UploadFile, status
from sqlalchemy.orm import Session

from app.db.deps import get_db
from app.exceptions import PersistenceError, SessionNotFoundError
from app.models import ConversationTurn, DocumentationRecord, InterviewSession
from app.repositories.conversation_repository import ConversationRepository
from app.repositories.interview_session_repository_sqlalchemy import InterviewSessionRepositorySQLAlchemy
from app.schemas.interview import (
    BackfillResponse,
    DocumentationResponse,
    InterviewResponseRequest,
    SaveTranscriptRequest,
    SaveTranscriptResponse,
    SESSION_ID_PATTERN,
    StartInterviewRequest,
    StartInterviewResponse,
)
from app.services import PipelineServices, get_pipeline_services
from app.services.documentation_service import DocumentationAssembler
from app.services.turn_parser import format_turns, turns_from_messages

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Interviews"])

SessionId = Annotated[str, Path(pattern=SESSION_ID_PATTERN)]


def get_documentation_assembler(
    pipeline: PipelineServices = Depends(get_pipeline_services),
    db: Session = Depends(get_db),
) -> DocumentationAssembler:
    return DocumentationAssembler(
        store=pipeline.store,
        resolver=pipeline.resolver,
        parser=pipeline.parser,
        summarizer=pipeline.summarizer,
        renderer=pipeline.renderer,
        sessions=InterviewSessionRepositorySQLAlchemy(db),
    )


@router.post("/interviews", response_model=StartInterviewResponse, status_code=status.HTTP_201_CREATED)
def start_interview(payload: StartInterviewRequest, db: Session = Depends(get_db)):
    repo = InterviewSessionRepositorySQLAlchemy(db)
    session = repo.create(
        InterviewSession(
            session_id=uuid.uuid4().hex,
            candidate_name=payload.candidate_name.strip(),
            position=payload.position.strip(),
            start_time=datetime.now(timezone.utc),
        )
    )
    logger.info(f"Started interview session {session.session_id} for {session.candidate_name}")
    return StartInterviewResponse(session_id=session.session_id, message="Interview session started")


@router.get("/interviews/{session_id}", response_model=InterviewSession)
def get_interview(session_id: SessionId, db: Session = Depends(get_db)):
    session = InterviewSessionRepositorySQLAlchemy(db).get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Interview session not found")
    return session


@router.post("/interviews/{session_id}/responses", status_code=status.HTTP_200_OK)
def save_interview_response(
    payload: InterviewResponseRequest,
    session_id: SessionId,
    db: Session = Depends(get_db),
    pipeline: PipelineServices = Depends(get_pipeline_services),
):
    """Capture one question/answer exchange and refresh the session transcript."""
    if not InterviewSessionRepositorySQLAlchemy(db).get(session_id):
        raise HTTPException(status_code=404, detail="Interview session not found")

    conversation = ConversationRepository(db)
    conversation.add_turns(
        session_id=session_id,
        turns=[
            ConversationTurn(role="interviewer", content=payload.question.strip()),
            ConversationTurn(role="candidate", content=payload.response.strip()),
        ],
    )
    turns = conversation.list_turns(session_id=session_id)
    _write_transcript(pipeline, session_id, format_turns(turns))
    return {"message": "Response saved successfully", "totalTurns": len(turns)}


@router.post("/interviews/{session_id}/transcript", response_model=SaveTranscriptResponse)
def save_transcript(
    payload: SaveTranscriptRequest,
    session_id: SessionId,
    pipeline: PipelineServices = Depends(get_pipeline_services),
):
    """Store a full conversation captured by the client as the session transcript."""
    turns = turns_from_messages(m.model_dump() for m in payload.transcript)
    if not turns:
        raise HTTPException(status_code=400, detail="Transcript is required")

    file_name = _write_transcript(pipeline, session_id, format_turns(turns))
    return SaveTranscriptResponse(message="Transcript saved successfully", file_name=file_name, turns=len(turns))


@router.post("/interviews/{session_id}/transcript/upload-docx", response_model=SaveTranscriptResponse)
async def upload_transcript_docx(
    session_id: SessionId,
    file: UploadFile = File(...),
    pipeline: PipelineServices = Depends(get_pipeline_services),
):
    """Store an exported speaker-labelled .docx transcript for a session."""
    filename = (file.filename or "").lower()
    if not filename.endswith(".docx"):
        raise HTTPException(status_code=415, detail="Only .docx files are supported")

    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        doc = Document(BytesIO(raw))
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid .docx file")

    parts: list[str] = []

    for p in doc.paragraphs:
        t = (p.text or "").strip()
        if t:
            parts.append(t)

    for table in doc.tables:
        for row in table.rows:
            cells = []
            for cell in row.cells:
                ct = (cell.text or "").strip()
                if ct:
                    cells.append(ct)
            if cells:
                parts.append(" ".join(cells))

    transcript = "\n".join(parts).strip()
    turns = pipeline.parser.parse(transcript)
    if not turns:
        raise HTTPException(
            status_code=422,
            detail="No speaker-labelled turns found in the uploaded transcript.",
        )

    file_name = _write_transcript(pipeline, session_id, transcript)
    return SaveTranscriptResponse(message="Transcript saved successfully", file_name=file_name, turns=len(turns))


@router.post("/interviews/{session_id}/documentation", response_model=DocumentationResponse)
async def generate_documentation(
    session_id: SessionId,
    assembler: DocumentationAssembler = Depends(get_documentation_assembler),
    db: Session = Depends(get_db),
):
    try:
        result = await assembler.assemble(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Interview session not found")
    except PersistenceError as e:
        logger.error(f"Documentation for session {session_id} could not be saved: {e}")
        raise HTTPException(status_code=500, detail="Failed to save documentation")

    InterviewSessionRepositorySQLAlchemy(db).update_status(session_id, "completed")
    return DocumentationResponse(
        message="Documentation generated successfully",
        pdf_file_name=result.pdf_file_name,
        json_file_name=result.json_file_name,
        transcript_source=result.transcript_source,
        documentation=result.record,
    )


@router.get("/interviews/{session_id}/documentation", response_model=DocumentationRecord)
def get_documentation(
    session_id: SessionId,
    pipeline: PipelineServices = Depends(get_pipeline_services),
):
    record = pipeline.store.read_record(session_id)
    if not record:
        raise HTTPException(status_code=404, detail="No documentation found for this session")
    return record


@router.post("/transcripts/backfill", response_model=BackfillResponse)
async def backfill_transcripts(pipeline: PipelineServices = Depends(get_pipeline_services)):
    """Regenerate transcript files for stored records that lack one."""
    result = await pipeline.resolver.backfill_missing()
    return BackfillResponse(
        message=f"Processed {result.processed} sessions, generated {result.generated} transcripts",
        processed=result.processed,
        generated=result.generated,
        errors=result.errors,
    )


def _write_transcript(pipeline: PipelineServices, session_id: str, text: str) -> str:
    try:
        return pipeline.store.write_transcript(session_id, text)
    except PersistenceError as e:
        logger.error(f"Failed to save transcript for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save transcript")
