"""Pytest fixtures for Exit Interview Documentation tests.

This module provides shared fixtures for testing the FastAPI application
and the documentation pipeline, including an in-memory database, a
temporary interviews directory and a stubbed language model.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.deps import get_db
from app.db import models as orm_models  # noqa: F401
from app.main import app
from app.repositories.transcript_store import TranscriptStore
from app.services import build_pipeline_services
from app.services.llm_service import LLMService
from app.services.transcript_service_client import TranscriptServiceClient


SAMPLE_SUMMARY = {
    "keyPoints": "- Built the deploy pipeline\n- Owns the release calendar",
    "knowledgeTransfer": "Release scripts live in the ops repository.",
    "documentationGaps": "Rollback procedure is undocumented.",
    "successorRecommendations": "Shadow the next two releases.",
    "organizationalValue": "High - the pipeline ships every product.",
}


@pytest.fixture
def sample_transcript():
    """Two-turn transcript in the Interviewer/Candidate convention."""
    return "Candidate: I built the deploy pipeline.\n\nInterviewer: What should a successor know?"


@pytest.fixture
def sample_summary_json():
    return json.dumps(SAMPLE_SUMMARY)


@pytest.fixture
def store(tmp_path):
    return TranscriptStore(tmp_path / "interviews")


@pytest.fixture
def mock_llm(sample_summary_json):
    """LLM stub answering every request with a valid summary."""
    llm = MagicMock(spec=LLMService)
    llm.is_configured = True
    llm.chat_completion = AsyncMock(return_value=sample_summary_json)
    llm.close = AsyncMock()
    return llm


@pytest.fixture
def unavailable_transcript_service():
    service = MagicMock(spec=TranscriptServiceClient)
    service.is_configured = False
    service.fetch = AsyncMock(return_value=None)
    service.close = AsyncMock()
    return service


@pytest.fixture
def db_session():
    """Session bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def pipeline(tmp_path, mock_llm, unavailable_transcript_service):
    return build_pipeline_services(
        tmp_path / "interviews",
        llm=mock_llm,
        transcript_service=unavailable_transcript_service,
    )


@pytest.fixture
def client(db_session, pipeline):
    """Create a test client for the FastAPI application.

    The database dependency and the pipeline are swapped for test doubles;
    the lifespan is not run.

    Returns:
        TestClient: A test client instance for making requests to the API.
    """
    app.dependency_overrides[get_db] = lambda: db_session
    app.state.pipeline = pipeline
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        del app.state.pipeline
