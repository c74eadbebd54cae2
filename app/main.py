"""FastAPI application for the Exit Interview Documentation service.

This module provides the main FastAPI application instance with CORS
middleware configuration, pipeline lifecycle management and router
registration.
"""

# Load environment variables before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import CORS_ORIGINS, INTERVIEWS_DIR
from app.routers.interviews import router as interviews_router


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# API version and metadata
API_VERSION = "0.1.0"
API_TITLE = "Exit Interview Documentation API"
API_DESCRIPTION = """
Exit Interview Documentation API.

This API provides endpoints for:
- Starting exit interview sessions and capturing the conversation
- Saving or importing interview transcripts
- Generating knowledge transfer documentation (JSON record + PDF report)
- Backfilling transcripts from previously generated documentation
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Creates the database tables and the documentation pipeline on startup
    and releases the pipeline's network clients on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup is complete.
    """
    # Startup: Initialize resources
    from app.db.base import Base
    from app.db.session import engine
    from app.services import build_pipeline_services

    from app.db import models as orm_models  # noqa: F401  (registers ORM tables)

    Base.metadata.create_all(bind=engine)

    pipeline = build_pipeline_services(INTERVIEWS_DIR)
    app.state.pipeline = pipeline
    logger.info(f"Interviews directory: {pipeline.store.base_dir}")
    logger.info(f"LLM configured: {pipeline.llm.is_configured}")
    if not pipeline.llm.is_configured:
        logger.warning("No LLM API key configured - documentation will use fallback analysis")
    if pipeline.transcript_service.is_configured:
        logger.info("Transcript service is configured")
    logger.info("Application startup complete")

    yield

    # Shutdown: Clean up resources
    logger.info("Shutting down application...")
    await pipeline.close()
    logger.info("Pipeline clients closed")


# Create FastAPI application instance
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# Configure CORS middleware
# Can be overridden via CORS_ORIGINS environment variable (comma-separated list)
_default_origins = [
    "http://localhost:8000",
    "http://127.0.0.1:8000",
    "http://localhost:5173",  # Vite dev server
    "http://127.0.0.1:5173",
]

if CORS_ORIGINS:
    ALLOWED_ORIGINS = [
        origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()
    ]
else:
    ALLOWED_ORIGINS = _default_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length", "Content-Type"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    """Root endpoint returning API information.

    Returns:
        Dict containing API metadata including name, version,
        description, and available documentation URLs.
    """
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Knowledge transfer documentation from exit interviews",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        Dict with status indicating the API is healthy.
    """
    return {"status": "healthy"}


# Router registration
app.include_router(interviews_router, prefix="/api", tags=["Interviews"])
