"""Services package for the exit interview documentation pipeline.

Pipeline components are built once per process (see ``app.main`` lifespan)
and handed to request handlers through ``get_pipeline_services``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from fastapi import Request

from app.core.config import INTERVIEWS_DIR
from app.repositories.transcript_store import TranscriptStore
from app.services.llm_service import LLMService
from app.services.report_renderer import PdfReportRenderer, ReportRenderer
from app.services.summarizer import Summarizer
from app.services.transcript_resolver import TranscriptResolver
from app.services.transcript_service_client import TranscriptServiceClient
from app.services.turn_parser import TurnParser


@dataclass
class PipelineServices:
    store: TranscriptStore
    resolver: TranscriptResolver
    parser: TurnParser
    summarizer: Summarizer
    renderer: ReportRenderer
    llm: LLMService
    transcript_service: TranscriptServiceClient

    async def close(self) -> None:
        await self.llm.close()
        await self.transcript_service.close()


def build_pipeline_services(
    interviews_dir: str | os.PathLike[str] = INTERVIEWS_DIR,
    *,
    llm: LLMService | None = None,
    transcript_service: TranscriptServiceClient | None = None,
    renderer: ReportRenderer | None = None,
) -> PipelineServices:
    store = TranscriptStore(interviews_dir)
    llm = llm or LLMService()
    transcript_service = transcript_service or TranscriptServiceClient()
    return PipelineServices(
        store=store,
        resolver=TranscriptResolver(store, transcript_service),
        parser=TurnParser(),
        summarizer=Summarizer(llm),
        renderer=renderer or PdfReportRenderer(),
        llm=llm,
        transcript_service=transcript_service,
    )


def get_pipeline_services(request: Request) -> PipelineServices:
    return request.app.state.pipeline


__all__ = [
    "PipelineServices",
    "build_pipeline_services",
    "get_pipeline_services",
    "LLMService",
    "Summarizer",
    "TranscriptResolver",
    "TranscriptServiceClient",
    "TurnParser",
    "PdfReportRenderer",
]
