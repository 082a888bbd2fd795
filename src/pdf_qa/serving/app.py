"""FastAPI application exposing ingestion and question answering over HTTP."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from pdf_qa.config import settings
from pdf_qa.errors import LoadError, NotFoundError, NotReadyError, PdfQAError, ServiceError, ValidationError
from pdf_qa.service import PdfQAService, build_service

logger = logging.getLogger(__name__)


# ── Request / Response schemas ────────────────────────────────────────
class FileNameRequest(BaseModel):
    """PDF to load from the configured directory."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName", min_length=1, max_length=100)


class AnswerResponse(BaseModel):
    """Generated answer plus the best supporting passage."""

    text: str
    source: str


class LoadResponse(BaseModel):
    """Outcome of loading a PDF."""

    message: str
    status: str
    chunk_count: int = Field(serialization_alias="chunkCount")


_STATUS_BY_ERROR: list[tuple[type[PdfQAError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 400),
    (LoadError, 422),
    (NotReadyError, 503),
    (ServiceError, 500),
]


def _status_for(exc: PdfQAError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


async def _ensure_started(svc: PdfQAService) -> None:
    """Retry a failed startup connection; report 503 while the index is down."""
    if svc.ready:
        return
    try:
        await svc.start()
    except ServiceError as exc:
        raise NotReadyError() from exc


def create_app(service: PdfQAService | None = None) -> FastAPI:
    """Build the application; *service* defaults to one built from settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=settings.log_level)
        svc = service or build_service(settings)
        app.state.service = svc
        try:
            await svc.start()
        except ServiceError:
            # Served as 503 until a later start succeeds.
            logger.error("Vector index unavailable at startup")
        yield
        await svc.close()

    app = FastAPI(
        title="PDF QA API",
        version="0.1.0",
        description="Ask questions about a private collection of PDF documents.",
        lifespan=lifespan,
    )

    @app.exception_handler(PdfQAError)
    async def _pdf_qa_error(request: Request, exc: PdfQAError) -> JSONResponse:
        # Error messages are credential-free by construction.
        status = _status_for(exc)
        return JSONResponse(status_code=status, content={"statusCode": status, "message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"statusCode": 400, "message": [e.get("msg", "") for e in exc.errors()]},
        )

    # ── Routes ────────────────────────────────────────────────────────
    @app.get("/health")
    async def health(request: Request) -> dict:
        """Liveness probe; ``ready`` is false until the vector index answers a heartbeat."""
        svc: PdfQAService = request.app.state.service
        return {"status": "ok", "ready": await svc.index.health_check()}

    @app.get("/chat/ask-question", response_model=AnswerResponse)
    async def ask_question(
        request: Request,
        question: str = Query(min_length=10, max_length=250),
    ) -> AnswerResponse:
        """Answer a question from the loaded documents."""
        svc: PdfQAService = request.app.state.service
        await _ensure_started(svc)
        answer = await svc.answer(question)
        return AnswerResponse(text=answer.text, source=answer.source)

    @app.post("/chat/load-pdf", response_model=LoadResponse)
    async def load_pdf(request: Request, body: FileNameRequest) -> LoadResponse:
        """Load a PDF from the configured directory and index its embeddings."""
        svc: PdfQAService = request.app.state.service
        await _ensure_started(svc)
        result = await svc.ingest(body.file_name)
        return LoadResponse(message=result.message, status=result.status, chunk_count=result.chunk_count)

    return app


app = create_app()
