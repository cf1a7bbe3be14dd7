"""FastAPI application entry point."""
import os
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic_settings import BaseSettings

from academic_assistant.api.routes import ask, documents, faq, metrics, upload
from academic_assistant.qa.answer_synthesizer import AnswerSynthesizer
from academic_assistant.qa.assistant import AcademicAssistant
from academic_assistant.qa.predefined_qa import PredefinedAnswerMatcher
from academic_assistant.services.chunker import Chunker
from academic_assistant.services.document_processor import DocumentProcessor
from academic_assistant.services.document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
)
from academic_assistant.services.document_summary import DocumentSummarizer
from academic_assistant.services.document_upload_service import DocumentUploadService
from academic_assistant.services.faq_service import FAQTracker
from academic_assistant.services.faq_store import InMemoryFAQRepository, JsonFAQRepository
from academic_assistant.services.retrieval_service import RetrievalEngine
from academic_assistant.services.scoring_rules import DEFAULT_SCORING_RULES
from academic_assistant.utils.logger import logger
from academic_assistant.validators import PDF_CONTENT_TYPE


class Settings(BaseSettings):
    """Application settings."""

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # Upload limits
    max_file_size_mb: float = 10
    allowed_content_types: List[str] = [PDF_CONTENT_TYPE]

    # Chunking and retrieval
    max_chunk_size: int = 500
    max_results: int = 8
    fallback_max_results: int = 6
    search_timeout_seconds: float = 5.0

    # Persistence (empty path = in-memory)
    document_store_path: str = ""
    faq_store_path: str = ""

    # Answering behaviour
    enable_predefined_answers: bool = True
    expand_acronyms: bool = False
    append_follow_ups: bool = True

    class Config:
        # Look for .env in both backend/ and parent directory
        env_file = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        env_file_encoding = 'utf-8'
        case_sensitive = False
        extra = "ignore"


# Global services (initialized in lifespan)
settings: Settings = None
document_store: DocumentStore = None
upload_service: DocumentUploadService = None
engine: RetrievalEngine = None
assistant: AcademicAssistant = None
faq_tracker: FAQTracker = None
summarizer: DocumentSummarizer = None


def build_document_store(app_settings: Settings) -> DocumentStore:
    if app_settings.document_store_path:
        return JsonFileDocumentStore(app_settings.document_store_path)
    return InMemoryDocumentStore()


def build_faq_tracker(app_settings: Settings) -> FAQTracker:
    if app_settings.faq_store_path:
        return FAQTracker(JsonFAQRepository(app_settings.faq_store_path))
    return FAQTracker(InMemoryFAQRepository())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global settings, document_store, upload_service, engine, assistant, faq_tracker, summarizer

    # Startup
    logger.info("Starting Academic Assistant")
    settings = Settings()

    document_store = build_document_store(settings)
    document_processor = DocumentProcessor(
        chunker=Chunker(max_chunk_size=settings.max_chunk_size),
        expand_acronyms=settings.expand_acronyms,
    )
    upload_service = DocumentUploadService(
        document_store=document_store,
        document_processor=document_processor,
        max_file_size_mb=settings.max_file_size_mb,
        allowed_content_types=settings.allowed_content_types,
    )

    rules = replace(
        DEFAULT_SCORING_RULES,
        max_results=settings.max_results,
        fallback_max_results=settings.fallback_max_results,
    )
    engine = RetrievalEngine(rules)
    faq_tracker = build_faq_tracker(settings)
    summarizer = DocumentSummarizer()

    assistant = AcademicAssistant(
        document_store=document_store,
        engine=engine,
        synthesizer=AnswerSynthesizer(engine),
        faq_tracker=faq_tracker,
        predefined=PredefinedAnswerMatcher() if settings.enable_predefined_answers else None,
        search_timeout_seconds=settings.search_timeout_seconds,
        append_follow_ups=settings.append_follow_ups,
    )

    logger.info(
        f"All services initialized (document store: "
        f"{settings.document_store_path or 'in-memory'}, "
        f"predefined answers: {settings.enable_predefined_answers})"
    )

    yield

    # Shutdown
    logger.info("Shutting down Academic Assistant")
    if upload_service:
        await upload_service.close()


# Create FastAPI app
app = FastAPI(
    title="Academic Assistant",
    description="PDF question answering with keyword retrieval and template answers",
    version="1.0.0",
    lifespan=lifespan,
)


def _is_control_character_error(error: dict) -> bool:
    if error.get("type") != "json_invalid":
        return False
    return "Invalid control character" in str(error.get("ctx", {}).get("error", ""))


def jsonable_errors(errors: list) -> list:
    # ctx may hold the original exception object
    cleaned = []
    for error in errors:
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        cleaned.append(error)
    return cleaned


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Return 422 for invalid requests.

    Raw control characters inside a question make the body invalid JSON;
    those get a dedicated hint instead of the parser error list.
    """
    errors = exc.errors()

    if any(_is_control_character_error(error) for error in errors):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Invalid JSON: the question contains raw control characters.",
                "error": "json_parse_error",
                "hint": "Escape or remove control characters before sending the question.",
            },
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_errors(errors)},
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Academic Assistant"}


# Prometheus metrics endpoint
@app.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint."""
    return metrics.metrics_response()


# Include routers
app.include_router(upload.router, prefix="/api", tags=["upload"])
app.include_router(documents.router, prefix="/api", tags=["documents"])
app.include_router(ask.router, prefix="/api", tags=["ask"])
app.include_router(faq.router, prefix="/api", tags=["faq"])
app.include_router(metrics.router, prefix="/api", tags=["metrics"])


if __name__ == "__main__":
    import uvicorn

    startup_settings = Settings()
    uvicorn.run(app, host=startup_settings.api_host, port=startup_settings.api_port)
