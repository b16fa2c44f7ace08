"""
Main FastAPI application for the PaperGen backend.
Handles CORS, request logging middleware, lifespan events, error mapping and
router registration.
"""
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from papergen.config import settings
from papergen.errors import PaperGenError
from papergen.routers import chat, export, files, generate, health, images, projects, topics
from papergen.services.chat_service import ChatService
from papergen.services.file_extractor import FileExtractor
from papergen.services.gemini_client import GeminiService
from papergen.services.generation import DocumentPipeline
from papergen.services.image_search import PixabayImageService
from papergen.services.project_store import InMemoryProjectStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared HTTP client and services; close the client on shutdown."""
    logger.info("=" * 60)
    logger.info("  Starting PaperGen backend …")
    logger.info("=" * 60)

    client = httpx.AsyncClient(timeout=httpx.Timeout(settings.GEMINI_TIMEOUT, connect=10.0))

    gemini = GeminiService(client)
    image_service = PixabayImageService(client)
    app.state.http_client = client
    app.state.gemini = gemini
    app.state.images = image_service
    app.state.pipeline = DocumentPipeline(gemini, image_service)
    app.state.extractor = FileExtractor(gemini, max_file_size=settings.MAX_FILE_SIZE)
    app.state.chat = ChatService(gemini)
    app.state.projects = InMemoryProjectStore()

    if gemini.is_configured:
        logger.info("✓ Gemini configured (model %s)", gemini.model)
    else:
        logger.warning("⚠ GEMINI_API_KEY not set — generation, chat and image transcription will fail")
    if image_service.is_configured:
        logger.info("✓ Pixabay configured")
    else:
        logger.warning("⚠ PIXABAY_API_KEY not set — image search returns no results")

    logger.info("=" * 60)
    logger.info("  PaperGen backend ready on http://%s:%d", settings.HOST, settings.PORT)
    logger.info("  Swagger UI : http://%s:%d/docs", settings.HOST, settings.PORT)
    logger.info("  Health     : http://%s:%d/api/health", settings.HOST, settings.PORT)
    logger.info("=" * 60)

    yield  # ← server is running

    logger.info("Shutting down PaperGen backend …")
    await client.aclose()
    logger.info("✓ Shutdown complete.")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="PaperGen API",
    description=(
        "**PaperGen** — AI-generated academic documents.\n\n"
        "Describe a topic, get a structured technical report, slide deck, "
        "conference paper or thesis, preview it and export it.\n\n"
        "Key endpoints:\n"
        "- `POST /api/generate/{documentType}` — generate a document\n"
        "- `POST /api/files/process` — extract text from a reference file\n"
        "- `POST /api/export/{format}` — render HTML, DOCX or PPTX\n"
        "- `POST /api/projects` — save a generated document\n"
    ),
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Process-Time"],
)


# ---------------------------------------------------------------------------
# Request / response logging middleware
# ---------------------------------------------------------------------------

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log every request with method, path, status code, and elapsed time.
    Attaches an ``X-Process-Time`` header (milliseconds) to every response.
    """
    t0 = time.monotonic()
    response = await call_next(request)
    elapsed_ms = round((time.monotonic() - t0) * 1000, 2)

    # Skip noisy health-check polling from the frontend
    if request.url.path not in ("/api/health", "/"):
        logger.info(
            "%s %s → %d  (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )

    response.headers["X-Process-Time"] = f"{elapsed_ms}ms"
    return response


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

@app.exception_handler(PaperGenError)
async def papergen_exception_handler(request: Request, exc: PaperGenError):
    """Map pipeline errors to their status code and structured body."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "%s on %s %s: %s",
        exc.kind.value,
        request.method,
        request.url.path,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return a structured JSON error for any unhandled exception."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error": str(exc),
            "path": str(request.url.path),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(health.router,    prefix="/api/health",       tags=["Health"])
app.include_router(generate.router,  prefix="/api/generate",     tags=["Generate"])
app.include_router(files.router,     prefix="/api/files",        tags=["Files"])
app.include_router(export.router,    prefix="/api/export",       tags=["Export"])
app.include_router(images.router,    prefix="/api/images",       tags=["Images"])
app.include_router(topics.router,    prefix="/api/random-topic", tags=["Topics"])
app.include_router(chat.router,      prefix="/api/chat",         tags=["Chat"])
app.include_router(projects.router,  prefix="/api/projects",     tags=["Projects"])


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

@app.get("/", tags=["Root"], include_in_schema=False)
async def root():
    """API root — returns basic service info."""
    return {
        "name": "PaperGen API",
        "version": VERSION,
        "description": "Academic Document Generation Backend",
        "docs": "/docs",
        "health": "/api/health",
        "endpoints": {
            "generate": "/api/generate/{documentType}",
            "files": "/api/files/process",
            "export": "/api/export/{format}",
            "images": "/api/images/search",
            "randomTopic": "/api/random-topic",
            "chat": "/api/chat",
            "projects": "/api/projects",
        },
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "papergen.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level="info",
    )
