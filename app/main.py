import asyncio
import logging
import time
import traceback
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.config import Settings
from app.core.config import DEFAULT_CONTENT_TYPE, VIDEO_CONTENT_TYPES
from app.core.logging import configure_logging
from app.errors import InvalidTransitionError, JobNotFoundError, UploadValidationError
from app.generators import TutorialGenerator, get_generator
from app.ingest import VideoIngest
from app.job_store import JobStore
from app.schemas import ErrorResponse, FileInfo, HealthResponse, JobList, JobSnapshot, UploadResponse
from app.status import ENDPOINTS, StatusService
from app.workflow.runner import JobOrchestrator

logger = logging.getLogger(__name__)

def get_status_service(request: Request) -> StatusService:
    return request.app.state.status_service

def get_orchestrator(request: Request) -> JobOrchestrator:
    return request.app.state.orchestrator

def get_ingest(request: Request) -> VideoIngest:
    return request.app.state.ingest

def create_app(settings: Optional[Settings] = None, generator: Optional[TutorialGenerator] = None) -> FastAPI:
    """Build the API with its own store, orchestrator and status service."""
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE_PATH)

    uploads_dir = Path(settings.UPLOADS_DIR)
    store = JobStore()
    generator = generator or get_generator(settings)
    orchestrator = JobOrchestrator(store, generator, timeout=settings.JOB_TIMEOUT_SECONDS)
    ingest = VideoIngest(uploads_dir, max_bytes=settings.max_upload_bytes)
    status_service = StatusService(store, settings.PUBLIC_BASE_URL, uploads_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Generator mode: {generator.mode}; uploads folder: {uploads_dir.resolve()}")
        yield
        logger.info("Shutting down; cancelling outstanding generation")
        await orchestrator.shutdown()

    app = FastAPI(title="Tutorial Steps", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.generator = generator
    app.state.orchestrator = orchestrator
    app.state.ingest = ingest
    app.state.status_service = status_service

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.1f}ms)")
        return response

    @app.exception_handler(UploadValidationError)
    async def upload_error_handler(request: Request, exc: UploadValidationError):
        logger.warning(f"Upload rejected: {exc.details}")
        body = ErrorResponse(error=exc.message, details=exc.details, tip=exc.tip)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(by_alias=True, exclude_none=True))

    @app.exception_handler(JobNotFoundError)
    async def job_not_found_handler(request: Request, exc: JobNotFoundError):
        body = ErrorResponse(error="Job not found", job_id=exc.job_id)
        return JSONResponse(status_code=404, content=body.model_dump(by_alias=True, exclude_none=True))

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        logger.critical(f"Job state invariant violated: {exc}", exc_info=exc)
        body = ErrorResponse(error="Internal server error", details=str(exc), job_id=exc.job_id)
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True, exclude_none=True))

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(
                status_code=404,
                content={"error": "Endpoint not found", "availableEndpoints": ENDPOINTS},
            )
        return await http_exception_handler(request, exc)

    # Add exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception handler caught: {str(exc)}", exc_info=True)
        content = {"error": "Internal server error", "detail": str(exc)}
        if settings.ENVIRONMENT == "development":
            content["traceback"] = traceback.format_exc()
        return JSONResponse(status_code=500, content=content)

    @app.post("/api/upload", response_model=UploadResponse)
    async def upload_video(
        video: Optional[UploadFile] = File(None),
        ingest: VideoIngest = Depends(get_ingest),
        orchestrator: JobOrchestrator = Depends(get_orchestrator),
    ):
        """Accept a screen recording and start generating its tutorial."""
        if video is None:
            raise UploadValidationError("No file uploaded")
        # writing to disk is blocking, so it runs in an executor
        loop = asyncio.get_running_loop()
        stored = await loop.run_in_executor(
            None, ingest.store, video.filename, video.content_type, video.file
        )
        job_id = orchestrator.submit(stored)
        return UploadResponse(
            job_id=job_id,
            video_url=stored.url,
            file_info=FileInfo(name=stored.original_name, size=stored.size_label, type=stored.content_type),
        )

    @app.get("/api/job/{job_id}", response_model=JobSnapshot, response_model_exclude_none=True)
    async def get_job(job_id: str, status_service: StatusService = Depends(get_status_service)):
        """Current snapshot of a job, for polling."""
        return status_service.query(job_id)

    @app.get("/api/jobs", response_model=JobList)
    async def list_jobs(status_service: StatusService = Depends(get_status_service)):
        """List all jobs (for debugging)."""
        return status_service.summaries()

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check(status_service: StatusService = Depends(get_status_service)):
        """Health check endpoint."""
        return status_service.health()

    @app.get("/api/generator")
    async def generator_info(request: Request):
        """Which tutorial generator this server runs."""
        info = dict(request.app.state.generator.describe())
        info["pendingJobs"] = request.app.state.orchestrator.pending
        return info

    @app.get("/uploads/{filename}")
    async def serve_upload(filename: str, ingest: VideoIngest = Depends(get_ingest)):
        """Raw video bytes; FileResponse answers Range requests."""
        try:
            path = ingest.resolve(filename)
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail=f"Video {filename} not found")
        media_type = VIDEO_CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)
        return FileResponse(
            path,
            media_type=media_type,
            headers={"Accept-Ranges": "bytes", "Cache-Control": "public, max-age=3600"},
        )

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    from app.config import settings
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
