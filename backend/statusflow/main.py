"""statusflow: reporting workflow service (FastAPI app + scheduled job loops)."""

import asyncio
import signal
import uuid
from contextlib import asynccontextmanager

# Logging first: structlog caches loggers on first use
from statusflow.core.config import get_settings
from statusflow.core.logging import configure_structlog

configure_structlog(
    log_level="DEBUG" if get_settings().debug else "INFO",
    json_logs=not get_settings().debug,
)

import structlog

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from statusflow.api.routes import api_router
from statusflow.core.config import Settings
from statusflow.core.exceptions import StatusFlowError
from statusflow.db import close_db, close_redis, get_redis, get_session_factory, init_db, init_redis
from statusflow.middleware.correlation import get_correlation_id, setup_correlation_middleware
from statusflow.queue.dispatcher import DispatcherTimer, ScheduledJobDispatcher
from statusflow.queue.processor import ScheduledJobsProcessor
from statusflow.queue.schemas import SCHEDULED_JOBS_QUEUE
from statusflow.queue.work_queue import WorkQueue
from statusflow.queue.worker import QueueWorker

logger = structlog.get_logger(__name__)


def build_background_workers(settings: Settings) -> list[DispatcherTimer | QueueWorker]:
    """The dispatcher timer feeding the scheduled-jobs queue, and that queue's consumer."""
    session_factory = get_session_factory()
    work_queue = WorkQueue(get_redis())

    return [
        DispatcherTimer(
            ScheduledJobDispatcher(session_factory, work_queue),
            interval_seconds=settings.scheduled_jobs_interval_seconds,
        ),
        QueueWorker(
            work_queue,
            SCHEDULED_JOBS_QUEUE,
            ScheduledJobsProcessor(session_factory, work_queue),
            poll_interval=settings.worker_poll_interval_seconds,
        ),
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        # /api/health answers 503 so the load balancer drains this instance
        app.state.shutting_down = True
        logger.info("sigterm_received")

    signal.signal(signal.SIGTERM, handle_sigterm)

    await init_db()
    await init_redis()
    logger.info("startup_complete", app_name=settings.app_name, scheduler_enabled=settings.scheduler_enabled)

    workers = build_background_workers(settings) if settings.scheduler_enabled else []
    tasks = [asyncio.create_task(worker.run()) for worker in workers]

    yield

    for worker in workers:
        worker.stop()
    await asyncio.gather(*tasks, return_exceptions=True)
    await close_redis()
    await close_db()
    logger.info("shutdown_complete")


def _error_response(request: Request, status_code: int, detail, event: str, **log_context) -> JSONResponse:
    """Log with a debug_id the client can quote, and answer with detail + debug_id."""
    debug_id = str(uuid.uuid4())
    logger.error(
        event,
        status_code=status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        **log_context,
    )
    return JSONResponse(status_code=status_code, content={"detail": detail, "debug_id": debug_id})


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.detail, "http_exception")


async def workflow_exception_handler(request: Request, exc: StatusFlowError) -> JSONResponse:
    """Workflow errors answer with their own status code; 5xx messages stay in the logs."""
    detail = str(exc) if exc.status_code < 500 else "Internal server error"
    return _error_response(
        request,
        exc.status_code,
        detail,
        "workflow_exception",
        error=str(exc),
        error_type=type(exc).__name__,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(
        request,
        500,
        "Internal server error",
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Status transitions, task rollup and scheduled reporting jobs",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_correlation_middleware(app)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StatusFlowError, workflow_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("statusflow.main:app", host="0.0.0.0", port=8000)
