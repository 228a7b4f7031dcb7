"""
Team Task Tracker - Main FastAPI Application.

Serves a server-rendered team task tracker. Pages are rendered with Jinja2
and use HTMX so form submits and clicks swap in freshly rendered fragments.
Tracker state is loaded once at startup and persisted after every mutation.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import settings
from .dependencies import get_tracker, set_tracker
from .exceptions import TeamTaskerException, ValidationException
from .logging_config import get_logger, setup_logging
from .metrics import metrics_endpoint, track_request_metrics, track_task_operation
from .middleware import (
    PerformanceMonitoringMiddleware,
    PrometheusMiddleware,
    RequestLoggingMiddleware,
    StaticFileCacheMiddleware,
)
from .models import ErrorResponse
from .rendering import templates
from .routers import api, pages
from .storage import create_store
from .tracker import TeamTracker

setup_logging(
    log_level=settings.LOG_LEVEL,
    service_name=settings.SERVICE_NAME,
    use_json=settings.LOG_JSON,
)
logger = get_logger(__name__)

BASE_PATH = Path(__file__).resolve().parent


def build_tracker() -> TeamTracker:
    """Create the tracker for the configured store and load its state."""
    tracker = TeamTracker(create_store(settings.STORAGE_PATH))
    tracker.load()
    return tracker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Loads tracker state on startup and releases it on shutdown.
    """
    logger.info("Starting Team Task Tracker")
    logger.info(
        "Configuration loaded",
        extra={
            "extra_fields": {
                "app_name": settings.APP_NAME,
                "debug_mode": settings.DEBUG,
                "log_level": settings.LOG_LEVEL,
                "storage_path": settings.STORAGE_PATH or "<memory>",
            }
        },
    )

    set_tracker(build_tracker())
    logger.info("Team Task Tracker startup complete")

    yield

    logger.info("Shutting down Team Task Tracker")
    set_tracker(None)


app = FastAPI(
    title="Team Task Tracker",
    description="Track team members and the tasks assigned to them",
    version=__version__,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Add middleware (order matters - first added is last executed)
app.add_middleware(StaticFileCacheMiddleware)
app.add_middleware(
    PerformanceMonitoringMiddleware,
    slow_request_threshold_ms=settings.SLOW_REQUEST_THRESHOLD_MS,
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)

app.mount(
    "/static",
    StaticFiles(directory=str(BASE_PATH / "static")),
    name="static",
)

app.include_router(pages.router)
app.include_router(api.router)


def _is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


@app.exception_handler(TeamTaskerException)
async def tracker_exception_handler(
    request: Request, exc: TeamTaskerException
) -> Response:
    """
    Render tracker errors for the caller.

    HTMX requests get an alert fragment swapped into the page's alert
    region; HTMX only swaps successful responses, so these are sent as 200.
    API callers get a JSON error body with the exception's status code.
    """
    route = request.scope.get("route")
    operation = getattr(route, "name", "unknown")
    track_task_operation(operation, False)

    field = exc.field_name if isinstance(exc, ValidationException) else None
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={
            "extra_fields": {
                "operation": operation,
                "path": request.url.path,
                "error_code": exc.error_code,
                **exc.details,
            }
        },
    )

    if _is_htmx(request):
        return templates.TemplateResponse(
            request=request,
            name="components/error.html",
            context={
                "error_title": "Validation failed"
                if isinstance(exc, ValidationException)
                else "Something went wrong",
                "error_message": exc.message,
            },
            headers={"HX-Retarget": "#alerts", "HX-Reswap": "innerHTML"},
        )

    body = ErrorResponse(detail=exc.message, error_code=exc.error_code, field=field)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.get(
    "/health",
    tags=["Health"],
    summary="Health check",
    description="Service status with storage backend and collection counts",
)
async def health_check(tracker: TeamTracker = Depends(get_tracker)) -> Dict[str, Any]:
    """
    Report service health.

    Returns:
        Dictionary with health status information:
        {
            "status": "healthy",
            "service": "teamtasker",
            "version": "...",
            "storage": "memory" | "file:<path>",
            "stats": {"members": int, "tasks": int, "completed": int, "open": int}
        }
    """
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": __version__,
        "storage": tracker.store.describe(),
        "stats": tracker.stats(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return await metrics_endpoint()


def main() -> None:
    """Run the tracker with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
