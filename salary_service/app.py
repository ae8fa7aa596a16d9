"""
FastAPI application for Salary Service.

Serves salary entries and registered names from a CSV-backed record
store. Endpoints are plain ``def`` functions so every request runs on
its own worker thread and blocks on the store lock and file I/O.
"""

from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from . import __version__
from .config import Settings, get_settings
from .dependencies import get_store
from .exceptions import PersistenceError
from .logging_config import get_logger
from .metrics import (
    metrics_endpoint,
    track_request_metrics,
    track_store_operation,
    update_entry_count,
)
from .middleware import CORSHeadersMiddleware, PrometheusMiddleware, RequestLoggingMiddleware
from .models import DataSnapshot, HealthResponse, NameCreate, SalaryEntry
from .store import RecordStore

logger = get_logger(__name__)


def format_validation_error(exc: RequestValidationError) -> str:
    """Flatten request validation errors into one plain-text line."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(messages) or "invalid request body"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the backing file on startup."""
    settings: Settings = app.state.settings
    store: RecordStore = app.state.store

    logger.info(
        "Starting Salary Service",
        version=__version__,
        data_file=str(store.path),
        port=settings.SERVICE_PORT,
    )
    store.load()
    update_entry_count(len(store.snapshot().entries))
    logger.info("Salary Service started")

    yield

    logger.info("Salary Service stopped")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Service settings, defaults to the cached environment settings
        store: Record store to serve, built from settings if omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    if store is None:
        store = RecordStore(settings.DATA_FILE, currency=settings.CURRENCY)

    app = FastAPI(
        title="Salary Service",
        description="Store and retrieve salary entries backed by a CSV file",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CORSHeadersMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = format_validation_error(exc)
        logger.warning("Rejected malformed request body", path=request.url.path, error=message)
        return PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(PersistenceError)
    async def persistence_exception_handler(request: Request, exc: PersistenceError):
        return PlainTextResponse(
            exc.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return await metrics_endpoint()

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check(store: RecordStore = Depends(get_store)):
        """Health check endpoint."""
        snapshot = store.snapshot()
        return HealthResponse(
            status="healthy",
            service=settings.SERVICE_NAME,
            version=__version__,
            names=len(snapshot.names),
            entries=len(snapshot.entries),
        )

    @app.get("/data", response_model=DataSnapshot, tags=["Salaries"])
    def get_data(store: RecordStore = Depends(get_store)):
        """Return every known name and salary entry."""
        snapshot = store.snapshot()
        track_store_operation("snapshot", True)
        return DataSnapshot(names=list(snapshot.names), entries=list(snapshot.entries))

    @app.post("/names", response_model=List[str], tags=["Salaries"])
    def register_name(payload: NameCreate, store: RecordStore = Depends(get_store)):
        """Register a name. Registering a known name changes nothing."""
        names = store.register_name(payload.name)
        track_store_operation("register_name", True)
        return names

    @app.post("/entries", response_model=List[SalaryEntry], tags=["Salaries"])
    def append_entry(entry: SalaryEntry, store: RecordStore = Depends(get_store)):
        """Persist a salary entry and return all entries."""
        try:
            entries = store.append_entry(entry)
        except PersistenceError:
            track_store_operation("append_entry", False)
            raise
        track_store_operation("append_entry", True)
        update_entry_count(len(entries))
        return entries

    return app
