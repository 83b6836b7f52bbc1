"""Mood Tracker API - FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from mood_analytics.errors import MoodTrackerError, SchemaError, StoreUnavailable, ValidationError
from mood_analytics.store import Store

from .config import Settings, get_settings
from .database import create_store
from .models.envelope import ErrorDetail, envelope
from .routes import mood, submit
from .services.mood_service import build_service

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    details = []
    for error in exc.errors():
        # Drop the leading "body"/"query" segment
        loc = [str(part) for part in error.get("loc", ())[1:]]
        details.append(
            ErrorDetail(
                field=".".join(loc) or "body",
                constraint=error.get("type", "invalid"),
                message=error.get("msg", "Invalid value"),
            )
        )
    return details


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        first = f"{details[0].field}: {details[0].message}" if details else "invalid request"
        return envelope(
            success=False,
            message=f"Validation error: {first}",
            errors=details,
            status_code=400,
        )

    @app.exception_handler(ValidationError)
    async def domain_validation_handler(request: Request, exc: ValidationError):
        detail = ErrorDetail(**exc.to_dict())
        return envelope(
            success=False,
            message=f"Validation error: {exc.message}",
            errors=[detail],
            status_code=400,
        )

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error(f"[API] {request.method} {request.url.path}: {exc}")
        return envelope(
            success=False,
            message="Mood store is unavailable, please try again",
            status_code=502,
        )

    @app.exception_handler(SchemaError)
    async def schema_error_handler(request: Request, exc: SchemaError):
        logger.error(f"[API] Store misconfigured on {request.url.path}: {exc}")
        return envelope(success=False, message=f"Store misconfigured: {exc}", status_code=500)

    @app.exception_handler(MoodTrackerError)
    async def mood_tracker_error_handler(request: Request, exc: MoodTrackerError):
        logger.error(f"[API] {request.method} {request.url.path}: {exc}")
        return envelope(success=False, message="Something went wrong!", status_code=500)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return envelope(success=False, message="Route not found", status_code=404)
        return envelope(success=False, message=str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[API] Unhandled error on {request.method} {request.url.path}")
        return envelope(success=False, message="Something went wrong!", status_code=500)


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    """
    Build the API with its own store and service instances.

    Args:
        settings: Settings to use, defaults to the environment
        store: Sheet store, defaults to the SQLite store from settings
    """
    settings = settings or get_settings()
    store = store if store is not None else create_store(settings)
    service = build_service(settings, store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Mood Tracker API...")
        try:
            service.provision()
        except StoreUnavailable as e:
            logger.warning(f"Could not provision sheets at startup: {e}")
        yield
        logger.info("Mood Tracker API stopped")

    app = FastAPI(
        title="Mood Tracker API",
        description="Mood logging with rolling statistics and risk heuristics",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mood_service = service

    # Configure CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(submit.router)
    app.include_router(mood.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for the API."""
        return {
            "status": "OK",
            "message": "Mood Tracker API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "server.mood_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
