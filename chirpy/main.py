"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chirpy.api.auth import router as auth_router
from chirpy.api.chirps import router as chirps_router
from chirpy.api.middleware import CorrelationIdMiddleware, HitCounter, HitCounterMiddleware
from chirpy.api.routes import router
from chirpy.api.users import router as users_router
from chirpy.config import get_settings
from chirpy.database import close_database, init_database
from chirpy.exceptions import ChirpyError
from chirpy.services.logging_service import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    stores = init_database(settings.data_dir, reset=settings.debug)
    logger.info(
        "application_started",
        data_dir=str(stores.data_dir),
        debug=settings.debug,
        log_level=settings.log_level,
    )

    yield

    # Shutdown
    close_database()
    logger.info("application_shutdown")


app = FastAPI(
    title="Chirpy",
    description="Micro-blog API: users, tokens, and chirps on flat JSON files",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.hit_counter = HitCounter()


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid4())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with user-friendly messages.

    Returns 400 Bad Request naming the first offending field.
    """
    correlation_id = _correlation_id(request)
    logger = structlog.get_logger()

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]))
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}"
    else:
        detail = "Request validation failed"

    logger.warning(
        "validation_error",
        correlation_id=correlation_id,
        detail=detail,
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "detail": detail,
            "correlation_id": correlation_id,
        },
        headers={"X-Correlation-Id": correlation_id},
    )


@app.exception_handler(ChirpyError)
async def chirpy_exception_handler(request: Request, exc: ChirpyError) -> JSONResponse:
    """Map domain errors to their status code.

    Storage failures are logged at error level; the client only sees the
    generic message carried by the exception.
    """
    correlation_id = _correlation_id(request)
    logger = structlog.get_logger()

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        correlation_id=correlation_id,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        path=request.url.path,
    )

    headers = {"X-Correlation-Id": correlation_id}
    if exc.status_code == 401:
        headers["WWW-Authenticate"] = "Bearer"

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error,
            "detail": exc.message,
            "correlation_id": correlation_id,
        },
        headers=headers,
    )


# CORS middleware for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.add_middleware(HitCounterMiddleware)

# Correlation ID middleware for request tracking and observability
app.add_middleware(CorrelationIdMiddleware)

# Include API routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(chirps_router)
app.include_router(router)
