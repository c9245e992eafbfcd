"""FastAPI application initialization."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from devcamper.api.auth import router as auth_router
from devcamper.api.health import router as health_router
from devcamper.api.middleware import CorrelationIdMiddleware, RequestLoggingMiddleware
from devcamper.config import get_settings
from devcamper.exceptions import AppError
from devcamper.models.auth import ErrorResponse
from devcamper.services.logging_service import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    try:
        from devcamper.database import init_database, run_migrations

        await init_database()
        await run_migrations()
        logger.info("database_initialized")
    except Exception as e:
        logger.warning(
            "database_initialization_failed",
            error=str(e),
            note="Continuing without database - auth endpoints will return 500",
        )

    logger.info(
        "application_started",
        environment=settings.environment,
        log_level=settings.log_level,
    )

    yield

    try:
        from devcamper.database import close_database

        await close_database()
    except Exception as e:
        logger.warning("database_close_failed", error=str(e))

    logger.info("application_shutdown")


app = FastAPI(
    title="DevCamper API - Auth",
    description="Registration, login and password lifecycle for the bootcamp directory",
    version="1.0.0",
    lifespan=lifespan,
)

# Last added runs first: correlation id must be bound before request logging.
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(auth_router)
app.include_router(health_router)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map service-layer errors to the uniform failure envelope."""
    logger = structlog.get_logger()
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        detail=exc.message,
    )
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors as 400 with the first failing field."""
    logger = structlog.get_logger()

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]) if loc != "body")
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}" if field else message
    else:
        detail = "Request validation failed"

    logger.info("validation_error", detail=detail)
    return _error_response(status.HTTP_400_BAD_REQUEST, detail)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all boundary: anything unexpected becomes a generic 500."""
    logger = structlog.get_logger()
    logger.error("unhandled_exception", error_type=type(exc).__name__, error=str(exc))
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")
