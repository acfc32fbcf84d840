"""
FastAPI Application Entry Point
"""
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.constants import CORS_HEADERS, INVALID_BODY_MESSAGE, MISSING_FIELDS_MESSAGE
from app.core.dependencies import init_inference_client
from app.routes import health, verification

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Silence noisy third-party loggers
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('urllib3').setLevel(logging.WARNING)
logging.getLogger('openai').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

MISSING_ERROR_TYPES = {"missing", "string_too_short", "too_short"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager for startup/shutdown events
    """
    # Startup
    init_inference_client(app, settings)

    yield

    # Shutdown
    app.state.inference_client = None
    logger.info("✓ Inference client released")


def validation_message(errors) -> str:
    """
    Collapse pydantic validation errors into one public message

    Missing fields win over validator messages, which win over the
    generic invalid-body message.
    """
    if any(err.get("type") in MISSING_ERROR_TYPES for err in errors):
        return MISSING_FIELDS_MESSAGE
    for err in errors:
        if err.get("type") == "value_error":
            cause = err.get("ctx", {}).get("error")
            if cause:
                return str(cause)
    return INVALID_BODY_MESSAGE


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = validation_message(exc.errors())
    logger.warning(f"[{request.url.path}] Rejected request: {message}")
    return JSONResponse(status_code=400, content={"error": message})


def create_app() -> FastAPI:
    """Build the gateway application"""
    app = FastAPI(
        title="MorningProof Verification Gateway",
        version="0.1.0",
        lifespan=lifespan
    )

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register routes
    app.include_router(health.router)
    app.include_router(verification.router)
    return app


app = create_app()
