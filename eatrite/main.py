"""FastAPI application entry point."""

import logging

import pydantic
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from eatrite import __version__
from eatrite.api.routes import health, recipes
from eatrite.config import settings
from eatrite.core.request_id import get_request_id
from eatrite.middleware.logging import RequestLoggingMiddleware
from eatrite.middleware.performance import PerformanceMiddleware
from eatrite.middleware.rate_limit import get_rate_limit_exceeded_handler, limiter
from eatrite.middleware.security import SecurityHeadersMiddleware, setup_compression, setup_cors
from eatrite.utils.exceptions import (
    EatRiteException,
    ImageProcessingError,
    RecipeGenerationError,
    ValidationError,
)
from eatrite.utils.logging_config import setup_logging

# Setup logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="EatRite API",
    description="AI-assisted recipe generation from ingredients or ingredient photos",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, get_rate_limit_exceeded_handler())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors with detailed messages."""
    request_id = get_request_id()

    logger.warning(
        f"Validation error: {str(exc)}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation error",
            "detail": jsonable_errors(exc.errors()),
            "request_id": request_id,
            "message": "Request validation failed. Check the 'detail' field for specific errors.",
        },
    )


@app.exception_handler(pydantic.ValidationError)
async def model_validation_exception_handler(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Handle models built inside routes from already-parsed form fields."""
    request_id = get_request_id()
    logger.warning(f"Model validation error: {str(exc)}", extra={"request_id": request_id})
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation error",
            "detail": jsonable_errors(exc.errors()),
            "request_id": request_id,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Flatten route HTTPException details into the common error body."""
    request_id = get_request_id()

    if isinstance(exc.detail, dict):
        content = {**exc.detail}
    else:
        content = {"error": exc.detail, "detail": exc.detail}
    content["request_id"] = request_id

    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code}: {content.get('detail')}", extra={"request_id": request_id})

    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(EatRiteException)
async def eatrite_exception_handler(request: Request, exc: EatRiteException) -> JSONResponse:
    """Handle EatRite exceptions that escaped a route."""
    request_id = get_request_id()

    if isinstance(exc, (ValidationError, ImageProcessingError)):
        status_code = status.HTTP_400_BAD_REQUEST
        error_message = "Validation error"
    elif isinstance(exc, RecipeGenerationError):
        status_code = status.HTTP_502_BAD_GATEWAY
        error_message = "Recipe generation failed"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_message = "Internal server error"

    logger.error(
        f"Exception: {error_message}",
        extra={"request_id": request_id, "exception": str(exc)},
        exc_info=True,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": error_message,
            "detail": str(exc),
            "request_id": request_id,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = get_request_id()

    logger.error(
        f"Unexpected exception: {str(exc)}",
        extra={"request_id": request_id},
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred",
            "request_id": request_id,
        },
    )


def jsonable_errors(errors: list) -> list:
    """Drop the non-serializable ``ctx``/``input`` parts of pydantic errors."""
    return [{k: v for k, v in err.items() if k in ("type", "loc", "msg")} for err in errors]


# Add middleware (last added runs first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(PerformanceMiddleware)
app.add_middleware(RequestLoggingMiddleware)
setup_compression(app)
setup_cors(app)

app.include_router(health.router)
app.include_router(recipes.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event."""
    logger.info("EatRite API starting up...")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"AI backend: {'mock' if settings.mock_ai_enabled else 'openai'}")
    logger.info(f"Rate limit: {settings.rate_limit_per_hour} requests/hour")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event."""
    logger.info("EatRite API shutting down...")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "EatRite API",
        "version": __version__,
        "docs": "/docs",
    }


def run() -> None:
    """Run the API with uvicorn."""
    uvicorn.run("eatrite.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
