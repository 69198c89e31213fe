"""Wellness Visits - patient records and wellness assessment API."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from wellness.config import settings
from wellness.database import Database
from wellness.core.logging import logger
from wellness.routers import health_router
from wellness.features.auth.router import router as auth_router
from wellness.features.patients.router import router as patients_router
from wellness.features.practice.router import router as practice_router
from wellness.features.templates.router import router as templates_router
from wellness.features.users.router import router as users_router
from wellness.features.visits.router import router as visits_router
from wellness.shared.schemas import ErrorDetail, ErrorResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} service...")

    database = Database(settings.MONGODB_URL, settings.DATABASE_NAME)
    app.state.database = database
    await database.connect()

    logger.info(f"Service started on port {settings.PORT}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME} service...")
    await database.close()


def error_response(code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    """Failed response envelope."""
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=code, content=body.model_dump(), headers=headers)


def first_error_message(errors) -> str:
    """Human readable form of the first violated validation rule."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, first_error_message(exc.errors()))


async def model_validation_exception_handler(request: Request, exc: ValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, first_error_message(exc.errors()))


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    logger.info(f"Duplicate key on {request.method} {request.url.path}: {exc.details}")
    return error_response(status.HTTP_409_CONFLICT, "A record with the same unique value already exists")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Patient records and template-driven wellness visit assessments",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, model_validation_exception_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routers
    app.include_router(health_router, prefix=settings.API_V1_PREFIX)
    app.include_router(auth_router, prefix=settings.API_V1_PREFIX)
    app.include_router(patients_router, prefix=settings.API_V1_PREFIX)
    app.include_router(templates_router, prefix=settings.API_V1_PREFIX)
    app.include_router(visits_router, prefix=settings.API_V1_PREFIX)
    app.include_router(users_router, prefix=settings.API_V1_PREFIX)
    app.include_router(practice_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "docs": "/docs",
            "health": f"{settings.API_V1_PREFIX}/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "wellness.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
