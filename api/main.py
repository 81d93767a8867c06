"""
FastAPI application factory for the Bookstore API.
"""

import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from accounts.store import UserStore
from accounts.tokens import TokenService
from api import auth, books
from api.config import APIConfig
from api.deps import get_api_config, get_db_manager
from api.models import ErrorDetails, HealthResponse
from catalog.repository import BookRepository
from catalog.seed import seed_books_from_csv
from utilities.config import BookstoreConfig
from utilities.database import DatabaseManager
from utilities.logger import bind_request_context, clear_request_context

logger = structlog.get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    """Render the uniform ``{statusCode, message}`` error body."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetails(status_code=status_code, message=message).model_dump(by_alias=True),
        headers=headers,
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns any exception escaping a handler into a 500 error body."""

    def __init__(self, app, development: bool = False):
        super().__init__(app)
        self.development = development

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            message = str(e) if self.development else UNEXPECTED_ERROR_MESSAGE
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one event per request with a request id bound to the log context."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        clear_request_context()
        bind_request_context(request_id=request_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.info(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


async def seed_database(db_manager: DatabaseManager, config: BookstoreConfig) -> None:
    """
    Ensure the admin account exists and load the optional books CSV.

    Args:
        db_manager: Database manager with an initialized schema
        config: Service configuration
    """
    async with db_manager.session() as session:
        created = await UserStore(session).ensure_admin(
            config.admin_username,
            config.admin_password,
            config.admin_email,
        )
        if created:
            logger.info("Admin user created", username=config.admin_username)

    seed_path = config.get_seed_books_path()
    if seed_path is None:
        return

    if not seed_path.exists():
        logger.warning("Books CSV not found, skipping import", path=str(seed_path))
        return

    async with db_manager.session() as session:
        await seed_books_from_csv(BookRepository(session), seed_path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: BookstoreConfig = app.state.config

    # Startup
    logger.info("Starting Bookstore API", environment=config.environment)

    db_manager = DatabaseManager(config.database_url, echo=config.database_echo)
    try:
        if config.database_auto_create:
            await db_manager.init_database()
        await seed_database(db_manager, config)
    except Exception as e:
        logger.error("Failed to prepare database", error=str(e))
        await db_manager.close()
        raise

    app.state.db_manager = db_manager
    app.state.token_service = TokenService.from_config(config)

    yield

    # Shutdown
    logger.info("Shutting down Bookstore API")
    await db_manager.close()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions, including router 404 and 405."""
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors as 400."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    logger.info("Request validation failed", path=request.url.path, errors=problems)
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(problems) or "Invalid request")


async def health_check(
    db_manager: DatabaseManager = Depends(get_db_manager),
    api_config: APIConfig = Depends(get_api_config),
) -> HealthResponse:
    """Health check endpoint."""
    database_ok = await db_manager.verify_connection()
    db_status = "healthy" if database_ok else "unhealthy"

    return HealthResponse(
        status=db_status,
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        database_status=db_status,
    )


def create_app(config: Optional[BookstoreConfig] = None, api_config: Optional[APIConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Service configuration, read from the environment when omitted
        api_config: HTTP server configuration, read from the environment when omitted

    Returns:
        Configured application; the database is opened by its lifespan
    """
    config = config or BookstoreConfig()
    api_config = api_config or APIConfig()
    development = config.is_development()

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        docs_url="/docs" if development else None,
        redoc_url="/redoc" if development else None,
        openapi_url="/openapi.json" if development else None,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.api_config = api_config

    # Added innermost first
    app.add_middleware(ErrorHandlingMiddleware, development=development)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=api_config.cors_allow_credentials,
        allow_methods=api_config.cors_allow_methods,
        allow_headers=api_config.cors_allow_headers,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_api_route(
        "/health",
        health_check,
        methods=["GET"],
        response_model=HealthResponse,
        tags=["Health"],
    )
    app.include_router(auth.router)
    app.include_router(books.router)

    return app
