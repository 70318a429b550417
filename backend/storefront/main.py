"""
Storefront Backend: FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) builds the engine, repositories
       and services, registers middleware, exception handlers and routes, and
       returns a configured FastAPI instance.
Who:   Served with `uvicorn --factory storefront.main:create_app`; the test suite
       calls create_app() directly.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │  Request ID  │→│   Logging    │→│    CORS     │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │   /store     │ │   /product   │ │   /health   │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers (all render the envelope):      │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Dependency Wiring:
    Settings ─▶ engine ─▶ session factory ─▶ StoreRepository ─▶ StoreService ─┐
                                         └─▶ ProductRepository ───────────────┴▶ ProductService

    Everything is stored on `app.state.dependencies` and reached from routes
    through deps.py. No module holds a global engine or service.

Lifecycle:
    Startup:  configure logging, validate settings, optionally create tables
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront import __version__
from storefront.config import Settings
from storefront.database import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
    dispose_engine,
)
from storefront.deps import ApplicationDependencies
from storefront.exceptions import (
    DatabaseError,
    ErrorCode,
    StorefrontError,
    get_error_spec,
)
from storefront.middleware.logging import RequestLoggingMiddleware
from storefront.middleware.request_id import RequestIDMiddleware, request_id_var
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.store_repository import StoreRepository
from storefront.responses import ApiResponse, error_response
from storefront.routes import health, products, stores
from storefront.services.product_service import ProductService
from storefront.services.store_service import StoreService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Handler: stdout (captured by Docker / the process supervisor)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every statement / access line at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    deps: ApplicationDependencies = app.state.dependencies
    settings = deps.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("Storefront Backend starting up (environment=%s)...", settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report the problem
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if settings.db_create_tables:
        await create_tables(deps.engine)
        logger.info("Database tables created (DB_CREATE_TABLES=true)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Storefront Backend shutting down...")
    await dispose_engine(deps.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every error to the `{code, message}` envelope.

    Handler hierarchy:
        ValidationError         → 400 (StorefrontError handler, by code)
        NotFoundError           → 404 (StorefrontError handler, by code)
        DatabaseError           → 500 (generic message; details logged)
        RequestValidationError  → 400 (malformed JSON body / query string)
        HTTPException           → envelope with the exception's status
        Exception (fallback)    → 500
    """

    @app.exception_handler(StorefrontError)
    async def handle_storefront_error(request: Request, exc: StorefrontError):
        rid = request_id_var.get("")
        if isinstance(exc, DatabaseError):
            logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        elif exc.code is ErrorCode.INTERNAL:
            logger.error("[%s] Internal error: %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, exc.code.value, exc.message)
        return error_response(exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Unparseable body or query string, reported like any other bad request."""
        rid = request_id_var.get("")
        errors = exc.errors()
        message = ""
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ())[1:])
            message = f"invalid {location or 'request'}: {first.get('msg', 'invalid value')}"
        logger.warning("[%s] Request validation error: %s", rid, message)
        return error_response(ErrorCode.BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Unknown routes (404), wrong methods (405) and friends."""
        if exc.status_code == 404:
            code = ErrorCode.NOT_FOUND
        elif exc.status_code >= 500:
            code = ErrorCode.INTERNAL
        else:
            code = ErrorCode.BAD_REQUEST
        return ApiResponse(
            code=get_error_spec(code).code,
            message=str(exc.detail),
            http_status=exc.status_code,
        ).to_response()

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(ErrorCode.INTERNAL)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_dependencies(settings: Settings) -> ApplicationDependencies:
    """Construct the engine, repositories and services for `settings`."""
    engine = create_engine_from_settings(settings)
    session_factory = create_session_factory(engine)

    store_service = StoreService(StoreRepository(session_factory))
    product_service = ProductService(ProductRepository(session_factory), store_service)

    return ApplicationDependencies(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        store_service=store_service,
        product_service=product_service,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build against. Defaults to `Settings()`,
            i.e. environment variables and `.env`.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Storefront API",
        description="Stores and their products, with paginated product search.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.dependencies = build_dependencies(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(stores.router)
    app.include_router(products.router)
    app.include_router(health.router)

    return app

