"""Landscape explorer API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from explorer.api.explore import router as explore_router
from explorer.api.health import router as health_router
from explorer.api.middleware import error_response, setup_middleware
from explorer.domain.exceptions import CatalogError, DomainError, LoadingError
from explorer.domain.value_objects import Tier
from explorer.engine.loader import StagedLoader
from explorer.infrastructure.catalog_client import CatalogClient
from explorer.infrastructure.config import settings
from explorer.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()


def build_loader(client: CatalogClient) -> StagedLoader:
    """Create a staged loader reading through a catalog client."""
    return StagedLoader(
        client.fetch,
        search_max_results=settings.search_max_results,
        maturity_order=settings.maturity_order,
        default_foundation=settings.default_foundation,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Loads the base catalog tier on startup. A failed load does not stop
    the service: `/ready` reports it and queries answer 503.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting landscape explorer",
        version=settings.api_version,
        debug=settings.debug,
        base_source=settings.base_data_source,
        full_source=settings.full_data_source,
    )

    client: CatalogClient | None = None
    if getattr(app.state, "loader", None) is None:
        client = CatalogClient()
        app.state.loader = build_loader(client)

    loader: StagedLoader = app.state.loader
    try:
        await loader.load(Tier.BASE)
    except LoadingError as e:
        logger.warning("Base catalog unavailable at startup", error=e.message)

    yield

    logger.info("Shutting down landscape explorer")
    if client is not None:
        await client.close()


def create_app(loader: StagedLoader | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        loader: Staged loader to serve from; built from settings on startup
            when omitted.

    Returns:
        Configured application.
    """
    app = FastAPI(
        title="Landscape Explorer API",
        description="Read-only explore engine over a landscape catalog",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.loader = loader

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    setup_middleware(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(explore_router)

    register_exception_handlers(app)
    return app


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Map exceptions to the standard error envelope."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent format."""
        detail = exc.detail
        if isinstance(detail, dict):
            error_code = detail.get("error_code", "ERROR")
            message = detail.get("message", str(detail))
            details = detail.get("details", [])
        else:
            error_code = "ERROR"
            message = str(detail)
            details = []
        return error_response(request, exc.status_code, error_code, message, details)

    @app.exception_handler(LoadingError)
    async def loading_error_handler(request: Request, exc: LoadingError) -> JSONResponse:
        """Catalog not loaded (yet or ever): service unavailable."""
        logger.warning("Catalog unavailable", path=request.url.path, error=exc.message)
        return error_response(
            request,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "CATALOG_NOT_LOADED",
            exc.message,
            exc.details,
        )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        """Invalid catalog payload."""
        logger.error("Invalid catalog", path=request.url.path, error=exc.message)
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "CATALOG_INVALID",
            exc.message,
            exc.details,
        )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        """Any other domain error."""
        logger.error("Domain error", path=request.url.path, error=exc.message)
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "DOMAIN_ERROR",
            exc.message,
            exc.details,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions with consistent format."""
        logger.exception(
            "Unhandled exception in handler",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "An internal error occurred",
        )


configure_logging(settings.log_level)

app = create_app()
