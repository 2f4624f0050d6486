#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Configures the completion relay: lifespan, middleware, rate limiting,
exception handlers and routers.

Run locally:
    uvicorn completion_relay.application.app:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from completion_relay.application.api.middleware import setup_middleware
from completion_relay.application.api.routes.completion import router as completion_router
from completion_relay.application.api.routes.health import router as health_router
from completion_relay.application.api.routes.title import router as title_router
from completion_relay.core.config.settings import get_settings
from completion_relay.core.exceptions import (
    AuthenticationRequiredError,
    CompletionRelayError,
    ValidationError,
)
from completion_relay.core.logging.logger import get_logger, setup_logging
from completion_relay.executors import close_executor, get_executor, get_title_generator
from completion_relay.infrastructure.monitoring import get_metrics_collector
from completion_relay.infrastructure.rate_limiting import setup_rate_limiting

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).
    """
    settings = get_settings()

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "application_starting",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
        executor=settings.streaming.COMPLETION_EXECUTOR,
    )

    try:
        get_metrics_collector()

        # Store in app state for dependencies.py
        app.state.executor = get_executor()
        app.state.title_generator = get_title_generator()

        logger.info("application_started")

        yield

    finally:
        logger.info("application_stopping")
        await close_executor()
        logger.info("application_stopped")


# ============================================================================
# Exception Handlers
# ============================================================================


async def relay_exception_handler(request: Request, exc: CompletionRelayError) -> JSONResponse:
    """Map application exceptions raised outside a stream to JSON responses."""
    if isinstance(exc, ValidationError):
        status_code = 400
    elif isinstance(exc, AuthenticationRequiredError):
        status_code = 401
    else:
        status_code = 500

    logger.error(
        "application_exception",
        error=exc.message,
        error_type=type(exc).__name__,
        thread_id=exc.thread_id,
    )
    return JSONResponse(status_code=status_code, content={"error": exc.message, **exc.to_dict()})


# ============================================================================
# Application Factory
# ============================================================================


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="SSE relay streaming LLM completions to chat clients",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    setup_middleware(app)
    setup_rate_limiting(app)
    app.add_exception_handler(CompletionRelayError, relay_exception_handler)

    # All API endpoints live under API_BASE_PATH (default: /api)
    base_path = settings.app.API_BASE_PATH

    app.include_router(completion_router, prefix=base_path)
    app.include_router(title_router, prefix=base_path)
    app.include_router(health_router, prefix=base_path)

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint with API information.
        """
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "docs": "/docs",
            "health": f"{base_path}/health",
            "completion": f"{base_path}/completion",
        }

    return app


# Create application instance
app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "completion_relay.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.app.ENVIRONMENT == "development",
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
