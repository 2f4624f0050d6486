"""
Middleware Package

Request flow:  Client → ErrorHandling → RequestId → CORS → Handler
Response flow: Handler → CORS → RequestId → ErrorHandling → Client

Starlette runs the last-added middleware first, so ``setup_middleware``
registers them in reverse.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from completion_relay.core.config.constants import HEADER_REQUEST_ID
from completion_relay.core.config.settings import get_settings
from completion_relay.core.logging.logger import get_logger

from .error_handler import ErrorHandlingMiddleware, add_error_handling_middleware
from .request_id import RequestIdMiddleware

logger = get_logger(__name__)


def setup_middleware(app: FastAPI):
    """Register all middleware components in the correct order."""
    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[HEADER_REQUEST_ID],
    )
    app.add_middleware(RequestIdMiddleware)
    add_error_handling_middleware(
        app, include_traceback=(settings.app.ENVIRONMENT == "development")
    )

    logger.info("middleware_registered")


__all__ = [
    "setup_middleware",
    "add_error_handling_middleware",
    "ErrorHandlingMiddleware",
    "RequestIdMiddleware",
]
