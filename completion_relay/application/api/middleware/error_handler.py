"""
Error Handling Middleware
=========================

Last line of defense for exceptions that escape route handlers and FastAPI
exception handlers. Anything caught here becomes a 500 JSON response.

Exceptions raised while a streaming body is being sent never reach this
middleware: by then the 200 headers are flushed and the session reports
failures in-band through its terminal ``done`` frame.
"""

import traceback
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from completion_relay.core.logging.logger import get_logger

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized error handling and formatting.

    Logs the full exception server-side and returns a generic body. Stack
    traces are only included when ``include_traceback`` is set (development).
    """

    def __init__(self, app, include_traceback: bool = False):
        super().__init__(app)
        self.include_traceback = include_traceback

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            method = request.method
            path = request.url.path
            error_type = type(e).__name__
            error_message = str(e)

            logger.error(
                "unhandled_exception",
                method=method,
                path=path,
                error_type=error_type,
                error_message=error_message,
                exc_info=True,
            )

            error_response = {
                "error": "Internal server error",
                "error_type": error_type,
            }

            if self.include_traceback:
                error_response["traceback"] = traceback.format_exc()
                error_response["details"] = error_message

            return JSONResponse(status_code=500, content=error_response)


def add_error_handling_middleware(app, include_traceback: bool = False):
    """
    Add error handling middleware to the FastAPI application.

    Register it before other middleware so it wraps them.
    """
    app.add_middleware(ErrorHandlingMiddleware, include_traceback=include_traceback)
    logger.info("error_handling_middleware_registered", include_traceback=include_traceback)
