"""
Rate Limiter

Per-identity rate limiting for the completion endpoint using slowapi.

Features:
- Identity priority: X-User-ID header > bearer token hash > remote IP
- Moving-window strategy
- In-memory storage by default; point RATE_LIMIT_STORAGE_URI at redis://
  when running several instances
- 429 JSON responses with Retry-After
"""

import hashlib
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from completion_relay.core.config.constants import HEADER_USER_ID
from completion_relay.core.config.settings import get_settings
from completion_relay.core.logging import get_logger
from completion_relay.infrastructure.monitoring import get_metrics_collector

logger = get_logger(__name__)

RETRY_AFTER_SECONDS = 60


def get_user_identifier(request: Request) -> str:
    """
    Extract the rate limit key from a request.

    Priority: X-User-ID header > Authorization token hash > Remote IP
    """
    user_id = request.headers.get(HEADER_USER_ID)
    if user_id:
        return f"user:{user_id}"

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        # Hash the token for privacy
        token_hash = hashlib.sha256(auth_header.encode()).hexdigest()[:16]
        return f"token:{token_hash}"

    return f"ip:{get_remote_address(request)}"


def completion_limit() -> str:
    """Current completion limit, read at request time so tests can override it."""
    return get_settings().rate_limit.RATE_LIMIT_COMPLETION


class RateLimitManager:
    """
    Owns the slowapi limiter and wires it into the FastAPI app.

    Usage:
        manager = get_rate_limit_manager()

        @router.post("/completion")
        @manager.limit(completion_limit)
        async def completion(request: Request): ...
    """

    def __init__(self):
        self.settings = get_settings()
        rate_limit = self.settings.rate_limit

        self._limiter = Limiter(
            key_func=get_user_identifier,
            storage_uri=rate_limit.RATE_LIMIT_STORAGE_URI,
            strategy="moving-window",
            enabled=rate_limit.RATE_LIMIT_ENABLED,
            headers_enabled=False,
        )

        logger.info(
            "rate_limit_manager_initialized",
            enabled=rate_limit.RATE_LIMIT_ENABLED,
            storage=rate_limit.RATE_LIMIT_STORAGE_URI.split("://", 1)[0],
        )

    @property
    def limiter(self) -> Limiter:
        return self._limiter

    def setup_app(self, app) -> None:
        """Configure rate limiting for FastAPI application."""
        app.state.limiter = self._limiter
        app.add_exception_handler(RateLimitExceeded, self._rate_limit_handler)

    async def _rate_limit_handler(self, request: Request, exc: RateLimitExceeded) -> Response:
        """Handle rate limit exceeded - return 429 with Retry-After."""
        identifier = get_user_identifier(request)
        logger.warning("rate_limit_exceeded", user=identifier, limit=str(exc.detail))
        get_metrics_collector().record_rate_limit_exceeded(identifier.split(":", 1)[0])

        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": "Too many requests. Please try again later.",
                "retry_after": RETRY_AFTER_SECONDS,
            },
            headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
        )

    def limit(self, limit_value: str | Callable[[], str]) -> Callable:
        """Create rate limit decorator (e.g., "60/minute")."""
        return self._limiter.limit(limit_value)

    def reset(self) -> None:
        """Clear all counters (used by tests)."""
        self._limiter.reset()


# Global rate limit manager
_rate_manager: RateLimitManager | None = None


def get_rate_limit_manager() -> RateLimitManager:
    """Get global rate limit manager instance."""
    global _rate_manager
    if _rate_manager is None:
        _rate_manager = RateLimitManager()
    return _rate_manager


def setup_rate_limiting(app) -> RateLimitManager:
    """Setup rate limiting for FastAPI application."""
    manager = get_rate_limit_manager()
    manager.setup_app(app)
    return manager
