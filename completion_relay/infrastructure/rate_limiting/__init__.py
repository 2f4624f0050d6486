from completion_relay.infrastructure.rate_limiting.rate_limiter import (
    RateLimitManager,
    completion_limit,
    get_rate_limit_manager,
    get_user_identifier,
    setup_rate_limiting,
)

__all__ = [
    "RateLimitManager",
    "completion_limit",
    "get_rate_limit_manager",
    "get_user_identifier",
    "setup_rate_limiting",
]
