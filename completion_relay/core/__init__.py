"""
Core Module

Foundational components: configuration, logging and exceptions.
"""

from .exceptions import (
    AuthenticationRequiredError,
    ChannelClosedError,
    CompletionRelayError,
    ConfigurationError,
    ProviderError,
    StreamingError,
    ValidationError,
)
from .logging import clear_request_id, get_logger, get_request_id, set_request_id, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    "CompletionRelayError",
    "ConfigurationError",
    "AuthenticationRequiredError",
    "ChannelClosedError",
    "ProviderError",
    "StreamingError",
    "ValidationError",
]
