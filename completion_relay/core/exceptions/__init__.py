"""
Exception Module

Structured exception hierarchy for the completion relay.

Module Structure:
-----------------
- **base.py**: CompletionRelayError base class + ConfigurationError
- **streaming.py**: SSE channel and cancellation exceptions
- **validation.py**: Request validation exceptions
- **auth.py**: Authentication exceptions
- **provider.py**: LLM provider exceptions

Usage:
------
```python
from completion_relay.core.exceptions import ChannelClosedError, ProviderAPIError
```
"""

from completion_relay.core.exceptions.auth import AuthenticationRequiredError
from completion_relay.core.exceptions.base import CompletionRelayError, ConfigurationError
from completion_relay.core.exceptions.provider import (
    MissingProviderKeyError,
    ProviderAPIError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderNotAvailableError,
    ProviderRateLimitError,
)
from completion_relay.core.exceptions.streaming import (
    ChannelClosedError,
    OperationAbortedError,
    StreamingError,
)
from completion_relay.core.exceptions.validation import InvalidRequestBodyError, ValidationError

__all__ = [
    # Base
    "CompletionRelayError",
    "ConfigurationError",
    # Auth
    "AuthenticationRequiredError",
    # Provider
    "ProviderError",
    "ProviderNotAvailableError",
    "ProviderAuthenticationError",
    "ProviderRateLimitError",
    "ProviderAPIError",
    "MissingProviderKeyError",
    # Streaming
    "StreamingError",
    "ChannelClosedError",
    "OperationAbortedError",
    # Validation
    "ValidationError",
    "InvalidRequestBodyError",
]
