"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions
inherit from. Specialized exceptions live in their themed modules.
"""

from typing import Any


class CompletionRelayError(Exception):
    """
    Base exception for all completion relay errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Thread ID correlation (the chat thread the request belongs to)
    - Structured error logging

    Attributes:
        message: Error message
        thread_id: Chat thread ID for correlation (if available)
        details: Additional error details (dict)

    Example:
        raise ProviderAPIError(
            "Upstream returned 500",
            thread_id="thread-123",
            details={"provider": "openrouter", "status_code": 500}
        )
    """

    def __init__(
        self, message: str, thread_id: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.thread_id = thread_id
        self.details = (details or {}).copy()  # Create a copy to prevent external modification
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging/API responses.

        Returns:
            Dict with error_type, message, thread_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "thread_id": self.thread_id,
            "details": self.details,
        }

    def with_context(self, **context) -> "CompletionRelayError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        thread_id_str = f", thread_id='{self.thread_id}'" if self.thread_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{thread_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        thread_id: str | None = None,
        **details
    ) -> "CompletionRelayError":
        """
        Create an error from another exception.

        Useful for wrapping third-party exceptions with additional context.

        Example:
            >>> try:
            ...     await client.chat.completions.create(...)
            ... except openai.APIError as e:
            ...     raise ProviderAPIError.from_exception(e, thread_id="abc-123", provider="google")
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, thread_id=thread_id, details=error_details)


# Configuration exception (kept here as it's fundamental)
class ConfigurationError(CompletionRelayError):
    """Raised when configuration is invalid or missing."""
    pass
