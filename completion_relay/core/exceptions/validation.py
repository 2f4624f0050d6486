"""
Validation Exceptions

All exceptions related to request validation.
"""

from typing import Any

from completion_relay.core.exceptions.base import CompletionRelayError


class ValidationError(CompletionRelayError):
    """
    Raised when request validation fails.

    This is the base class for all validation-related errors.
    """
    pass


class InvalidRequestBodyError(ValidationError):
    """
    Raised when a request body fails schema validation.

    ``field_errors`` maps a dotted field path to its error messages and is
    returned to the client as the ``details`` of a 400 response.
    """

    def __init__(
        self,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
        thread_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, thread_id=thread_id, details=details)
        self.field_errors = dict(field_errors or {})
