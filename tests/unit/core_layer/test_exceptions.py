"""
Unit Tests for the Exception Hierarchy

Tests exception construction, serialization and inheritance.
"""

import pytest

from completion_relay.core.exceptions import (
    AuthenticationRequiredError,
    ChannelClosedError,
    CompletionRelayError,
    InvalidRequestBodyError,
    MissingProviderKeyError,
    OperationAbortedError,
    ProviderAPIError,
    ProviderError,
    StreamingError,
    ValidationError,
)


@pytest.mark.unit
class TestCompletionRelayError:
    """Test the base exception."""

    def test_to_dict(self):
        error = CompletionRelayError("Something failed", thread_id="t1", details={"k": "v"})

        assert error.to_dict() == {
            "error_type": "CompletionRelayError",
            "message": "Something failed",
            "thread_id": "t1",
            "details": {"k": "v"},
        }

    def test_details_are_copied(self):
        """Test external changes to the details dict do not leak in."""
        details = {"k": "v"}
        error = CompletionRelayError("x", details=details)
        details["k"] = "changed"

        assert error.details == {"k": "v"}

    def test_with_context_chains(self):
        error = ProviderAPIError("x").with_context(provider="google")
        assert error.details == {"provider": "google"}

    def test_repr_includes_thread(self):
        assert "thread_id='t1'" in repr(CompletionRelayError("x", thread_id="t1"))

    def test_from_exception(self):
        error = ProviderAPIError.from_exception(ValueError("bad"), thread_id="t1", provider="google")

        assert isinstance(error, ProviderAPIError)
        assert error.message == "bad"
        assert error.details["original_error"] == "ValueError"
        assert error.details["provider"] == "google"


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test themed exceptions inherit from the right bases."""

    @pytest.mark.parametrize(
        "exc_class, base",
        [
            (ChannelClosedError, StreamingError),
            (OperationAbortedError, StreamingError),
            (InvalidRequestBodyError, ValidationError),
            (MissingProviderKeyError, ProviderError),
            (AuthenticationRequiredError, CompletionRelayError),
        ],
    )
    def test_inheritance(self, exc_class, base):
        assert issubclass(exc_class, base)
        assert issubclass(exc_class, CompletionRelayError)

    def test_invalid_body_keeps_field_errors(self):
        error = InvalidRequestBodyError("Invalid request body", field_errors={"threadId": ["Field required"]})

        assert error.field_errors == {"threadId": ["Field required"]}
        assert error.message == "Invalid request body"

    def test_missing_key_message_names_env_var(self):
        error = MissingProviderKeyError("google")
        assert error.message == (
            "Missing Google Gemini API credentials. Set the GEMINI_API_KEY environment variable."
        )

    def test_missing_key_unknown_provider(self):
        assert "acme" in MissingProviderKeyError("acme").message
