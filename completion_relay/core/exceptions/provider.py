"""
LLM Provider Exceptions

All exceptions related to LLM provider operations (Google Gemini, OpenRouter).
"""

from completion_relay.core.exceptions.base import CompletionRelayError


class ProviderError(CompletionRelayError):
    """Base exception for LLM provider errors."""
    pass


class ProviderNotAvailableError(ProviderError):
    """
    Raised when an LLM provider cannot be reached.

    Common causes:
    - Provider API is down
    - Network connectivity issues
    - Upstream timeout
    """
    pass


class ProviderAuthenticationError(ProviderError):
    """
    Raised when LLM provider authentication fails.

    Common causes:
    - Invalid API key
    - Expired API key
    - Insufficient permissions
    """
    pass


class ProviderRateLimitError(ProviderError):
    """Raised when the upstream provider rejects a call with a rate limit."""
    pass


class ProviderAPIError(ProviderError):
    """Raised when the provider API returns an error response."""
    pass


class MissingProviderKeyError(ProviderError):
    """
    Raised when no API key is configured for the provider a model needs.
    """

    ENV_HINTS = {
        "google": (
            "Google Gemini",
            "Set the GEMINI_API_KEY environment variable.",
        ),
        "openrouter": (
            "OpenRouter",
            "Set the OPENROUTER_API_KEY environment variable.",
        ),
    }

    def __init__(self, provider: str, thread_id: str | None = None):
        provider_name, env_hint = self.ENV_HINTS.get(
            provider, (provider, "Configure an API key for this provider.")
        )
        super().__init__(
            f"Missing {provider_name} API credentials. {env_hint}",
            thread_id=thread_id,
            details={"provider": provider},
        )
        self.provider = provider
