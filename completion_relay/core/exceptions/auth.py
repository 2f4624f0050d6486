"""
Authentication Exceptions
"""

from completion_relay.core.exceptions.base import CompletionRelayError


class AuthenticationRequiredError(CompletionRelayError):
    """
    Raised when the selected chat mode requires a signed-in user and the
    request carries no user identity.
    """
    pass
