"""
Streaming Exceptions

All exceptions related to SSE session streaming.
"""

from completion_relay.core.exceptions.base import CompletionRelayError


class StreamingError(CompletionRelayError):
    """Base exception for streaming errors."""
    pass


class ChannelClosedError(StreamingError):
    """
    Raised by the output channel when it can no longer be written to or closed.

    Common causes:
    - close() was already called
    - The consumer (browser/proxy) stopped reading and the channel was cancelled

    The stream relay recognizes this kind and suppresses it; every other
    transport failure propagates.
    """
    pass


class OperationAbortedError(StreamingError):
    """
    Raised by executors that unwind because the session's cancellation
    token was set.
    """
    pass
