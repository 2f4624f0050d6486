"""
Output Channel

In-process queue of encoded SSE chunks that feeds the HTTP response body.
The Stream Relay is the only writer; the response body iterator is the only
reader. Consumer-side cancellation (client gone, body iteration stopped) is
reported through cancel callbacks.
"""

import asyncio
from collections.abc import AsyncIterator, Callable

from completion_relay.core.exceptions import ChannelClosedError
from completion_relay.core.logging import get_logger

logger = get_logger(__name__)

_END_OF_STREAM = object()


class OutputChannel:
    """
    Unbounded chunk queue with explicit close and cancel states.

    - ``enqueue`` and ``close`` raise ``ChannelClosedError`` once the channel
      has been closed or cancelled.
    - ``cancel`` is idempotent and runs the registered callbacks once.
    """

    def __init__(self):
        # Unbounded: writes are synchronous and must never block the relay.
        # Growth is capped by one completion's output, batched into sentence-sized
        # frames, and a reader that goes away cancels the channel.
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._cancelled = False
        self._cancel_reason: str | None = None
        self._cancel_callbacks: list[Callable[[str], object]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def cancel_reason(self) -> str | None:
        return self._cancel_reason

    @property
    def finished(self) -> bool:
        return self._closed or self._cancelled

    def on_cancel(self, callback: Callable[[str], object]) -> None:
        """Register a callback invoked with the reason when the consumer cancels."""
        self._cancel_callbacks.append(callback)

    def enqueue(self, chunk: bytes) -> None:
        if self._cancelled:
            raise ChannelClosedError("Invalid state: channel cancelled by consumer")
        if self._closed:
            raise ChannelClosedError("Invalid state: channel is already closed")
        self._queue.put_nowait(chunk)

    def close(self) -> None:
        if self._cancelled:
            raise ChannelClosedError("Invalid state: channel cancelled by consumer")
        if self._closed:
            raise ChannelClosedError("Invalid state: channel is already closed")
        self._closed = True
        self._queue.put_nowait(_END_OF_STREAM)

    def cancel(self, reason: str = "consumer_cancelled") -> bool:
        """
        Cancel from the consumer side.

        Returns:
            True if this call cancelled the channel, False if it was already
            closed or cancelled.
        """
        if self.finished:
            return False

        self._cancelled = True
        self._cancel_reason = reason
        # Wake up any reader still waiting on the queue
        self._queue.put_nowait(_END_OF_STREAM)
        logger.debug("output_channel_cancelled", reason=reason)

        for callback in self._cancel_callbacks:
            callback(reason)
        return True

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self._queue.get()
            if chunk is _END_OF_STREAM:
                return
            yield chunk
