"""
Cancellation Bridge

Funnels the two ways a completion can be abandoned into one token that the
executor observes:

(a) the client closed the HTTP connection (inbound request disconnect);
(b) the response consumer stopped reading (output channel cancel callback).

Cancellation is cooperative. The bridge only signals; executors check the
token, or await upstream calls through ``CancellationToken.until_aborted``
so a pending call is torn down as soon as the token is set.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from completion_relay.core.exceptions import OperationAbortedError
from completion_relay.core.logging import get_logger

logger = get_logger(__name__)

DisconnectProbe = Callable[[], Awaitable[bool]]

T = TypeVar("T")

# Extra time allowed for the watcher to return after stop()
STOP_GRACE_SECONDS = 0.5


class CancellationToken:
    """Shared aborted flag with subscription support."""

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._callbacks: list[Callable[[str], object]] = []

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "aborted") -> bool:
        """
        Request cancellation.

        Returns:
            True if this call set the token, False if it was already set.
        """
        if self._event.is_set():
            return False

        self._reason = reason
        self._event.set()
        logger.info("cancellation_requested", reason=reason)
        for callback in self._callbacks:
            callback(reason)
        return True

    def add_callback(self, callback: Callable[[str], object]) -> None:
        """Subscribe to cancellation. Fires immediately if already aborted."""
        if self.aborted:
            callback(self._reason)
            return
        self._callbacks.append(callback)

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_aborted(self) -> None:
        if self.aborted:
            raise OperationAbortedError(f"Operation aborted: {self._reason}")

    async def until_aborted(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the token is set first.

        If the token wins, the pending call is cancelled and awaited, then
        OperationAbortedError is raised. A call that already finished keeps
        its result (or exception).
        """
        call = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({call, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not call.done():
                call.cancel()
                await asyncio.gather(call, return_exceptions=True)

        if call.cancelled():
            raise OperationAbortedError(f"Operation aborted: {self._reason}")
        return call.result()


class CancellationBridge:
    """
    Links request disconnects and consumer cancellation to a token.

    Usage:
        bridge = CancellationBridge(token, request.is_disconnected)
        channel.on_cancel(bridge.on_consumer_cancel)
        async with bridge:
            ...

    The watcher is stopped through its own event, not by task cancellation
    alone. Starlette's ``is_disconnected()`` runs ``receive()`` inside a
    pre-cancelled anyio scope, and that scope can absorb a ``Task.cancel()``
    landing while that check is in flight.
    """

    def __init__(
        self,
        token: CancellationToken,
        is_disconnected: DisconnectProbe | None = None,
        poll_interval: float = 1.0,
    ):
        self.token = token
        self._is_disconnected = is_disconnected
        self._poll_interval = poll_interval
        self._stopped = asyncio.Event()
        self._watcher: asyncio.Task | None = None

    @property
    def watching(self) -> bool:
        return self._watcher is not None and not self._watcher.done()

    def on_client_disconnect(self) -> bool:
        return self.token.cancel("client_disconnected")

    def on_consumer_cancel(self, reason: str = "consumer_cancelled") -> bool:
        return self.token.cancel(reason)

    def stop(self) -> None:
        """Signal the watcher to exit at its next check."""
        self._stopped.set()

    def _should_watch(self) -> bool:
        return not (self.token.aborted or self._stopped.is_set())

    async def _sleep(self) -> None:
        """Wait one poll interval, waking early on abort or stop."""
        waiters = [
            asyncio.ensure_future(self.token.wait()),
            asyncio.ensure_future(self._stopped.wait()),
        ]
        try:
            await asyncio.wait(waiters, timeout=self._poll_interval, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()

    async def _watch(self) -> None:
        while self._should_watch():
            disconnected = await self._is_disconnected()
            if not self._should_watch():
                return
            if disconnected:
                self.on_client_disconnect()
                return
            await self._sleep()

    async def __aenter__(self) -> "CancellationBridge":
        if self._is_disconnected is not None and self._watcher is None:
            self._stopped.clear()
            self._watcher = asyncio.create_task(self._watch(), name="sse-disconnect-watcher")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._watcher is None:
            return
        watcher, self._watcher = self._watcher, None
        self.stop()

        # One disconnect check plus one wake-up is the longest the watcher needs to notice
        done, _ = await asyncio.wait({watcher}, timeout=self._poll_interval + STOP_GRACE_SECONDS)
        if not done:
            logger.warning("disconnect_watcher_unresponsive", poll_interval=self._poll_interval)
            watcher.cancel()
            watcher.add_done_callback(_log_watcher_outcome)
            return
        _log_watcher_outcome(watcher)


def _log_watcher_outcome(watcher: asyncio.Task) -> None:
    if watcher.cancelled():
        return
    error = watcher.exception()
    if error is not None:
        logger.warning("disconnect_watcher_failed", error=str(error), error_type=type(error).__name__)
