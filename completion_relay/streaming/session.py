"""
Completion Session

One session per completion request. It wires the pieces together:

    OutputChannel ◀── StreamRelay ◀── executor frames
                          ▲   ▲
       HeartbeatEmitter ──┘   └── terminal dispatch + close (cleanup)

    request disconnect ──┐
    channel cancel ──────┴──▶ CancellationBridge ──▶ CancellationToken ──▶ executor

Terminal dispatch, once the executor settles:
1. token aborted      → ``done`` / aborted
2. executor raised    → ``done`` / error, message from the exception
3. otherwise          → ``done`` / completed

The abort check comes first: a cancelled upstream call usually surfaces as
an exception too, and reporting it as ``error`` would blame the server for a
client that went away.

The terminal frame is written and the relay closed before the disconnect
watcher is joined. Cleanup (heartbeat cancel, watcher release, relay close)
also sits in ``finally`` blocks and runs on every exit path.
"""

import asyncio
import time
from collections.abc import AsyncIterator

import structlog

from completion_relay.application.api.models import CompletionRequest, GeoLocation
from completion_relay.core.config.constants import TerminalStatus
from completion_relay.core.config.settings import Settings, get_settings
from completion_relay.core.logging import get_logger
from completion_relay.executors.base import CompletionExecutor, ExecutionContext
from completion_relay.infrastructure.monitoring import MetricsCollector, get_metrics_collector
from completion_relay.streaming.cancellation import (
    CancellationBridge,
    CancellationToken,
    DisconnectProbe,
)
from completion_relay.streaming.channel import OutputChannel
from completion_relay.streaming.frames import FrameEncoder, SessionIdentifiers
from completion_relay.streaming.heartbeat import HeartbeatEmitter
from completion_relay.streaming.relay import StreamRelay

logger = get_logger(__name__)

# Strong references to running session tasks until they finish
_running_sessions: set[asyncio.Task] = set()


def describe_failure(exc: BaseException) -> str:
    """
    Human-readable message for an executor failure.

    Uses the exception's ``message`` attribute or ``str(exc)``, falling back
    to ``repr(exc)`` when both are empty.
    """
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    text = str(exc)
    if text.strip():
        return text
    return repr(exc)


def _on_session_done(task: asyncio.Task) -> None:
    _running_sessions.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("session_task_failed", error=str(exc), error_type=type(exc).__name__)


class CompletionSession:
    """
    Request-scoped streaming session.

    Usage (in a route):
        session = CompletionSession(data, executor, user_id=user_id, geo=geo,
                                    is_disconnected=request.is_disconnected)
        return StreamingResponse(session.iter_frames(), headers=SSE_HEADERS)
    """

    def __init__(
        self,
        data: CompletionRequest,
        executor: CompletionExecutor,
        *,
        user_id: str | None = None,
        geo: GeoLocation | None = None,
        is_disconnected: DisconnectProbe | None = None,
        settings: Settings | None = None,
        metrics: MetricsCollector | None = None,
    ):
        self.data = data
        self.executor = executor
        self.user_id = user_id
        self.geo = geo
        self.settings = settings or get_settings()
        self.metrics = metrics or get_metrics_collector()

        self.identifiers = SessionIdentifiers(
            thread_id=data.thread_id,
            thread_item_id=data.thread_item_id,
            parent_thread_item_id=data.parent_thread_item_id,
        )
        self.encoder = FrameEncoder()
        self.channel = OutputChannel()
        self.relay = StreamRelay(self.channel, self.encoder, self.identifiers, self.metrics)
        self.token = CancellationToken()
        self.bridge = CancellationBridge(
            self.token,
            is_disconnected,
            poll_interval=self.settings.streaming.SSE_DISCONNECT_POLL_INTERVAL,
        )
        self.channel.on_cancel(self.bridge.on_consumer_cancel)

        self.status: TerminalStatus | None = None
        self.failure: Exception | None = None

    def _context(self) -> ExecutionContext:
        return ExecutionContext(
            relay=self.relay,
            encoder=self.encoder,
            data=self.data,
            cancellation_token=self.token,
            geo=self.geo,
            user_id=self.user_id,
        )

    def _dispatch_terminal(self) -> TerminalStatus:
        if self.token.aborted:
            status = TerminalStatus.ABORTED
            self.relay.send_terminal(status)
        elif self.failure is not None:
            status = TerminalStatus.ERROR
            message = describe_failure(self.failure)
            logger.warning(
                "completion_failed",
                error=message,
                error_type=type(self.failure).__name__,
            )
            self.relay.send_terminal(status, error=message)
        else:
            status = TerminalStatus.COMPLETED
            self.relay.send_terminal(status)
        return status

    async def run(self) -> TerminalStatus:
        """
        Execute the session to completion and close the relay.

        Returns the terminal status decided for the session. Cancellation of
        the task itself counts as an abort and is re-raised after cleanup.
        """
        started = time.monotonic()
        self.metrics.session_opened()
        heartbeat = HeartbeatEmitter(
            self.relay, self.settings.streaming.SSE_HEARTBEAT_INTERVAL, self.metrics
        )

        with structlog.contextvars.bound_contextvars(
            thread_id=self.data.thread_id,
            thread_item_id=self.data.thread_item_id,
        ):
            logger.info("session_opened", mode=self.data.mode.value, executor=self.executor.name)
            try:
                try:
                    async with self.bridge:
                        async with heartbeat:
                            try:
                                await self.executor.execute(self._context())
                            except Exception as exc:
                                self.failure = exc
                        # The client gets its terminal frame and end of stream
                        # before the disconnect watcher is joined
                        self.status = self._dispatch_terminal()
                        self.relay.close()
                except asyncio.CancelledError:
                    self.token.cancel("session_cancelled")
                    if self.status is None:
                        self.status = self._dispatch_terminal()
                    raise
                finally:
                    self.relay.close()
            finally:
                status = (self.status or TerminalStatus.ERROR).value
                self.metrics.session_closed(status, time.monotonic() - started)
                logger.info(
                    "session_closed",
                    status=status,
                    written=self.relay.terminal_status.value if self.relay.terminal_status else None,
                    heartbeats=heartbeat.beats,
                )
        return self.status

    async def iter_frames(self) -> AsyncIterator[bytes]:
        """
        Response body iterator.

        Runs the session in its own task and yields encoded frames until the
        channel is closed. If iteration stops early (client gone, response
        aborted) the channel is cancelled, which cancels the token.
        """
        task = asyncio.create_task(self.run(), name=f"completion-session-{self.data.thread_item_id}")
        _running_sessions.add(task)
        task.add_done_callback(_on_session_done)

        try:
            async for chunk in self.channel:
                yield chunk
        finally:
            if not self.channel.finished:
                self.channel.cancel("consumer_stopped")
