"""
Heartbeat Emitter

Writes a ``: heartbeat`` comment frame through the relay at a fixed interval
so intermediary proxies and browsers do not time out long generations.
"""

import asyncio

from completion_relay.core.config.constants import HEARTBEAT_COMMENT
from completion_relay.core.logging import get_logger
from completion_relay.infrastructure.monitoring import MetricsCollector
from completion_relay.streaming.relay import StreamRelay

logger = get_logger(__name__)


class HeartbeatEmitter:
    """
    Periodic keep-alive task bound to a relay.

    Use as an async context manager so the timer is cancelled on every exit
    path of the enclosing session:

        async with HeartbeatEmitter(relay, interval=15.0):
            await executor.execute(context)

    The task stops itself as soon as the relay stops accepting frames.
    """

    def __init__(
        self,
        relay: StreamRelay,
        interval: float,
        metrics: MetricsCollector | None = None,
    ):
        if interval <= 0:
            raise ValueError("Heartbeat interval must be positive")
        self._relay = relay
        self._interval = interval
        self._metrics = metrics
        self._task: asyncio.Task | None = None
        self.beats = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="sse-heartbeat")

    async def stop(self) -> None:
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        results = await asyncio.gather(self._task, return_exceptions=True)
        outcome = results[0]
        if isinstance(outcome, Exception):
            logger.warning("heartbeat_failed", error=str(outcome), error_type=type(outcome).__name__)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)

            # Checked at the top of every tick so a closed relay ends the timer
            if not self._relay.writable:
                break
            if not self._relay.comment(HEARTBEAT_COMMENT):
                logger.debug("heartbeat_stopped_channel_gone", beats=self.beats)
                break

            self.beats += 1
            if self._metrics:
                self._metrics.record_heartbeat()

    async def __aenter__(self) -> "HeartbeatEmitter":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
