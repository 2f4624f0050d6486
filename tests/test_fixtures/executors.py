"""
Executor Test Doubles

Scripted executors for driving completion sessions without an upstream.
"""

import asyncio

from completion_relay.core.config.constants import TerminalStatus
from completion_relay.executors.base import CompletionExecutor, ExecutionContext


class ScriptedExecutor(CompletionExecutor):
    """
    Executor that replays a fixed script.

    Args:
        frames: (event_type, payload) pairs emitted in order
        delay: pause before each frame and before finishing
        error: exception raised once the script has run
        wait_for_abort: block until the cancellation token is set before finishing
        emit_completed: write the ``completed`` terminal frame itself
    """

    name = "scripted"

    def __init__(
        self,
        frames=(),
        delay: float = 0.0,
        error: BaseException | None = None,
        wait_for_abort: bool = False,
        emit_completed: bool = False,
    ):
        self.frames = list(frames)
        self.delay = delay
        self.error = error
        self.wait_for_abort = wait_for_abort
        self.emit_completed = emit_completed
        self.calls = 0
        self.context: ExecutionContext | None = None

    async def execute(self, context: ExecutionContext) -> None:
        self.calls += 1
        self.context = context
        for event_type, payload in self.frames:
            if self.delay:
                await asyncio.sleep(self.delay)
            if context.cancellation_token.aborted:
                break
            context.relay.emit(event_type, payload)

        if self.wait_for_abort:
            await context.cancellation_token.wait()
        elif self.delay:
            await asyncio.sleep(self.delay)

        if self.error is not None:
            raise self.error
        if self.emit_completed:
            context.relay.send_terminal(TerminalStatus.COMPLETED)
