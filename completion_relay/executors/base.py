"""
Completion Executor Contract

An executor performs the LLM call for one completion session. It is handed
the session's relay and cancellation token and:

- emits zero or more data frames through ``context.relay``;
- checks ``context.cancellation_token`` and stops emitting once it is set;
- returns normally on success, or raises on failure.

The session decides and writes the terminal ``done`` frame. An executor may
also call ``relay.send_terminal(TerminalStatus.COMPLETED)`` itself as its
last step; the relay writes the terminal frame only once.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from completion_relay.application.api.models import CompletionRequest, GeoLocation
    from completion_relay.streaming.cancellation import CancellationToken
    from completion_relay.streaming.frames import FrameEncoder
    from completion_relay.streaming.relay import StreamRelay


@dataclass
class ExecutionContext:
    relay: "StreamRelay"
    encoder: "FrameEncoder"
    data: "CompletionRequest"
    cancellation_token: "CancellationToken"
    geo: "GeoLocation | None" = None
    user_id: str | None = None


class CompletionExecutor(ABC):
    """Base class for completion executors."""

    name: str = "base"

    @abstractmethod
    async def execute(self, context: ExecutionContext) -> None:
        """
        Run the completion and emit progress frames.

        Raises:
            Exception: any failure; the session reports it as an ``error``
                terminal frame unless the request was cancelled.
        """
