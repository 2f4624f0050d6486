"""
Stream Relay

Owns the output channel of one completion session and arbitrates the three
independent producers that may write to or close it: the executor, the
heartbeat emitter and the cleanup path.

State machine:

    OPEN ──send_terminal()──▶ CLOSING ──close()──▶ CLOSED
      │                                              ▲
      └──────────── close() / channel gone ──────────┘

- In OPEN every frame is written.
- In CLOSING the terminal frame has been written; nothing else is accepted.
- In CLOSED every write is a no-op.

All operations are synchronous, so each one runs to completion on the event
loop without interleaving. Idempotence checks replace locks.
"""

from typing import Any

from completion_relay.core.config.constants import RelayState, TerminalStatus
from completion_relay.core.exceptions import ChannelClosedError
from completion_relay.core.logging import get_logger
from completion_relay.infrastructure.monitoring import MetricsCollector
from completion_relay.streaming.channel import OutputChannel
from completion_relay.streaming.frames import Frame, FrameEncoder, SessionIdentifiers

logger = get_logger(__name__)


class StreamRelay:
    """
    Guarded writer over an ``OutputChannel``.

    Usage:
        relay = StreamRelay(channel, FrameEncoder(), identifiers)
        relay.emit("answer", {"text": "Hello", "status": "PENDING"})
        relay.send_terminal(TerminalStatus.COMPLETED)
        relay.close()
    """

    def __init__(
        self,
        channel: OutputChannel,
        encoder: FrameEncoder,
        identifiers: SessionIdentifiers,
        metrics: MetricsCollector | None = None,
    ):
        self._channel = channel
        self._encoder = encoder
        self._identifiers = identifiers
        self._metrics = metrics
        self._state = RelayState.OPEN
        self._released = False
        self._terminal_status: TerminalStatus | None = None

    @property
    def state(self) -> RelayState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is RelayState.CLOSED

    @property
    def writable(self) -> bool:
        return self._state is RelayState.OPEN

    @property
    def identifiers(self) -> SessionIdentifiers:
        return self._identifiers

    @property
    def terminal_status(self) -> TerminalStatus | None:
        """Status of the terminal frame actually written, if any."""
        return self._terminal_status

    def write(self, frame: Frame) -> bool:
        """
        Encode and enqueue a frame.

        Returns:
            True if the frame reached the channel. False if the relay no
            longer accepts frames or the channel turned out to be gone.

        Raises:
            Any transport failure other than ChannelClosedError.
        """
        if not self.writable:
            return False

        chunk = self._encoder.encode(frame)
        try:
            self._channel.enqueue(chunk)
        except ChannelClosedError:
            self._state = RelayState.CLOSED
            logger.debug("relay_write_suppressed", frame_kind=frame.kind.value)
            if self._metrics:
                self._metrics.record_channel_closed("write")
            return False

        if frame.is_terminal:
            self._state = RelayState.CLOSING
        if self._metrics:
            self._metrics.record_frame(frame.kind.value)
        return True

    def emit(self, event_type: str, payload: Any) -> bool:
        """Write a data frame annotated with the session identifiers."""
        return self.write(Frame.event(event_type, payload, self._identifiers))

    def comment(self, text: str) -> bool:
        return self.write(Frame.comment(text))

    def send_terminal(self, status: TerminalStatus, error: str | None = None) -> bool:
        """
        Write the terminal ``done`` frame.

        Only the first call while the relay is OPEN writes anything; every
        later call is a no-op returning False.
        """
        written = self.write(Frame.terminal(status, self._identifiers, error=error))
        if written:
            self._terminal_status = status
            logger.info("terminal_frame_written", status=status.value)
        return written

    def close(self) -> bool:
        """
        Release the channel.

        Idempotent: exactly one caller performs the release and gets True.
        A channel that is already gone is not an error. Any other failure is
        re-raised after the relay is marked CLOSED.
        """
        if self._released:
            return False

        self._released = True
        self._state = RelayState.CLOSED
        try:
            self._channel.close()
        except ChannelClosedError:
            logger.debug("relay_close_suppressed", reason=self._channel.cancel_reason)
            if self._metrics:
                self._metrics.record_channel_closed("close")
        return True
