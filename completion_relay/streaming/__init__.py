"""
SSE Streaming Core

Relay, heartbeat and cancellation primitives behind the completion endpoint.

Components:
-----------
- **frames.py**: Frame model and SSE wire encoding
- **channel.py**: Output channel feeding the HTTP response body
- **relay.py**: Stream Relay (guarded writes, exactly-once terminal and close)
- **heartbeat.py**: Periodic ``: heartbeat`` comment frames
- **cancellation.py**: Cancellation token and bridge
- **session.py**: Completion session and terminal dispatch
"""

from completion_relay.streaming.cancellation import CancellationBridge, CancellationToken
from completion_relay.streaming.channel import OutputChannel
from completion_relay.streaming.frames import Frame, FrameEncoder, FrameKind, SessionIdentifiers
from completion_relay.streaming.heartbeat import HeartbeatEmitter
from completion_relay.streaming.relay import StreamRelay
from completion_relay.streaming.session import CompletionSession, describe_failure

__all__ = [
    "CancellationBridge",
    "CancellationToken",
    "CompletionSession",
    "Frame",
    "FrameEncoder",
    "FrameKind",
    "HeartbeatEmitter",
    "OutputChannel",
    "SessionIdentifiers",
    "StreamRelay",
    "describe_failure",
]
