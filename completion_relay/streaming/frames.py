"""
SSE Frame Encoding

Two kinds of frames travel over a completion stream:

- Comment frames (``: heartbeat\\n\\n``) keep proxies from idling out the
  connection. Conforming SSE clients ignore them.
- Data frames (``event: <type>\\ndata: <json>\\n\\n``) carry workflow
  progress. Every data frame is annotated with the session identifiers
  (threadId, threadItemId, parentThreadItemId) and carries its payload under
  the key named by its type. The terminal frame is a data frame of type
  ``done`` with a ``status`` and, for failures, an ``error`` message.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import orjson

from completion_relay.core.config.constants import FRAME_TYPE_DONE, TerminalStatus


class FrameKind(str, Enum):
    COMMENT = "comment"
    DATA = "data"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class SessionIdentifiers:
    """Identifiers that correlate every frame with its chat thread item."""

    thread_id: str
    thread_item_id: str
    parent_thread_item_id: str | None = None

    def annotate(self) -> dict[str, Any]:
        return {
            "threadId": self.thread_id,
            "threadItemId": self.thread_item_id,
            "parentThreadItemId": self.parent_thread_item_id,
        }


@dataclass(frozen=True)
class Frame:
    """
    A single SSE frame before encoding.

    Use the constructors instead of building frames by hand:

        Frame.comment("heartbeat")
        Frame.event("answer", {"text": "Hi", "status": "PENDING"}, ids)
        Frame.terminal(TerminalStatus.ERROR, ids, error="Upstream failed")
    """

    kind: FrameKind
    event: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    text: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.kind is FrameKind.TERMINAL

    @classmethod
    def comment(cls, text: str) -> "Frame":
        return cls(kind=FrameKind.COMMENT, text=text)

    @classmethod
    def event(cls, event_type: str, payload: Any, identifiers: SessionIdentifiers) -> "Frame":
        data = {"type": event_type, **identifiers.annotate(), event_type: payload}
        return cls(kind=FrameKind.DATA, event=event_type, data=data)

    @classmethod
    def terminal(
        cls,
        status: TerminalStatus,
        identifiers: SessionIdentifiers,
        error: str | None = None,
    ) -> "Frame":
        data = {"type": FRAME_TYPE_DONE, "status": status.value, **identifiers.annotate()}
        if status is TerminalStatus.ERROR:
            data["error"] = error or "Unknown error"
        return cls(kind=FrameKind.TERMINAL, event=FRAME_TYPE_DONE, data=data)


class FrameEncoder:
    """Serializes frames to SSE wire bytes."""

    def encode(self, frame: Frame) -> bytes:
        if frame.kind is FrameKind.COMMENT:
            return self.encode_comment(frame.text)
        return self.encode_event(frame.event, frame.data)

    def encode_comment(self, text: str) -> bytes:
        # A comment spans one line per ": " prefix
        lines = text.splitlines() or [""]
        return ("".join(f": {line}\n" for line in lines) + "\n").encode("utf-8")

    def encode_event(self, event_type: str | None, data: dict[str, Any]) -> bytes:
        head = f"event: {event_type}\n".encode("utf-8") if event_type else b""
        return head + b"data: " + orjson.dumps(data) + b"\n\n"
