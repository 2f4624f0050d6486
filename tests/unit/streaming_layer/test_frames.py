"""
Unit Tests for SSE Frame Encoding

Tests comment frames, data frame annotation and the terminal frame shape.
"""

import orjson
import pytest

from completion_relay.core.config.constants import TerminalStatus
from completion_relay.streaming.frames import Frame, FrameEncoder, FrameKind, SessionIdentifiers

IDS = SessionIdentifiers(thread_id="t1", thread_item_id="i2", parent_thread_item_id="i1")


def _decode_data(chunk: bytes) -> dict:
    data_line = next(line for line in chunk.decode().split("\n") if line.startswith("data: "))
    return orjson.loads(data_line[len("data: "):])


@pytest.mark.unit
class TestCommentFrames:
    """Test keep-alive comment encoding."""

    def test_heartbeat_comment_wire_format(self):
        """Test a heartbeat comment encodes to a single comment line."""
        assert FrameEncoder().encode(Frame.comment("heartbeat")) == b": heartbeat\n\n"

    def test_multiline_comment_prefixes_every_line(self):
        """Test each line of a multi-line comment is prefixed."""
        assert FrameEncoder().encode_comment("a\nb") == b": a\n: b\n\n"


@pytest.mark.unit
class TestDataFrames:
    """Test data frame construction and encoding."""

    def test_event_frame_is_annotated_with_identifiers(self):
        """Test every data frame carries threadId, threadItemId and parentThreadItemId."""
        frame = Frame.event("answer", {"text": "Hi"}, IDS)

        assert frame.kind is FrameKind.DATA
        assert frame.data == {
            "type": "answer",
            "threadId": "t1",
            "threadItemId": "i2",
            "parentThreadItemId": "i1",
            "answer": {"text": "Hi"},
        }

    def test_event_wire_format(self):
        """Test event and data lines followed by a blank line."""
        chunk = FrameEncoder().encode(Frame.event("status", "COMPLETED", IDS))

        assert chunk.startswith(b"event: status\ndata: ")
        assert chunk.endswith(b"\n\n")
        assert _decode_data(chunk)["status"] == "COMPLETED"

    def test_missing_parent_is_encoded_as_null(self):
        """Test parentThreadItemId is present even without a parent."""
        ids = SessionIdentifiers(thread_id="t1", thread_item_id="i2")
        chunk = FrameEncoder().encode(Frame.event("answer", {}, ids))

        assert _decode_data(chunk)["parentThreadItemId"] is None


@pytest.mark.unit
class TestTerminalFrames:
    """Test the terminal ``done`` frame."""

    def test_completed_frame_has_no_error(self):
        """Test completed terminal frames omit the error field."""
        frame = Frame.terminal(TerminalStatus.COMPLETED, IDS)

        assert frame.is_terminal
        assert frame.data["type"] == "done"
        assert frame.data["status"] == "completed"
        assert "error" not in frame.data

    def test_aborted_frame_has_no_error(self):
        frame = Frame.terminal(TerminalStatus.ABORTED, IDS, error="ignored")
        assert frame.data["status"] == "aborted"
        assert "error" not in frame.data

    def test_error_frame_carries_message(self):
        """Test error terminal frames carry the failure message."""
        frame = Frame.terminal(TerminalStatus.ERROR, IDS, error="Upstream failed")

        assert frame.data["status"] == "error"
        assert frame.data["error"] == "Upstream failed"
        assert frame.data["threadItemId"] == "i2"

    def test_error_frame_never_has_empty_message(self):
        """Test an empty error message is replaced with a default."""
        frame = Frame.terminal(TerminalStatus.ERROR, IDS, error="")
        assert frame.data["error"]

    def test_terminal_wire_format(self):
        chunk = FrameEncoder().encode(Frame.terminal(TerminalStatus.COMPLETED, IDS))

        assert chunk.startswith(b"event: done\n")
        assert _decode_data(chunk)["status"] == "completed"
