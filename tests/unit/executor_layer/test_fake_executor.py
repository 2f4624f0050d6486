"""
Unit Tests for the Fake Completion Executor
"""

import pytest

from completion_relay.core.exceptions import OperationAbortedError
from completion_relay.executors.base import ExecutionContext
from completion_relay.executors.fake_executor import FakeCompletionExecutor
from completion_relay.streaming.cancellation import CancellationToken
from completion_relay.streaming.channel import OutputChannel
from completion_relay.streaming.frames import FrameEncoder, SessionIdentifiers
from completion_relay.streaming.relay import StreamRelay
from tests.test_fixtures import data_frames, parse_sse


@pytest.fixture
def channel():
    return OutputChannel()


@pytest.fixture
def context(channel, completion_request):
    encoder = FrameEncoder()
    relay = StreamRelay(channel, encoder, SessionIdentifiers("thread-1", "item-2"))
    return ExecutionContext(
        relay=relay,
        encoder=encoder,
        data=completion_request,
        cancellation_token=CancellationToken(),
    )


async def frames_of(channel: OutputChannel) -> list[dict]:
    channel.close()
    return data_frames(parse_sse(b"".join([chunk async for chunk in channel])))


@pytest.mark.unit
class TestFakeCompletionExecutor:
    """Test the deterministic local executor."""

    @pytest.mark.asyncio
    async def test_streams_answer_then_metrics_and_status(self, context, channel):
        await FakeCompletionExecutor(chunk_delay=0).execute(context)

        frames = await frames_of(channel)
        types = [frame["data"]["type"] for frame in frames]

        assert types[-3:] == ["answer", "metrics", "status"]
        assert types.count("answer") >= 2

        final_answer = frames[-3]["data"]["answer"]
        assert final_answer["status"] == "COMPLETED"
        assert final_answer["fullText"].startswith("You asked: What is SSE?.")
        assert frames[-2]["data"]["metrics"]["model"] == "fake"
        assert frames[-1]["data"]["status"] == "COMPLETED"

    @pytest.mark.asyncio
    async def test_pending_chunks_rebuild_full_text(self, context, channel):
        await FakeCompletionExecutor(chunk_delay=0).execute(context)

        frames = await frames_of(channel)
        answers = [frame["data"]["answer"] for frame in frames if frame["data"]["type"] == "answer"]
        pending = "".join(a["text"] for a in answers if a["status"] == "PENDING")

        assert pending == answers[-1]["fullText"]

    @pytest.mark.asyncio
    async def test_aborted_token_stops_stream(self, context, channel):
        context.cancellation_token.cancel("client_disconnected")

        with pytest.raises(OperationAbortedError, match="client_disconnected"):
            await FakeCompletionExecutor(chunk_delay=0).execute(context)

        assert await frames_of(channel) == []

    @pytest.mark.asyncio
    async def test_simulated_failure(self, context):
        with pytest.raises(RuntimeError, match="upstream exploded"):
            await FakeCompletionExecutor(chunk_delay=0, fail_with="upstream exploded").execute(context)
