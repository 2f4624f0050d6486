import asyncio

from completion_relay.chat.chunk_buffer import ChunkBuffer
from completion_relay.core.config.constants import (
    FRAME_TYPE_ANSWER,
    FRAME_TYPE_METRICS,
    FRAME_TYPE_STATUS,
    WorkflowStatus,
)
from completion_relay.core.exceptions import OperationAbortedError
from completion_relay.core.logging import get_logger
from completion_relay.executors.base import CompletionExecutor, ExecutionContext

logger = get_logger(__name__)

LOREM_IPSUM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. "
    "Sed do eiusmod tempor incididunt ut labore et dolore magna aliqua. "
    "Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris "
    "nisi ut aliquip ex ea commodo consequat."
)


class FakeCompletionExecutor(CompletionExecutor):
    """
    A fake executor for local development and tests.
    Streams a deterministic answer in small token-sized pieces without
    calling any upstream provider.
    """

    name = "fake"

    def __init__(self, chunk_delay: float = 0.02, chars_per_chunk: int = 4, fail_with: str | None = None):
        self.chunk_delay = chunk_delay
        self.chars_per_chunk = chars_per_chunk
        # Simulated upstream failure message (None disables)
        self.fail_with = fail_with

    def _generate_response_content(self, prompt: str) -> str:
        return f"You asked: {prompt.strip()}. {LOREM_IPSUM}"

    def _chunk_text(self, text: str) -> list[str]:
        size = self.chars_per_chunk
        return [text[i : i + size] for i in range(0, len(text), size)]

    async def execute(self, context: ExecutionContext) -> None:
        relay = context.relay
        token = context.cancellation_token

        buffer = ChunkBuffer(
            lambda chunk, _full: relay.emit(
                FRAME_TYPE_ANSWER, {"text": chunk, "status": WorkflowStatus.PENDING.value}
            )
        )

        chunks = self._chunk_text(self._generate_response_content(context.data.prompt))
        for i, piece in enumerate(chunks):
            await asyncio.sleep(self.chunk_delay)
            if token.aborted:
                raise OperationAbortedError(f"Completion aborted: {token.reason}")
            if self.fail_with and i == len(chunks) // 2:
                raise RuntimeError(self.fail_with)
            buffer.add(piece)
        buffer.end()

        relay.emit(
            FRAME_TYPE_ANSWER,
            {
                "text": "",
                "fullText": buffer.full_text,
                "thinkingProcess": "",
                "status": WorkflowStatus.COMPLETED.value,
            },
        )
        relay.emit(
            FRAME_TYPE_METRICS,
            {
                "totalTokens": len(chunks),
                "promptTokens": 0,
                "completionTokens": len(chunks),
                "durationMs": int(len(chunks) * self.chunk_delay * 1000),
                "model": "fake",
            },
        )
        relay.emit(FRAME_TYPE_STATUS, WorkflowStatus.COMPLETED.value)
        logger.debug("fake_completion_finished", chunks=len(chunks))
