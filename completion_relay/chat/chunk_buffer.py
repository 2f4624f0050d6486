"""
Chunk buffer for streamed answer text.

Upstream tokens arrive a few characters at a time. Forwarding each one as its
own SSE frame floods the client, so text is accumulated and flushed at
sentence boundaries or once it grows past a threshold.
"""

from collections.abc import Callable, Sequence

DEFAULT_THRESHOLD = 48
DEFAULT_BREAK_ON = ("\n", ". ", ".\n", ".", "! ", "!", "? ", "?")


class ChunkBuffer:
    """
    Accumulates text and calls ``on_flush(chunk, full_text)`` in batches.

    Example:
        >>> flushed = []
        >>> buffer = ChunkBuffer(lambda chunk, full: flushed.append(chunk), threshold=10)
        >>> buffer.add("Hello")
        >>> buffer.add(" world.")
        >>> flushed
        ['Hello world.']
    """

    def __init__(
        self,
        on_flush: Callable[[str, str], object],
        threshold: int = DEFAULT_THRESHOLD,
        break_on: Sequence[str] = DEFAULT_BREAK_ON,
    ):
        self._on_flush = on_flush
        self._threshold = threshold
        self._break_on = tuple(break_on)
        self._buffer = ""
        self._full_text = ""

    @property
    def full_text(self) -> str:
        return self._full_text

    @property
    def pending(self) -> str:
        return self._buffer

    def add(self, chunk: str) -> None:
        if not chunk:
            return
        self._buffer += chunk
        self._full_text += chunk
        if len(self._buffer) >= self._threshold or any(mark in chunk for mark in self._break_on):
            self.flush()

    def flush(self) -> None:
        if not self._buffer:
            return
        chunk, self._buffer = self._buffer, ""
        self._on_flush(chunk, self._full_text)

    def end(self) -> None:
        """Flush whatever is left once the upstream stream ends."""
        self.flush()
