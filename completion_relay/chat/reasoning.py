"""
Reasoning extraction for streamed answers.

Models asked to think inside ``<think>`` tags interleave their reasoning with
the answer in one text stream. ``ThinkTagSplitter`` separates the two while
chunks arrive, including tags that are split across chunk boundaries.
"""

OPEN_TAG = "<think>"
CLOSE_TAG = "</think>"


def _partial_tag_length(text: str, tag: str) -> int:
    """Length of the longest suffix of ``text`` that starts ``tag``."""
    for size in range(min(len(tag) - 1, len(text)), 0, -1):
        if text.endswith(tag[:size]):
            return size
    return 0


class ThinkTagSplitter:
    """
    Splits streamed text into (reasoning, answer) parts.

    Example:
        >>> splitter = ThinkTagSplitter()
        >>> splitter.feed("<thi")
        ('', '')
        >>> splitter.feed("nk>Step 1</think>Answer")
        ('Step 1', 'Answer')
    """

    def __init__(self):
        self._in_think = False
        self._pending = ""

    @property
    def in_reasoning(self) -> bool:
        return self._in_think

    def feed(self, text: str) -> tuple[str, str]:
        data = self._pending + text
        self._pending = ""
        reasoning: list[str] = []
        answer: list[str] = []

        while data:
            tag = CLOSE_TAG if self._in_think else OPEN_TAG
            target = reasoning if self._in_think else answer
            index = data.find(tag)
            if index >= 0:
                target.append(data[:index])
                data = data[index + len(tag):]
                self._in_think = not self._in_think
                continue

            # Hold back a possible tag prefix until the next chunk
            keep = _partial_tag_length(data, tag)
            target.append(data[: len(data) - keep])
            self._pending = data[len(data) - keep:]
            break

        return "".join(reasoning), "".join(answer)

    def flush(self) -> tuple[str, str]:
        """Release held-back text once the stream ends."""
        pending, self._pending = self._pending, ""
        if self._in_think:
            return pending, ""
        return "", pending
