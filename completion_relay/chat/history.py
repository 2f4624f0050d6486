"""
Conversation history trimming by estimated token count.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from completion_relay.chat.models import max_tokens_for_mode
from completion_relay.chat.modes import ChatMode
from completion_relay.core.config.constants import TOKENS_PER_WORD


@dataclass
class TrimmedHistory:
    messages: list[dict[str, str]]
    token_count: int


def estimate_tokens(text: str | None) -> int:
    """Estimate tokens from whitespace-separated words (1.35 tokens per word)."""
    words = (text or "").split()
    return math.ceil(len(words) * TOKENS_PER_WORD)


def estimate_message_tokens(messages: Sequence[dict[str, str]]) -> int:
    return sum(estimate_tokens(message.get("content")) for message in messages)


def trim_history(
    messages: Sequence[dict[str, str]],
    mode: ChatMode,
    max_tokens: int | None = None,
) -> TrimmedHistory:
    """
    Drop the oldest messages until the estimated total fits the mode budget.

    The latest message is always kept, even when it alone exceeds the budget.
    """
    budget = max_tokens if max_tokens is not None else max_tokens_for_mode(mode)
    history = list(messages)

    if len(history) <= 1:
        return TrimmedHistory(messages=history, token_count=estimate_message_tokens(history))

    latest = history.pop()
    sizes = [estimate_tokens(message.get("content")) for message in history]
    total = sum(sizes) + estimate_tokens(latest.get("content"))

    dropped = 0
    while total > budget and dropped < len(history):
        total -= sizes[dropped]
        dropped += 1

    return TrimmedHistory(messages=history[dropped:] + [latest], token_count=total)
