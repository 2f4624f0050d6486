"""
Chat thread title prompts and cleanup.
"""

import re
from collections.abc import Sequence

from completion_relay.core.config.constants import TITLE_MAX_LENGTH

_INITIAL_INSTRUCTIONS = (
    "This is the first exchange in a new chat thread. Craft a clear, specific title "
    "(4-6 words) that captures the essence of the user's request and assistant's response."
)
_REFINE_INSTRUCTIONS = (
    "You now have three full exchanges from this chat. Using the broader context, craft a "
    "refined title (4-7 words) that captures the main objective or topic driving the conversation."
)

TITLE_PROMPT = """You are a helpful assistant responsible for naming chat threads.

{instructions}

Guidelines:
- Use Title Case (Capitalize Major Words)
- Be specific and descriptive
- Avoid vague words like "Chat" or "Conversation"
- No punctuation except necessary hyphens or apostrophes
- Respond with the title only, no quotations.

Conversation:
{conversation}

Title:"""

_SURROUNDING_QUOTES = re.compile(r"^['\"]|['\"]$")


def build_title_prompt(conversation: Sequence[tuple[str, str]], stage: str = "initial") -> str:
    """
    Args:
        conversation: (role, content) pairs, oldest first
        stage: "initial" after the first exchange, "refine" later on
    """
    lines = [
        f"{index}. {'User' if role == 'user' else 'Assistant'}: {content}"
        for index, (role, content) in enumerate(conversation, start=1)
    ]
    instructions = _INITIAL_INSTRUCTIONS if stage == "initial" else _REFINE_INSTRUCTIONS
    return TITLE_PROMPT.format(instructions=instructions, conversation="\n".join(lines))


def clean_title(raw: str) -> str:
    """Trim, strip one leading and one trailing quote, cap at 80 characters."""
    return _SURROUNDING_QUOTES.sub("", raw.strip())[:TITLE_MAX_LENGTH]
