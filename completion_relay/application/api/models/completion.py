"""
Completion API Models
=====================

Pydantic models for the SSE completion endpoint.

The browser client speaks camelCase JSON (``threadId``, ``threadItemId``),
so every field carries a camelCase alias. Python code uses the snake_case
attribute names; ``populate_by_name`` lets tests build models either way.

This module defines:
- ChatMessage: One prior conversation turn
- CompletionRequest: Validated body of POST /completion
- GeoLocation: Coarse client location from edge headers
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from completion_relay.chat.modes import ChatMode


class ChatMessage(BaseModel):
    """A single message of the conversation history."""

    role: Literal["user", "assistant", "system"]
    content: str = ""


class CompletionRequest(BaseModel):
    """
    Request model for the SSE completion endpoint.

    Required: threadId, threadItemId, prompt, mode.
    The remaining fields tune the completion workflow.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "threadId": "thread-123",
                "threadItemId": "item-456",
                "parentThreadItemId": "item-455",
                "prompt": "Explain quantum computing in simple terms",
                "messages": [{"role": "user", "content": "Explain quantum computing"}],
                "mode": "gemini-flash-2.5",
                "webSearch": False,
                "showSuggestions": True,
            }
        },
    )

    thread_id: str = Field(..., min_length=1, description="Chat thread identifier")
    thread_item_id: str = Field(..., min_length=1, description="Identifier of the answer being generated")
    parent_thread_item_id: str | None = Field(
        default=None, description="Identifier of the item this answer follows up on"
    )
    prompt: str = Field(..., min_length=1, max_length=100000, description="User prompt")
    messages: list[ChatMessage] = Field(default_factory=list, description="Conversation history")
    mode: ChatMode = Field(..., description="Selected chat mode")
    web_search: bool = Field(default=False, description="Enable web search")
    show_suggestions: bool = Field(default=False, description="Generate follow-up suggestions")
    custom_instructions: str | None = Field(default=None, description="User custom instructions")

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Prompt cannot be empty")
        return v


class GeoLocation(BaseModel):
    """Client location derived from edge network headers. Every field is optional."""

    city: str | None = None
    country: str | None = None
    country_region: str | None = None
    latitude: str | None = None
    longitude: str | None = None

    @property
    def is_known(self) -> bool:
        return bool(self.city or self.country)
