"""
API Models Package

Pydantic request/response models for the completion relay API.
"""

from completion_relay.application.api.models.completion import (
    ChatMessage,
    CompletionRequest,
    GeoLocation,
)
from completion_relay.application.api.models.title import (
    ConversationTurn,
    TitleGenerationRequest,
    TitleGenerationResponse,
)

__all__ = [
    "ChatMessage",
    "CompletionRequest",
    "GeoLocation",
    "ConversationTurn",
    "TitleGenerationRequest",
    "TitleGenerationResponse",
]
