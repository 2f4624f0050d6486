"""
Title Generation API Models
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class TitleGenerationRequest(BaseModel):
    """Body of POST /title-generation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    thread_id: str = Field(..., min_length=1)
    conversation: list[ConversationTurn] = Field(..., min_length=2)
    stage: Literal["initial", "refine"] = "initial"


class TitleGenerationResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    thread_id: str
