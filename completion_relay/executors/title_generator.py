"""
Title Generators

Produce a short title for a chat thread from its first exchanges. The LLM
generator asks Gemini 2.5 Flash; the fake generator is used together with
the fake completion executor.
"""

from abc import ABC, abstractmethod

from openai import APIError

from completion_relay.chat.models import MODELS, ModelId
from completion_relay.core.exceptions import ProviderAPIError
from completion_relay.core.logging import get_logger
from completion_relay.executors.providers import ProviderRegistry

logger = get_logger(__name__)

TITLE_MODEL = MODELS[ModelId.GEMINI_2_5_FLASH]
TITLE_MAX_TOKENS = 50


class TitleGenerator(ABC):
    @abstractmethod
    async def generate(self, prompt: str, thread_id: str | None = None) -> str:
        """Return the raw (uncleaned) title text for a title prompt."""


class LLMTitleGenerator(TitleGenerator):
    def __init__(self, registry: ProviderRegistry):
        self.registry = registry

    async def generate(self, prompt: str, thread_id: str | None = None) -> str:
        client = self.registry.get_client(TITLE_MODEL.provider, thread_id=thread_id)
        try:
            response = await client.chat.completions.create(
                model=TITLE_MODEL.id.value,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=TITLE_MAX_TOKENS,
            )
        except APIError as api_error:
            logger.error("title_generation_failed", error=str(api_error))
            raise ProviderAPIError.from_exception(
                api_error,
                message="Failed to generate title",
                thread_id=thread_id,
                provider=TITLE_MODEL.provider.value,
            ) from api_error

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class FakeTitleGenerator(TitleGenerator):
    """Uses the first words of the first user turn found in the prompt."""

    async def generate(self, prompt: str, thread_id: str | None = None) -> str:
        for line in prompt.splitlines():
            _, sep, content = line.partition(". User: ")
            if sep:
                return " ".join(content.split()[:6]).title()
        return "New Thread"
