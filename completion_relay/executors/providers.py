"""
LLM Provider Registry

Both upstream providers expose OpenAI-compatible chat completion APIs, so a
single ``AsyncOpenAI`` client per provider covers every model:

- google: Gemini models through the Gemini OpenAI-compatible endpoint
- openrouter: free community models through OpenRouter
"""

from openai import AsyncOpenAI

from completion_relay.chat.models import ModelProvider
from completion_relay.core.config.settings import Settings
from completion_relay.core.exceptions import MissingProviderKeyError
from completion_relay.core.logging import get_logger

logger = get_logger(__name__)


class ProviderRegistry:
    """
    Lazily creates and caches one AsyncOpenAI client per provider.

    Usage:
        registry = ProviderRegistry(settings)
        client = registry.get_client(ModelProvider.GOOGLE)
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._clients: dict[ModelProvider, AsyncOpenAI] = {}

    def _credentials(self, provider: ModelProvider) -> tuple[str | None, str]:
        providers = self.settings.providers
        if provider is ModelProvider.GOOGLE:
            return providers.GEMINI_API_KEY, providers.GEMINI_BASE_URL
        return providers.OPENROUTER_API_KEY, providers.OPENROUTER_BASE_URL

    def get_client(self, provider: ModelProvider, thread_id: str | None = None) -> AsyncOpenAI:
        """
        Raises:
            MissingProviderKeyError: if no API key is configured for the provider.
        """
        client = self._clients.get(provider)
        if client is not None:
            return client

        api_key, base_url = self._credentials(provider)
        if not api_key:
            raise MissingProviderKeyError(provider.value, thread_id=thread_id)

        client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=self.settings.providers.PROVIDER_TIMEOUT,
            max_retries=0,  # No retries inside the provider client
        )
        self._clients[provider] = client
        logger.info("provider_client_created", provider=provider.value, base_url=base_url)
        return client

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
