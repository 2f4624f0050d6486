"""
Executor selection from settings (COMPLETION_EXECUTOR=llm|fake).
"""

from completion_relay.core.config.settings import Settings, get_settings
from completion_relay.core.exceptions import ConfigurationError
from completion_relay.executors.base import CompletionExecutor
from completion_relay.executors.fake_executor import FakeCompletionExecutor
from completion_relay.executors.llm_executor import LLMCompletionExecutor
from completion_relay.executors.providers import ProviderRegistry
from completion_relay.executors.title_generator import (
    FakeTitleGenerator,
    LLMTitleGenerator,
    TitleGenerator,
)

_executor: CompletionExecutor | None = None
_title_generator: TitleGenerator | None = None
_registry: ProviderRegistry | None = None


def _get_registry(settings: Settings) -> ProviderRegistry:
    global _registry
    if _registry is None:
        _registry = ProviderRegistry(settings)
    return _registry


def create_executor(settings: Settings) -> CompletionExecutor:
    kind = settings.streaming.COMPLETION_EXECUTOR
    if kind == "fake":
        return FakeCompletionExecutor()
    if kind == "llm":
        return LLMCompletionExecutor(_get_registry(settings))
    raise ConfigurationError(f"Unknown completion executor: {kind}")


def create_title_generator(settings: Settings) -> TitleGenerator:
    if settings.streaming.COMPLETION_EXECUTOR == "fake":
        return FakeTitleGenerator()
    return LLMTitleGenerator(_get_registry(settings))


def get_executor() -> CompletionExecutor:
    """Get the process-wide executor, created on first use."""
    global _executor
    if _executor is None:
        _executor = create_executor(get_settings())
    return _executor


def get_title_generator() -> TitleGenerator:
    global _title_generator
    if _title_generator is None:
        _title_generator = create_title_generator(get_settings())
    return _title_generator


async def close_executor() -> None:
    """Release provider clients (called on shutdown)."""
    global _executor, _title_generator, _registry
    if _registry is not None:
        await _registry.aclose()
    _executor = None
    _title_generator = None
    _registry = None
