"""
Model Catalogue

Maps chat modes to upstream models and the providers that serve them.
"""

from dataclasses import dataclass
from enum import Enum

from completion_relay.chat.modes import ChatMode


class ModelProvider(str, Enum):
    GOOGLE = "google"
    OPENROUTER = "openrouter"


class ModelId(str, Enum):
    GEMINI_2_5_PRO = "gemini-2.5-pro"
    GEMINI_2_5_FLASH = "gemini-2.5-flash"
    GROK_4_FAST = "x-ai/grok-4-fast:free"
    GLM_4_5_AIR = "z-ai/glm-4.5-air:free"
    DEEPSEEK_CHAT_V3_1 = "deepseek/deepseek-chat-v3.1:free"
    GPT_OSS_120B = "openai/gpt-oss-120b:free"
    DOLPHIN_MISTRAL_24B_VENICE = "cognitivecomputations/dolphin-mistral-24b-venice-edition:free"


@dataclass(frozen=True)
class Model:
    id: ModelId
    name: str
    provider: ModelProvider
    max_tokens: int
    context_window: int
    is_free: bool = False


MODELS: dict[ModelId, Model] = {
    model.id: model
    for model in (
        Model(ModelId.GEMINI_2_5_FLASH, "Gemini 2.5 Flash", ModelProvider.GOOGLE, 200000, 200000),
        Model(ModelId.GEMINI_2_5_PRO, "Gemini 2.5 Pro", ModelProvider.GOOGLE, 200000, 200000),
        Model(ModelId.GROK_4_FAST, "Grok 4 Fast", ModelProvider.OPENROUTER, 8000, 128000, True),
        Model(ModelId.GLM_4_5_AIR, "GLM 4.5 Air", ModelProvider.OPENROUTER, 8000, 128000, True),
        Model(
            ModelId.DEEPSEEK_CHAT_V3_1, "DeepSeek Chat v3.1", ModelProvider.OPENROUTER, 8000, 128000, True
        ),
        Model(ModelId.GPT_OSS_120B, "GPT-OSS 120B", ModelProvider.OPENROUTER, 8000, 128000, True),
        Model(
            ModelId.DOLPHIN_MISTRAL_24B_VENICE,
            "Dolphin Mistral 24B Venice",
            ModelProvider.OPENROUTER,
            8000,
            128000,
            True,
        ),
    )
}

_MODE_TO_MODEL: dict[ChatMode, ModelId] = {
    ChatMode.GEMINI_2_5_PRO: ModelId.GEMINI_2_5_PRO,
    ChatMode.GEMINI_2_5_FLASH: ModelId.GEMINI_2_5_FLASH,
    ChatMode.GROK_4_FAST: ModelId.GROK_4_FAST,
    ChatMode.GLM_4_5_AIR: ModelId.GLM_4_5_AIR,
    ChatMode.DEEPSEEK_CHAT_V3_1: ModelId.DEEPSEEK_CHAT_V3_1,
    ChatMode.GPT_OSS_120B: ModelId.GPT_OSS_120B,
    ChatMode.DOLPHIN_MISTRAL_24B_VENICE: ModelId.DOLPHIN_MISTRAL_24B_VENICE,
}

DEFAULT_MODEL = ModelId.GEMINI_2_5_FLASH

# History budgets (estimated tokens) per mode
_OPENROUTER_HISTORY_BUDGET = 128000
_DEFAULT_HISTORY_BUDGET = 500000


def model_for_mode(mode: ChatMode) -> Model:
    """Resolve the model that answers a mode. Unmapped modes use Gemini 2.5 Flash."""
    return MODELS[_MODE_TO_MODEL.get(mode, DEFAULT_MODEL)]


def max_tokens_for_mode(mode: ChatMode) -> int:
    mapped = _MODE_TO_MODEL.get(mode)
    if mapped is not None and MODELS[mapped].provider is ModelProvider.OPENROUTER:
        return _OPENROUTER_HISTORY_BUDGET
    return _DEFAULT_HISTORY_BUDGET
