"""
Chat Modes

Every completion request selects a chat mode. The mode decides which model
answers and whether the user must be signed in.
"""

from dataclasses import dataclass
from enum import Enum


class ChatMode(str, Enum):
    PRO = "pro"
    DEEP = "deep"
    GEMINI_2_5_PRO = "gemini-pro-2.5"
    GEMINI_2_5_FLASH = "gemini-flash-2.5"
    GROK_4_FAST = "grok-4-fast"
    GLM_4_5_AIR = "glm-4-5-air"
    DEEPSEEK_CHAT_V3_1 = "deepseek-chat-v3-1"
    DEEPSEEK_R1 = "deepseek-r1"
    GPT_OSS_120B = "gpt-oss-120b"
    DOLPHIN_MISTRAL_24B_VENICE = "dolphin-mistral-24b-venice"


@dataclass(frozen=True)
class ChatModeConfig:
    display_name: str
    web_search: bool
    image_upload: bool
    retry: bool
    document_analysis: bool = False
    native_internet_access: bool = False
    is_new: bool = False
    is_auth_required: bool = False


def _openrouter_mode(display_name: str) -> ChatModeConfig:
    return ChatModeConfig(
        display_name=display_name,
        web_search=True,
        image_upload=True,
        retry=True,
        document_analysis=True,
        native_internet_access=True,
        is_new=True,
    )


CHAT_MODE_CONFIGS: dict[ChatMode, ChatModeConfig] = {
    ChatMode.DEEP: ChatModeConfig(
        display_name="Deep Research",
        web_search=False,
        image_upload=False,
        retry=False,
        document_analysis=True,
        is_auth_required=True,
    ),
    ChatMode.PRO: ChatModeConfig(
        display_name="Pro Search",
        web_search=False,
        image_upload=False,
        retry=False,
        document_analysis=True,
        is_auth_required=True,
    ),
    ChatMode.GEMINI_2_5_PRO: ChatModeConfig(
        display_name="Gemini 2.5 Pro",
        web_search=True,
        image_upload=True,
        retry=True,
        document_analysis=True,
        native_internet_access=True,
    ),
    ChatMode.GEMINI_2_5_FLASH: ChatModeConfig(
        display_name="Gemini 2.5 Flash",
        web_search=True,
        image_upload=True,
        retry=True,
        document_analysis=True,
        native_internet_access=True,
    ),
    ChatMode.GROK_4_FAST: ChatModeConfig(
        display_name="Grok 4 Fast",
        web_search=True,
        image_upload=False,
        retry=True,
        document_analysis=True,
        native_internet_access=True,
        is_new=True,
    ),
    ChatMode.GLM_4_5_AIR: _openrouter_mode("GLM 4.5 Air"),
    ChatMode.DEEPSEEK_CHAT_V3_1: _openrouter_mode("DeepSeek Chat v3.1"),
    ChatMode.DEEPSEEK_R1: _openrouter_mode("DeepSeek R1"),
    ChatMode.GPT_OSS_120B: _openrouter_mode("GPT-OSS 120B"),
    ChatMode.DOLPHIN_MISTRAL_24B_VENICE: _openrouter_mode("Dolphin Mistral 24B Venice"),
}


def get_mode_config(mode: ChatMode) -> ChatModeConfig:
    return CHAT_MODE_CONFIGS[mode]


def requires_auth(mode: ChatMode) -> bool:
    """Whether a request in this mode must carry a user identity."""
    return get_mode_config(mode).is_auth_required
