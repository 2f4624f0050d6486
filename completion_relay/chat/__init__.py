"""
Chat Domain

Chat modes, the model catalogue, history trimming and answer buffering used by
the completion executors.
"""

from completion_relay.chat.chunk_buffer import ChunkBuffer
from completion_relay.chat.history import TrimmedHistory, estimate_tokens, trim_history
from completion_relay.chat.models import Model, ModelId, ModelProvider, max_tokens_for_mode, model_for_mode
from completion_relay.chat.modes import CHAT_MODE_CONFIGS, ChatMode, ChatModeConfig, get_mode_config, requires_auth
from completion_relay.chat.titles import build_title_prompt, clean_title

__all__ = [
    "ChatMode",
    "ChatModeConfig",
    "CHAT_MODE_CONFIGS",
    "get_mode_config",
    "requires_auth",
    "Model",
    "ModelId",
    "ModelProvider",
    "model_for_mode",
    "max_tokens_for_mode",
    "TrimmedHistory",
    "estimate_tokens",
    "trim_history",
    "ChunkBuffer",
    "build_title_prompt",
    "clean_title",
]
