"""
Unit Tests for Chat Modes and the Model Catalogue
"""

import pytest

from completion_relay.chat.models import (
    MODELS,
    ModelId,
    ModelProvider,
    max_tokens_for_mode,
    model_for_mode,
)
from completion_relay.chat.modes import CHAT_MODE_CONFIGS, ChatMode, get_mode_config, requires_auth


@pytest.mark.unit
class TestChatModes:
    """Test mode configuration."""

    def test_every_mode_is_configured(self):
        assert set(CHAT_MODE_CONFIGS) == set(ChatMode)

    @pytest.mark.parametrize("mode", [ChatMode.PRO, ChatMode.DEEP])
    def test_research_modes_require_auth(self, mode):
        assert requires_auth(mode) is True

    @pytest.mark.parametrize(
        "mode", [ChatMode.GEMINI_2_5_FLASH, ChatMode.GEMINI_2_5_PRO, ChatMode.GROK_4_FAST]
    )
    def test_model_modes_allow_anonymous(self, mode):
        assert requires_auth(mode) is False

    def test_mode_values_match_client_identifiers(self):
        assert ChatMode("gemini-flash-2.5") is ChatMode.GEMINI_2_5_FLASH
        assert ChatMode("deepseek-r1") is ChatMode.DEEPSEEK_R1

    def test_display_name(self):
        assert get_mode_config(ChatMode.DEEP).display_name == "Deep Research"


@pytest.mark.unit
class TestModelCatalogue:
    """Test mode to model resolution."""

    def test_gemini_modes_use_google(self):
        model = model_for_mode(ChatMode.GEMINI_2_5_PRO)
        assert model.id is ModelId.GEMINI_2_5_PRO
        assert model.provider is ModelProvider.GOOGLE

    def test_free_models_use_openrouter(self):
        model = model_for_mode(ChatMode.GROK_4_FAST)
        assert model.id.value == "x-ai/grok-4-fast:free"
        assert model.provider is ModelProvider.OPENROUTER
        assert model.is_free

    @pytest.mark.parametrize("mode", [ChatMode.PRO, ChatMode.DEEP, ChatMode.DEEPSEEK_R1])
    def test_unmapped_modes_fall_back_to_flash(self, mode):
        assert model_for_mode(mode) is MODELS[ModelId.GEMINI_2_5_FLASH]

    def test_history_budget_per_provider(self):
        assert max_tokens_for_mode(ChatMode.GLM_4_5_AIR) == 128000
        assert max_tokens_for_mode(ChatMode.GEMINI_2_5_FLASH) == 500000
        assert max_tokens_for_mode(ChatMode.PRO) == 500000
