"""
Unit Tests for Thread Title Prompts
"""

import pytest

from completion_relay.chat.titles import build_title_prompt, clean_title


@pytest.mark.unit
class TestBuildTitlePrompt:
    """Test the title prompt layout."""

    def test_numbers_conversation_turns(self):
        prompt = build_title_prompt([("user", "How do SSE work?"), ("assistant", "They stream.")])

        assert "1. User: How do SSE work?" in prompt
        assert "2. Assistant: They stream." in prompt
        assert prompt.endswith("Title:")

    def test_initial_stage_instructions(self):
        prompt = build_title_prompt([("user", "a"), ("assistant", "b")], stage="initial")
        assert "first exchange" in prompt
        assert "(4-6 words)" in prompt

    def test_refine_stage_instructions(self):
        prompt = build_title_prompt([("user", "a"), ("assistant", "b")], stage="refine")
        assert "refined title (4-7 words)" in prompt


@pytest.mark.unit
class TestCleanTitle:
    """Test title cleanup."""

    def test_strips_whitespace_and_quotes(self):
        assert clean_title('  "Streaming LLM Answers"\n') == "Streaming LLM Answers"

    def test_strips_single_quotes(self):
        assert clean_title("'Quoted'") == "Quoted"

    def test_keeps_inner_apostrophes(self):
        assert clean_title("Builder's Guide") == "Builder's Guide"

    def test_caps_length(self):
        assert len(clean_title("x" * 200)) == 80
