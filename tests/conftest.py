"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os

import pytest

# Test defaults, applied before any application module reads settings
os.environ.setdefault("COMPLETION_EXECUTOR", "fake")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

from completion_relay.application.api.models import CompletionRequest  # noqa: E402
from completion_relay.core.config.settings import Settings, reload_settings  # noqa: E402
from tests.test_fixtures import ScriptedExecutor  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reload settings and clear rate limit counters after every test."""
    from completion_relay.infrastructure.rate_limiting import get_rate_limit_manager

    yield
    reload_settings()
    get_rate_limit_manager().reset()


@pytest.fixture
def fast_settings():
    """Settings with short intervals so timing tests run quickly."""
    return Settings(
        SSE_HEARTBEAT_INTERVAL=0.02,
        SSE_DISCONNECT_POLL_INTERVAL=0.01,
        COMPLETION_EXECUTOR="fake",
    )


@pytest.fixture
def quiet_settings():
    """Settings whose heartbeat never fires within a test."""
    return Settings(
        SSE_HEARTBEAT_INTERVAL=60.0,
        SSE_DISCONNECT_POLL_INTERVAL=0.01,
        COMPLETION_EXECUTOR="fake",
    )


@pytest.fixture
def completion_request():
    return CompletionRequest(
        thread_id="thread-1",
        thread_item_id="item-2",
        parent_thread_item_id="item-1",
        prompt="What is SSE?",
        mode="gemini-flash-2.5",
    )


@pytest.fixture
def valid_body():
    """Raw camelCase JSON body accepted by POST /completion."""
    return {
        "threadId": "thread-1",
        "threadItemId": "item-2",
        "parentThreadItemId": "item-1",
        "prompt": "What is SSE?",
        "messages": [{"role": "user", "content": "What is SSE?"}],
        "mode": "gemini-flash-2.5",
    }


@pytest.fixture
def two_frame_executor():
    return ScriptedExecutor(
        frames=[
            ("answer", {"text": "Server-Sent ", "status": "PENDING"}),
            ("answer", {"text": "Events.", "status": "PENDING"}),
        ]
    )
