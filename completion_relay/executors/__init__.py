"""
Completion Executors

Executors perform the LLM call for a session and emit data frames through
the session's Stream Relay.
"""

from completion_relay.executors.base import CompletionExecutor, ExecutionContext
from completion_relay.executors.factory import (
    close_executor,
    create_executor,
    create_title_generator,
    get_executor,
    get_title_generator,
)
from completion_relay.executors.fake_executor import FakeCompletionExecutor
from completion_relay.executors.llm_executor import LLMCompletionExecutor
from completion_relay.executors.title_generator import (
    FakeTitleGenerator,
    LLMTitleGenerator,
    TitleGenerator,
)

__all__ = [
    "CompletionExecutor",
    "ExecutionContext",
    "FakeCompletionExecutor",
    "LLMCompletionExecutor",
    "TitleGenerator",
    "LLMTitleGenerator",
    "FakeTitleGenerator",
    "create_executor",
    "create_title_generator",
    "get_executor",
    "get_title_generator",
    "close_executor",
]
