"""
Test Fixtures Package

Shared test doubles and SSE parsing helpers used across the test layers.
"""

from .executors import ScriptedExecutor
from .sse import data_frames, parse_sse, terminal_frames

__all__ = ["ScriptedExecutor", "parse_sse", "data_frames", "terminal_frames"]
