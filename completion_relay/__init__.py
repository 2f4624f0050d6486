"""Chat completion relay: SSE streaming of LLM completions."""

__version__ = "1.0.0"
