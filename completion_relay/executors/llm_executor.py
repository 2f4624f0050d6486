#!/usr/bin/env python3
"""
LLM Completion Executor

Runs the plain completion workflow for a chat request against an
OpenAI-compatible upstream (Google Gemini or OpenRouter) and streams the
answer back through the session relay.

Frames emitted, in order:
    answer   {"text": <chunk>, "status": "PENDING"}            (zero or more)
    steps    {"0": {"steps": {"reasoning": {"data": <so far>}}}} (when the model reasons)
    answer   {"text": "", "fullText", "thinkingProcess", "status": "COMPLETED"}
    metrics  {"totalTokens", "promptTokens", "completionTokens", "durationMs", "model"}
    status   "COMPLETED"

Reasoning comes from ``<think>`` tags in the answer text, or from the
``reasoning`` / ``reasoning_content`` delta fields some OpenRouter models send.

The upstream call runs under ``CancellationToken.until_aborted``. Once the
token is set the pending request or chunk read is cancelled, the stream is
closed and OperationAbortedError is raised so the session can report an
``aborted`` terminal frame.
"""

import time
from datetime import datetime
from typing import TYPE_CHECKING, Any

from openai import APIConnectionError, APIError, AuthenticationError, RateLimitError

from completion_relay.application.api.models import CompletionRequest, GeoLocation
from completion_relay.chat.chunk_buffer import ChunkBuffer
from completion_relay.chat.history import trim_history
from completion_relay.chat.models import Model, model_for_mode
from completion_relay.chat.modes import get_mode_config
from completion_relay.chat.reasoning import ThinkTagSplitter
from completion_relay.core.config.constants import (
    FRAME_TYPE_ANSWER,
    FRAME_TYPE_METRICS,
    FRAME_TYPE_STATUS,
    FRAME_TYPE_STEPS,
    MAX_CUSTOM_INSTRUCTIONS_LENGTH,
    WorkflowStatus,
)
from completion_relay.core.exceptions import (
    OperationAbortedError,
    ProviderAPIError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderNotAvailableError,
    ProviderRateLimitError,
)
from completion_relay.core.logging import get_logger
from completion_relay.executors.base import CompletionExecutor, ExecutionContext
from completion_relay.executors.providers import ProviderRegistry
from completion_relay.infrastructure.monitoring import get_metrics_collector

if TYPE_CHECKING:
    from completion_relay.streaming.relay import StreamRelay

logger = get_logger(__name__)

NATIVE_INTERNET_ACCESS = """

**Important**: You have native internet access capabilities. Even though the web search feature is not enabled, you can still:
- Access current information and recent events
- Look up real-time data, prices, and statistics
- Provide up-to-date information about current affairs
- Check recent developments in technology, business, and other fields
- Access current weather, stock prices, and other live data when relevant

For Indian context queries, prioritize:
- Current INR exchange rates and market prices
- Latest RBI policies and government regulations
- Recent Indian startup funding, IPOs, and business news
- Current Digital India initiatives and UPI statistics
- Latest Supreme Court judgments and parliamentary developments
- Real-time NSE/BSE stock prices and market indices"""

SYSTEM_PROMPT = """You are a helpful assistant that can answer questions and help with tasks.
Today is {date}.{internet_access}

Before providing your final answer, please think through the problem step by step inside <think> tags. This thinking process helps you reason through complex problems and provide better responses.

Use <think> tags like this:
<think>
Let me think about this step by step:
1. First, I need to understand what the user is asking...
2. Then I should consider...
3. Finally, I can conclude...
</think>

After your thinking process, provide your clear, well-structured answer."""

REASONING_THRESHOLD = 120
REASONING_BREAK_ON = ("\n\n",)


def humanized_date(now: datetime | None = None) -> str:
    """Format a date the way it reads in a prompt, e.g. 'Saturday, October 18, 2026'."""
    now = now or datetime.now()
    return f"{now.strftime('%A')}, {now.strftime('%B')} {now.day}, {now.year}"


def system_prompt(data: CompletionRequest, date: str) -> str:
    # Models with their own internet access are told so unless web search was requested
    native_internet = get_mode_config(data.mode).native_internet_access and not data.web_search
    return SYSTEM_PROMPT.format(
        date=date, internet_access=NATIVE_INTERNET_ACCESS if native_internet else ""
    )


def build_messages(data: CompletionRequest, geo: GeoLocation | None = None) -> list[dict[str, str]]:
    """
    Assemble the upstream chat messages.

    - System prompt with today's date and the reasoning instructions
    - Custom instructions (with the client location when known) when shorter than the limit
    - History limited to user/assistant turns that have content
    - The prompt as the final user turn, unless the history already ends with it
    """
    date = humanized_date()
    messages: list[dict[str, str]] = [{"role": "system", "content": system_prompt(data, date)}]

    instructions = data.custom_instructions
    if instructions and len(instructions) < MAX_CUSTOM_INSTRUCTIONS_LENGTH:
        location = ""
        if geo is not None and geo.is_known:
            place = ", ".join(part for part in (geo.city, geo.country) if part)
            location = f" and current location is {place}."
        messages.append(
            {"role": "system", "content": f"Today is {date}.{location} \n\n {instructions}"}
        )

    history = [
        {"role": message.role, "content": message.content}
        for message in data.messages
        if message.role in ("user", "assistant") and message.content
    ]
    if not history or history[-1] != {"role": "user", "content": data.prompt}:
        history.append({"role": "user", "content": data.prompt})

    trimmed = trim_history(history, data.mode)
    return messages + trimmed.messages


def reasoning_steps(text: str) -> dict[str, Any]:
    """Payload of a ``steps`` frame carrying the reasoning gathered so far."""
    completed = WorkflowStatus.COMPLETED.value
    return {
        "0": {
            "id": 0,
            "status": completed,
            "steps": {"reasoning": {"data": text, "status": completed}},
        }
    }


class StreamedAnswer:
    """
    Routes upstream deltas into an answer buffer and a reasoning buffer.

    Answer text is flushed as PENDING ``answer`` frames at sentence breaks;
    reasoning is flushed as ``steps`` frames at paragraph breaks.
    """

    def __init__(self, relay: "StreamRelay"):
        self._splitter = ThinkTagSplitter()
        self.answer = ChunkBuffer(
            lambda chunk, _full: relay.emit(
                FRAME_TYPE_ANSWER, {"text": chunk, "status": WorkflowStatus.PENDING.value}
            )
        )
        self.reasoning = ChunkBuffer(
            lambda _chunk, full: relay.emit(FRAME_TYPE_STEPS, reasoning_steps(full)),
            threshold=REASONING_THRESHOLD,
            break_on=REASONING_BREAK_ON,
        )

    def add_delta(self, delta) -> None:
        native_reasoning = getattr(delta, "reasoning", None) or getattr(delta, "reasoning_content", None)
        if isinstance(native_reasoning, str):
            self.reasoning.add(native_reasoning)

        if delta.content:
            thought, text = self._splitter.feed(delta.content)
            self.reasoning.add(thought)
            self.answer.add(text)

    def end(self) -> None:
        thought, text = self._splitter.flush()
        self.reasoning.add(thought)
        self.answer.add(text)
        self.reasoning.end()
        self.answer.end()

    @property
    def full_text(self) -> str:
        return self.answer.full_text

    @property
    def thinking_process(self) -> str:
        return self.reasoning.full_text


class LLMCompletionExecutor(CompletionExecutor):
    """
    Streams a chat completion from the provider serving the request's mode.
    """

    name = "llm"

    def __init__(self, registry: ProviderRegistry):
        self.registry = registry
        self.metrics = get_metrics_collector()

    async def execute(self, context: ExecutionContext) -> None:
        data = context.data
        relay = context.relay
        token = context.cancellation_token
        model = model_for_mode(data.mode)

        token.raise_if_aborted()
        client = self.registry.get_client(model.provider, thread_id=data.thread_id)
        messages = build_messages(data, context.geo)
        answer = StreamedAnswer(relay)

        logger.info(
            "completion_started",
            model=model.id.value,
            provider=model.provider.value,
            message_count=len(messages),
            web_search=data.web_search,
            show_suggestions=data.show_suggestions,
        )
        started = time.perf_counter()
        try:
            usage = await self._stream(client, model, messages, answer, context)
        except ProviderError as error:
            raise error.with_context(model=model.id.value)
        answer.end()
        duration_ms = int((time.perf_counter() - started) * 1000)

        relay.emit(
            FRAME_TYPE_ANSWER,
            {
                "text": "",
                "fullText": answer.full_text,
                "thinkingProcess": answer.thinking_process,
                "status": WorkflowStatus.COMPLETED.value,
            },
        )
        relay.emit(
            FRAME_TYPE_METRICS,
            {
                "totalTokens": usage.get("total_tokens", 0),
                "promptTokens": usage.get("prompt_tokens", 0),
                "completionTokens": usage.get("completion_tokens", 0),
                "durationMs": duration_ms,
                "model": model.id.value,
            },
        )
        relay.emit(FRAME_TYPE_STATUS, WorkflowStatus.COMPLETED.value)
        self.metrics.record_provider_request(model.provider.value, "success")
        logger.info("completion_finished", model=model.id.value, duration_ms=duration_ms)

    async def _consume(
        self,
        client,
        model: Model,
        messages: list[dict[str, str]],
        answer: StreamedAnswer,
        context: ExecutionContext,
    ) -> dict[str, Any]:
        """Request the completion and feed its chunks into ``answer``. Returns token usage."""
        token = context.cancellation_token
        usage: dict[str, Any] = {}

        stream = await client.chat.completions.create(
            model=model.id.value,
            messages=messages,
            stream=True,
            stream_options={"include_usage": True},
        )
        try:
            async for chunk in stream:
                if token.aborted:
                    break
                if chunk.choices:
                    answer.add_delta(chunk.choices[0].delta)
                if chunk.usage is not None:
                    usage = chunk.usage.model_dump()
        finally:
            await stream.close()

        if token.aborted:
            raise OperationAbortedError(
                f"Completion aborted: {token.reason}", thread_id=context.data.thread_id
            )
        return usage

    async def _stream(
        self,
        client,
        model: Model,
        messages: list[dict[str, str]],
        answer: StreamedAnswer,
        context: ExecutionContext,
    ) -> dict[str, Any]:
        """Run ``_consume`` until it finishes or the token is set, mapping SDK errors."""
        token = context.cancellation_token
        thread_id = context.data.thread_id
        provider = model.provider.value

        try:
            return await token.until_aborted(
                self._consume(client, model, messages, answer, context)
            )

        except OperationAbortedError:
            self.metrics.record_provider_request(provider, "aborted")
            raise

        except AuthenticationError as auth_error:
            self.metrics.record_provider_request(provider, "failure")
            logger.error("provider_authentication_failed", provider=provider, error=str(auth_error))
            raise ProviderAuthenticationError(
                message=f"Invalid {provider} API key",
                thread_id=thread_id,
                details={"provider": provider},
            ) from auth_error

        except RateLimitError as rate_error:
            self.metrics.record_provider_request(provider, "failure")
            logger.warning("provider_rate_limited", provider=provider, error=str(rate_error))
            raise ProviderRateLimitError(
                message=f"{provider} rate limit exceeded, please try again later",
                thread_id=thread_id,
                details={"provider": provider},
            ) from rate_error

        except APIConnectionError as conn_error:
            if token.aborted:
                self.metrics.record_provider_request(provider, "aborted")
                raise OperationAbortedError("Upstream call aborted", thread_id=thread_id) from conn_error
            self.metrics.record_provider_request(provider, "failure")
            logger.error("provider_connection_failed", provider=provider, error=str(conn_error))
            raise ProviderNotAvailableError(
                message=f"Could not connect to {provider}",
                thread_id=thread_id,
                details={"provider": provider},
            ) from conn_error

        except APIError as api_error:
            self.metrics.record_provider_request(provider, "failure")
            logger.error("provider_api_error", provider=provider, error=str(api_error))
            raise ProviderAPIError(
                message=f"{provider} API returned an error: {api_error.message}",
                thread_id=thread_id,
                details={"provider": provider, "code": api_error.code},
            ) from api_error
