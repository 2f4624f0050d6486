"""
Unit Tests for API Routes

Tests the completion, title generation, health and metrics endpoints
through the FastAPI TestClient.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from completion_relay.application.api.dependencies import (
    get_completion_executor,
    get_title_generator_dep,
)
from completion_relay.application.app import create_app
from completion_relay.core.config.settings import Settings, reload_settings
from completion_relay.executors.llm_executor import LLMCompletionExecutor
from completion_relay.executors.providers import ProviderRegistry
from completion_relay.executors.title_generator import TitleGenerator
from tests.test_fixtures import ScriptedExecutor, data_frames, parse_sse, terminal_frames

COMPLETION_URL = "/api/completion"
TITLE_URL = "/api/title-generation"


class StaticTitleGenerator(TitleGenerator):
    def __init__(self, title: str = '"Server-Sent Events Explained"', error: Exception | None = None):
        self.title = title
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str, thread_id: str | None = None) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.title


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app, two_frame_executor):
    """Test client whose completion executor replays two answer frames."""
    app.dependency_overrides[get_completion_executor] = lambda: two_frame_executor
    return TestClient(app)


def assert_sse_headers(response):
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert response.headers["x-accel-buffering"] == "no"


@pytest.mark.unit
class TestCompletionOptions:
    """Test OPTIONS /completion."""

    def test_options_returns_sse_headers(self, client):
        response = client.options(COMPLETION_URL)

        assert response.status_code == 200
        assert_sse_headers(response)
        assert response.content == b""


@pytest.mark.unit
class TestCompletionValidation:
    """Test rejected completion requests."""

    def test_invalid_body_returns_400(self, client, valid_body):
        """Test a schema failure returns JSON with field details, not a stream."""
        del valid_body["threadId"]

        response = client.post(COMPLETION_URL, json=valid_body)

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["error"] == "Invalid request body"
        assert "threadId" in body["details"]

    def test_unparsable_json_returns_400(self, client):
        response = client.post(
            COMPLETION_URL, content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert {"threadId", "threadItemId", "prompt", "mode"} <= set(response.json()["details"])

    def test_executor_not_called_on_invalid_body(self, app, client, two_frame_executor):
        client.post(COMPLETION_URL, json={"prompt": "Hi"})
        assert two_frame_executor.calls == 0

    @pytest.mark.parametrize("mode", ["pro", "deep"])
    def test_auth_required_mode_returns_401(self, client, valid_body, two_frame_executor, mode):
        response = client.post(COMPLETION_URL, json={**valid_body, "mode": mode})

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}
        assert two_frame_executor.calls == 0

    def test_auth_required_mode_with_user_streams(self, client, valid_body):
        response = client.post(
            COMPLETION_URL, json={**valid_body, "mode": "pro"}, headers={"X-User-ID": "user-1"}
        )

        assert response.status_code == 200
        assert terminal_frames(parse_sse(response.content))[0]["data"]["status"] == "completed"

    def test_blank_user_header_is_anonymous(self, client, valid_body):
        response = client.post(
            COMPLETION_URL, json={**valid_body, "mode": "deep"}, headers={"X-User-ID": "  "}
        )
        assert response.status_code == 401


@pytest.mark.unit
class TestCompletionStream:
    """Test successful completion streams."""

    def test_stream_frames_and_headers(self, client, valid_body):
        """Test two progress frames followed by one completed terminal frame."""
        response = client.post(COMPLETION_URL, json=valid_body)

        assert response.status_code == 200
        assert_sse_headers(response)

        frames = data_frames(parse_sse(response.content))
        assert [f["event"] for f in frames] == ["answer", "answer", "done"]
        assert frames[0]["data"]["answer"]["text"] == "Server-Sent "
        assert frames[-1]["data"] == {
            "type": "done",
            "status": "completed",
            "threadId": "thread-1",
            "threadItemId": "item-2",
            "parentThreadItemId": "item-1",
        }

    def test_executor_failure_is_reported_in_band(self, app, valid_body):
        """Test a failure after the stream opened ends with an error frame, not a 5xx."""
        executor = ScriptedExecutor(
            frames=[("answer", {"text": "partial"})], error=RuntimeError("upstream broke")
        )
        app.dependency_overrides[get_completion_executor] = lambda: executor

        response = TestClient(app).post(COMPLETION_URL, json=valid_body)

        assert response.status_code == 200
        terminals = terminal_frames(parse_sse(response.content))
        assert len(terminals) == 1
        assert terminals[0]["data"]["status"] == "error"
        assert terminals[0]["data"]["error"] == "upstream broke"

    def test_immediate_executor_failure_ends_stream(self, app, valid_body):
        """Test an executor that fails before its first await still ends the stream."""
        registry = ProviderRegistry(Settings(GEMINI_API_KEY=None, OPENROUTER_API_KEY=None))
        app.dependency_overrides[get_completion_executor] = lambda: LLMCompletionExecutor(registry)

        response = TestClient(app).post(COMPLETION_URL, json=valid_body)

        assert response.status_code == 200
        frames = data_frames(parse_sse(response.content))
        assert len(terminal_frames(frames)) == 1
        assert frames[-1]["data"]["status"] == "error"
        assert frames[-1]["data"]["error"] == (
            "Missing Google Gemini API credentials. Set the GEMINI_API_KEY environment variable."
        )

    def test_geo_and_user_reach_executor(self, client, valid_body, two_frame_executor):
        client.post(
            COMPLETION_URL,
            json=valid_body,
            headers={"X-User-ID": "user-1", "x-vercel-ip-city": "S%C3%A3o%20Paulo", "x-vercel-ip-country": "BR"},
        )

        context = two_frame_executor.context
        assert context.user_id == "user-1"
        assert context.geo.city == "São Paulo"
        assert context.geo.country == "BR"

    def test_request_id_echoed(self, client, valid_body):
        response = client.post(COMPLETION_URL, json=valid_body, headers={"X-Request-ID": "req-42"})
        assert response.headers["x-request-id"] == "req-42"

    def test_pre_stream_failure_returns_500(self, client, valid_body):
        """Test a failure while building the stream is reported as a JSON 500."""
        with patch(
            "completion_relay.application.api.routes.completion.CompletionSession",
            side_effect=RuntimeError("session setup failed"),
        ):
            response = client.post(COMPLETION_URL, json=valid_body)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "details": "session setup failed"}

    def test_fake_executor_end_to_end(self, valid_body):
        """Test the default fake executor streams a full answer."""
        with TestClient(create_app()) as client:
            response = client.post(COMPLETION_URL, json=valid_body)

        frames = data_frames(parse_sse(response.content))
        types = [f["data"]["type"] for f in frames]
        assert types[-4:] == ["answer", "metrics", "status", "done"]
        assert frames[-1]["data"]["status"] == "completed"


@pytest.mark.unit
class TestRateLimiting:
    """Test the completion rate limit."""

    def test_limit_exceeded_returns_429(self, monkeypatch, client, valid_body):
        monkeypatch.setenv("RATE_LIMIT_COMPLETION", "2/minute")
        reload_settings()

        statuses = [client.post(COMPLETION_URL, json=valid_body).status_code for _ in range(3)]

        assert statuses == [200, 200, 429]
        response = client.post(COMPLETION_URL, json=valid_body)
        assert response.json()["error"] == "rate_limit_exceeded"
        assert response.headers["retry-after"] == "60"

    def test_limit_is_per_user(self, monkeypatch, client, valid_body):
        monkeypatch.setenv("RATE_LIMIT_COMPLETION", "1/minute")
        reload_settings()

        first = client.post(COMPLETION_URL, json=valid_body, headers={"X-User-ID": "a"})
        second = client.post(COMPLETION_URL, json=valid_body, headers={"X-User-ID": "b"})

        assert first.status_code == 200
        assert second.status_code == 200


@pytest.mark.unit
class TestTitleGeneration:
    """Test POST /title-generation."""

    @pytest.fixture
    def conversation(self):
        return {
            "threadId": "thread-1",
            "conversation": [
                {"role": "user", "content": "How do SSE work?"},
                {"role": "assistant", "content": "They stream events over HTTP."},
            ],
        }

    def test_returns_clean_title(self, app, conversation):
        generator = StaticTitleGenerator()
        app.dependency_overrides[get_title_generator_dep] = lambda: generator

        response = TestClient(app).post(TITLE_URL, json=conversation)

        assert response.status_code == 200
        assert response.json() == {"title": "Server-Sent Events Explained", "threadId": "thread-1"}
        assert "1. User: How do SSE work?" in generator.prompts[0]

    def test_refine_stage(self, app, conversation):
        generator = StaticTitleGenerator()
        app.dependency_overrides[get_title_generator_dep] = lambda: generator

        TestClient(app).post(TITLE_URL, json={**conversation, "stage": "refine"})

        assert "refined title" in generator.prompts[0]

    def test_invalid_request_returns_400(self, app, conversation):
        conversation["conversation"] = conversation["conversation"][:1]

        response = TestClient(app).post(TITLE_URL, json=conversation)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request data"
        assert "conversation" in response.json()["details"]

    def test_generator_failure_returns_500(self, app, conversation):
        app.dependency_overrides[get_title_generator_dep] = lambda: StaticTitleGenerator(
            error=RuntimeError("upstream down")
        )

        response = TestClient(app).post(TITLE_URL, json=conversation)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate title"}


@pytest.mark.unit
class TestHealthAndMetrics:
    """Test operational endpoints."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == "1.0.0"

    def test_metrics_exposition(self, client, valid_body):
        client.post(COMPLETION_URL, json=valid_body)

        response = client.get("/api/metrics")

        assert response.status_code == 200
        assert "completion_sessions_total" in response.text

    def test_root(self, client):
        body = client.get("/").json()
        assert body["completion"] == "/api/completion"
