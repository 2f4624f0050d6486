#!/usr/bin/env python3
"""
Metrics Collector with Prometheus Integration

This module provides metrics collection for completion sessions:
- Sessions by terminal status
- Active session gauge
- Frames written by kind (data, comment, terminal)
- Heartbeats and suppressed channel-closed writes
- Request validation failures and rate limit rejections

Architectural Decision: prometheus-client for industry-standard metrics
- Compatible with Grafana dashboards
- Exposed at GET {API_BASE_PATH}/metrics
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)

from completion_relay.core.config.settings import get_settings
from completion_relay.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# Metric Definitions
# ============================================================================

SESSIONS = Counter(
    'completion_sessions_total',
    'Completion sessions by terminal status',
    ['status']  # completed, aborted, error
)

ACTIVE_SESSIONS = Gauge(
    'completion_active_sessions',
    'Number of open completion sessions'
)

SESSION_DURATION = Histogram(
    'completion_session_duration_seconds',
    'Completion session duration',
    ['status'],
    buckets=(0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0)
)

FRAMES_WRITTEN = Counter(
    'completion_frames_written_total',
    'SSE frames written to output channels',
    ['kind']  # data, comment, terminal
)

HEARTBEATS = Counter(
    'completion_heartbeats_total',
    'Heartbeat comment frames written'
)

CHANNEL_CLOSED_SUPPRESSED = Counter(
    'completion_channel_closed_suppressed_total',
    'Writes or closes suppressed because the channel was already gone',
    ['operation']  # write, close
)

VALIDATION_FAILURES = Counter(
    'completion_validation_failures_total',
    'Rejected request bodies',
    ['endpoint']
)

AUTH_REJECTIONS = Counter(
    'completion_auth_rejections_total',
    'Requests rejected because the mode requires authentication',
    ['mode']
)

RATE_LIMIT_EXCEEDED = Counter(
    'completion_rate_limit_exceeded_total',
    'Total rate limit exceeded events',
    ['user_type']  # ip, user, token
)

PROVIDER_REQUESTS = Counter(
    'completion_provider_requests_total',
    'Requests to LLM providers',
    ['provider', 'status']  # success, failure, aborted
)

APP_INFO = Info(
    'completion_app',
    'Application information'
)


class MetricsCollector:
    """
    Centralized metrics collector.

    Usage:
        metrics = get_metrics_collector()
        metrics.session_opened()
        metrics.record_frame("data")
        metrics.session_closed("completed", duration_seconds=1.2)
    """

    def __init__(self):
        self.settings = get_settings()

        APP_INFO.info({
            'version': self.settings.app.APP_VERSION,
            'environment': self.settings.app.ENVIRONMENT,
            'app_name': self.settings.app.APP_NAME
        })

        logger.info("metrics_collector_initialized")

    # =========================================================================
    # Session Metrics
    # =========================================================================

    def session_opened(self) -> None:
        ACTIVE_SESSIONS.inc()

    def session_closed(self, status: str, duration_seconds: float | None = None) -> None:
        """Record the end of a session with its terminal status."""
        ACTIVE_SESSIONS.dec()
        SESSIONS.labels(status=status).inc()
        if duration_seconds is not None:
            SESSION_DURATION.labels(status=status).observe(duration_seconds)

    # =========================================================================
    # Frame Metrics
    # =========================================================================

    def record_frame(self, kind: str) -> None:
        FRAMES_WRITTEN.labels(kind=kind).inc()

    def record_heartbeat(self) -> None:
        HEARTBEATS.inc()

    def record_channel_closed(self, operation: str) -> None:
        """Record a write or close that hit an already-closed channel."""
        CHANNEL_CLOSED_SUPPRESSED.labels(operation=operation).inc()

    # =========================================================================
    # Request Metrics
    # =========================================================================

    def record_validation_failure(self, endpoint: str) -> None:
        VALIDATION_FAILURES.labels(endpoint=endpoint).inc()

    def record_auth_rejection(self, mode: str) -> None:
        AUTH_REJECTIONS.labels(mode=mode).inc()

    def record_rate_limit_exceeded(self, user_type: str) -> None:
        RATE_LIMIT_EXCEEDED.labels(user_type=user_type).inc()

    def record_provider_request(self, provider: str, status: str) -> None:
        PROVIDER_REQUESTS.labels(provider=provider, status=status).inc()

    # =========================================================================
    # Export
    # =========================================================================

    def get_prometheus_metrics(self) -> bytes:
        """
        Get Prometheus metrics output.

        Returns:
            bytes: Prometheus text format metrics
        """
        return generate_latest(REGISTRY)

    def get_content_type(self) -> str:
        return CONTENT_TYPE_LATEST


# Global metrics collector
_metrics: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
