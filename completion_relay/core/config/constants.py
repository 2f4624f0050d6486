"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the completion relay.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic strings (headers, frame types)
- Type-safe enums for state management
"""

from enum import Enum

# ============================================================================
# Terminal Status
# ============================================================================


class TerminalStatus(str, Enum):
    """
    Status carried by the terminal ``done`` frame of a completion session.

    COMPLETED: Executor finished normally
    ABORTED: Client or consumer went away (clean, non-error termination)
    ERROR: Executor failed; the frame carries a human-readable message
    """

    COMPLETED = "completed"
    ABORTED = "aborted"
    ERROR = "error"


# ============================================================================
# Relay States
# ============================================================================


class RelayState(str, Enum):
    """
    Stream relay lifecycle.

    OPEN: Accepting data, heartbeat and terminal frames
    CLOSING: Terminal frame written, waiting for close()
    CLOSED: Channel released (or found gone); every write is a no-op
    """

    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


# ============================================================================
# Workflow Status (values used inside progress frames)
# ============================================================================


class WorkflowStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"
    ABORTED = "ABORTED"


# ============================================================================
# SSE Frame Types
# ============================================================================

FRAME_TYPE_DONE = "done"
FRAME_TYPE_ANSWER = "answer"
FRAME_TYPE_STATUS = "status"
FRAME_TYPE_METRICS = "metrics"
FRAME_TYPE_STEPS = "steps"

HEARTBEAT_COMMENT = "heartbeat"

# ============================================================================
# HTTP Headers
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"
HEADER_USER_ID = "X-User-ID"

# Geolocation headers set by the edge network in front of the service
HEADER_GEO_CITY = "x-vercel-ip-city"
HEADER_GEO_COUNTRY = "x-vercel-ip-country"
HEADER_GEO_REGION = "x-vercel-ip-country-region"
HEADER_GEO_LATITUDE = "x-vercel-ip-latitude"
HEADER_GEO_LONGITUDE = "x-vercel-ip-longitude"

SSE_MEDIA_TYPE = "text/event-stream"

SSE_HEADERS = {
    "Content-Type": SSE_MEDIA_TYPE,
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # Some reverse proxies buffer responses, which breaks streaming
    "X-Accel-Buffering": "no",
}

# ============================================================================
# Completion Limits
# ============================================================================

MAX_CUSTOM_INSTRUCTIONS_LENGTH = 6000
TOKENS_PER_WORD = 1.35
TITLE_MAX_LENGTH = 80
