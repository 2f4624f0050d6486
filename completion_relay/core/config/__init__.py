"""
Configuration Module

Centralized, type-safe configuration management for the completion relay.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: System-wide constants and enums

Usage:
------
```python
from completion_relay.core.config import get_settings
from completion_relay.core.config.constants import TerminalStatus

settings = get_settings()
interval = settings.streaming.SSE_HEARTBEAT_INTERVAL
```

Environment Variables:
---------------------
```bash
SSE_HEARTBEAT_INTERVAL=15
COMPLETION_EXECUTOR=llm
GEMINI_API_KEY=...
OPENROUTER_API_KEY=...
RATE_LIMIT_COMPLETION=60/minute
LOG_LEVEL=INFO
LOG_FORMAT=json
```
"""

from completion_relay.core.config.constants import (
    HEADER_REQUEST_ID,
    HEADER_USER_ID,
    SSE_HEADERS,
    RelayState,
    TerminalStatus,
    WorkflowStatus,
)
from completion_relay.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "RelayState",
    "TerminalStatus",
    "WorkflowStatus",
    # HTTP headers
    "HEADER_REQUEST_ID",
    "HEADER_USER_ID",
    "SSE_HEADERS",
]
