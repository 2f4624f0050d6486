"""
Application Validators

Schema validation of inbound request bodies.
"""

from completion_relay.application.validators.request_validator import (
    RequestValidator,
    format_validation_errors,
)

__all__ = ["RequestValidator", "format_validation_errors"]
