"""
Request Validator

Parses and schema-validates raw JSON bodies before any stream is
constructed. Failures are reported field by field so the client can show
precise messages.

USAGE:
------
    validator = RequestValidator(CompletionRequest)
    try:
        data = validator.validate(raw_body)
    except InvalidRequestBodyError as e:
        return JSONResponse(status_code=400, content={"error": ..., "details": e.field_errors})
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from completion_relay.core.exceptions import InvalidRequestBodyError
from completion_relay.core.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ROOT_ERROR_KEY = "_root"


def format_validation_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    """
    Group pydantic errors by dotted field path.

    Example:
        {"threadId": ["Field required"], "messages.0.role": ["Input should be 'user', ..."]}
    """
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ())) or ROOT_ERROR_KEY
        field_errors.setdefault(path, []).append(error.get("msg", "Invalid value"))
    return field_errors


class RequestValidator(Generic[ModelT]):
    """Validates raw request bodies against a pydantic model."""

    def __init__(self, model: type[ModelT], error_message: str = "Invalid request body"):
        self.model = model
        self.error_message = error_message

    def validate(self, raw: Any) -> ModelT:
        """
        Validate a decoded JSON body.

        Raises:
            InvalidRequestBodyError: with ``field_errors`` describing every
                failing field.
        """
        try:
            return self.model.model_validate(raw)
        except PydanticValidationError as exc:
            field_errors = format_validation_errors(exc)
            logger.info(
                "request_validation_failed",
                model=self.model.__name__,
                fields=sorted(field_errors),
            )
            raise InvalidRequestBodyError(
                self.error_message,
                field_errors=field_errors,
                details={"model": self.model.__name__},
            ) from exc
