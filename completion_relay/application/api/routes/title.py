"""
Title Generation Route

POST /title-generation names a chat thread from its first exchanges.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from completion_relay.application.api.dependencies import TitleGeneratorDep
from completion_relay.application.api.models import TitleGenerationRequest, TitleGenerationResponse
from completion_relay.application.api.routes.completion import read_json_body
from completion_relay.application.validators import RequestValidator
from completion_relay.chat.titles import build_title_prompt, clean_title
from completion_relay.core.exceptions import InvalidRequestBodyError
from completion_relay.core.logging import get_logger
from completion_relay.infrastructure.monitoring import get_metrics_collector

logger = get_logger(__name__)

router = APIRouter(tags=["Titles"])

title_validator = RequestValidator(TitleGenerationRequest, error_message="Invalid request data")


@router.post("/title-generation", response_model=TitleGenerationResponse, response_model_by_alias=True)
async def generate_title(request: Request, generator: TitleGeneratorDep):
    try:
        data = title_validator.validate(await read_json_body(request))
    except InvalidRequestBodyError as e:
        get_metrics_collector().record_validation_failure("title-generation")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": e.message, "details": e.field_errors},
        )

    prompt = build_title_prompt(
        [(turn.role, turn.content) for turn in data.conversation], stage=data.stage
    )

    try:
        raw_title = await generator.generate(prompt, thread_id=data.thread_id)
    except Exception as e:
        logger.error("title_generation_failed", error=str(e), error_type=type(e).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to generate title"},
        )

    title = clean_title(raw_title)
    logger.info("title_generated", thread_id=data.thread_id, stage=data.stage)
    return TitleGenerationResponse(title=title, thread_id=data.thread_id)
