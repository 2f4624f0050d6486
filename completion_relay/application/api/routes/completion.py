"""
Completion Routes
=================

POST /completion opens a Server-Sent Events stream that carries one
completion session:

    event: answer
    data: {"type":"answer","threadId":"t1","threadItemId":"i1",...,"answer":{...}}

    : heartbeat

    event: done
    data: {"type":"done","status":"completed","threadId":"t1",...}

REQUEST LIFECYCLE:
------------------
1. Parse the JSON body (unparsable bodies are treated as ``{}``)
2. Validate it                               → 400 on failure
3. Check whether the mode requires a user    → 401 when anonymous
4. Build the session and return the stream   → 200 text/event-stream
Anything raised before step 4 completes      → 500

Once the 200 headers are sent no HTTP error can be reported; every later
failure travels in-band as the terminal ``done`` frame.

OPTIONS /completion answers preflight-style probes with the SSE headers and
no body.
"""

from typing import Any

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from completion_relay.application.api.dependencies import ExecutorDep, GeoDep, SettingsDep, UserIdDep
from completion_relay.application.api.models import CompletionRequest
from completion_relay.application.validators import RequestValidator
from completion_relay.chat.modes import requires_auth
from completion_relay.core.config.constants import SSE_HEADERS, SSE_MEDIA_TYPE
from completion_relay.core.exceptions import InvalidRequestBodyError
from completion_relay.core.logging import get_logger
from completion_relay.infrastructure.monitoring import get_metrics_collector
from completion_relay.infrastructure.rate_limiting import completion_limit, get_rate_limit_manager
from completion_relay.streaming import CompletionSession

logger = get_logger(__name__)

router = APIRouter(tags=["Completion"])

rate_limits = get_rate_limit_manager()
completion_validator = RequestValidator(CompletionRequest, error_message="Invalid request body")


async def read_json_body(request: Request) -> Any:
    """Decode the request body, treating unparsable JSON as an empty object."""
    try:
        return await request.json()
    except ValueError:
        return {}


@router.options("/completion")
async def completion_options() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=SSE_HEADERS)


@router.post(
    "/completion",
    responses={
        200: {"content": {SSE_MEDIA_TYPE: {}}, "description": "SSE stream of completion frames"},
        400: {"description": "Invalid request body"},
        401: {"description": "Authentication required for the selected mode"},
        429: {"description": "Rate limit exceeded"},
        500: {"description": "Failure before the stream started"},
    },
)
@rate_limits.limit(completion_limit)
async def create_completion(
    request: Request,
    executor: ExecutorDep,
    user_id: UserIdDep,
    geo: GeoDep,
    settings: SettingsDep,
):
    metrics = get_metrics_collector()

    try:
        raw_body = await read_json_body(request)

        try:
            data = completion_validator.validate(raw_body)
        except InvalidRequestBodyError as e:
            metrics.record_validation_failure("completion")
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": e.message, "details": e.field_errors},
            )

        if requires_auth(data.mode) and not user_id:
            metrics.record_auth_rejection(data.mode.value)
            logger.info("completion_auth_required", mode=data.mode.value)
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Authentication required"},
            )

        session = CompletionSession(
            data,
            executor,
            user_id=user_id,
            geo=geo,
            is_disconnected=request.is_disconnected,
            settings=settings,
            metrics=metrics,
        )

        return StreamingResponse(
            session.iter_frames(),
            media_type=SSE_MEDIA_TYPE,
            headers=SSE_HEADERS,
        )

    except Exception as e:
        logger.error(
            "completion_request_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "details": str(e)},
        )
