"""
Request ID Middleware

Correlates every log line of a request with an ``X-Request-ID``. The id is
taken from the inbound header when a proxy already assigned one, generated
otherwise, and echoed on the response.

Written as pure ASGI middleware rather than BaseHTTPMiddleware so the
context variable stays set while a streaming body is being produced.
"""

import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from completion_relay.core.config.constants import HEADER_REQUEST_ID
from completion_relay.core.logging import clear_request_id, set_request_id


class RequestIdMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_id(request_id)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[HEADER_REQUEST_ID] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            clear_request_id()
