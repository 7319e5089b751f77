"""Per-request log context: request ID, method, path and timing."""

import time
import uuid

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tutordesk.core.logging import get_logger, set_request_id

REQUEST_ID_HEADER = b"x-request-id"


class RequestIDMiddleware:
    """
    Give every HTTP request an ID and echo it back in X-Request-ID.

    A client-supplied X-Request-ID is reused so a submission can be traced
    across the frontend and this service. Method and path are bound alongside
    it, so enrollment events logged during the request carry all three.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        structlog.contextvars.clear_contextvars()
        request_id = dict(scope.get("headers", [])).get(REQUEST_ID_HEADER, b"").decode()
        request_id = request_id or str(uuid.uuid4())
        set_request_id(request_id)
        structlog.contextvars.bind_contextvars(method=scope["method"], path=scope["path"])

        started = time.perf_counter()
        self.logger.info("request.start")

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode()),
                ]
                self.logger.info(
                    "request.complete",
                    status_code=message.get("status"),
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                )
            await send(message)

        await self.app(scope, receive, send_with_request_id)
