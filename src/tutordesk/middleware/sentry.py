"""Sentry context middleware to capture request context in error reports."""

import uuid

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from tutordesk.core.logging import get_request_id


class SentryContextMiddleware:
    """
    Inject structured context into Sentry error reports.

    Captures:
    - request_id: Unique request identifier
    - user_id: Authenticated user ID (if available)
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = get_request_id()
        if request_id == "no-request-id":
            request_id = str(uuid.uuid4())

        # Populated by SessionMiddleware, which wraps this middleware
        session = scope.get("session", {})
        user_id = session.get("user_id")

        sentry_sdk.set_tag("request_id", request_id)
        if user_id:
            sentry_sdk.set_user({"id": user_id})
            sentry_sdk.set_tag("user_id", user_id)

        sentry_sdk.set_context(
            "request",
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "request_id": request_id,
            },
        )

        await self.app(scope, receive, send)
