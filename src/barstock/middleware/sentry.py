"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from barstock.core.logging import get_request_id


class SentryContextMiddleware:
    """
    Attach request context to Sentry events.

    Runs inside RequestIDMiddleware and SessionMiddleware, so the request ID
    context var and the signed session are both available here.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = get_request_id()
        session = scope.get("session") or {}
        user_id = session.get("user_id")

        with sentry_sdk.new_scope() as sentry_scope:
            sentry_scope.set_tag("request_id", request_id)
            if user_id:
                sentry_scope.set_user({"id": user_id})
            sentry_scope.set_context(
                "request",
                {
                    "method": scope.get("method"),
                    "path": scope.get("path"),
                    "request_id": request_id,
                },
            )
            await self.app(scope, receive, send)
