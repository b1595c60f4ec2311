"""Request logging and ID injection middleware."""

import time
import uuid

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from barstock.core.logging import get_logger, set_request_id

MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware:
    """
    Tag every request with an ID and log its start and completion.

    A client-supplied X-Request-ID is reused when it is short enough to be
    an ID; otherwise a UUID is generated. The ID is echoed back on the
    response and bound into every log line emitted while serving it.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    @staticmethod
    def _incoming_id(scope: Scope) -> str:
        for name, value in scope.get("headers", []):
            if name == b"x-request-id":
                candidate = value.decode("latin1").strip()
                if candidate and len(candidate) <= MAX_REQUEST_ID_LENGTH:
                    return candidate
                break
        return str(uuid.uuid4())

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        structlog.contextvars.clear_contextvars()
        request_id = self._incoming_id(scope)
        set_request_id(request_id)

        started = time.perf_counter()
        self.logger.info("request.start", method=scope["method"], path=scope["path"])

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin1")))
                message["headers"] = headers

                self.logger.info(
                    "request.complete",
                    status_code=message.get("status"),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

            await send(message)

        await self.app(scope, receive, send_with_request_id)
