"""
Blog Backend — Request Body Size Middleware
=============================================

What:  Rejects requests whose body exceeds settings.max_body_size.
How:   Two checks, both answered with 413 and the standard error envelope:

       1. A declared Content-Length above the ceiling is refused before
          the application runs.
       2. Bodies without a Content-Length (chunked transfer) are counted as
          they are received; the read that crosses the ceiling raises
          PayloadTooLargeError, which the global handler turns into 413.

       Plain ASGI middleware, so the `receive` channel the route reads the
       body from can be wrapped.
"""

import logging
from typing import Optional

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.config import settings
from app.exceptions import BlogError, PayloadTooLargeError, ValidationError

logger = logging.getLogger(__name__)


def _error_response(exc: BlogError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.message},
    )


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_body_size: Optional[int] = None):
        self.app = app
        self.max_body_size = max_body_size or settings.max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                length = int(declared)
            except ValueError:
                response = _error_response(ValidationError(message="Invalid Content-Length header"))
                await response(scope, receive, send)
                return
            if length > self.max_body_size:
                self._log_rejection(scope, length)
                await _error_response(PayloadTooLargeError(limit=self.max_body_size))(
                    scope, receive, send
                )
                return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    self._log_rejection(scope, received)
                    raise PayloadTooLargeError(limit=self.max_body_size)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except PayloadTooLargeError as exc:
            # Body read outside the routed handlers; nothing answered yet
            if response_started:
                raise
            await _error_response(exc)(scope, receive, send)

    def _log_rejection(self, scope: Scope, size: int) -> None:
        logger.warning(
            "Rejected %s %s: body of %d bytes exceeds %d",
            scope.get("method", ""),
            scope.get("path", ""),
            size,
            self.max_body_size,
        )
