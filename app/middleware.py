# =============================================================================
# app/middleware.py - HTTP Failure Channel
# =============================================================================
# ASGI middleware that routes unhandled request failures through the same
# FailureInterceptor as the process hooks:
# - the failure is normalized into a FailureRecord and logged
# - the body is decided by the interceptor's config (generic or rendered)
# - if no headers were sent yet: 500 + plain text + no-cache headers
# - if headers were sent: the body is the final chunk, or the response is
#   just closed when it declared a Content-Length
#
# For a request, the terminal action is ending the response; the worker
# process keeps serving other requests.
#
# Usage:
#   app.add_middleware(FailureMiddleware, interceptor=interceptor)
# =============================================================================

import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from core.interceptor import FailureInterceptor
from core.models.failure import FailureRecord

logger = logging.getLogger(__name__)

FAILURE_STATUS_CODE = 500

FAILURE_HEADERS: list[tuple[bytes, bytes]] = [
    (b"content-type", b"text/plain; charset=utf-8"),
    (b"cache-control", b"private, no-cache, no-store, must-revalidate"),
    (b"pragma", b"no-cache"),
    (b"expires", b"Sat, 01 Jan 2000 00:00:00 GMT"),
]


class FailureMiddleware:
    """
    Last-resort handler for exceptions escaping a request.

    Sits inside Starlette's ServerErrorMiddleware, so it sees the exception
    first and the server never prints its own traceback or error page.
    """

    def __init__(self, app: ASGIApp, interceptor: FailureInterceptor):
        self.app = app
        self.interceptor = interceptor

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False
        response_complete = False
        length_declared = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started, response_complete, length_declared

            if message["type"] == "http.response.start":
                response_started = True
                length_declared = any(
                    name.lower() == b"content-length"
                    for name, _ in message.get("headers", [])
                )
            elif message["type"] == "http.response.body" and not message.get("more_body", False):
                response_complete = True

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            logger.debug(f"Unhandled failure on {scope.get('method')} {scope.get('path')}")

            record = FailureRecord.from_exception(exc)
            try:
                self.interceptor.write_log(record)
            except Exception:
                logger.exception("Failure log write failed")

            # Nothing more can be written to a finished response
            if response_complete:
                return

            body = self.interceptor.response_body(record).encode("utf-8")

            # Extra bytes would break a declared Content-Length; just end the body
            if response_started and length_declared:
                body = b""

            if not response_started:
                await send({
                    "type": "http.response.start",
                    "status": FAILURE_STATUS_CODE,
                    "headers": FAILURE_HEADERS + [
                        (b"content-length", str(len(body)).encode("latin-1")),
                    ],
                })

            await send({
                "type": "http.response.body",
                "body": body,
                "more_body": False,
            })
