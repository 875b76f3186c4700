import asyncio
import json
import logging
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.exceptions import Transient
from app.core.logging import request_id_ctx_var

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware:
    """Attach or generate an X-Request-ID for each request and set it on a contextvar
    so log records can include it via RequestIdFilter.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        # Only act on HTTP requests
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        raw = headers.get(b"x-request-id")
        request_id = raw.decode("latin-1") if raw else str(uuid.uuid4())
        token = request_id_ctx_var.set(request_id)

        async def send_with_request_id(message: Message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"] = list(message["headers"]) + [
                    (b"x-request-id", request_id.encode("latin-1"))
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            request_id_ctx_var.reset(token)


class TimeoutMiddleware:
    """Bound every HTTP request by a wall-clock timeout.

    A request that runs out of time before its response has started is answered
    with 503 so callers can treat it as retryable.
    """

    def __init__(self, app: ASGIApp, timeout: float):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or not self.timeout:
            await self.app(scope, receive, send)
            return

        started = False

        async def send_tracking(message: Message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_tracking), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Request timed out", extra={"path": scope.get("path")})
            if started:
                raise
            exc = Transient("Request timed out")
            body = json.dumps({"error": exc.message}).encode()
            await send({
                "type": "http.response.start",
                "status": exc.status_code,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(body)).encode()),
                ],
            })
            await send({"type": "http.response.body", "body": body})
