"""ASGI middleware for request validation."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, cast

from fastapi.responses import JSONResponse

from task_tracker_service.core.exceptions import ServiceError

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


# Public endpoints, checked eagerly. Everything else is behind the
# authorization gate, which must answer before anything about the body.
_JSON_VALIDATION_ENDPOINTS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("POST", re.compile(r"^/auth/signup$")),
    ("POST", re.compile(r"^/auth/signin$")),
)

_BODY_METHODS = ("POST", "PUT", "PATCH")

_TOO_LARGE_MESSAGE = "Request body exceeds maximum allowed size"


def payload_too_large() -> ServiceError:
    """Error for a body over the configured limit."""
    return ServiceError("PAYLOAD_TOO_LARGE", _TOO_LARGE_MESSAGE, 413, {})


class RequestValidationMiddleware:
    """
    ASGI middleware that validates Content-Type and body size.

    On the auth endpoints it returns 415 for a wrong content-type and 413
    for an oversized body before the route runs.

    On every other POST/PUT/PATCH the size limit is enforced lazily, while
    the route reads its body. Route dependencies (the authorization gate)
    run before the body is read, so a rejected caller gets 401, never 413.
    """

    def __init__(self, app: ASGIApp, max_body_size: int) -> None:
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = cast("str", scope.get("method", "GET"))

        if method not in _BODY_METHODS:
            await self.app(scope, receive, send)
            return

        path = cast("str", scope.get("path", ""))
        expects_json = any(
            candidate_method == method and pattern.match(path) is not None
            for candidate_method, pattern in _JSON_VALIDATION_ENDPOINTS
        )

        if not expects_json:
            await self.app(scope, self._limited_receive(receive), send)
            return

        raw_headers = cast("list[tuple[bytes, bytes]]", scope.get("headers", []))
        headers: dict[bytes, bytes] = dict(raw_headers)
        content_type = headers.get(b"content-type", b"").decode().lower()

        if not content_type.startswith("application/json"):
            response = JSONResponse(
                status_code=415,
                content={
                    "error": "UNSUPPORTED_MEDIA_TYPE",
                    "message": "Content-Type must be application/json",
                    "details": {},
                },
            )
            await response(scope, receive, send)
            return

        # Read and buffer body, checking size
        body_parts: list[bytes] = []
        body_size = 0

        while True:
            message = cast("dict[str, Any]", await receive())
            if message.get("type") == "http.disconnect":
                return
            chunk = cast("bytes", message.get("body", b""))
            body_parts.append(chunk)
            body_size += len(chunk)

            if body_size > self.max_body_size:
                response = JSONResponse(
                    status_code=413,
                    content={
                        "error": "PAYLOAD_TOO_LARGE",
                        "message": _TOO_LARGE_MESSAGE,
                        "details": {},
                    },
                )
                await response(scope, receive, send)
                return

            if not message.get("more_body", False):
                break

        # Replay buffered body for downstream app
        full_body = b"".join(body_parts)
        body_sent = False

        async def buffered_receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": full_body, "more_body": False}
            return {"type": "http.disconnect"}

        await self.app(scope, buffered_receive, send)

    def _limited_receive(self, receive: Receive) -> Receive:
        """Wrap receive so reading past max_body_size raises PAYLOAD_TOO_LARGE."""
        body_size = 0

        async def limited_receive() -> Message:
            nonlocal body_size
            message = await receive()
            if message.get("type") == "http.request":
                body_size += len(message.get("body", b""))
                if body_size > self.max_body_size:
                    raise payload_too_large()
            return message

        return limited_receive
