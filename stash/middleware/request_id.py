"""Request ID middleware.

Forwards a well-formed client X-Request-ID or mints one, echoes it on the
response and exposes it to log records for the duration of the request.
Raw ASGI so streamed downloads and background tasks are unaffected.
"""

import re
import uuid
from typing import Callable

from stash.shared.logging import request_id_var

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def header_value(scope: dict, name: str) -> str | None:
    """First value of header name in an ASGI scope (case-insensitive)."""
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("latin-1")
    return None


def _accept_or_mint(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if _REQUEST_ID_PATTERN.match(candidate):
        return candidate
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Tag each HTTP request and its response with a request id."""
    encoded_name = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        request_id = _accept_or_mint(header_value(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (encoded_name, request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)

    return asgi_app
