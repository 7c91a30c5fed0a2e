"""Upload size limit middleware.

Rejects request bodies larger than max_upload_size with a bare 413. A
declared Content-Length is checked up front; otherwise the body is
counted as it streams through, so chunked uploads are never buffered here.
Raw ASGI.
"""

from http import HTTPStatus
from typing import Callable

from stash.middleware.request_id import header_value


async def _send_413(send: Callable) -> None:
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"text/plain; charset=utf-8")],
    })
    await send({
        "type": "http.response.body",
        "body": HTTPStatus.REQUEST_ENTITY_TOO_LARGE.phrase.encode(),
        "more_body": False,
    })


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject request bodies over max_bytes."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = header_value(scope, "content-length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            await _send_413(send)
            return

        received = 0
        started = False
        rejected = False

        async def counting_receive() -> dict:
            nonlocal received, rejected
            if rejected:
                return {"type": "http.disconnect"}
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes and not started:
                    # The app sees a disconnect; whatever it answers is dropped.
                    rejected = True
                    await _send_413(send)
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: dict) -> None:
            nonlocal started
            if rejected:
                return
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        await app(scope, counting_receive, guarded_send)

    return asgi_app
