"""Request ID middleware.

Generates or forwards X-Request-ID and echoes it on the response. Client
values are sanitized (length and character set) before they reach the logs.
Raw ASGI, no BaseHTTPMiddleware.
"""

import re
import uuid
from typing import Callable

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def get_header(scope: dict, name: str) -> str | None:
    """Return the first value of a request header (case-insensitive), or None."""
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Keep a well-formed client id; anything else gets a fresh UUID."""
    candidate = (raw or "").strip()
    if (
        not candidate
        or len(candidate) > REQUEST_ID_MAX_LENGTH
        or not REQUEST_ID_ALLOWED_PATTERN.match(candidate)
    ):
        return str(uuid.uuid4())
    return candidate


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Attach a request id to scope state and to the response headers."""
    encoded_name = header_name.encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (encoded_name, request_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_with_request_id)

    return asgi_app
