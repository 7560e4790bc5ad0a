"""
Request sanitization middleware.

Strips script tags, ``javascript:`` URLs and inline event handlers from
every string in a JSON request body before routing, and logs requests
whose URL or body look like an attack. Written as a raw ASGI middleware
because the body has to be rewritten before anything downstream reads it.

Bodies larger than ``max_body_bytes`` are refused with a validation error.
A client that disconnects before the body is complete raises
``ClientDisconnect``, which the request context middleware logs as an
aborted request.
"""

import json
import re
from typing import Any
from urllib.parse import unquote

from starlette.datastructures import MutableHeaders
from starlette.requests import ClientDisconnect, Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.shared.context import get_request_context
from app.shared.errors.handlers import render_error
from app.shared.errors.taxonomy import ErrorDetail, ValidationError
from app.shared.logging import security_logger

DEFAULT_MAX_BODY_BYTES = 100 * 1024

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)

SUSPICIOUS_PATTERNS = (
    re.compile(r"\.\./"),
    re.compile(r"union.*select", re.IGNORECASE),
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"onload", re.IGNORECASE),
)

SANITIZED_BODY_KEY = "sanitized_body"


def sanitize_text(value: str) -> str:
    """Remove script blocks, javascript: schemes and on<event>= handlers."""
    value = _SCRIPT_BLOCK.sub("", value)
    value = _JS_SCHEME.sub("", value)
    return _EVENT_HANDLER.sub("", value)


def sanitize_value(value: Any) -> Any:
    """Sanitize every string inside a decoded JSON value, at any depth."""
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, list):
        return [sanitize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: sanitize_value(item) for key, item in value.items()}
    return value


def is_suspicious(text: str) -> bool:
    return any(pattern.search(text) for pattern in SUSPICIOUS_PATTERNS)


def _is_json(scope: Scope) -> bool:
    for name, value in scope.get("headers", []):
        if name == b"content-type":
            return b"json" in value.lower()
    return False


class SanitizeRequestMiddleware:
    """Rewrite JSON bodies with sanitized strings and flag suspicious input."""

    def __init__(self, app: ASGIApp, max_body_bytes: int = DEFAULT_MAX_BODY_BYTES) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            body = await _read_body(receive, self.max_body_bytes)
        except ValidationError as exc:
            response = render_error(Request(scope), exc)
            await response(scope, receive, send)
            return
        target = unquote(scope.get("path", "")) + "?" + unquote(
            scope.get("query_string", b"").decode("latin-1")
        )
        raw_text = body.decode("utf-8", errors="replace")
        if is_suspicious(target) or is_suspicious(raw_text):
            request = Request(scope)
            context = get_request_context(request)
            security_logger().warning(
                "Suspicious request detected: %s %s from %s (%s) [%s]",
                scope.get("method"),
                target,
                context.client_address,
                context.user_agent,
                context.correlation_id,
            )

        if body and _is_json(scope):
            try:
                payload = json.loads(body)
            except ValueError:
                payload = None
            else:
                payload = sanitize_value(payload)
                body = json.dumps(payload).encode("utf-8")
                headers = MutableHeaders(scope=scope)
                headers["content-length"] = str(len(body))
            scope.setdefault("state", {})[SANITIZED_BODY_KEY] = payload

        await self.app(scope, _replay(body, receive), send)


def _body_too_large(limit: int) -> ValidationError:
    return ValidationError(
        "Request body too large",
        details=[
            ErrorDetail(
                field="body",
                message=f"Request body must not exceed {limit} bytes",
            )
        ],
    )


async def _read_body(receive: Receive, limit: int) -> bytes:
    """Read the whole request body.

    Raises:
        ValidationError: If the body grows past ``limit`` bytes.
        ClientDisconnect: If the client goes away before the body ends.
    """
    chunks = []
    size = 0
    more_body = True
    while more_body:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise ClientDisconnect()
        chunk = message.get("body", b"")
        size += len(chunk)
        if size > limit:
            raise _body_too_large(limit)
        chunks.append(chunk)
        more_body = message.get("more_body", False)
    return b"".join(chunks)


def _replay(body: bytes, receive: Receive) -> Receive:
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay
