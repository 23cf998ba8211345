"""
ASGI middleware for logging HTTP requests and responses.

Pure ASGI (not BaseHTTPMiddleware) so WebSocket scopes pass straight
through. Logs method, path, status and duration; JSON bodies are logged
with sensitive keys filtered, binary uploads only by size.
"""

import json
import logging
import time
from typing import Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import redact, truncate_large_data

logger = logging.getLogger(__name__)


def _describe_body(body: bytes, content_type: str) -> Optional[str]:
    """Return a loggable rendering of a request/response body."""
    if not body:
        return None
    if "json" not in content_type:
        return f"<{len(body)} bytes {content_type or 'unknown'}>"
    text = body.decode("utf-8", errors="ignore")
    try:
        payload = redact(json.loads(text))
        text = json.dumps(payload, ensure_ascii=False)
    except json.JSONDecodeError:
        pass
    return truncate_large_data(text, max_length=2000)


class RequestLoggingMiddleware:
    """Log every HTTP request with its outcome and timing."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths to skip entirely (liveness probes)
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        headers = {
            k.decode("latin-1").lower(): v.decode("latin-1")
            for k, v in scope.get("headers", [])
        }
        request_type = headers.get("content-type", "")

        body_chunks = []
        response_chunks = []
        status_code = 0
        response_type = ""

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                body_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code, response_type
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                for k, v in message.get("headers", []):
                    if k.decode("latin-1").lower() == "content-type":
                        response_type = v.decode("latin-1")
            elif message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "method": method,
                    "path": path,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = _describe_body(b"".join(body_chunks), request_type)
        response_body = _describe_body(b"".join(response_chunks), response_type)

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        logger.log(
            log_level,
            f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
            f" | request_body={request_body or '-'}"
            f" | response_body={response_body or '-'}",
            extra={"extra_fields": {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "client": (scope.get("client") or [None])[0],
            }}
        )
