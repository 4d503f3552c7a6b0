"""
Middleware for request logging and response caching
"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from loguru import logger
import uuid
import time
from typing import Callable


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID and structured logging"""

    async def dispatch(self, request: Request, call_next: Callable):
        # Generate unique request ID
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        log = logger.bind(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        start_time = time.time()
        log.debug(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            log.opt(exception=True).error(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"{type(e).__name__} after {process_time:.3f}s"
            )
            raise

        process_time = time.time() - start_time
        log.bind(status_code=response.status_code, process_time=process_time).info(
            f"[{request_id}] {request.method} {request.url.path} - {response.status_code}"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response


class CacheMiddleware:
    """
    Add Cache-Control: max-age to responses under a path prefix.

    Responses that already set Cache-Control (the entry document) keep theirs,
    error responses (status >= 400) are left uncached.
    """

    def __init__(self, app: ASGIApp, max_age: int = 0, prefix: str = "") -> None:
        self.app = app
        self.max_age = max(0, int(max_age))
        self.prefix = prefix.rstrip("/")

    def _applies_to(self, path: str) -> bool:
        if not self.prefix:
            return True
        return path == self.prefix or path.startswith(self.prefix + "/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._applies_to(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        cache_control = f"max-age={self.max_age}".encode("latin-1")

        async def send_with_cache(message: Message) -> None:
            # Errors must not be held by intermediate caches
            if message["type"] == "http.response.start" and message.get("status", 200) < 400:
                headers = list(message.get("headers", []))
                if not any(k.lower() == b"cache-control" for k, _ in headers):
                    headers.append((b"cache-control", cache_control))
                    message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_cache)
