"""
HTTP middleware: security headers, per-client rate limiting and a request
body ceiling. Each rejection uses the same ``{"error": ...}`` envelope as the
route handlers.
"""

from __future__ import annotations

import logging
import math

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from patient_api.services.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

TOO_LARGE = "Request body too large"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_bytes``.

    A declared ``Content-Length`` is checked up front. Bodies without one
    (chunked) are counted as they are received; passing the limit raises a
    413 ``HTTPException`` out of the body read, before the route handler runs.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                response = JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})
                await response(scope, receive, send)
                return
            if size > self.max_bytes:
                logger.info("Rejected %d byte body", size)
                response = JSONResponse(status_code=413, content={"error": TOO_LARGE})
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.info("Rejected streamed body over %d bytes", self.max_bytes)
                    raise HTTPException(status_code=413, detail=TOO_LARGE)
            return message

        await self.app(scope, limited_receive, send)


def add_body_limit(app: FastAPI, max_bytes: int) -> None:
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=max_bytes)


def add_rate_limit(app: FastAPI, limiter: SlidingWindowRateLimiter) -> None:
    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        client = _client_key(request)
        retry_after = limiter.hit(client)
        if retry_after is not None:
            logger.warning("Rate limit exceeded for %s", client)
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests, please try again later."},
                headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
            )
        return await call_next(request)


def add_security_headers(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
