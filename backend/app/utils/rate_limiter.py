"""
Barangay Portal — Rate Limiter Middleware
Per-IP sliding window over the last minute, kept in memory.
Health checks are not counted.
"""

import time
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.logger import logger


EXEMPT_PATHS = {"/", "/health"}


class RateLimiter(BaseHTTPMiddleware):
    """
    Simple in-memory rate limiter.
    Default: 60 requests per minute per IP.
    """

    def __init__(self, app, requests_per_minute: int = 60):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.window = 60  # seconds
        self._store: dict[str, list[float]] = {}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()

        # Drop IPs with no requests inside the window
        stale = [ip for ip, stamps in self._store.items() if not stamps or now - stamps[-1] >= self.window]
        for ip in stale:
            del self._store[ip]

        # Clean old entries
        recent = [t for t in self._store.get(client_ip, []) if now - t < self.window]
        self._store[client_ip] = recent

        if len(recent) >= self.requests_per_minute:
            logger.warning(f"⏳ Rate limit hit for {client_ip} on {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests. Please wait a minute and try again."},
            )

        recent.append(now)
        return await call_next(request)
