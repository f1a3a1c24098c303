"""
Rate limiting for Wanka's backend

Sliding one-minute windows kept in memory. Signed-in customers are
counted per user id from their verified token (all their tokens share
one budget), anonymous visitors per client IP. The AI pantry endpoints
add a tighter per-endpoint budget on top through endpoint_rate_limit().
"""
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Tuple

from fastapi import Request, HTTPException, status
from jose import jwt, JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from wankas.core.auth import JWT_ALGORITHM
from wankas.core.config import settings


class RateLimiter:
    """
    In-memory sliding window counter.

    State is per process; each worker keeps its own windows. Keys with
    no request inside their window are dropped on a periodic sweep.
    """

    def __init__(self):
        # {key: deque of request timestamps, oldest first}
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_cleanup = time.time()
        self._cleanup_interval = 60  # seconds
        self._longest_window = 60

    def _cleanup_old_entries(self, now: float):
        """Forget keys whose newest request is older than any window in use"""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - self._longest_window
        for key in list(self._hits.keys()):
            hits = self._hits[key]
            if not hits or hits[-1] <= cutoff:
                del self._hits[key]

        self._last_cleanup = now

    def is_allowed(self, key: str, max_requests: int, window_seconds: int = 60) -> Tuple[bool, int, int]:
        """
        Record a request for key if the window has room.

        Returns:
            (allowed, remaining_requests, retry_after_seconds)
        """
        now = time.time()
        self._longest_window = max(self._longest_window, window_seconds)
        self._cleanup_old_entries(now)

        hits = self._hits[key]
        while hits and hits[0] <= now - window_seconds:
            hits.popleft()

        if len(hits) >= max_requests:
            retry_after = int(hits[0] + window_seconds - now) + 1
            return False, 0, retry_after

        hits.append(now)
        return True, max_requests - len(hits), 0

    def reset(self):
        """Forget every window (used by tests)"""
        self._hits.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


# Requests per minute
RATE_LIMITS = {
    "authenticated": settings.RATE_LIMIT_AUTHENTICATED,
    "unauthenticated": settings.RATE_LIMIT_ANONYMOUS,
}

EXEMPT_PATHS = {
    "/",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}


def client_ip(request: Request) -> str:
    """First address in X-Forwarded-For, else the socket peer"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def request_identity(request: Request) -> Tuple[str, bool]:
    """
    Key to count a request under, and whether it carries a session.

    Only a valid token signed with AUTH_SECRET counts as a session; any
    other request is counted by client IP.
    """
    auth_header = request.headers.get("Authorization") or ""
    if auth_header.startswith("Bearer ") and settings.AUTH_SECRET:
        try:
            claims = jwt.decode(auth_header[len("Bearer "):], settings.AUTH_SECRET, algorithms=[JWT_ALGORITHM])
        except JWTError:
            claims = {}
        user_id = claims.get("id") or claims.get("sub")
        if user_id:
            return f"user:{user_id}", True
    return f"ip:{client_ip(request)}", False


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Global budget for every non-exempt request.

    Headers returned:
    - X-RateLimit-Limit / X-RateLimit-Remaining on every counted response
    - Retry-After and X-RateLimit-Reset on 429
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        key, authenticated = request_identity(request)
        limit = RATE_LIMITS["authenticated" if authenticated else "unauthenticated"]
        allowed, remaining, retry_after = rate_limiter.is_allowed(key, limit)

        if not allowed:
            # JSONResponse instead of HTTPException so the CORS middleware still applies
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Rate limit exceeded. Please slow down."},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(retry_after),
                    "Retry-After": str(retry_after),
                }
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response


def endpoint_rate_limit(max_requests: int, window_seconds: int = 60):
    """
    Dependency factory for a per-endpoint budget.

    Usage:
        @router.post("/identify", dependencies=[Depends(endpoint_rate_limit(10))])
    """
    async def checker(request: Request):
        key, _ = request_identity(request)
        allowed, _, retry_after = rate_limiter.is_allowed(
            f"endpoint:{request.url.path}:{key}", max_requests, window_seconds
        )
        if not allowed:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Rate limit exceeded for this endpoint. Try again in {retry_after} seconds.",
                headers={
                    "X-RateLimit-Limit": str(max_requests),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                }
            )

    return checker
