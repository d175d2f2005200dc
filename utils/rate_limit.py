"""
Rate Limiting Module

Fixed-window, in-memory request limiting per client, built on the
``limits`` storage and strategy that slowapi uses underneath.

The store is an explicit object constructed once per process (see
core.dependencies) and handed to request handlers; there is no module
level state.

Usage:
    store = RateLimitStore()
    result = await store.check(client_id, max_requests=20, window_seconds=60)
    if not result.allowed:
        ...
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Request
from limits import RateLimitItem, RateLimitItemPerSecond
from limits.aio.storage import MemoryStorage
from limits.aio.strategies import FixedWindowRateLimiter
from slowapi.util import get_remote_address

from utils.exceptions import RateLimitExceededError
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitEntry:
    """Request count for one client within the current window."""
    count: int
    reset_time: float


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""
    allowed: bool
    remaining: int
    reset_time: float
    limit: int = 0

    @property
    def retry_after_seconds(self) -> int:
        return max(0, int(self.reset_time - time.time()) + 1)

    def to_headers(self) -> Dict[str, str]:
        """Convert to HTTP headers."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(max(0, self.remaining)),
            "X-RateLimit-Reset": str(int(self.reset_time)),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after_seconds)
        return headers


class RateLimitStore:
    """
    In-memory fixed-window rate limiter.

    Each client gets a window that starts with its first request and
    lasts ``window_seconds`` (whole seconds). Windows are keyed by client
    and quota, so endpoints with different quotas count separately.
    Not suitable for multi-instance deployments.
    """

    def __init__(self, storage: Optional[MemoryStorage] = None):
        self._storage = storage or MemoryStorage()
        self._limiter = FixedWindowRateLimiter(self._storage)
        # Last quota seen per client, for status() and list_active()
        self._seen: Dict[str, RateLimitItem] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _item(max_requests: int, window_seconds: float) -> RateLimitItem:
        return RateLimitItemPerSecond(max_requests, max(1, int(window_seconds)))

    async def check(
        self,
        client_id: str,
        max_requests: int,
        window_seconds: float
    ) -> RateLimitResult:
        """
        Count a request and report whether it is within the limit.

        A denied request does not increment the counter.
        """
        item = self._item(max_requests, window_seconds)

        async with self._lock:
            await self._purge_expired()
            self._seen[client_id] = item

            allowed = await self._limiter.test(item, client_id)
            if allowed:
                await self._limiter.hit(item, client_id)

            stats = await self._limiter.get_window_stats(item, client_id)

        return RateLimitResult(
            allowed=allowed,
            remaining=stats.remaining,
            reset_time=stats.reset_time,
            limit=max_requests,
        )

    async def clear(self, client_id: str) -> None:
        """Forget a client's window."""
        async with self._lock:
            item = self._seen.pop(client_id, None)
            if item is not None:
                await self._limiter.clear(item, client_id)

    async def status(self, client_id: str) -> Optional[RateLimitEntry]:
        """Current entry for a client, or None if absent or expired."""
        async with self._lock:
            return await self._entry(client_id)

    async def list_active(self) -> Dict[str, RateLimitEntry]:
        """Snapshot of all unexpired entries (for monitoring)."""
        async with self._lock:
            await self._purge_expired()
            active = {}
            for client_id in list(self._seen):
                entry = await self._entry(client_id)
                if entry is not None:
                    active[client_id] = entry
            return active

    async def _entry(self, client_id: str) -> Optional[RateLimitEntry]:
        item = self._seen.get(client_id)
        if item is None:
            return None

        stats = await self._limiter.get_window_stats(item, client_id)
        count = item.amount - stats.remaining
        if count <= 0:
            return None
        return RateLimitEntry(count=count, reset_time=stats.reset_time)

    async def _purge_expired(self) -> None:
        for client_id in list(self._seen):
            if await self._entry(client_id) is None:
                del self._seen[client_id]


# =============================================================================
# Client Identification
# =============================================================================

def get_client_identifier(request: Request) -> str:
    """
    Build a client key from the request.

    Prefers the first X-Forwarded-For hop, then X-Real-IP, then the socket
    address. The user agent prefix is appended for extra uniqueness.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    real_ip = request.headers.get("X-Real-IP")

    client_ip = None
    if forwarded:
        client_ip = forwarded.split(",")[0].strip()
    if not client_ip:
        client_ip = real_ip or get_remote_address(request) or "unknown"

    user_agent = request.headers.get("User-Agent") or "unknown"
    return f"{client_ip}-{user_agent[:50]}"


async def enforce_rate_limit(
    request: Request,
    store: RateLimitStore,
    max_requests: int,
    window_seconds: float
) -> RateLimitResult:
    """
    Check the request against the store and raise when over the limit.

    Raises:
        RateLimitExceededError: If the client has used up its window
    """
    client_id = get_client_identifier(request)
    result = await store.check(client_id, max_requests, window_seconds)

    if not result.allowed:
        logger.warning(f"Rate limit exceeded for {client_id} on {request.url.path}")
        raise RateLimitExceededError(
            retry_after=result.retry_after_seconds,
            details={"limit": max_requests, "window_seconds": window_seconds},
            headers=result.to_headers(),
        )

    return result
