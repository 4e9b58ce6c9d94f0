# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from threading import Lock

from flask import Request, current_app, request

from marketplace.shared.errors import RateLimitedError
from marketplace.shared.logging import logger


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(self, limit: int, window_seconds: float) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._buckets: dict[str, Bucket] = defaultdict(lambda: Bucket(deque(maxlen=self._limit)))
        self._lock = Lock()

    def allow(self, key: str) -> bool:
        return self.retry_after(key) == 0.0

    def retry_after(self, key: str) -> float:
        """Record a hit for ``key``; 0.0 means allowed, otherwise seconds to wait."""
        now = time.monotonic()
        with self._lock:
            bucket = self._buckets[key]
            # Drop old
            while bucket.timestamps and (now - bucket.timestamps[0]) > self._window:
                bucket.timestamps.popleft()
            if len(bucket.timestamps) >= self._limit:
                return max(0.1, self._window - (now - bucket.timestamps[0]))
            bucket.timestamps.append(now)
            return 0.0


def _client_key(req: Request) -> str:
    forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or (req.remote_addr or "unknown")


def _limiter_for(name: str, limit: int | None, window_seconds: float | None) -> InMemoryRateLimiter:
    limiters: dict[str, InMemoryRateLimiter] = current_app.extensions.setdefault("rate_limiters", {})
    limiter = limiters.get(name)
    if limiter is None:
        limiter = InMemoryRateLimiter(
            limit or current_app.config.get("RATE_LIMIT_REQUESTS", 10),
            window_seconds or current_app.config.get("RATE_LIMIT_WINDOW", 60.0),
        )
        limiters[name] = limiter
    return limiter


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Per-client sliding window limit; state lives on the Flask app."""

    def decorator(f: Callable):
        name = getattr(f, "__qualname__", getattr(f, "__name__", "wrapped"))

        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_app.config.get("RATE_LIMIT_ENABLED", True):
                return f(*args, **kwargs)
            client = _client_key(request)
            wait = _limiter_for(name, limit, window_seconds).retry_after(f"{request.path}:{client}")
            if wait:
                logger.warning(f"rate_limit: blocked {request.method} {request.path} from {client}")
                raise RateLimitedError(wait)
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
