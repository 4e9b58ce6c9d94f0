# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bounded execution with timeouts for CPU-heavy calls."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, TypeVar

from marketplace.shared.errors import OperationTimeoutError
from marketplace.shared.logging import logger

T = TypeVar("T")


class BoundedExecutor:
    """Fixed-size worker pool; callers wait at most ``timeout`` seconds for a result.

    No retries: a timed-out call surfaces as ``OperationTimeoutError`` and its
    worker finishes in the background.
    """

    def __init__(self, *, max_workers: int, timeout: float, name: str = "bounded") -> None:
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._timeout = timeout
        self._name = name

    def call(self, func: Callable[..., T], *args: Any, operation: str | None = None) -> T:
        label = operation or getattr(func, "__name__", "call")
        future = self._pool.submit(func, *args)
        try:
            return future.result(timeout=self._timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            logger.warning(f"{self._name}: {label} exceeded {self._timeout:.1f}s")
            raise OperationTimeoutError(label) from exc

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False, cancel_futures=True)


__all__ = ["BoundedExecutor"]
