# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bounded worker pool for memory-hard password hashing."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from credgate.shared.logging import logger

T = TypeVar("T")


class HashingPool:
    """Runs KDF work off the request threads with capped concurrency.

    ``hashlib.scrypt`` releases the GIL, so a thread pool gives real
    parallelism while ``max_workers`` bounds peak memory.
    """

    def __init__(self, max_workers: int) -> None:
        self._max_workers = max(1, int(max_workers))
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    def _ensure_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="credgate-hash",
                )
                logger.debug(f"hashing.pool: started with {self._max_workers} workers")
            return self._executor

    def run(self, func: Callable[..., T], *args: object) -> T:
        future = self._ensure_executor().submit(func, *args)
        return future.result()

    def shutdown(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
            logger.debug("hashing.pool: stopped")


__all__ = ["HashingPool"]
