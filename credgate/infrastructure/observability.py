# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

AUTH_OUTCOMES = Counter(
    "credgate_auth_outcomes_total",
    "Outcomes of registration and login flows",
    labelnames=("flow", "outcome"),
)
TOKEN_REJECTIONS = Counter(
    "credgate_token_rejections_total",
    "Rejected bearer tokens by internal reason",
    labelnames=("reason",),
)
HASH_LATENCY = Histogram(
    "credgate_password_hash_seconds",
    "Time spent deriving or verifying password hashes",
    labelnames=("operation",),
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

_enabled = True


def configure_metrics(enabled: bool) -> None:
    global _enabled
    _enabled = enabled


def record_outcome(flow: str, outcome: str) -> None:
    if _enabled:
        AUTH_OUTCOMES.labels(flow=flow, outcome=outcome).inc()


def record_token_rejection(reason: str) -> None:
    if _enabled:
        TOKEN_REJECTIONS.labels(reason=reason).inc()


@contextmanager
def track_hash_latency(operation: str) -> Iterator[None]:
    if not _enabled:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        HASH_LATENCY.labels(operation=operation).observe(time.perf_counter() - start)


__all__ = [
    "AUTH_OUTCOMES",
    "HASH_LATENCY",
    "TOKEN_REJECTIONS",
    "configure_metrics",
    "record_outcome",
    "record_token_rejection",
    "track_hash_latency",
]
