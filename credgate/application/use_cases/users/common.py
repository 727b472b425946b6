# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from credgate.infrastructure.observability import record_outcome
from credgate.shared.errors.base import InfrastructureError, InternalError
from credgate.shared.logging import logger


def internal_failure(flow: str, exc: InfrastructureError) -> InternalError:
    """Log an infrastructure failure in full and return the opaque error."""
    logger.opt(exception=exc).error(f"auth.{flow}: {exc}")
    record_outcome(flow, "internal")
    return InternalError()
