# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Audit trail for credential events, written to the application log."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from credgate.shared.logging import logger

_REDACTED = "***REDACTED***"
_SENSITIVE_KEY_PARTS = frozenset({"password", "token", "hash", "secret", "authorization"})


class AuditAction(str, Enum):
    REGISTER = "register"
    REGISTER_FAILED = "register_failed"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    TOKEN_REJECTED = "token_rejected"


def redact_details(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: _REDACTED if any(part in key.lower() for part in _SENSITIVE_KEY_PARTS) else value
        for key, value in details.items()
    }


def audit_log(
    action: AuditAction,
    *,
    user_id: str | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> None:
    parts = [
        f"AUDIT: {action.value}",
        f"user_id={user_id or '-'}",
        f"ip={ip_address or '-'}",
        f"success={success}",
    ]
    if details:
        parts.append(f"details={redact_details(details)}")

    message = " | ".join(parts)
    if success:
        logger.info(message)
    else:
        logger.warning(message)


__all__ = ["AuditAction", "audit_log", "redact_details"]
