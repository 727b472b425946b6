from __future__ import annotations

import pytest

from credgate.infrastructure.audit import redact_details
from credgate.shared.logging import sanitize_message


@pytest.mark.parametrize(
    ("message", "leaked"),
    [
        ("Authorization: Bearer abc.def.ghi", "abc.def.ghi"),
        ("token eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiJhIn0.c2ln issued", "eyJzdWIiOiJhIn0"),
        ("login attempt password=hunter2 rejected", "hunter2"),
        ("stored scrypt:32768:8:1$abcdefgh$0123456789abcdef", "0123456789abcdef"),
        ("connect postgresql://app:pa55@db:5432/credgate", "pa55"),
    ],
)
def test_sanitize_message_redacts_secrets(message: str, leaked: str) -> None:
    assert leaked not in sanitize_message(message)


def test_sanitize_message_leaves_plain_text_alone() -> None:
    assert sanitize_message("Request: GET /index from 127.0.0.1") == (
        "Request: GET /index from 127.0.0.1"
    )


def test_audit_details_redact_sensitive_keys() -> None:
    assert redact_details(
        {"path": "/api/auth/me", "access_token": "abc", "Password": "pw", "reason": "dup"}
    ) == {
        "path": "/api/auth/me",
        "access_token": "***REDACTED***",
        "Password": "***REDACTED***",
        "reason": "dup",
    }
