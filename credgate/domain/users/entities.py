# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class CredentialRecord:

    user_id: str
    display_name: str
    email: str
    password_hash: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class TokenClaims:

    subject: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class IssuedToken:

    access_token: str
    issued_at: datetime
    expires_at: datetime
    token_type: str = "Bearer"


def normalize_email(email: str) -> str:
    return email.strip().lower()
