# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .entities import CredentialRecord, TokenClaims


class CredentialStore(Protocol):
    def create(self, record: CredentialRecord) -> None: ...
    def find_hash_by_email(self, email: str) -> str: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenIssuer(Protocol):
    def issue(self, subject: str, now: datetime, ttl: timedelta) -> str: ...


class TokenValidator(Protocol):
    def validate(self, token: str, now: datetime) -> TokenClaims: ...
