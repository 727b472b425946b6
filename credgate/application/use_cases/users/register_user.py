# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from collections.abc import Callable

from credgate.domain.users.entities import CredentialRecord, normalize_email
from credgate.domain.users.exceptions import (
    CredentialStoreError,
    DuplicateEmailError,
    HashingError,
)
from credgate.domain.users.repositories import CredentialStore, PasswordHasher
from credgate.infrastructure.observability import record_outcome
from credgate.shared.errors.validation import require_fields
from credgate.shared.logging import logger
from credgate.shared.utils.clock import Clock, utc_now

from .common import internal_failure


def _new_user_id() -> str:
    return uuid.uuid4().hex


class RegisterUserUseCase:
    """Validate, hash, persist. No token is issued at registration."""

    def __init__(
        self,
        *,
        credentials: CredentialStore,
        password_hasher: PasswordHasher,
        clock: Clock = utc_now,
        id_factory: Callable[[], str] = _new_user_id,
    ) -> None:
        self._credentials = credentials
        self._password_hasher = password_hasher
        self._clock = clock
        self._id_factory = id_factory

    def execute(self, name: str, email: str, password: str) -> CredentialRecord:
        require_fields(
            name=name,
            email=email,
            password=password,
            keep_whitespace=("password",),
        )

        try:
            hashed = self._password_hasher.hash(password)
        except HashingError as exc:
            raise internal_failure("register", exc) from exc

        record = CredentialRecord(
            user_id=self._id_factory(),
            display_name=name.strip(),
            email=normalize_email(email),
            password_hash=hashed,
            created_at=self._clock(),
        )

        try:
            self._credentials.create(record)
        except DuplicateEmailError:
            logger.info("auth.register: email already registered")
            record_outcome("register", "conflict")
            raise
        except CredentialStoreError as exc:
            raise internal_failure("register", exc) from exc

        record_outcome("register", "success")
        logger.info(f"auth.register: ok user_id={record.user_id}")
        return record
