# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from credgate.domain.users.entities import IssuedToken, normalize_email
from credgate.domain.users.exceptions import (
    CredentialNotFoundError,
    CredentialStoreError,
    InvalidCredentialsError,
    SigningError,
)
from credgate.domain.users.repositories import CredentialStore, PasswordHasher, TokenIssuer
from credgate.infrastructure.observability import record_outcome
from credgate.shared.errors.validation import require_fields
from credgate.shared.logging import logger
from credgate.shared.utils.clock import Clock, utc_now

from .common import internal_failure

_DECOY_PASSWORD = "credgate-decoy-password"


class LoginUserUseCase:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        password_hasher: PasswordHasher,
        tokens: TokenIssuer,
        token_ttl: timedelta,
        clock: Clock = utc_now,
    ) -> None:
        self._credentials = credentials
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._token_ttl = token_ttl
        self._clock = clock
        # Verified against on unknown emails so a miss costs as much as a wrong password.
        self._decoy_hash = password_hasher.hash(_DECOY_PASSWORD)

    def execute(self, email: str, password: str) -> IssuedToken:
        require_fields(email=email, password=password, keep_whitespace=("password",))
        email = normalize_email(email)

        try:
            stored_hash = self._credentials.find_hash_by_email(email)
        except CredentialNotFoundError:
            self._burn_verification(password)
            raise self._rejected() from None
        except CredentialStoreError as exc:
            raise internal_failure("login", exc) from exc

        if not self._password_hasher.verify(password, stored_hash):
            raise self._rejected()

        now = self._clock()
        try:
            token = self._tokens.issue(email, now, self._token_ttl)
        except SigningError as exc:
            raise internal_failure("login", exc) from exc

        record_outcome("login", "success")
        logger.info("auth.login: ok")
        return IssuedToken(
            access_token=token,
            issued_at=now,
            expires_at=now + self._token_ttl,
        )

    def _burn_verification(self, password: str) -> None:
        self._password_hasher.verify(password, self._decoy_hash)

    @staticmethod
    def _rejected() -> InvalidCredentialsError:
        record_outcome("login", "unauthorized")
        logger.info("auth.login: invalid credentials")
        return InvalidCredentialsError()
