# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case guarding protected endpoints with bearer tokens."""

from __future__ import annotations

from credgate.domain.users.entities import TokenClaims
from credgate.domain.users.exceptions import NotAuthenticatedError, TokenValidationError
from credgate.domain.users.repositories import TokenValidator
from credgate.infrastructure.observability import record_token_rejection
from credgate.shared.logging import logger
from credgate.shared.utils.clock import Clock, utc_now


class AuthenticateTokenUseCase:
    def __init__(self, *, validator: TokenValidator, clock: Clock = utc_now) -> None:
        self._validator = validator
        self._clock = clock

    def execute(self, token: str) -> TokenClaims:
        try:
            return self._validator.validate(token, self._clock())
        except TokenValidationError as exc:
            logger.info(f"auth.token: rejected reason={exc.reason}")
            record_token_rejection(exc.reason)
            raise NotAuthenticatedError() from None
