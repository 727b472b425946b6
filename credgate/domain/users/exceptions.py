# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from credgate.shared.errors.base import DomainError, InfrastructureError


class DuplicateEmailError(DomainError):
    code = "email_already_registered"
    status = HTTPStatus.CONFLICT


class CredentialNotFoundError(DomainError):
    code = "credential_not_found"
    status = HTTPStatus.NOT_FOUND


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class NotAuthenticatedError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED


class TokenValidationError(DomainError):
    """Base for token rejections; ``reason`` is for logs and metrics only."""

    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    reason = "invalid"


class MalformedTokenError(TokenValidationError):
    reason = "malformed"


class InvalidSignatureError(TokenValidationError):
    reason = "invalid_signature"


class ExpiredTokenError(TokenValidationError):
    reason = "expired"


class HashingError(InfrastructureError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__("hashing_failed", detail=detail)


class SigningError(InfrastructureError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__("signing_failed", detail=detail)


class CredentialStoreError(InfrastructureError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__("credential_store_failed", detail=detail)
