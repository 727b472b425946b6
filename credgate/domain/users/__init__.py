# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import CredentialRecord, IssuedToken, TokenClaims
from .exceptions import (
    CredentialNotFoundError,
    CredentialStoreError,
    DuplicateEmailError,
    ExpiredTokenError,
    HashingError,
    InvalidCredentialsError,
    InvalidSignatureError,
    MalformedTokenError,
    NotAuthenticatedError,
    SigningError,
    TokenValidationError,
)
from .repositories import CredentialStore, PasswordHasher, TokenIssuer, TokenValidator

__all__ = [
    "CredentialNotFoundError",
    "CredentialRecord",
    "CredentialStore",
    "CredentialStoreError",
    "DuplicateEmailError",
    "ExpiredTokenError",
    "HashingError",
    "InvalidCredentialsError",
    "InvalidSignatureError",
    "IssuedToken",
    "MalformedTokenError",
    "NotAuthenticatedError",
    "PasswordHasher",
    "SigningError",
    "TokenClaims",
    "TokenIssuer",
    "TokenValidationError",
    "TokenValidator",
]
