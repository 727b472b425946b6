# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users import CredentialRecord, IssuedToken, TokenClaims

__all__ = [
    "CredentialRecord",
    "IssuedToken",
    "TokenClaims",
]
