# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from credgate.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from credgate.domain.users.entities import TokenClaims
from credgate.domain.users.exceptions import NotAuthenticatedError
from credgate.infrastructure.audit import AuditAction, audit_log

F = TypeVar("F", bound=Callable[..., Any])


def client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def current_claims() -> TokenClaims:
    return cast(TokenClaims, g.token_claims)


def make_auth_required(authenticate: AuthenticateTokenUseCase) -> Callable[[F], F]:
    """Build a view decorator that admits only requests with a valid bearer token."""

    def auth_required(view: F) -> F:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            try:
                g.token_claims = authenticate.execute(bearer_token())
            except NotAuthenticatedError:
                audit_log(
                    AuditAction.TOKEN_REJECTED,
                    ip_address=client_ip(),
                    details={"path": request.path},
                    success=False,
                )
                raise
            return view(*args, **kwargs)

        return cast(F, inner)

    return auth_required


__all__ = ["bearer_token", "client_ip", "current_claims", "make_auth_required"]
