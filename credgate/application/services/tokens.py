"""Signed access tokens (compact HS256 JWTs carrying ``sub`` and ``exp``)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jws, jwt
from jose.exceptions import JOSEError, JWTError

from credgate.domain.users.entities import TokenClaims
from credgate.domain.users.exceptions import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    SigningError,
)
from credgate.domain.users.repositories import TokenIssuer, TokenValidator

DEFAULT_ALGORITHM = "HS256"


class JoseTokenIssuer(TokenIssuer):
    def __init__(self, secret: str, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, subject: str, now: datetime, ttl: timedelta) -> str:
        if not self._secret:
            raise SigningError("signing secret is not configured")

        expires_at = now + ttl
        claims = {"sub": subject, "exp": int(expires_at.timestamp())}
        try:
            return cast(str, jwt.encode(claims, self._secret, algorithm=self._algorithm))
        except JOSEError as exc:
            raise SigningError(type(exc).__name__) from exc


class JoseTokenValidator(TokenValidator):
    """Checks structure, then signature, then claims, then expiry.

    Each failure raises a distinct ``TokenValidationError`` subclass; callers
    at the HTTP boundary must collapse them into one response.
    """

    def __init__(self, secret: str, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self._secret = secret
        self._algorithm = algorithm

    def validate(self, token: str, now: datetime) -> TokenClaims:
        if not isinstance(token, str) or not token:
            raise MalformedTokenError()

        try:
            jwt.get_unverified_header(token)
            payload = jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedTokenError() from exc

        if not self._secret:
            raise InvalidSignatureError()
        try:
            jws.verify(token, self._secret, algorithms=[self._algorithm])
        except JOSEError as exc:
            raise InvalidSignatureError() from exc

        subject, exp = _read_claims(payload)
        if now.timestamp() >= exp:
            raise ExpiredTokenError()

        try:
            expires_at = datetime.fromtimestamp(exp, UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise MalformedTokenError() from exc
        return TokenClaims(subject=subject, expires_at=expires_at)


def _read_claims(payload: dict[str, Any]) -> tuple[str, int]:
    subject = payload.get("sub")
    exp = payload.get("exp")
    if not isinstance(subject, str) or not subject:
        raise MalformedTokenError()
    if isinstance(exp, bool) or not isinstance(exp, int):
        raise MalformedTokenError()
    return subject, exp


def ttl_from_seconds(seconds: int) -> timedelta:
    return timedelta(seconds=max(0, int(seconds)))


__all__ = ["JoseTokenIssuer", "JoseTokenValidator", "ttl_from_seconds"]
