"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from credgate.domain.users.exceptions import HashingError
from credgate.domain.users.repositories import PasswordHasher
from credgate.infrastructure.hashing_pool import HashingPool
from credgate.infrastructure.observability import track_hash_latency
from credgate.shared.logging import logger

DEFAULT_METHOD = "scrypt:32768:8:1"
DEFAULT_SALT_LENGTH = 16


def _as_text(password: str) -> str:
    # Lone surrogates cannot be UTF-8 encoded; escape them instead of failing.
    try:
        password.encode("utf-8")
    except UnicodeEncodeError:
        return password.encode("utf-8", "backslashreplace").decode("utf-8")
    return password


def _algorithm_of(encoded: str) -> str:
    return encoded.split("$", 1)[0].split(":", 1)[0]


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted scrypt hashes in werkzeug's ``method$salt$digest`` format.

    Every call to :meth:`hash` draws a fresh salt. :meth:`verify` reads the
    cost parameters and salt back from the stored string, so hashes made
    with older parameters keep verifying after the configured method changes.
    """

    def __init__(
        self,
        method: str = DEFAULT_METHOD,
        salt_length: int = DEFAULT_SALT_LENGTH,
    ) -> None:
        self._method = method
        self._algorithm = _algorithm_of(method)
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        try:
            return str(
                generate_password_hash(
                    _as_text(password),
                    method=self._method,
                    salt_length=self._salt_length,
                )
            )
        except (ValueError, TypeError, MemoryError, OSError, NotImplementedError) as exc:
            raise HashingError(f"{type(exc).__name__}: {exc}") from exc

    def verify(self, password: str, hashed: str) -> bool:
        if not isinstance(hashed, str) or _algorithm_of(hashed) != self._algorithm:
            return False
        try:
            return bool(check_password_hash(hashed, _as_text(password)))
        except (ValueError, TypeError, MemoryError, OverflowError):
            return False


class PooledPasswordHasher(PasswordHasher):
    def __init__(self, inner: PasswordHasher, pool: HashingPool) -> None:
        self._inner = inner
        self._pool = pool

    def hash(self, password: str) -> str:
        with track_hash_latency("hash"):
            try:
                return self._pool.run(self._inner.hash, password)
            except RuntimeError as exc:
                raise HashingError(f"hashing pool unavailable: {exc}") from exc

    def verify(self, password: str, hashed: str) -> bool:
        with track_hash_latency("verify"):
            try:
                return self._pool.run(self._inner.verify, password, hashed)
            except RuntimeError as exc:
                logger.error(f"hashing pool unavailable for verify: {exc}")
                return False


__all__ = ["PooledPasswordHasher", "WerkzeugPasswordHasher"]
