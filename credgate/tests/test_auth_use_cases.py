from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

import pytest

from credgate.application.services.tokens import JoseTokenIssuer, JoseTokenValidator
from credgate.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from credgate.application.use_cases.users.login_user import LoginUserUseCase
from credgate.application.use_cases.users.register_user import RegisterUserUseCase
from credgate.domain.users.entities import CredentialRecord
from credgate.domain.users.exceptions import (
    CredentialStoreError,
    DuplicateEmailError,
    HashingError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    SigningError,
)
from credgate.shared.errors.base import InternalError, ValidationError

from .conftest import TEST_SECRET, DeterministicHasher, InMemoryCredentialStore

NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)
TTL = timedelta(hours=8)


def _clock() -> datetime:
    return NOW


class FailingHasher(DeterministicHasher):
    def hash(self, password: str) -> str:
        raise HashingError("kdf exploded")


class BrokenStore(InMemoryCredentialStore):
    def create(self, record: CredentialRecord) -> None:
        raise CredentialStoreError("connection refused")

    def find_hash_by_email(self, email: str) -> str:
        raise CredentialStoreError("connection refused")


class FailingIssuer:
    def issue(self, subject: str, now: datetime, ttl: timedelta) -> str:
        raise SigningError("no secret")


@pytest.fixture()
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


def _register(store, hasher) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        credentials=store,
        password_hasher=hasher,
        clock=_clock,
        id_factory=lambda: "user-1",
    )


def _login(store, hasher, tokens=None) -> LoginUserUseCase:
    return LoginUserUseCase(
        credentials=store,
        password_hasher=hasher,
        tokens=tokens or JoseTokenIssuer(TEST_SECRET),
        token_ttl=TTL,
        clock=_clock,
    )


def test_register_persists_normalized_record(store, hasher) -> None:
    record = _register(store, hasher).execute(" Alice ", " A@X.com ", "secret123")

    assert record == CredentialRecord(
        user_id="user-1",
        display_name="Alice",
        email="a@x.com",
        password_hash="hashed:secret123",
        created_at=NOW,
    )
    assert store.get("a@x.com") == record


def test_register_keeps_password_whitespace(store, hasher) -> None:
    _register(store, hasher).execute("Alice", "a@x.com", "  pw  ")

    assert store.get("a@x.com").password_hash == "hashed:  pw  "


def test_register_duplicate_email_conflicts(store, hasher) -> None:
    use_case = _register(store, hasher)
    use_case.execute("Alice", "a@x.com", "secret123")

    with pytest.raises(DuplicateEmailError) as exc_info:
        use_case.execute("Bob", "A@x.com", "other")

    assert exc_info.value.to_dict() == {"error": "email_already_registered"}
    assert store.get("a@x.com").display_name == "Alice"


@pytest.mark.parametrize(
    ("name", "email", "password", "missing"),
    [
        ("", "a@x.com", "pw", ["name"]),
        ("Alice", "   ", "pw", ["email"]),
        ("Alice", "a@x.com", "", ["password"]),
        ("", "", "", ["email", "name", "password"]),
    ],
)
def test_register_rejects_missing_fields(store, hasher, name, email, password, missing) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _register(store, hasher).execute(name, email, password)

    assert exc_info.value.context["fields"] == missing
    assert store.get("a@x.com") is None


def test_register_hashing_failure_is_internal(store) -> None:
    with pytest.raises(InternalError) as exc_info:
        _register(store, FailingHasher()).execute("Alice", "a@x.com", "pw")

    assert exc_info.value.to_dict() == {"error": "internal_error"}
    assert store.get("a@x.com") is None


def test_register_store_failure_is_internal(hasher) -> None:
    with pytest.raises(InternalError):
        _register(BrokenStore(), hasher).execute("Alice", "a@x.com", "pw")


def test_concurrent_duplicate_registration_has_one_winner(store) -> None:
    barrier = threading.Barrier(2)

    class RendezvousHasher(DeterministicHasher):
        def hash(self, password: str) -> str:
            # Both requests finish hashing before either persists.
            barrier.wait(timeout=5)
            return super().hash(password)

    ids = iter(["user-1", "user-2"])
    lock = threading.Lock()

    def next_id() -> str:
        with lock:
            return next(ids)

    use_case = RegisterUserUseCase(
        credentials=store,
        password_hasher=RendezvousHasher(),
        clock=_clock,
        id_factory=next_id,
    )

    def attempt(name: str) -> str:
        try:
            use_case.execute(name, "dup@x.com", "pw")
        except DuplicateEmailError:
            return "conflict"
        return "ok"

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = sorted(pool.map(attempt, ["Alice", "Bob"]))

    assert results == ["conflict", "ok"]
    assert store.get("dup@x.com") is not None


def test_login_issues_valid_token(store, hasher) -> None:
    _register(store, hasher).execute("Alice", "a@x.com", "secret123")

    issued = _login(store, hasher).execute("A@X.com", "secret123")

    assert issued.token_type == "Bearer"
    assert issued.issued_at == NOW
    assert issued.expires_at == NOW + TTL
    claims = JoseTokenValidator(TEST_SECRET).validate(issued.access_token, NOW)
    assert claims.subject == "a@x.com"


def test_login_wrong_password_and_unknown_email_look_the_same(store, hasher) -> None:
    _register(store, hasher).execute("Alice", "a@x.com", "secret123")
    use_case = _login(store, hasher)

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        use_case.execute("a@x.com", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        use_case.execute("ghost@x.com", "nope")

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
    assert wrong_password.value.status == unknown_email.value.status == 401


def test_login_unknown_email_still_verifies_a_hash(store, hasher) -> None:
    with pytest.raises(InvalidCredentialsError):
        _login(store, hasher).execute("ghost@x.com", "guess")

    assert len(hasher.verified) == 1
    password, decoy = hasher.verified[0]
    assert password == "guess"
    assert decoy.startswith("hashed:")


def test_login_rejects_missing_fields(store, hasher) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _login(store, hasher).execute("", "")

    assert exc_info.value.context["fields"] == ["email", "password"]
    assert hasher.verified == []


def test_login_store_failure_is_internal(hasher) -> None:
    with pytest.raises(InternalError):
        _login(BrokenStore(), hasher).execute("a@x.com", "pw")


def test_login_signing_failure_is_internal(store, hasher) -> None:
    _register(store, hasher).execute("Alice", "a@x.com", "secret123")

    with pytest.raises(InternalError):
        _login(store, hasher, tokens=FailingIssuer()).execute("a@x.com", "secret123")


def test_authenticate_returns_claims_for_valid_token() -> None:
    token = JoseTokenIssuer(TEST_SECRET).issue("a@x.com", NOW, TTL)
    use_case = AuthenticateTokenUseCase(validator=JoseTokenValidator(TEST_SECRET), clock=_clock)

    assert use_case.execute(token).subject == "a@x.com"


@pytest.mark.parametrize(
    "token",
    [
        JoseTokenIssuer("another-secret").issue("a@x.com", NOW, TTL),
        JoseTokenIssuer(TEST_SECRET).issue("a@x.com", NOW, timedelta(0)),
        "garbage",
        "",
    ],
    ids=["foreign-secret", "expired", "garbage", "empty"],
)
def test_authenticate_collapses_rejections(token: str) -> None:
    use_case = AuthenticateTokenUseCase(validator=JoseTokenValidator(TEST_SECRET), clock=_clock)

    with pytest.raises(NotAuthenticatedError) as exc_info:
        use_case.execute(token)

    assert exc_info.value.to_dict() == {"error": "unauthorized"}


class CountingHasher(DeterministicHasher):
    def __init__(self) -> None:
        super().__init__()
        self.hash_calls = 0

    def hash(self, password: str) -> str:
        self.hash_calls += 1
        return super().hash(password)


def test_unknown_email_costs_no_more_hashing_than_wrong_password(store) -> None:
    counting = CountingHasher()
    _register(store, counting).execute("Alice", "a@x.com", "secret123")
    use_case = _login(store, counting)
    counting.hash_calls = 0

    with pytest.raises(InvalidCredentialsError):
        use_case.execute("a@x.com", "wrong")
    assert counting.hash_calls == 0

    with pytest.raises(InvalidCredentialsError):
        use_case.execute("ghost@x.com", "wrong")
    assert counting.hash_calls == 0
    assert len(counting.verified) == 2


def test_decoy_hash_is_built_once_at_construction(store) -> None:
    counting = CountingHasher()

    use_case = _login(store, counting)
    assert counting.hash_calls == 1

    for _ in range(3):
        with pytest.raises(InvalidCredentialsError):
            use_case.execute("ghost@x.com", "wrong")
    assert counting.hash_calls == 1
