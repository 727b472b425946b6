from __future__ import annotations

import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

import pytest
from sqlalchemy.engine import Engine

from credgate.domain.users.entities import CredentialRecord
from credgate.domain.users.exceptions import (
    CredentialNotFoundError,
    CredentialStoreError,
    DuplicateEmailError,
)
from credgate.infrastructure.db import build_engine, build_session_factory, init_db
from credgate.infrastructure.repositories.users.sqlalchemy_credential_store import (
    SqlAlchemyCredentialStore,
)
from credgate.shared.config import DatabaseConfig

NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


def _record(user_id: str = "u1", email: str = "a@x.com") -> CredentialRecord:
    return CredentialRecord(
        user_id=user_id,
        display_name="Alice",
        email=email,
        password_hash="scrypt:1024:8:1$salt$digest",
        created_at=NOW,
    )


@pytest.fixture()
def engine(database_url: str) -> Iterator[Engine]:
    engine = build_engine(DatabaseConfig(url=database_url))
    yield engine
    engine.dispose()


@pytest.fixture()
def store(engine: Engine) -> SqlAlchemyCredentialStore:
    init_db(engine)
    return SqlAlchemyCredentialStore(build_session_factory(engine))


def test_create_then_find_hash(store: SqlAlchemyCredentialStore) -> None:
    store.create(_record())

    assert store.find_hash_by_email("a@x.com") == "scrypt:1024:8:1$salt$digest"


def test_find_unknown_email_raises_not_found(store: SqlAlchemyCredentialStore) -> None:
    store.create(_record())

    with pytest.raises(CredentialNotFoundError):
        store.find_hash_by_email("b@x.com")


def test_duplicate_email_is_rejected_by_constraint(store: SqlAlchemyCredentialStore) -> None:
    store.create(_record())

    with pytest.raises(DuplicateEmailError):
        store.create(_record(user_id="u2"))

    assert store.find_hash_by_email("a@x.com") == "scrypt:1024:8:1$salt$digest"


def test_duplicate_user_id_is_a_store_failure(store: SqlAlchemyCredentialStore) -> None:
    store.create(_record())

    with pytest.raises(CredentialStoreError):
        store.create(_record(email="b@x.com"))


def test_missing_schema_is_a_store_failure(engine: Engine) -> None:
    store = SqlAlchemyCredentialStore(build_session_factory(engine))

    with pytest.raises(CredentialStoreError):
        store.find_hash_by_email("a@x.com")
    with pytest.raises(CredentialStoreError):
        store.create(_record())


def test_concurrent_duplicate_creates_have_one_winner(store: SqlAlchemyCredentialStore) -> None:
    workers = 8
    barrier = threading.Barrier(workers)

    def attempt(index: int) -> str:
        barrier.wait(timeout=5)
        try:
            store.create(_record(user_id=f"u{index}", email="dup@x.com"))
        except DuplicateEmailError:
            return "conflict"
        return "ok"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(attempt, range(workers)))

    assert results.count("ok") == 1
    assert results.count("conflict") == workers - 1
    assert store.find_hash_by_email("dup@x.com") == "scrypt:1024:8:1$salt$digest"
