from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from credgate.app import create_app
from credgate.container import Container
from credgate.domain.users.entities import CredentialRecord
from credgate.domain.users.exceptions import CredentialNotFoundError, DuplicateEmailError
from credgate.domain.users.repositories import CredentialStore, PasswordHasher
from credgate.shared.config import (
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    HashingConfig,
    ObservabilityConfig,
)

TEST_SECRET = "test-secret"
FAST_SCRYPT = "scrypt:1024:8:1"


class InMemoryCredentialStore(CredentialStore):
    def __init__(self) -> None:
        self._records: dict[str, CredentialRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: CredentialRecord) -> None:
        # Stands in for the database's unique constraint.
        with self._lock:
            if record.email in self._records:
                raise DuplicateEmailError()
            self._records[record.email] = record

    def find_hash_by_email(self, email: str) -> str:
        record = self._records.get(email)
        if record is None:
            raise CredentialNotFoundError()
        return record.password_hash

    def get(self, email: str) -> CredentialRecord | None:
        return self._records.get(email)


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verified: list[tuple[str, str]] = []

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verified.append((password, hashed))
        return hashed == f"hashed:{password}"


def make_config(database_url: str, **auth_overrides: object) -> AppConfig:
    auth = {"jwt_secret": TEST_SECRET, **auth_overrides}
    return AppConfig(
        app_env="test",
        database=DatabaseConfig(url=database_url),
        auth=AuthConfig(**auth),
        hashing=HashingConfig(method=FAST_SCRYPT, workers=2),
        observability=ObservabilityConfig(metrics_enabled=False),
    )


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'credgate.db'}"


@pytest.fixture()
def config(database_url: str) -> AppConfig:
    return make_config(database_url)


@pytest.fixture()
def app(config: AppConfig) -> Iterator[Flask]:
    container = Container(config)
    flask_app = create_app(container=container)
    flask_app.config.update(TESTING=True)
    yield flask_app
    container.close()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
