# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from credgate.domain.users.entities import CredentialRecord
from credgate.domain.users.exceptions import (
    CredentialNotFoundError,
    CredentialStoreError,
    DuplicateEmailError,
)
from credgate.domain.users.repositories import CredentialStore
from credgate.infrastructure.db.models import User
from credgate.infrastructure.db.session import SessionFactory, session_scope


class SqlAlchemyCredentialStore(CredentialStore):
    """Credential gateway over the ``users`` table.

    Email uniqueness is left to the table's unique constraint, so two
    concurrent registrations race inside the database rather than here.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def create(self, record: CredentialRecord) -> None:
        row = User(
            user_id=record.user_id,
            display_name=record.display_name,
            email=record.email,
            password_hash=record.password_hash,
            created_at=record.created_at,
        )
        try:
            with session_scope(self._session_factory) as session:
                session.add(row)
        except IntegrityError as exc:
            if _is_email_conflict(exc):
                raise DuplicateEmailError() from exc
            raise CredentialStoreError(f"integrity error: {exc.orig!r}") from exc
        except SQLAlchemyError as exc:
            raise CredentialStoreError(f"{type(exc).__name__}: {exc}") from exc

    def find_hash_by_email(self, email: str) -> str:
        try:
            with session_scope(self._session_factory) as session:
                password_hash = session.scalar(
                    select(User.password_hash).where(User.email == email)
                )
        except SQLAlchemyError as exc:
            raise CredentialStoreError(f"{type(exc).__name__}: {exc}") from exc

        if password_hash is None:
            raise CredentialNotFoundError()
        return password_hash


def _is_email_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    if "email" in message:
        return True
    # PostgreSQL reports the constraint name rather than the column.
    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None)
    return bool(constraint and "email" in constraint)
