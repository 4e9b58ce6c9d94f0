# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from marketplace.domain.users.entities import User as DomainUser
from marketplace.domain.users.exceptions import EmailAlreadyRegisteredError
from marketplace.domain.users.repositories import UserRepository
from marketplace.infrastructure.db import Database
from marketplace.infrastructure.db.models import User
from marketplace.shared.errors import StorageUnavailableError


def as_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(UTC)
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        phone=row.phone,
        created_at=as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._database = database

    def find_by_email(self, email: str) -> DomainUser | None:
        try:
            with self._database.session_scope() as session:
                row = session.scalars(select(User).where(User.email == email)).first()
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def find_by_id(self, user_id: int) -> DomainUser | None:
        try:
            with self._database.session_scope() as session:
                row = session.get(User, user_id)
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with self._database.session_scope() as session:
                row = User(
                    name=user.name,
                    email=user.email,
                    password_hash=user.password_hash,
                    phone=user.phone,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            # The unique index on email is the source of truth under concurrent sign-ups.
            raise EmailAlreadyRegisteredError() from exc
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc


__all__ = ["SqlAlchemyUserRepository", "as_utc"]
