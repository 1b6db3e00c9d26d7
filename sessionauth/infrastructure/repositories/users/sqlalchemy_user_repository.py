# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sessionauth.domain.users.entities import User as DomainUser
from sessionauth.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from sessionauth.domain.users.repositories import UserRepository
from sessionauth.infrastructure.db.models import User
from sessionauth.infrastructure.db.session import Database
from sessionauth.shared.errors.base import StorageError
from sessionauth.shared.logging import logger


def _to_domain(row: User) -> DomainUser:
    created_at = row.created_at
    # SQLite drops tzinfo on the way back.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    def create(self, username: str, password_hash: str) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = User(username=username, password_hash=password_hash)
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info(f"users.create: username taken username={username!r}")
            raise UserAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            logger.error(f"users.create: storage failure {type(exc).__name__}")
            raise StorageError("create_user") from exc

    def find_by_username(self, username: str) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = session.scalars(select(User).where(User.username == username)).first()
                found = _to_domain(row) if row is not None else None
        except SQLAlchemyError as exc:
            logger.error(f"users.find_by_username: storage failure {type(exc).__name__}")
            raise StorageError("find_user") from exc
        if found is None:
            raise UserNotFoundError()
        return found
