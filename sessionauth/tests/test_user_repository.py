from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest
from sqlalchemy import func, select

from sessionauth.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from sessionauth.infrastructure.db import Database
from sessionauth.infrastructure.db.models import User
from sessionauth.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from sessionauth.shared.config import DatabaseConfig
from sessionauth.shared.errors.base import StorageError


def _rows_for(database: Database, username: str) -> int:
    with database.session_scope() as session:
        return session.scalar(
            select(func.count()).select_from(User).where(User.username == username)
        )


@pytest.fixture()
def repository(database: Database) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(database)


def test_create_assigns_id_and_persists(repository: SqlAlchemyUserRepository) -> None:
    user = repository.create("alice", "scrypt:32768:8:1$salt$abcdef")

    assert user.id > 0
    assert user.username == "alice"
    assert user.created_at.tzinfo is not None

    found = repository.find_by_username("alice")
    assert found.id == user.id
    assert found.password_hash == "scrypt:32768:8:1$salt$abcdef"


def test_user_repr_hides_password_hash(repository: SqlAlchemyUserRepository) -> None:
    user = repository.create("alice", "scrypt:32768:8:1$salt$abcdef")

    assert "abcdef" not in repr(user)


def test_create_duplicate_username_raises(
    repository: SqlAlchemyUserRepository, database: Database
) -> None:
    repository.create("alice", "hash-1")

    with pytest.raises(UserAlreadyExistsError):
        repository.create("alice", "hash-2")

    assert _rows_for(database, "alice") == 1
    assert repository.find_by_username("alice").password_hash == "hash-1"


def test_usernames_are_case_sensitive(repository: SqlAlchemyUserRepository) -> None:
    repository.create("alice", "hash-1")
    repository.create("Alice", "hash-2")

    assert repository.find_by_username("Alice").password_hash == "hash-2"


def test_find_unknown_username_raises(repository: SqlAlchemyUserRepository) -> None:
    with pytest.raises(UserNotFoundError):
        repository.find_by_username("nobody")


def test_concurrent_creates_for_same_username_admit_one(
    repository: SqlAlchemyUserRepository, database: Database
) -> None:
    workers = 8
    barrier = Barrier(workers)

    def attempt(i: int) -> str:
        barrier.wait()
        try:
            repository.create("alice", f"hash-{i}")
        except UserAlreadyExistsError:
            return "duplicate"
        return "created"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(attempt, range(workers)))

    assert outcomes.count("created") == 1
    assert outcomes.count("duplicate") == workers - 1
    assert _rows_for(database, "alice") == 1


def test_unreachable_store_raises_storage_error(tmp_path) -> None:
    missing_dir = tmp_path / "does-not-exist" / "auth.db"
    database = Database(DatabaseConfig(DATABASE_URL=f"sqlite:///{missing_dir}"))
    repository = SqlAlchemyUserRepository(database)

    with pytest.raises(StorageError):
        repository.create("alice", "hash")
    with pytest.raises(StorageError):
        repository.find_by_username("alice")

    database.dispose()


def test_missing_schema_raises_storage_error(database_config: DatabaseConfig) -> None:
    database = Database(database_config)
    repository = SqlAlchemyUserRepository(database)

    with pytest.raises(StorageError) as excinfo:
        repository.find_by_username("alice")

    assert excinfo.value.to_dict() == {"error": "internal_error"}
    database.dispose()
