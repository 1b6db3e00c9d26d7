from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from sessionauth.app import create_app
from sessionauth.container import Container
from sessionauth.infrastructure.db import Database
from sessionauth.shared.config import AppConfig, DatabaseConfig

TEST_SECRET = "test-secret-key-with-enough-entropy-0123456789"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def database_config(tmp_path: Path) -> DatabaseConfig:
    return DatabaseConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'auth.db'}")


@pytest.fixture()
def app_config(tmp_path: Path, database_config: DatabaseConfig) -> AppConfig:
    return AppConfig(
        APP_ENV="test",
        SECRET_KEY=TEST_SECRET,
        LOG_FILE=str(tmp_path / "logs" / "sessionauth.log"),
        database=database_config,
    )


@pytest.fixture()
def database(database_config: DatabaseConfig) -> Iterator[Database]:
    db = Database(database_config)
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture()
def container(app_config: AppConfig) -> Iterator[Container]:
    container = Container(app_config)
    yield container
    if "database" in container.__dict__:
        container.database.dispose()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container=container)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
