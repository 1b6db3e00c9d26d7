# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from sessionauth.shared.config import DatabaseConfig
from sessionauth.shared.logging import logger


class Base(DeclarativeBase):
    pass


def create_engine_from_config(config: DatabaseConfig) -> Engine:
    connect_args: dict[str, object] = {}
    if config.is_sqlite():
        connect_args = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }

    return create_engine(
        config.url(),
        echo=False,
        pool_pre_ping=True,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        connect_args=connect_args,
    )


class Database:
    """Engine plus session factory, built once at startup."""

    def __init__(self, config: DatabaseConfig) -> None:
        self.engine: Engine = create_engine_from_config(config)
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        logger.debug("db.session: opened session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed session")
        except Exception as exc:
            logger.warning(f"db.session: {type(exc).__name__}, rolling back")
            session.rollback()
            raise
        finally:
            session.close()
            logger.debug("db.session: closed session")

    def init_db(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def dispose(self) -> None:
        self.engine.dispose()
