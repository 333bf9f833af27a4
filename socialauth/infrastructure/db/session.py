# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from socialauth.shared.config import DatabaseConfig
from socialauth.shared.logging import logger


class Base(DeclarativeBase):
    pass


SessionFactory = Callable[[], Session]


def build_engine(config: DatabaseConfig) -> Engine:
    if config.is_sqlite():
        engine = create_engine(
            config.url,
            echo=False,
            future=True,
            pool_pre_ping=True,
            connect_args={
                "check_same_thread": False,
                "timeout": config.pool_timeout,
            },
        )

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_conn, _):
            cur = dbapi_conn.cursor()
            try:
                cur.execute("PRAGMA foreign_keys=ON;")
                cur.execute(f"PRAGMA busy_timeout={int(config.pool_timeout * 1000)};")
            finally:
                cur.close()

        return engine

    connect_args: dict[str, object] = {}
    if config.url.startswith("postgresql"):
        connect_args = {
            "connect_timeout": max(int(config.pool_timeout), 1),
            "options": f"-c statement_timeout={int(config.statement_timeout * 1000)}",
        }

    return create_engine(
        config.url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> SessionFactory:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    from socialauth.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")
