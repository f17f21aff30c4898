from __future__ import annotations

from functools import lru_cache
import os

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, Session, create_engine

from edu_resources.core.config import get_settings


def _is_sqlite(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def _on_serverless() -> bool:
    return bool(os.environ.get("VERCEL") or os.environ.get("VERCEL_ENV"))


@lru_cache
def _engine_for_url(database_url: str):
    sqlite = _is_sqlite(database_url)
    engine_kwargs = {
        "echo": False,
        "pool_pre_ping": True,
        # SQLite 在多线程下需要该参数
        "connect_args": {"check_same_thread": False} if sqlite else {},
    }
    # One connection per checkout: view/download writes from concurrent requests
    # serialize in the database, not in a shared pool.
    if sqlite or _on_serverless():
        engine_kwargs["poolclass"] = NullPool

    engine = create_engine(database_url, **engine_kwargs)

    if sqlite:
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def get_engine():
    return _engine_for_url(get_settings().database_url)


def init_db(engine=None) -> None:
    """Create missing tables on `engine` (the configured one by default)."""

    # 确保所有表模型已 import，注册到 SQLModel.metadata
    import edu_resources.models  # noqa: F401

    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(get_engine()) as session:
        yield session
