"""Database helpers: engine construction, session factories and schema setup.

Engines are built on demand by the event store rather than at import time,
so an unreachable database never breaks importing the application.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def make_engine(url: str) -> Engine:
    """Create an engine for `url`.

    SQLite connections are shared across threads; an in-memory database is
    pinned to a single connection so every session sees the same tables.
    """
    if not _is_sqlite(url):
        return create_engine(url)
    if _is_memory(url):
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    engine = create_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_wal(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_db(engine: Engine) -> None:
    """Create both tables and their four indexes if they do not exist yet."""
    Base.metadata.create_all(bind=engine, checkfirst=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to `engine`."""
    return sessionmaker(bind=engine, expire_on_commit=False)
