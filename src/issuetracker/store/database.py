"""SQLite engine and sessions for the Issue Store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from issuetracker.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

IN_MEMORY = ":memory:"


def _use_wal(dbapi_connection: object, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_sqlite_engine(db_path: str) -> Engine:
    """Build an engine for a SQLite file, or a private in-memory database.

    File databases run in WAL mode and their parent directory is created.
    An in-memory database lives on a single shared connection, since it
    disappears with the connection that created it.
    """
    # Handlers run in worker threads, so connections cross threads
    connect_args = {"check_same_thread": False}
    if db_path == IN_MEMORY:
        return create_engine("sqlite://", poolclass=StaticPool, connect_args=connect_args)

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}", connect_args=connect_args)
    event.listen(engine, "connect", _use_wal)
    return engine


class Database:
    """Engine and session factory bound to one issues database."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self.engine = create_sqlite_engine(db_path)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        """Create the issues table if it does not exist."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Open a new session. The caller closes it."""
        return self._sessions()

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
