"""SQLAlchemy engine and session ownership for the CRM store.

A ``Database`` is constructed explicitly and handed to every component that
needs the store; there is no module-level client.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from maintcrm.models.domain import EntityCounts
from maintcrm.models.orm import Base, Customer, Reminder, ServiceRecord

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class Database:
    """Owns the engine, the session factory and schema creation."""

    def __init__(self, db_path: Path | None = None, *, echo: bool = False, create_schema: bool = True):
        """
        Args:
            db_path: SQLite database file. ``None`` opens a private in-memory
                database (no raw file is available for backups then).
            echo: Log emitted SQL.
            create_schema: Create missing tables on startup.
        """
        self._path = Path(db_path) if db_path is not None else None
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            url = f"sqlite:///{self._path}"
            self.engine: Engine = create_engine(url, echo=echo)
        else:
            from sqlalchemy.pool import StaticPool

            self.engine = create_engine(
                "sqlite://",
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

        if create_schema:
            self.create_schema()

    @property
    def path(self) -> Path | None:
        """On-disk database file, if any."""
        return self._path

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on any exception."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """One atomic unit of work: every statement inside commits together or not at all."""
        session = self._session_factory()
        try:
            with session.begin():
                yield session
        finally:
            session.close()

    def counts(self) -> EntityCounts:
        """Row counts per entity table."""
        with self.session() as session:
            return EntityCounts(
                customers=session.scalar(select(func.count()).select_from(Customer)) or 0,
                service_records=session.scalar(select(func.count()).select_from(ServiceRecord)) or 0,
                reminders=session.scalar(select(func.count()).select_from(Reminder)) or 0,
            )

    def __repr__(self) -> str:
        return f"Database(path={self._path!s})"
