"""SQLAlchemy-backed key/value store for the three persisted assessment parts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from crindex.db.orm import Base, StateBlobRow
from crindex.errors import PersistenceUnavailableError

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Engine

logger = structlog.get_logger()

_BUSY_TIMEOUT_MS = 30_000


def _sqlite_url(db_path: str) -> str:
    return "sqlite://" if db_path == ":memory:" else f"sqlite:///{db_path}"


class StateDatabase:
    """Stores each assessment part as a JSON blob under its own key.

    Reads raise PersistenceUnavailableError when the database cannot be
    queried. Writes never raise: failures are logged and reported through
    the boolean return value so a failed save cannot undo an edit.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        self._engine: Engine = create_engine(
            _sqlite_url(self.db_path),
            connect_args={"timeout": _BUSY_TIMEOUT_MS / 1000},
        )
        event.listen(self._engine, "connect", self._on_connect)
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=self._engine, expire_on_commit=False
        )

    @staticmethod
    def _on_connect(dbapi_conn: object, _connection_record: object) -> None:
        cursor = dbapi_conn.cursor()  # type: ignore[attr-defined]
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={_BUSY_TIMEOUT_MS}")
        cursor.close()

    @property
    def engine(self) -> Engine:
        return self._engine

    def init_schema(self) -> None:
        """Create the state table via ORM metadata."""
        Base.metadata.create_all(self._engine)

    def close(self) -> None:
        self._engine.dispose()

    def load(self, key: str) -> str | None:
        """Return the JSON blob stored under *key*, or None if nothing is stored."""
        try:
            with self._session_factory() as session:
                row = session.get(StateBlobRow, key)
                return row.data_json if row is not None else None
        except SQLAlchemyError as exc:
            raise PersistenceUnavailableError(f"Cannot read {key!r}: {exc}") from exc

    def save(self, key: str, data_json: str) -> bool:
        """Insert or replace the blob under *key*. Returns False on failure."""
        try:
            with self._session_factory() as session:
                row = session.get(StateBlobRow, key)
                if row is None:
                    session.add(StateBlobRow(key=key, data_json=data_json))
                else:
                    row.data_json = data_json
                session.commit()
        except SQLAlchemyError as exc:
            logger.warning("state_save_failed", key=key, error=str(exc))
            return False
        logger.debug("state_saved", key=key, size=len(data_json))
        return True
