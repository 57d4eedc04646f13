"""The ORM engine: owns a database connection and hands out sessions."""

from __future__ import annotations

import sqlite3
from typing import Any, Callable, Dict, TypeVar

from gee.orm import log
from gee.orm.dialect import get_dialect
from gee.orm.session import Session

T = TypeVar("T")


def _open_sqlite3(source: str) -> sqlite3.Connection:
    # Transactions are started explicitly by sessions.
    return sqlite3.connect(source, isolation_level=None, check_same_thread=False)


_DRIVERS: Dict[str, Callable[[str], Any]] = {"sqlite3": _open_sqlite3}


class Engine:
    """Connects to ``source`` with ``driver`` and creates sessions on it."""

    def __init__(self, driver: str, source: str):
        opener = _DRIVERS.get(driver)
        if opener is None:
            log.error(f"driver {driver} Not Found")
            raise ValueError(f"unknown driver {driver}")
        try:
            db = opener(source)
        except Exception as exc:
            log.error(exc)
            raise
        try:
            db.cursor().execute("SELECT 1")
        except Exception as exc:
            log.error(exc)
            db.close()
            raise
        dialect = get_dialect(driver)
        if dialect is None:
            db.close()
            log.error(f"dialect {driver} Not Found")
            raise ValueError(f"dialect {driver} Not Found")
        self._db = db
        self._dialect = dialect
        log.info("connection db success")

    def close(self) -> None:
        """Close the connection."""
        try:
            self._db.close()
        except Exception as exc:
            log.error("Failed to close connection db err", exc)
            raise
        log.info("close connection db success")

    def new_session(self) -> Session:
        """Return a new session on this engine's connection."""
        return Session(self._db, self._dialect)

    def transaction(self, fn: Callable[[Session], T]) -> T:
        """Run ``fn`` in a transaction, committing on success and rolling back on error."""
        session = self.new_session()
        session.begin()
        try:
            result = fn(session)
        except BaseException:
            session.rollback()
            raise
        session.commit()
        return result

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()