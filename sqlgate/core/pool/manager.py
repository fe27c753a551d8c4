"""
Registry of served databases: one guarded connection per database id.

Each configured database gets a ``DbHandle`` (config, stored statements,
connection, lock). A request takes exclusive ownership of a handle through
``DatabaseRegistry.acquire`` for the whole transaction; requests for different
databases never contend.
"""

import logging
import sqlite3
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlgate.core.config import settings
from sqlgate.core.errors import DatabaseBusyError, DatabaseNotFoundError
from sqlgate.core.gateway.resolver import StoredStatements
from sqlgate.models import DatabaseConfig, DatabasesConfig

from .connect import connect

_log = logging.getLogger(__name__)


@dataclass(eq=False)
class DbHandle:
    config: DatabaseConfig
    conn: sqlite3.Connection
    stored_statements: StoredStatements
    lock: threading.Lock = field(default_factory=threading.Lock)

    @property
    def name(self) -> str:
        return self.config.id


class DatabaseRegistry:
    """Owns the handles; created once at start-up and shared by all requests."""

    def __init__(self, handles: Iterable[DbHandle] = ()) -> None:
        self._handles: dict[str, DbHandle] = {h.name: h for h in handles}

    @classmethod
    def from_config(cls, config: DatabasesConfig) -> "DatabaseRegistry":
        """Open every configured database; closes what was opened on failure."""
        handles: list[DbHandle] = []
        try:
            for db in config.databases:
                handles.append(
                    DbHandle(
                        config=db,
                        conn=connect(db),
                        stored_statements=StoredStatements(db.stored_statements),
                    )
                )
        except Exception:
            for h in handles:
                h.conn.close()
            raise
        return cls(handles)

    def names(self) -> list[str]:
        return list(self._handles)

    def get(self, name: str) -> DbHandle:
        handle = self._handles.get(name)
        if handle is None:
            raise DatabaseNotFoundError(f"Database '{name}' not found")
        return handle

    @contextmanager
    def acquire(self, name: str, timeout: float | None = None) -> Iterator[DbHandle]:
        """
        Hold ``name``'s lock for the duration of the ``with`` block.

        ``timeout`` defaults to ``settings.DB_LOCK_TIMEOUT_SEC``; a value <= 0
        waits forever. Raises DatabaseNotFoundError or DatabaseBusyError.
        """
        handle = self.get(name)
        wait = settings.DB_LOCK_TIMEOUT_SEC if timeout is None else timeout
        acquired = handle.lock.acquire(timeout=wait) if wait > 0 else handle.lock.acquire()
        if not acquired:
            _log.warning("Timed out waiting for database lock", extra={"db": name})
            raise DatabaseBusyError(f"Database '{name}' is busy")
        _log.debug("Acquired database lock", extra={"db": name})
        try:
            yield handle
        finally:
            handle.lock.release()

    def close(self) -> None:
        """Close every connection, waiting for in-flight requests to finish."""
        for handle in self._handles.values():
            with handle.lock:
                handle.conn.close()
        self._handles.clear()
