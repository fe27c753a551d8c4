"""
SQLite connection helpers for configured databases.

Connections are opened with ``isolation_level=None`` so the driver never
issues an implicit BEGIN; the runner controls transactions explicitly.
``check_same_thread=False`` because requests run in worker threads; the
registry's per-database lock guarantees one user at a time.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any

from sqlgate.core.config import settings
from sqlgate.core.errors import ConfigError
from sqlgate.models import DatabaseConfig

_log = logging.getLogger(__name__)


def _uri(path: str, *, read_only: bool) -> str:
    mode = "ro" if read_only else "rwc"
    return f"{Path(path).resolve().as_uri()}?mode={mode}"


def connect(
    config: DatabaseConfig,
    *,
    busy_timeout: float | None = None,
) -> sqlite3.Connection:
    """
    Open the database described by ``config``.

    - Read-only databases must already exist and are opened with ``mode=ro``.
    - Journal mode is applied to writable file databases only.
    - Init statements run in one transaction when the database is new (the
      file did not exist before, or the database is in memory).
    """
    timeout = settings.SQLITE_BUSY_TIMEOUT_SEC if busy_timeout is None else busy_timeout
    if config.is_memory:
        created = True
        conn = sqlite3.connect(
            config.path,
            timeout=timeout,
            isolation_level=None,
            check_same_thread=False,
        )
    else:
        path = Path(config.path)
        created = not path.exists()
        if config.read_only and created:
            raise ConfigError(
                f"database '{config.id}': read-only database file {path} does not exist"
            )
        if created and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(
                _uri(config.path, read_only=config.read_only),
                timeout=timeout,
                isolation_level=None,
                check_same_thread=False,
                uri=True,
            )
        except sqlite3.Error as e:
            raise ConfigError(f"database '{config.id}': cannot open {path}: {e}") from e

    try:
        if config.journal_mode is not None and not config.read_only and not config.is_memory:
            conn.execute(f"PRAGMA journal_mode = {config.journal_mode.value}")
        if created and config.init_statements:
            run_init_statements(conn, config.init_statements)
            _log.info(
                "Applied %d init statements",
                len(config.init_statements),
                extra={"db": config.id},
            )
    except Exception:
        conn.close()
        raise

    _log.info("Opened database %s (%s)", config.id, config.path)
    return conn


def run_init_statements(conn: sqlite3.Connection, statements: list[str]) -> None:
    """Run ``statements`` in order inside one transaction; all or nothing."""
    conn.execute("BEGIN")
    try:
        for sql in statements:
            conn.execute(sql)
    except sqlite3.Error as e:
        conn.rollback()
        raise ConfigError(f"init statement failed: {e}") from e
    conn.commit()


def execute(
    conn: sqlite3.Connection,
    sql: str,
    params: dict[str, Any] | None = None,
) -> sqlite3.Cursor:
    """Execute one statement and return the cursor (rows and rowcount)."""
    cur = conn.cursor()
    try:
        if params is not None:
            cur.execute(sql, params)
        else:
            cur.execute(sql)
    except BaseException:
        cur.close()
        raise
    return cur
