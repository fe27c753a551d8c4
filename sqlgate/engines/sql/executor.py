"""
Run one resolved query/statement on an open SQLite connection.

- Query: all rows fetched and translated to JSON objects (no streaming).
- Statement: executed once, returns the affected-row count.
- Statement batch: executed once per parameter object; the driver's statement
  cache keeps the prepared statement across executions. Returns one count per
  object, in order.

``sqlite3.Error`` is converted to EngineError; parameter problems surface as
TranslationError before the engine is called.
"""

import logging
import sqlite3
from typing import Any

from sqlgate.core.errors import SQLITE_ERRORS, EngineError
from sqlgate.core.param_type import translate_params
from sqlgate.core.pool.connect import execute
from sqlgate.core.result_transform import cursor_to_json

_log = logging.getLogger(__name__)


def _rowcount(cur: sqlite3.Cursor) -> int:
    # -1 for statements that do not modify rows (DDL, SELECT)
    return cur.rowcount if cur.rowcount is not None and cur.rowcount >= 0 else 0


def execute_query(
    conn: sqlite3.Connection,
    sql: str,
    values: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    params = translate_params(values) if values is not None else None
    try:
        cur = execute(conn, sql, params)
        try:
            return cursor_to_json(cur)
        finally:
            cur.close()
    except SQLITE_ERRORS as e:
        raise EngineError.from_sqlite(e) from e


def execute_statement(
    conn: sqlite3.Connection,
    sql: str,
    values: dict[str, Any] | None = None,
) -> int:
    params = translate_params(values) if values is not None else None
    try:
        cur = execute(conn, sql, params)
        try:
            return _rowcount(cur)
        finally:
            cur.close()
    except SQLITE_ERRORS as e:
        raise EngineError.from_sqlite(e) from e


def execute_batch(
    conn: sqlite3.Connection,
    sql: str,
    values_batch: list[dict[str, Any]],
) -> list[int]:
    params_list = [translate_params(values) for values in values_batch]
    counts: list[int] = []
    cur = conn.cursor()
    try:
        for i, params in enumerate(params_list):
            try:
                cur.execute(sql, params)
            except SQLITE_ERRORS as e:
                _log.debug("Batch execution %d failed: %s", i, e)
                raise EngineError.from_sqlite(e) from e
            counts.append(_rowcount(cur))
    finally:
        cur.close()
    return counts
