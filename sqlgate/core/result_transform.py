"""
Result translation: SQLite row -> JSON object.

NULL -> null, INTEGER/REAL -> number, TEXT -> string. REAL infinities and NaN
have no JSON form and become null. BLOB values are returned
as standard base64 (RFC 4648, padded) strings; clients decode them with any
base64 library.
"""

import base64
import math
from collections.abc import Sequence
from typing import Any


def sql_to_json(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    # sqlite3 only yields the types above unless converters are registered
    raise TypeError(f"Unsupported SQLite value type: {type(value).__name__}")


def row_to_json(column_names: Sequence[str], row: Sequence[Any]) -> dict[str, Any]:
    """Map one row to ``{column: value}`` in column order."""
    return {
        name: sql_to_json(value)
        for name, value in zip(column_names, row, strict=True)
    }


def cursor_to_json(cursor: Any) -> list[dict[str, Any]]:
    """Fetch every remaining row from a cursor as JSON objects."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [row_to_json(names, row) for row in cursor.fetchall()]
