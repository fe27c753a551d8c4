"""
Parameter translation: JSON parameter object -> SQLite named parameters.

JSON null -> NULL, integer -> INTEGER, other number -> REAL, string -> TEXT,
boolean -> INTEGER 1/0. Objects and arrays are not scalar and are rejected, as
are infinities and NaN (accepted by the JSON parser, not by the JSON response).

The result is a plain dict for ``sqlite3`` named binding; the driver matches a
key ``v`` against ``:v``, ``@v`` and ``$v`` placeholders, so a leading sigil in
the JSON key is stripped.
"""

import math
from typing import Any

from sqlgate.core.errors import TranslationError

SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1

_SIGILS = (":", "@", "$")

SqlValue = int | float | str | None


def _param_name(key: str) -> str:
    name = key[1:] if key.startswith(_SIGILS) else key
    if not name:
        raise TranslationError(f"Invalid parameter name: {key!r}")
    return name


def json_to_sql(name: str, value: Any) -> SqlValue:
    """Translate one JSON scalar; ``name`` is only used in error messages."""
    if value is None:
        return None
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int):
        if not SQLITE_INT_MIN <= value <= SQLITE_INT_MAX:
            raise TranslationError(
                f"Parameter '{name}' integer out of 64-bit range: {value}"
            )
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TranslationError(f"Parameter '{name}' must be a finite number, got {value}")
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        raise TranslationError(f"Parameter '{name}' must be a scalar, got object")
    if isinstance(value, list):
        raise TranslationError(f"Parameter '{name}' must be a scalar, got array")
    raise TranslationError(
        f"Parameter '{name}' has unsupported type: {type(value).__name__}"
    )


def translate_params(values: dict[str, Any] | None) -> dict[str, SqlValue]:
    """
    Translate a JSON parameter object into named SQLite parameters.

    Raises TranslationError on the first value that cannot be bound.
    """
    out: dict[str, SqlValue] = {}
    for key, value in (values or {}).items():
        name = _param_name(key)
        if name in out:
            raise TranslationError(f"Parameter '{name}' given more than once")
        out[name] = json_to_sql(name, value)
    return out
