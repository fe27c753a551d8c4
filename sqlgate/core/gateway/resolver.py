"""
Statement resolver.

Maps the text of a query/statement item to the SQL that will run: a stored
statement when the text is exactly one of its ids, otherwise the text itself
as raw SQL, unless the database only allows stored statements.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from sqlgate.core.errors import ResolutionError
from sqlgate.models import StoredStatementConfig

_log = logging.getLogger(__name__)


class StoredStatements(Mapping[str, str]):
    """Read-only id -> SQL mapping, built once per configured database."""

    __slots__ = ("_by_id",)

    def __init__(self, statements: Iterable[StoredStatementConfig] = ()) -> None:
        self._by_id: Mapping[str, str] = MappingProxyType(
            {s.id: s.sql for s in statements}
        )

    def __getitem__(self, key: str) -> str:
        return self._by_id[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def __repr__(self) -> str:
        return f"StoredStatements({sorted(self._by_id)!r})"


def resolve_sql(
    text: str,
    stored_statements: Mapping[str, str],
    use_only_stored: bool = False,
) -> str:
    """
    Return the SQL to execute for ``text``.

    Lookup is by exact id (case-sensitive, no trimming). Raises ResolutionError
    when ``use_only_stored`` is set and ``text`` is not a stored statement id.
    """
    sql = stored_statements.get(text)
    if sql is not None:
        _log.debug("Resolved stored statement %r", text)
        return sql
    if use_only_stored:
        raise ResolutionError("SQL not in the list of stored statements")
    return text
