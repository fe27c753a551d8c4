"""
SQL execution on SQLite connections.

Exports: execute_query, execute_statement, execute_batch.
"""

from sqlgate.engines.sql.executor import execute_batch, execute_query, execute_statement

__all__ = [
    "execute_query",
    "execute_statement",
    "execute_batch",
]
