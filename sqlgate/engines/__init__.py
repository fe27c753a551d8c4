"""
Engines: SQL execution against SQLite.
"""

from sqlgate.engines.sql import execute_batch, execute_query, execute_statement

__all__ = [
    "execute_query",
    "execute_statement",
    "execute_batch",
]
