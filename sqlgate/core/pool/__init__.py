"""
SQLite connections and the per-database registry.
"""

from .connect import connect, execute, run_init_statements
from .health import health_check
from .manager import DatabaseRegistry, DbHandle

__all__ = [
    "connect",
    "execute",
    "run_init_statements",
    "health_check",
    "DatabaseRegistry",
    "DbHandle",
]
