"""
Connection health check for served databases.
"""

import sqlite3

from .connect import execute


def health_check(conn: sqlite3.Connection) -> bool:
    """
    Run SELECT 1 and return True if no exception.
    """
    cur = None
    try:
        cur = execute(conn, "SELECT 1")
        cur.fetchone()
        return True
    except sqlite3.Error:
        return False
    finally:
        if cur is not None:
            cur.close()
