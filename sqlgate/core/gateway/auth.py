"""
Gateway auth: check credentials against a database's auth configuration.

Runs before any transaction is opened. Credentials come either from the
request body (INLINE) or from the HTTP Basic header (HTTP_BASIC); the route
extracts them and passes a plain ``Credentials`` (or None) here.

- byCredentials: user must match; password compared in constant time, or
  verified with passlib when the config stores a hash.
- byQuery: the configured SQL runs on the database's connection with ``:user``
  and ``:password`` bound; at least one row means authorized.
"""

import logging
import sqlite3

from sqlgate.core.errors import SQLITE_ERRORS, AuthError
from sqlgate.core.security import compare_plain, verify_password
from sqlgate.models import AuthConfig, CredentialsConfig
from sqlgate.schemas import Credentials

_log = logging.getLogger(__name__)


def _match_configured(creds: Credentials, allowed: list[CredentialsConfig]) -> bool:
    for c in allowed:
        if c.user != creds.user:
            continue
        if c.hashed_password is not None:
            if verify_password(creds.password, c.hashed_password):
                return True
        elif c.password is not None and compare_plain(creds.password, c.password):
            return True
    return False


def _match_query(creds: Credentials, conn: sqlite3.Connection, sql: str) -> bool:
    cur = conn.cursor()
    try:
        cur.execute(sql, {"user": creds.user, "password": creds.password})
        return cur.fetchone() is not None
    except SQLITE_ERRORS as e:
        _log.warning("Auth query failed: %s", e)
        return False
    finally:
        cur.close()


def check_credentials(
    auth: AuthConfig,
    creds: Credentials | None,
    conn: sqlite3.Connection,
) -> bool:
    """True if ``creds`` satisfy ``auth``. Missing credentials never do."""
    if creds is None:
        return False
    if auth.by_credentials is not None:
        return _match_configured(creds, auth.by_credentials)
    if auth.by_query is not None:
        return _match_query(creds, conn, auth.by_query)
    return False


def verify_request_auth(
    auth: AuthConfig | None,
    creds: Credentials | None,
    conn: sqlite3.Connection,
    *,
    db_name: str = "",
) -> None:
    """Raise AuthError unless the database is open or ``creds`` are accepted."""
    if auth is None:
        return
    if not check_credentials(auth, creds, conn):
        _log.warning(
            "Authorization failed",
            extra={"db": db_name, "user": creds.user if creds else None},
        )
        raise AuthError(status_code=auth.custom_error_code)
