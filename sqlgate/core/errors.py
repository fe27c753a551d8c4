"""
Error kinds raised while serving a transaction request.

Item-level kinds (ItemValidationError, ResolutionError, TranslationError,
EngineError) go through the item's noFail policy in the runner. AuthError
short-circuits before any transaction is opened. The remaining kinds are raised
by the connection registry and map straight to a transport status.

Every kind carries ``status_code``, the HTTP status the transport uses when the
error ends the request.
"""

import sqlite3

from sqlgate.core.config import settings


# Python < 3.12 reports "one statement at a time" as sqlite3.Warning
SQLITE_ERRORS = (sqlite3.Error, sqlite3.Warning)


class GatewayError(Exception):
    """Base class; ``str(exc)`` is the message shown to clients."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ItemValidationError(GatewayError):
    """Malformed transaction item (e.g. both or neither of query/statement)."""


class ResolutionError(GatewayError):
    """Statement text is not a stored statement and raw SQL is not allowed."""


class TranslationError(GatewayError):
    """A JSON parameter value cannot be bound as a SQLite value."""


class EngineError(GatewayError):
    """SQLite rejected or failed to run a statement."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = (
            status_code if status_code is not None else settings.ENGINE_ERROR_STATUS_CODE
        )

    @classmethod
    def from_sqlite(cls, exc: Exception) -> "EngineError":
        return cls(str(exc) or exc.__class__.__name__)


class AuthError(GatewayError):
    """Missing or invalid credentials."""

    status_code = 401

    def __init__(
        self, message: str = "Authorization failed", *, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class DatabaseNotFoundError(GatewayError):
    status_code = 404


class DatabaseBusyError(GatewayError):
    status_code = 503


class ConfigError(ValueError):
    """Invalid database configuration; raised at start-up."""
