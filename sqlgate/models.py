"""
Database configuration models.

One JSON file (``settings.DATABASES_FILE``) lists every database the gateway
serves: where the SQLite file lives, how it is opened, who may use it and which
stored statements it exposes. Keys are camelCase on the wire; Python code uses
the snake_case attribute names.
"""

import json
from enum import Enum
from pathlib import Path

from pydantic import ConfigDict, Field, ValidationError, model_validator
from sqlmodel import SQLModel

from sqlgate.core.errors import ConfigError

MEMORY_PATH = ":memory:"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class AuthModeEnum(str, Enum):
    """Where credentials are read from: request body or HTTP Basic header."""

    INLINE = "INLINE"
    HTTP_BASIC = "HTTP_BASIC"


class JournalModeEnum(str, Enum):
    """SQLite journal modes accepted by ``PRAGMA journal_mode``."""

    DELETE = "DELETE"
    TRUNCATE = "TRUNCATE"
    PERSIST = "PERSIST"
    MEMORY = "MEMORY"
    WAL = "WAL"
    OFF = "OFF"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class CredentialsConfig(SQLModel):
    """One allowed user; exactly one of password / hashedPassword."""

    model_config = ConfigDict(populate_by_name=True)

    user: str = Field(..., min_length=1)
    password: str | None = None
    hashed_password: str | None = Field(default=None, alias="hashedPassword")

    @model_validator(mode="after")
    def exactly_one_password(self) -> "CredentialsConfig":
        if (self.password is None) == (self.hashed_password is None):
            raise ValueError(
                f"credentials for '{self.user}' need exactly one of password and hashedPassword"
            )
        return self


class AuthConfig(SQLModel):
    model_config = ConfigDict(populate_by_name=True)

    mode: AuthModeEnum = AuthModeEnum.INLINE
    custom_error_code: int | None = Field(
        default=None, alias="customErrorCode", ge=100, le=599
    )
    by_query: str | None = Field(default=None, alias="byQuery", min_length=1)
    by_credentials: list[CredentialsConfig] | None = Field(
        default=None, alias="byCredentials"
    )

    @model_validator(mode="after")
    def exactly_one_source(self) -> "AuthConfig":
        if (self.by_query is None) == (self.by_credentials is None):
            raise ValueError("auth needs exactly one of byQuery and byCredentials")
        if self.by_credentials is not None and not self.by_credentials:
            raise ValueError("auth.byCredentials must not be empty")
        return self


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


class StoredStatementConfig(SQLModel):
    id: str = Field(..., min_length=1)
    sql: str = Field(..., min_length=1)


class DatabaseConfig(SQLModel):
    """A served database; ``id`` is the URL segment in POST /api/{id}."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, max_length=255, pattern=r"^[A-Za-z0-9_\-]+$")
    path: str = Field(..., min_length=1)
    read_only: bool = Field(default=False, alias="readOnly")
    journal_mode: JournalModeEnum | None = Field(
        default=JournalModeEnum.WAL, alias="journalMode"
    )
    init_statements: list[str] = Field(default_factory=list, alias="initStatements")
    auth: AuthConfig | None = None
    use_only_stored_statements: bool = Field(
        default=False, alias="useOnlyStoredStatements"
    )
    stored_statements: list[StoredStatementConfig] = Field(
        default_factory=list, alias="storedStatements"
    )

    @property
    def is_memory(self) -> bool:
        return self.path == MEMORY_PATH

    @model_validator(mode="after")
    def check_consistency(self) -> "DatabaseConfig":
        if self.read_only and self.is_memory:
            raise ValueError(f"database '{self.id}': an in-memory database cannot be read-only")
        if self.use_only_stored_statements and not self.stored_statements:
            raise ValueError(
                f"database '{self.id}': useOnlyStoredStatements requires storedStatements"
            )
        seen: set[str] = set()
        for stmt in self.stored_statements:
            if stmt.id in seen:
                raise ValueError(
                    f"database '{self.id}': duplicate stored statement id '{stmt.id}'"
                )
            seen.add(stmt.id)
        return self


class DatabasesConfig(SQLModel):
    """Root of the databases file: ``{"databases": [...]}``."""

    databases: list[DatabaseConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def unique_ids(self) -> "DatabasesConfig":
        ids = [db.id for db in self.databases]
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        if dupes:
            raise ValueError(f"duplicate database ids: {', '.join(dupes)}")
        return self

    @classmethod
    def from_file(cls, path: str | Path) -> "DatabasesConfig":
        """Load and validate a databases file; raises ConfigError on any problem."""
        p = Path(path)
        try:
            raw = json.loads(p.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read databases file {p}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in databases file {p}: {e}") from e
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid databases file {p}: {e}") from e
