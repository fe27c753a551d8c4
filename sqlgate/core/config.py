from typing import Literal

from pydantic import AnyUrl, HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "sqlgate"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SENTRY_DSN: HttpUrl | None = None

    # JSON list in the environment, e.g. '["http://localhost:3000"]'
    BACKEND_CORS_ORIGINS: list[AnyUrl] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # JSON file listing the served databases (see sqlgate.models.DatabasesConfig)
    DATABASES_FILE: str | None = None

    # Max seconds a request waits for a database's lock; <= 0 waits forever
    DB_LOCK_TIMEOUT_SEC: float = 30.0
    # Passed to sqlite3.connect(timeout=...) for file-level locking
    SQLITE_BUSY_TIMEOUT_SEC: float = 5.0

    # Transport status for SQL engine failures (validation failures are always 400)
    ENGINE_ERROR_STATUS_CODE: int = 400


settings = Settings()  # type: ignore
