"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All credentials come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - sync_url always resolves to a blocking driver for the same database

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - sync_database_url optional: derived from database_url so one env var configures both engines
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# async driver -> blocking driver for the same backend
_SYNC_DRIVERS: dict[str, str] = {
    "postgresql+asyncpg://": "postgresql+psycopg://",
    "sqlite+aiosqlite://": "sqlite+pysqlite://",
}


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://cultureview:cultureview@db:5432/cultureview"
    )
    sync_database_url: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_echo: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def sync_url(self) -> str:
        """Blocking-driver URL for the same database."""
        if self.sync_database_url:
            return self.sync_database_url
        for async_prefix, sync_prefix in _SYNC_DRIVERS.items():
            if self.database_url.startswith(async_prefix):
                return self.database_url.replace(async_prefix, sync_prefix, 1)
        return self.database_url


@lru_cache
def get_settings() -> Settings:
    return Settings()
