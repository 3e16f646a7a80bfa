from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Database settings.

    Reads from environment variables (or .env via pydantic-settings):
      - DATABASE_URL (full SQLAlchemy URL, wins over the parts below)
      - DATABASE_HOST / DATABASE_PORT / DATABASE_NAME
      - DATABASE_USER / DATABASE_PASSWORD
    """

    DATABASE_URL: Optional[str] = Field(
        default=None, description="If provided, full database connection URL."
    )
    DATABASE_USER: Optional[str] = Field(default=None, description="DB username")
    DATABASE_PASSWORD: Optional[str] = Field(default=None, description="DB password")
    DATABASE_NAME: Optional[str] = Field(
        default="topological_inventory_production", description="Database name"
    )
    DATABASE_PORT: Optional[int] = Field(default=5432, description="Database port (default 5432)")
    DATABASE_HOST: Optional[str] = Field(
        default="localhost", description="Database host (default localhost)"
    )

    # SQLAlchemy engine options
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """
        Base database URL. Prefers DATABASE_URL, otherwise builds a PostgreSQL URL
        from the individual DATABASE_* variables.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if not all([self.DATABASE_USER, self.DATABASE_PASSWORD, self.DATABASE_NAME]):
            raise ValueError(
                "Database configuration missing. Ensure DATABASE_URL or "
                "DATABASE_USER, DATABASE_PASSWORD, and DATABASE_NAME are set in the environment."
            )
        host = self.DATABASE_HOST or "localhost"
        port = self.DATABASE_PORT or 5432
        return f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{host}:{port}/{self.DATABASE_NAME}"

    @property
    def async_database_url(self) -> str:
        """
        URL for the AsyncEngine: PostgreSQL URLs are switched to asyncpg, other
        URLs (e.g. sqlite+aiosqlite) are used as given.
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg://"):
            return url
        return re.sub(r"^postgres(ql)?(\+\w+)?://", "postgresql+asyncpg://", url)

    @property
    def sync_database_url(self) -> str:
        """Driver-less URL variant for Alembic offline mode."""
        url = self.database_url
        url = re.sub(r"^postgresql\+\w+://", "postgresql://", url)
        return re.sub(r"^sqlite\+\w+://", "sqlite://", url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a settings object for the database layer."""
    return Settings()
