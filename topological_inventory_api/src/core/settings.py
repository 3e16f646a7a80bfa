from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the FastAPI service.

    This is separate from src.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: Optional[str] = Field(
        default=None, description="Application name used in the API path prefix."
    )
    PATH_PREFIX: Optional[str] = Field(
        default=None, description="Leading path segment of the API (e.g. 'api')."
    )
    APP_TITLE: str = Field(default="Topological Inventory API")
    APP_DESCRIPTION: str = Field(
        default=(
            "REST API over the topological inventory of connected sources: "
            "service catalogs, virtual machines, container images and tasks."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=False)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Tenancy
    BYPASS_TENANCY: Optional[str] = Field(
        default=None,
        description="When set to any non-empty value, requests run without tenant scoping.",
    )

    # Messaging
    QUEUE_HOST: str = Field(default="localhost", description="Kafka bootstrap host")
    QUEUE_PORT: str = Field(default="9092", description="Kafka bootstrap port")

    # Startup behavior
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=False,
        description="If true, run Alembic migrations (upgrade head) at app startup.",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="If true, seed the known source types after migrations.",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Root log level name (DEBUG, INFO, ...)")

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]

    @property
    def api_prefix(self) -> str:
        """
        Path prefix of all versioned routes, without surrounding slashes.

        Defaults to 'api'; when both PATH_PREFIX and APP_NAME are set the prefix
        becomes '<PATH_PREFIX>/<APP_NAME>'.
        """
        if self.PATH_PREFIX and self.APP_NAME:
            return "/".join(p.strip("/") for p in (self.PATH_PREFIX, self.APP_NAME))
        return "api"

    @property
    def tenancy_enabled(self) -> bool:
        """Tenant scoping is on unless BYPASS_TENANCY carries a value."""
        return not (self.BYPASS_TENANCY or "").strip()

    @property
    def queue_bootstrap_servers(self) -> str:
        return f"{self.QUEUE_HOST}:{self.QUEUE_PORT}"


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    A fresh instance is built on every call so environment changes are picked up.
    """
    return AppSettings()
