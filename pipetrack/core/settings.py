from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Service-level settings read from the environment (and .env).

    Database location lives in pipetrack.db.config.DatabaseSettings.
    """

    APP_NAME: str = "Pipe Order Tracking API"
    APP_DESCRIPTION: str = (
        "Order intake, per-process production records, shipping and progress "
        "reporting for a ductile iron pipe plant."
    )
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Optional[str] = Field(default=None, description="dev / test / prod label")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level name")

    # Comma separated or JSON list
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_CREDENTIALS: bool = True

    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=True, description="Apply Alembic migrations (upgrade head) when the app starts"
    )
    AUTO_SEED: bool = Field(
        default=False, description="Create default users and master data after migrating"
    )

    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=12 * 60, gt=0)

    ORDER_CACHE_TTL_SECONDS: float = Field(
        default=30.0, ge=0, description="Max age of the cached order list; 0 turns the cache off"
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            v = [p.strip() for p in v.split(",")]
        return [o for o in (v or []) if o] or ["*"]

    @property
    def cors_credentials(self) -> bool:
        """Browsers reject credentials with a wildcard origin, so drop them in that case."""
        return self.CORS_ALLOW_CREDENTIALS and self.CORS_ORIGINS != ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """Fresh settings from the current environment."""
    return AppSettings()
