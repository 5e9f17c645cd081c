"""Service settings, read from the environment and an optional ``.env`` file.

Every value can be overridden by an environment variable of the same name
(case-insensitive), e.g. ``POSTGRES_HOST`` or ``PREVIEW_ROW_LIMIT``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/src/caseintake/config.py -> repository root
_REPO_ROOT = Path(__file__).resolve().parents[3]

Environment = Literal["development", "staging", "production"]


class Settings(BaseSettings):
    """Runtime configuration for the API, CLI and migrations."""

    model_config = SettingsConfigDict(
        # Later files win; the working directory overrides the repo root
        env_file=(_REPO_ROOT / ".env", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = "development"

    # HTTP server
    api_host: str = "127.0.0.1"
    api_port: int = Field(default=8000, ge=1, le=65535)
    api_debug: bool = False
    cors_origins: str = "http://localhost:5173"

    # PostgreSQL connection parts, used when DATABASE_URL is not set
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "caseintake"
    postgres_user: str = "caseintake"
    postgres_password: str = Field(default="", repr=False)
    database_url_override: str = Field(default="", alias="database_url", repr=False)

    # Bearer tokens
    jwt_secret: str = Field(default="change-me-in-production", repr=False)
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = Field(default=12, ge=1)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Intake limits
    preview_row_limit: int = Field(default=200, ge=1)
    search_default_limit: int = Field(default=50, ge=1)
    search_max_limit: int = Field(default=500, ge=1)

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the async engine.

        ``DATABASE_URL`` wins when set (tests point it at SQLite); otherwise
        the URL is assembled from the ``POSTGRES_*`` parts.
        """
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins from the comma-separated setting, blanks dropped."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def expose_docs(self) -> bool:
        """Interactive API docs are served outside production only."""
        return self.environment != "production"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return Settings()
