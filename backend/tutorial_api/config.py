"""
Tutorial API - Application Configuration
========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values come from environment variables (or a .env file) and are
       validated once, when `Settings()` is constructed.
Who:   `create_app()` takes a Settings instance; the module-level `settings`
       is the default used by `tutorial_api.main` and `python -m tutorial_api`.

Environment variables keep the names the deployment already uses:
MONGO_URL for the connection string and PORT for the listening port.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a development default so the server starts against a
    local MongoDB without any configuration.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host:port/dbname
    # The path component names the database; DEFAULT_DATABASE is used without one.
    mongo_url: str = Field(
        default="mongodb://localhost:27017/appdb",
        description="MongoDB connection URL",
    )

    # Bounds the startup ping; an unreachable server fails startup after this long.
    mongo_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=120_000)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:8081")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGO_URL and mongo_url both work
    }


DEFAULT_DATABASE = "appdb"

settings = Settings()
