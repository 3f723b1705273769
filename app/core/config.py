"""
app/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; the deployment environment injects these at runtime.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "PDF Drop API"
    app_version: str = "1.0.0"
    app_env: str = "development"
    debug: bool = False

    # ── Server ─────────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000

    # ── Blob store (MongoDB GridFS) ────────────────────────────────────────────
    mongodb_uri: str = "mongodb://localhost:27017/pdfdrop"
    mongodb_database: Optional[str] = None   # falls back to the URI's database
    mongodb_bucket: str = "pdfs"
    mongodb_timeout_ms: int = 5000

    # ── CORS ───────────────────────────────────────────────────────────────────
    cors_origin_production: str = "https://currencychronicle.in"
    cors_origin_development: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def cors_origin(self) -> str:
        """The single cross-origin caller allowed for the current environment."""
        if self.is_production:
            return self.cors_origin_production
        return self.cors_origin_development


# Single shared instance — import this everywhere.
settings = Settings()
