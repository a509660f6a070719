"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Settings are read from TWO sources (in priority order):
#
#   1. **Environment variables**: e.g., GOOGLE_POLLEN_API_KEY=abc123
#   2. **.env file**: key=value lines in the project root .env file
#
# Field name `google_pollen_api_key` maps to env var
# `GOOGLE_POLLEN_API_KEY` (pydantic-settings uppercases and matches).
#
# SECURITY: API keys and the auth secret live only in the environment or
# the git-ignored .env file, never in source.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """pollenTracker application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Environmental lookup (Google Pollen API) ===
    # Empty key = lookups return no readings; submissions still succeed.
    google_pollen_api_key: str = ""
    pollen_api_url: str = "https://pollen.googleapis.com/v1/forecast:lookup"
    pollen_forecast_days: int = 1
    http_timeout: float = 15.0

    # === Record store ===
    store_backend: str = "sqlite"  # "sqlite" or "memory"
    feedback_db_path: str = "data/feedback.db"

    # === Auth ===
    # Secret used to sign owner bearer tokens.  Empty = development mode,
    # where the bearer value itself is trusted as the owner id.
    auth_secret: str = ""

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    # Comma-separated browser origins allowed by CORS; "*" in development.
    cors_allowed_origins: str = "*"

    def pollen_lookup_enabled(self) -> bool:
        """Return True when an API key for the pollen lookup is configured."""
        return bool(self.google_pollen_api_key)

    def cors_origins(self) -> list[str]:
        """Return the CORS origins as a list, dropping blanks."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]
