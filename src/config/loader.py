"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml : Static defaults checked into the repo
#   2. .env file          : Local developer overrides (not committed)
#   3. Environment vars   : Set at deploy time
#
# _deep_merge does recursive dict merging:
#   base = {"exposure": {"info_fields": ["plantInfo"]}}
#   overrides = {"exposure": {"forecast_days": 2}}
#   result = {"exposure": {"info_fields": ["plantInfo"], "forecast_days": 2}}
#
# Only the sections src/main.py reads are overridden: ``exposure``
# (api_url, forecast_days, timeout) and ``store`` (backend, db_path).
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from src.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built Settings; a fresh instance is read when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "exposure": {
            "api_url": settings.pollen_api_url,
            "forecast_days": settings.pollen_forecast_days,
            "timeout": settings.http_timeout,
        },
        "store": {
            "backend": settings.store_backend,
            "db_path": settings.feedback_db_path,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
