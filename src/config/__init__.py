"""Configuration module: exports Settings and load_config.

Settings are built once at the process boundary (``src.main``) and passed
down explicitly; nothing in the services reads configuration globals.
"""

from src.config.loader import load_config
from src.config.settings import Settings

__all__ = ["Settings", "load_config"]
