"""
TreeCache Configuration Settings

This module contains all configuration constants for TreeCache.
Values can be overridden through environment variables.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass
class Settings:
    """Cache configuration settings."""

    # Key settings
    KEY_SEPARATOR: str = ":"

    # TTL settings
    DEFAULT_TTL: float = float(os.environ.get("TREECACHE_DEFAULT_TTL", "0"))  # 0 means no expiration

    # Value settings
    COPY_VALUES: bool = _env_bool("TREECACHE_COPY_VALUES")

    # Logging settings
    DEBUG: bool = _env_bool("TREECACHE_DEBUG")
    LOG_LEVEL: str = os.environ.get("TREECACHE_LOG_LEVEL", "INFO")
    LOG_PREFIX: str = "[TreeCache]"


# Global settings instance
settings = Settings()
