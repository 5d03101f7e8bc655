"""
bucketkv Configuration Settings

All configuration constants for the store and the TCP front end.
Values marked with an env var can be overridden from the environment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server and storage configuration settings."""

    # Network settings
    HOST: str = os.environ.get("BUCKETKV_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("BUCKETKV_PORT", "3000"))

    # Storage settings
    DATA_FILE: str = os.environ.get("BUCKETKV_DATA_FILE", "./data/store.txt")
    INITIAL_BUCKETS: int = 16
    LOAD_FACTOR_THRESHOLD: float = 0.75

    # Protocol limits
    MAX_KEY_LENGTH: int = 256
    MAX_VALUE_LENGTH: int = 4096

    # Connection settings
    READ_BUFFER_SIZE: int = 65536

    # Logging settings
    DEBUG: bool = os.environ.get("BUCKETKV_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("BUCKETKV_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
