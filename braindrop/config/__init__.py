"""
Configuration module.

Handles environment variables and application settings.
"""

from braindrop.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    BRAINDROP_DATA_DIR,
    BRAINDROP_STORAGE_SLOT,
    BRAINDROP_STORAGE_BACKEND,
    VALID_STORAGE_BACKENDS,
    WEB_HOST,
    WEB_PORT,
    is_production,
    is_development,
    get_data_dir,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "BRAINDROP_DATA_DIR",
    "BRAINDROP_STORAGE_SLOT",
    "BRAINDROP_STORAGE_BACKEND",
    "VALID_STORAGE_BACKENDS",
    "WEB_HOST",
    "WEB_PORT",
    "is_production",
    "is_development",
    "get_data_dir",
    "validate_config",
    "print_config_summary",
]
