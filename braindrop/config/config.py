"""
Configuration module for Braindrop.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of braindrop/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Log level name for the root logger
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()


# =============================================================================
# Storage Configuration
# =============================================================================

# Directory holding the persisted collection
# Default: ~/.braindrop
BRAINDROP_DATA_DIR: str = os.getenv(
    "BRAINDROP_DATA_DIR", str(Path.home() / ".braindrop")
)

# Name of the storage slot (the file stem for the file backend)
BRAINDROP_STORAGE_SLOT: str = os.getenv("BRAINDROP_STORAGE_SLOT", "braindrop_ideas")

# Storage backend: "file" (durable) or "memory" (lost on exit)
BRAINDROP_STORAGE_BACKEND: str = os.getenv("BRAINDROP_STORAGE_BACKEND", "file").lower()

VALID_STORAGE_BACKENDS = ("file", "memory")


# =============================================================================
# Web API Configuration
# =============================================================================

WEB_HOST: str = os.getenv("WEB_HOST", "127.0.0.1")

WEB_PORT: int = int(os.getenv("WEB_PORT", "5001"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def get_data_dir() -> Path:
    """Data directory with ~ expanded."""
    return Path(BRAINDROP_DATA_DIR).expanduser()


def validate_config() -> list[str]:
    """
    Validate the current configuration.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if BRAINDROP_STORAGE_BACKEND not in VALID_STORAGE_BACKENDS:
        errors.append(
            f"BRAINDROP_STORAGE_BACKEND must be one of {', '.join(VALID_STORAGE_BACKENDS)}"
        )

    if is_production() and BRAINDROP_STORAGE_BACKEND == "memory":
        errors.append("BRAINDROP_STORAGE_BACKEND=memory is not allowed in production")

    if not BRAINDROP_STORAGE_SLOT.strip():
        errors.append("BRAINDROP_STORAGE_SLOT cannot be empty")

    if not BRAINDROP_DATA_DIR.strip():
        errors.append("BRAINDROP_DATA_DIR cannot be empty")

    if not (1 <= WEB_PORT <= 65535):
        errors.append("WEB_PORT must be between 1 and 65535")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  BRAINDROP_DATA_DIR: {get_data_dir()}")
    print(f"  BRAINDROP_STORAGE_SLOT: {BRAINDROP_STORAGE_SLOT}")
    print(f"  BRAINDROP_STORAGE_BACKEND: {BRAINDROP_STORAGE_BACKEND}")
    print(f"  WEB_HOST: {WEB_HOST}")
    print(f"  WEB_PORT: {WEB_PORT}")
