"""
Configuration module for Idea Swipe.

Reads settings from the environment (and a project-root .env file) into typed
module-level constants. Every setting has a default that works for local runs.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# .env lives next to pyproject.toml; real environment variables win over it
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Deployment stage: "development", "staging" or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Verbose logging and Flask debug mode
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Root log level name, overridden to DEBUG when DEBUG is true
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# =============================================================================
# Storage Configuration
# =============================================================================

# Which backend holds ideas and interactions: "memory", "sqlite" or "airtable"
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()

VALID_BACKENDS = ("memory", "sqlite", "airtable")

# SQLite database file (":memory:" is accepted for throwaway runs)
SQLITE_PATH: str = os.getenv("SQLITE_PATH", str(_project_root / "data" / "ideaswipe.db"))

# Seconds to wait on a locked SQLite database before failing
SQLITE_TIMEOUT: float = float(os.getenv("SQLITE_TIMEOUT", "30.0"))


# =============================================================================
# Airtable Configuration
# =============================================================================

# Personal access token for the Airtable backend
# Required when STORAGE_BACKEND=airtable; empty string as default for development
AIRTABLE_API_KEY: str = os.getenv("AIRTABLE_API_KEY", "")

# Airtable base ID holding both tables
AIRTABLE_BASE_ID: str = os.getenv("AIRTABLE_BASE_ID", "")

# Airtable table names
AIRTABLE_IDEAS_TABLE: str = os.getenv("AIRTABLE_IDEAS_TABLE", "Ideas")
AIRTABLE_INTERACTIONS_TABLE: str = os.getenv("AIRTABLE_INTERACTIONS_TABLE", "Interactions")

# Seconds before an Airtable HTTP call is abandoned
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))


# =============================================================================
# Web Configuration
# =============================================================================

WEB_PORT: int = int(os.getenv("WEB_PORT", "5001"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """True when APP_ENV is production."""
    return APP_ENV == "production"


def is_development() -> bool:
    """True when APP_ENV is development."""
    return APP_ENV == "development"


def configure_logging(level: str = None) -> None:
    """
    Configure root logging for the application.

    Args:
        level: Log level name. Defaults to LOG_LEVEL, or DEBUG when DEBUG is set.
    """
    if level is None:
        level = "DEBUG" if DEBUG else LOG_LEVEL

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for the selected backend.

    Returns:
        Human-readable problems, one per invalid or missing setting. Empty when usable.
    """
    errors = []

    if STORAGE_BACKEND not in VALID_BACKENDS:
        errors.append(
            f"STORAGE_BACKEND must be one of {', '.join(VALID_BACKENDS)}, got {STORAGE_BACKEND!r}"
        )

    if STORAGE_BACKEND == "airtable":
        if not AIRTABLE_API_KEY:
            errors.append("AIRTABLE_API_KEY is required for the airtable backend")
        if not AIRTABLE_BASE_ID:
            errors.append("AIRTABLE_BASE_ID is required for the airtable backend")

    if is_production() and STORAGE_BACKEND == "memory":
        errors.append("STORAGE_BACKEND=memory is not durable and cannot be used in production")

    if DEBUG and not is_development():
        errors.append(f"DEBUG is only allowed when APP_ENV=development, got {APP_ENV!r}")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if SQLITE_TIMEOUT < 0:
        errors.append("SQLITE_TIMEOUT cannot be negative")

    if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"LOG_LEVEL is not a valid level name: {LOG_LEVEL}")

    return errors


def print_config_summary() -> None:
    """Print every setting, masking credentials."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  STORAGE_BACKEND: {STORAGE_BACKEND}")
    print(f"  SQLITE_PATH: {SQLITE_PATH}")
    print(f"  AIRTABLE_API_KEY: {'***' if AIRTABLE_API_KEY else '(not set)'}")
    print(f"  AIRTABLE_BASE_ID: {'***' if AIRTABLE_BASE_ID else '(not set)'}")
    print(f"  AIRTABLE_IDEAS_TABLE: {AIRTABLE_IDEAS_TABLE}")
    print(f"  AIRTABLE_INTERACTIONS_TABLE: {AIRTABLE_INTERACTIONS_TABLE}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  WEB_PORT: {WEB_PORT}")
