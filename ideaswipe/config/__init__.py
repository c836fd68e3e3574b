"""
Configuration module.

Handles environment variables, storage selection, and logging setup.
"""

from ideaswipe.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    STORAGE_BACKEND,
    VALID_BACKENDS,
    SQLITE_PATH,
    SQLITE_TIMEOUT,
    AIRTABLE_API_KEY,
    AIRTABLE_BASE_ID,
    AIRTABLE_IDEAS_TABLE,
    AIRTABLE_INTERACTIONS_TABLE,
    REQUEST_TIMEOUT,
    WEB_PORT,
    is_production,
    is_development,
    configure_logging,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "STORAGE_BACKEND",
    "VALID_BACKENDS",
    "SQLITE_PATH",
    "SQLITE_TIMEOUT",
    "AIRTABLE_API_KEY",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_IDEAS_TABLE",
    "AIRTABLE_INTERACTIONS_TABLE",
    "REQUEST_TIMEOUT",
    "WEB_PORT",
    "is_production",
    "is_development",
    "configure_logging",
    "validate_config",
    "print_config_summary",
]
