"""
Centralized configuration module for application-wide settings.

Every setting is read from the environment (optionally populated from a
``.env`` file by ``medeina.main.create_clinic``) with a safe default, so
tests can override behaviour simply by setting variables.
"""

import logging
import os

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")

# ===========================
# Store Configuration
# ===========================

STORE_SQLALCHEMY = "sqlalchemy"
STORE_MEMORY = "memory"
SUPPORTED_STORES = (STORE_SQLALCHEMY, STORE_MEMORY)

DEFAULT_DATABASE_URL = "sqlite:///medeina.db"


def get_store_backend() -> str:
    """
    Get the entity store backend to use.

    Environment Variables:
        MEDEINA_STORE: 'sqlalchemy' or 'memory'
            Default: 'sqlalchemy'

    Unknown values fall back to the default with a warning.
    """
    backend = os.getenv("MEDEINA_STORE", STORE_SQLALCHEMY).strip().lower()
    if backend not in SUPPORTED_STORES:
        logger.warning(
            f"Unknown store backend '{backend}' in MEDEINA_STORE. "
            f"Falling back to '{STORE_SQLALCHEMY}'."
        )
        return STORE_SQLALCHEMY
    return backend


def get_database_url() -> str:
    """
    Get the SQLAlchemy database URL.

    Environment Variables:
        DATABASE_URL: Any SQLAlchemy URL
            Default: 'sqlite:///medeina.db'
            Tests: 'sqlite:///:memory:'
    """
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


# ===========================
# Logging Configuration
# ===========================


def _get_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_to_file() -> bool:
    return _get_flag("LOG_TO_FILE", "false")


def get_log_json() -> bool:
    return _get_flag("LOG_JSON", "false")


def get_sql_echo() -> bool:
    return _get_flag("SQL_ECHO", "false")


# ===========================
# Undo Configuration
# ===========================

DEFAULT_UNDO_HISTORY_LIMIT = 50


def get_undo_history_limit() -> int:
    """
    Get the maximum number of undoable commands kept in history.

    Environment Variables:
        MEDEINA_UNDO_HISTORY_LIMIT: positive integer
            Default: 50

    Invalid or non-positive values fall back to the default with a warning.
    """
    raw = os.getenv("MEDEINA_UNDO_HISTORY_LIMIT", str(DEFAULT_UNDO_HISTORY_LIMIT))
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid MEDEINA_UNDO_HISTORY_LIMIT '{raw}'. "
            f"Falling back to {DEFAULT_UNDO_HISTORY_LIMIT}."
        )
        return DEFAULT_UNDO_HISTORY_LIMIT
    if limit <= 0:
        logger.warning(
            f"MEDEINA_UNDO_HISTORY_LIMIT must be positive, got {limit}. "
            f"Falling back to {DEFAULT_UNDO_HISTORY_LIMIT}."
        )
        return DEFAULT_UNDO_HISTORY_LIMIT
    return limit


def log_clinic_config():
    """
    Log the active configuration.

    Should be called during startup to provide visibility into the store
    and undo settings being used.
    """
    logger.info(
        "Clinic configuration initialized",
        extra={
            "context": {
                "store": get_store_backend(),
                "database_url": get_database_url(),
                "undo_history_limit": get_undo_history_limit(),
            }
        },
    )
