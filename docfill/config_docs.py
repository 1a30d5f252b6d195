"""Configuration reference and helpers for the docfill service.

This module gives an overview of all configuration options and their
environment variable mappings.
"""

# =============================================================================
# ENVIRONMENT VARIABLES REFERENCE
# =============================================================================

# Data & Storage
# --------------
# DOCFILL_DATA_DIR: Base directory for all persistent data (default: ./data)
#   Used for: object storage and metadata records
# DOCFILL_STORAGE_DIR: Object storage override (default: {DATA_DIR}/storage)
# DOCFILL_MAX_TEMPLATE_MB: Largest accepted template upload (default: 50)
#
# Web Server
# ----------
# DOCFILL_WEB_PORT: Web server port (default: 8020)
# DOCFILL_WEB_SERVER_URL: Public base URL used in retrieval links
#   (default: http://localhost:{DOCFILL_WEB_PORT})
# DOCFILL_SIGNED_URL_TTL: Lifetime of retrieval links in seconds (default: 3600)
#
# Authentication
# --------------
# DOCFILL_JWT_SECRET: Secret for signing bearer tokens and retrieval links
#   (required unless the server runs with --no-auth)
#
# Development
# -----------
# DOCFILL_LOG_LEVEL: Logging verbosity (default: INFO)
#   Values: DEBUG, INFO, WARNING, ERROR, CRITICAL

import os

from docfill.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_TEMPLATE_MB,
    DEFAULT_SIGNED_URL_TTL_SECONDS,
    DEFAULT_WEB_PORT,
    Config,
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_config_summary() -> dict:
    """Get a summary of current configuration from environment.

    Returns:
        Dictionary with current configuration values
    """
    return {
        "data_dir": str(Config.get_data_dir()),
        "storage_dir": str(Config.get_storage_dir()),
        "metadata_dir": str(Config.get_metadata_dir()),
        "test_mode": Config.is_test_mode(),
        "web_port": Config.get_web_port(),
        "web_server_url": Config.get_web_server_url(),
        "signed_url_ttl": Config.get_signed_url_ttl(),
        "max_template_mb": Config.get_max_template_bytes() // (1024 * 1024),
        "jwt_secret_set": bool(Config.get_jwt_secret()),
        "log_level": Config.get_log_level(),
    }


def validate_configuration(require_auth: bool = True) -> tuple[bool, list[str]]:
    """Validate current configuration for completeness and consistency.

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    try:
        data_dir = Config.get_data_dir()
        if not data_dir.exists():
            data_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(data_dir, os.W_OK):
            errors.append(f"Data directory not writable: {data_dir}")
    except OSError as e:
        errors.append(f"Cannot access data directory: {e}")

    if require_auth and not Config.get_jwt_secret():
        errors.append("DOCFILL_JWT_SECRET must be set when authentication is enabled")

    if Config.get_signed_url_ttl() <= 0:
        errors.append(
            f"DOCFILL_SIGNED_URL_TTL must be positive (default {DEFAULT_SIGNED_URL_TTL_SECONDS})"
        )

    if Config.get_max_template_bytes() <= 0:
        errors.append(f"DOCFILL_MAX_TEMPLATE_MB must be positive (default {DEFAULT_MAX_TEMPLATE_MB})")

    port = Config.get_web_port()
    if not 0 < port < 65536:
        errors.append(f"DOCFILL_WEB_PORT out of range: {port} (default {DEFAULT_WEB_PORT})")

    if Config.get_log_level() not in VALID_LOG_LEVELS:
        errors.append(
            f"DOCFILL_LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)} "
            f"(default {DEFAULT_LOG_LEVEL})"
        )

    return len(errors) == 0, errors
