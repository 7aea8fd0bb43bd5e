"""
Centralized configuration management for the recipe matcher.
Consolidates all environment variable access and default values.
"""

import os
from typing import Optional
from constants import (
    DEBUG_HTTP_ORIGIN,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
)
from error_utils import safe_int_conversion


def get_env_str(key: str, default: str = "") -> str:
    """Get environment variable as string."""
    return os.getenv(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    elif value in ("false", "0", "no", "off"):
        return False
    else:
        return default


# Configuration getters (evaluated at runtime)
def get_host() -> str:
    """Get server host."""
    return get_env_str("RECIPE_MATCHER_HOST", DEFAULT_HOST)


def get_port() -> int:
    """Get server port."""
    return safe_int_conversion(
        os.getenv("RECIPE_MATCHER_PORT"), default=DEFAULT_PORT, min_val=1, max_val=65535
    )


def is_debug_mode() -> bool:
    """Check if debug mode is enabled."""
    return get_env_bool("RECIPE_MATCHER_DEBUG", False)


def get_http_origin() -> Optional[str]:
    """Get the origin sent in Access-Control-Allow-Origin, if any."""
    if is_debug_mode():
        return DEBUG_HTTP_ORIGIN
    return os.getenv("RECIPE_MATCHER_HTTP_ORIGIN") or None


def get_tls_cert_file() -> Optional[str]:
    """Get TLS certificate file."""
    return os.getenv("RECIPE_MATCHER_TLS_CERT_FILE") or None


def get_tls_key_file() -> Optional[str]:
    """Get TLS key file."""
    return os.getenv("RECIPE_MATCHER_TLS_KEY_FILE") or None


def get_log_level() -> str:
    """Get logging level name."""
    if is_debug_mode():
        return "DEBUG"
    return get_env_str("RECIPE_MATCHER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def get_server_config() -> dict:
    """Get server configuration."""
    return {
        "host": get_host(),
        "port": get_port(),
        "debug": is_debug_mode(),
        "http_origin": get_http_origin(),
        "tls_cert_file": get_tls_cert_file(),
        "tls_key_file": get_tls_key_file(),
        "log_level": get_log_level(),
    }


def uses_tls(config: dict) -> bool:
    """Check if both TLS materials are configured."""
    return bool(config.get("tls_cert_file") and config.get("tls_key_file"))


def validate_config(config: dict) -> list:
    """Validate configuration and return list of issues."""
    issues = []

    # Port validation
    port = config.get("port")
    if not isinstance(port, int) or port < 1 or port > 65535:
        issues.append(f"Invalid port: {port}")

    # TLS validation
    cert_file = config.get("tls_cert_file")
    key_file = config.get("tls_key_file")
    if bool(cert_file) != bool(key_file):
        issues.append("TLS requires both a certificate file and a key file")
    for path in (cert_file, key_file):
        if path and not os.path.isfile(path):
            issues.append(f"TLS file not found: {path}")

    # Log level validation
    log_level = config.get("log_level", DEFAULT_LOG_LEVEL)
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        issues.append(f"Invalid log level: {log_level}")

    return issues
