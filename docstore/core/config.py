"""
Document store configuration.
Values come from the environment, optionally seeded from a local .env file.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Database connection configuration
DB_HOST = os.getenv("DOCSTORE_DB_HOST", "localhost")
DB_PORT = os.getenv("DOCSTORE_DB_PORT", "5432")
DB_USER = os.getenv("DOCSTORE_DB_USER", "postgres")
DB_PASSWORD = os.getenv("DOCSTORE_DB_PASSWORD", "")
DB_NAME = os.getenv("DOCSTORE_DB_NAME", "postgres")
CONNECT_TIMEOUT_SEC = os.getenv("DOCSTORE_CONNECT_TIMEOUT_SEC", "10")

# Diagnostics (default disabled)
DEBUG = os.getenv("DOCSTORE_DEBUG", "false").lower() == "true"
LOG_STATEMENTS = os.getenv("DOCSTORE_LOG_STATEMENTS", "false").lower() == "true"

# Version string
VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DOCSTORE_DEBUG", "false").lower() == "true"


def statement_logging_enabled():
    """Check if generated statements should be written to the debug log."""
    return os.getenv("DOCSTORE_LOG_STATEMENTS", "false").lower() == "true"


def get_db_settings():
    """Read connection settings from the environment as a plain dict."""
    return {
        "host": os.getenv("DOCSTORE_DB_HOST", DB_HOST),
        "port": os.getenv("DOCSTORE_DB_PORT", DB_PORT),
        "user": os.getenv("DOCSTORE_DB_USER", DB_USER),
        "password": os.getenv("DOCSTORE_DB_PASSWORD", DB_PASSWORD),
        "database": os.getenv("DOCSTORE_DB_NAME", DB_NAME),
        "timeout": os.getenv("DOCSTORE_CONNECT_TIMEOUT_SEC", CONNECT_TIMEOUT_SEC),
    }


def validate_db_config():
    """Validate database configuration and return any issues."""
    issues = []
    settings = get_db_settings()

    for name in ("host", "user", "database"):
        if not settings[name].strip():
            issues.append(f"Database {name} must not be empty")

    try:
        port = int(settings["port"])
        if not 0 < port < 65536:
            issues.append(f"Invalid DOCSTORE_DB_PORT: {port}")
    except ValueError:
        issues.append(f"DOCSTORE_DB_PORT must be an integer: {settings['port']}")

    try:
        if float(settings["timeout"]) <= 0:
            issues.append("DOCSTORE_CONNECT_TIMEOUT_SEC must be > 0")
    except ValueError:
        issues.append(f"DOCSTORE_CONNECT_TIMEOUT_SEC must be a number: {settings['timeout']}")

    return issues


def get_connection_options(on_lost=None):
    """Build validated connection options from the environment."""
    from .errors import ConfigurationError
    from .options import ConnectionOptions

    issues = validate_db_config()
    if issues:
        raise ConfigurationError(issues)

    settings = get_db_settings()
    return ConnectionOptions(
        host=settings["host"],
        port=int(settings["port"]),
        user=settings["user"],
        password=settings["password"],
        database=settings["database"],
        timeout=float(settings["timeout"]),
        on_lost=on_lost,
    )
