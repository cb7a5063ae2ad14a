"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  In a
production deployment you should override these via environment
variables, in particular the basic‑auth credentials.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Directory API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    description: str = os.getenv(
        "API_DESCRIPTION",
        "User management API: CRUD, pagination, search, role filtering and soft delete.",
    )
    contact_name: str = os.getenv("API_CONTACT_NAME", "User Directory Team")
    contact_email: str = os.getenv("API_CONTACT_EMAIL", "support@example.com")
    license_name: str = os.getenv("API_LICENSE_NAME", "MIT License")
    license_url: str = os.getenv("API_LICENSE_URL", "https://opensource.org/licenses/MIT")

    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  Relative paths are resolved
    # against the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "user_directory.db")

    # bcrypt work factor.  Each increment doubles the hashing cost.
    password_hash_rounds: int = int(os.getenv("PASSWORD_HASH_ROUNDS", "12"))

    # Credentials accepted by the HTTP Basic guard on the users API.
    basic_auth_username: str = os.getenv("API_USERNAME", "admin")
    basic_auth_password: str = os.getenv("API_PASSWORD", "change_me")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes defaults at import time, environment variables should be
# set before importing this module.
settings = Settings()
