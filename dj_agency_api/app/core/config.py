"""
Configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
portal can be started locally without any configuration; in a
production deployment override at least ``SECRET_KEY`` and
``DATABASE_URL``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "DJ Agency Portal API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Optional static token granting admin access.  Requests carrying
    # this token in the Authorization header bypass JWT decoding and are
    # treated as the primary administrator (user id 1).
    super_admin_static_token: str = os.getenv("SUPER_ADMIN_TOKEN", "")

    # Path to the SQLite database.  Relative paths are resolved against
    # the package directory by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "dj_agency.db")

    # Agency commission applied to DJ earnings, in percent.
    commission_rate: float = float(os.getenv("COMMISSION_RATE", "20"))

    # Length of generated producer access codes.
    access_code_length: int = int(os.getenv("ACCESS_CODE_LENGTH", "8"))

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
