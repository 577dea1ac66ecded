"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables, following the same approach for every
component of the service (database, tokens, preview storage and font
loading).  Defaults are provided for all fields so the API can be
started locally without any configuration.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Frame Studio API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Comma‑separated list of tokens identifying trusted internal callers
    # (the frame renderer, the call counter).  Only these callers may
    # overwrite a frame's storage, call counter or preview image, because
    # those routes are not scoped to the frame owner.
    internal_tokens: str = os.getenv("INTERNAL_TOKENS", "")

    # Path or connection string for the SQLite database.  Relative paths
    # are resolved against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "frame_studio.db")

    # Preview images are PUT to ``STORAGE_UPLOAD_URL`` when it is set.
    # Otherwise they are written to ``PREVIEW_DIR`` on the local disk.
    preview_dir: str = os.getenv("PREVIEW_DIR", "previews")
    storage_upload_url: str = os.getenv("STORAGE_UPLOAD_URL", "")
    storage_token: str = os.getenv("STORAGE_TOKEN", "")

    google_fonts_url: str = os.getenv("GOOGLE_FONTS_URL", "https://fonts.googleapis.com/css2")

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
