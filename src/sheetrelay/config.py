"""Configuration management for SheetRelay."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


def _parse_script_url() -> Optional[str]:
    """Read the default destination, treating a blank value as unset."""
    url = os.getenv("GOOGLE_SCRIPT_URL", "").strip()
    return url or None


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseModel):
    """Application settings.

    Built once at startup and handed to the app factory. Request handling
    never reads the environment directly.
    """

    # Default downstream Apps Script web app (overridable per request)
    google_script_url: Optional[str] = Field(default_factory=_parse_script_url)
    default_sheet_name: str = Field(
        default_factory=lambda: os.getenv("DEFAULT_SHEET_NAME", "PIF_Master")
    )

    # Server settings
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "10000")))
    debug: bool = Field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = Field(default_factory=_parse_cors_origins)

    # Forwarding policy
    forward_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("FORWARD_TIMEOUT_SECONDS", "120"))
    )
    forward_max_attempts: int = Field(
        default_factory=lambda: int(os.getenv("FORWARD_MAX_ATTEMPTS", "2"))
    )
    retry_backoff_seconds: float = Field(
        default_factory=lambda: float(os.getenv("RETRY_BACKOFF_SECONDS", "1"))
    )  # after a 5xx
    error_backoff_seconds: float = Field(
        default_factory=lambda: float(os.getenv("ERROR_BACKOFF_SECONDS", "2"))
    )  # after a network error or timeout

    # Inbound body cap (50MB)
    max_body_bytes: int = Field(
        default_factory=lambda: int(os.getenv("MAX_BODY_BYTES", str(50 * 1024 * 1024)))
    )

    @property
    def destination_configured(self) -> bool:
        return bool(self.google_script_url)


settings = Settings()
