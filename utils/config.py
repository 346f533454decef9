"""Configuration management utilities for the deal feed explorer.

Provides:
- A small ``Config`` base class that exposes its settings as a dict
- ``AppConfig``: application settings loaded from environment variables
- Page-size constants shared by the view and the API
"""

import os as _os
from pathlib import Path
from typing import Any, Dict

# ── Pagination constants ──────────────────────────────────────────────────────

PAGE_SIZES: tuple[int, ...] = (25, 50, 100)
DEFAULT_PAGE_SIZE = 50

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_LOCAL_PATH = _PROJECT_ROOT / "static" / "test-data.json"

_SECRET_KEYS = frozenset({"developer_key"})


class Config:
    """Base configuration class for organizing application settings."""

    def to_dict(self, redact: bool = False) -> Dict[str, Any]:
        """Convert config to dictionary.

        Args:
            redact: Mask secret values (credentials) so the result is safe
                to log.

        Returns:
            Dictionary of all public config attributes
        """
        data = {k: v for k, v in self.__dict__.items() if not k.startswith("_")}
        if redact:
            for key in _SECRET_KEYS & data.keys():
                if data[key]:
                    data[key] = "***"
        return data


def _optional_float(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    return float(raw)


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    Every variable has a default so the explorer starts without any
    configuration (the remote source simply reports itself unconfigured).

    Environment variables:
        FEED_API_BASE_URL: Base URL of the remote feed service (default: "")
        FEED_DEVELOPER_KEY: Static credential sent as the DeveloperKey header
        FEED_LOCAL_PATH: Path to the bundled JSON snapshot
            (default: static/test-data.json)
        FEED_TIMEOUT_SECONDS: Request timeout; unset means wait indefinitely
        FEED_DEFAULT_PAGE_SIZE: Initial page size, one of 25/50/100 (default: 50)
        APP_PORT: Server port (default: 8000)
        APP_HOST: Server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
    """

    def __init__(self) -> None:
        self.api_base_url = _os.getenv("FEED_API_BASE_URL", "").rstrip("/")
        self.developer_key = _os.getenv("FEED_DEVELOPER_KEY", "")
        self.local_path = Path(_os.getenv("FEED_LOCAL_PATH", str(DEFAULT_LOCAL_PATH)))
        self.timeout_seconds = _optional_float(_os.getenv("FEED_TIMEOUT_SECONDS"))
        self.default_page_size = int(
            _os.getenv("FEED_DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))
        )
        if self.default_page_size not in PAGE_SIZES:
            raise ValueError(
                f"FEED_DEFAULT_PAGE_SIZE must be one of {PAGE_SIZES}, "
                f"got {self.default_page_size}"
            )
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )

    @property
    def remote_configured(self) -> bool:
        """True when a base URL for the remote feed has been supplied."""
        return bool(self.api_base_url)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
