"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_ENVIRONMENT = "development"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_REQUEST_ID_HEADER = "X-Request-ID"
DEFAULT_VERSION = "1.0.0"

PRODUCTION_ENVIRONMENT = "production"


@dataclass(frozen=True)
class AppSettings:
    """Process-wide runtime settings."""

    environment: str = DEFAULT_ENVIRONMENT
    log_level: str = DEFAULT_LOG_LEVEL
    request_id_header: str = DEFAULT_REQUEST_ID_HEADER
    version: str = DEFAULT_VERSION

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION_ENVIRONMENT

    def safe_for_logging(self) -> dict[str, str]:
        """Return settings safe for logs."""
        return {
            "environment": self.environment,
            "log_level": self.log_level,
            "request_id_header": self.request_id_header,
            "version": self.version,
        }


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Load application settings from the environment."""
    return AppSettings(
        environment=os.getenv("LIFETRACK_ENV", DEFAULT_ENVIRONMENT).strip().lower(),
        log_level=os.getenv("LIFETRACK_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        request_id_header=os.getenv("LIFETRACK_REQUEST_ID_HEADER", DEFAULT_REQUEST_ID_HEADER),
        version=os.getenv("LIFETRACK_VERSION", DEFAULT_VERSION),
    )
