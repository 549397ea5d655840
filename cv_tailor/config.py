"""
Runtime configuration and logging setup.
Settings come from environment variables; CLI flags may override them.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_SERVICE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 60.0
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class Settings:
    """Configuration for the tailoring/scoring service client."""
    service_url: str = DEFAULT_SERVICE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from CV_TAILOR_* environment variables."""
        service_url = os.environ.get("CV_TAILOR_SERVICE_URL", DEFAULT_SERVICE_URL)

        try:
            timeout = float(os.environ.get("CV_TAILOR_TIMEOUT", DEFAULT_TIMEOUT))
        except ValueError:
            timeout = DEFAULT_TIMEOUT

        log_level = os.environ.get("CV_TAILOR_LOG_LEVEL", "INFO").upper()

        return cls(
            service_url=service_url.rstrip("/"),
            timeout=timeout,
            log_level=log_level,
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic stderr handler on the root logger."""
    level_name = (level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
