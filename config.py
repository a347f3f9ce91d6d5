"""Settings for the habit dashboard, read from the environment and an optional .env file."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = "http://localhost:5000"
REQUEST_TIMEOUT_S = 10.0
TOAST_MS = 3000
SHORT_TOAST_MS = 1200
YEAR_RANGE = (2026, 2030)


@dataclass(frozen=True)
class Settings:
    service_url: str = DEFAULT_SERVICE_URL
    request_timeout: float = REQUEST_TIMEOUT_S
    log_level: str = "INFO"
    log_file: Optional[str] = None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, using default %s", name, default)
        return default
    return value


def load_settings(env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file)
    return Settings(
        service_url=os.getenv("HABIT_SERVICE_URL", DEFAULT_SERVICE_URL).rstrip("/"),
        request_timeout=_float_env("HABIT_SERVICE_TIMEOUT", REQUEST_TIMEOUT_S),
        log_level=os.getenv("HABIT_LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("HABIT_LOG_FILE") or None,
    )
