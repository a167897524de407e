from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_API_URL = "http://localhost:8001"
DEFAULT_VALIDATE_PATH = "/document/v2/validate"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(slots=True)
class Settings:
    api_base_url: str
    validate_path: str
    max_upload_bytes: int
    request_timeout: float
    log_level: str

    @property
    def validate_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/{self.validate_path.lstrip('/')}"


def load_settings() -> Settings:
    return Settings(
        api_base_url=os.getenv("SCTR_API_URL", DEFAULT_API_URL),
        validate_path=os.getenv("SCTR_VALIDATE_PATH", DEFAULT_VALIDATE_PATH),
        max_upload_bytes=_env_int("SCTR_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        request_timeout=_env_float("SCTR_REQUEST_TIMEOUT", 120.0),
        log_level=os.getenv("SCTR_LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
