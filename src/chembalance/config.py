"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

LOGGER_NAME = "chembalance"


def _env(key: str, default: str = "") -> str:
    v = os.getenv(key)
    return default if v is None else str(v).strip()


def _env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v is None or str(v).strip() == "":
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(key: str) -> Optional[Path]:
    v = _env(key)
    return Path(v).expanduser() if v else None


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    history_path: Optional[Path] = None
    validate_coefficients: bool = False


def load_settings() -> Settings:
    return Settings(
        log_level=_env("CHEMBALANCE_LOG_LEVEL", "WARNING").upper(),
        history_path=_env_path("CHEMBALANCE_HISTORY"),
        validate_coefficients=_env_bool("CHEMBALANCE_VALIDATE_COEFFICIENTS", False),
    )


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Configure root logging once; only entry points should call this."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return logging.getLogger(LOGGER_NAME)
