from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple


_DEFAULT_DEVICE_ENV = "METER_DEFAULT_DEVICE_ID"
_CORS_ORIGINS_ENV = "METER_CORS_ORIGINS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_DEVICE_ID = "esp32_1"


@dataclass(frozen=True)
class Settings:
    default_device_id: str
    cors_origins: Tuple[str, ...]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_origins(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_CORS_ORIGINS_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        default_device_id=_read_str_env(_DEFAULT_DEVICE_ENV, DEFAULT_DEVICE_ID),
        cors_origins=_read_origins(("*",)),
        log_level=_read_log_level("INFO"),
    )
