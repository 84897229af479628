from __future__ import annotations
from functools import lru_cache
from threading import Lock
from typing import Dict, Optional

from app.schemas import Reading


class LatestReadingStore:
    """Single-slot-per-device cache holding only the most recent reading."""

    def __init__(self) -> None:
        self._readings: Dict[str, Reading] = {}
        self._lock = Lock()

    def put(self, device_id: str, reading: Reading) -> None:
        with self._lock:
            self._readings[device_id] = reading

    def get(self, device_id: str) -> Optional[Reading]:
        with self._lock:
            return self._readings.get(device_id)

    def device_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._readings)

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)


@lru_cache
def build_default_store() -> LatestReadingStore:
    return LatestReadingStore()
