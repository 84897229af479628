"""Lenient ingest of device pushes into the latest-reading store."""

from __future__ import annotations

import logging
import math
import re
import time
from functools import lru_cache
from typing import Any, Callable, Mapping, Optional

from app.schemas import Number, Reading, as_number
from datastore.latest_store import LatestReadingStore, build_default_store
from settings import get_settings

logger = logging.getLogger(__name__)

_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:Infinity|\d+(?:\.\d*)?(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)"
)
_INT_PREFIX = re.compile(r"(?P<hex>[+-]?0[xX][0-9a-fA-F]+)|[+-]?\d+")


def parse_float(value: Any) -> float:
    """Parse the leading numeric part of ``value``, falling back to ``0.0``.

    Strings such as ``"120.5V"`` yield ``120.5``. Booleans, containers,
    unparseable strings and non-finite results all become ``0.0``.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            parsed = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value.lstrip())
        if match is None:
            return 0.0
        parsed = float(match.group().replace("Infinity", "inf"))
    else:
        return 0.0
    if not math.isfinite(parsed):
        return 0.0
    return parsed or 0.0


def parse_int(value: Any) -> int:
    """Parse the leading integer part of ``value``, falling back to ``0``."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _INT_PREFIX.match(value.lstrip())
        if match is None:
            return 0
        if match.group("hex"):
            return int(match.group("hex"), 16)
        return int(match.group())
    return 0


class IngestionService:
    """Coerces raw push payloads into readings and serves the latest one per device.

    ``clock`` returns wall-clock seconds and only stamps readings whose producer
    sent no usable timestamp.
    """

    def __init__(
        self,
        store: LatestReadingStore,
        default_device_id: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.default_device_id = default_device_id
        self._clock = clock

    def resolve_device_id(self, raw: Any) -> str:
        if isinstance(raw, str):
            return raw.strip() or self.default_device_id
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return str(raw)
        return self.default_device_id

    def coerce(self, payload: Mapping[str, Any]) -> Reading:
        """Build a reading from an arbitrary mapping without ever rejecting it."""
        return Reading(
            device_id=self.resolve_device_id(payload.get("deviceId")),
            voltage=parse_float(payload.get("voltage")),
            current=parse_float(payload.get("current")),
            power=parse_float(payload.get("power")),
            raw_adc=parse_int(payload.get("rawAdc")),
            timestamp=self._coerce_timestamp(payload.get("timestamp")),
        )

    def ingest(self, payload: Any) -> Reading:
        if not isinstance(payload, Mapping):
            payload = {}
        reading = self.coerce(payload)
        self.store.put(reading.device_id, reading)
        logger.info(
            "Stored reading: %.2f V, %.1f mA, %.1f W",
            reading.voltage,
            reading.current,
            reading.power,
            extra={"device_id": reading.device_id},
        )
        return reading

    def latest(self, device_id: Optional[str] = None) -> Optional[Reading]:
        resolved = self.resolve_device_id(device_id)
        reading = self.store.get(resolved)
        logger.debug(
            "Latest reading requested",
            extra={"device_id": resolved, "has_data": reading is not None},
        )
        return reading

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _coerce_timestamp(self, value: Any) -> Number:
        if isinstance(value, (int, float, str)) and not isinstance(value, bool):
            parsed = parse_float(value)
            if parsed:
                return as_number(parsed)
        return self.now_ms()


@lru_cache
def build_default_service() -> IngestionService:
    """Factory that wires the ingestion service with the process-wide store."""
    settings = get_settings()
    return IngestionService(
        store=build_default_store(),
        default_device_id=settings.default_device_id,
    )
