"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


def as_number(value: float) -> Number:
    """Return integral floats as ``int`` so they serialize without a trailing ``.0``."""
    return int(value) if value.is_integer() else value


class Reading(BaseModel):
    """The latest telemetry sample held for a device.

    Instances are frozen so the store can hand the same object to every reader;
    a new push always builds a new instance.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device_id: str = Field(..., alias="deviceId", min_length=1)
    voltage: float = Field(0.0, description="Line voltage in volts.")
    current: float = Field(0.0, description="Current draw in milliamps.")
    power: float = Field(0.0, description="Real power in watts.")
    raw_adc: int = Field(0, alias="rawAdc", description="Raw sensor ADC counts.")
    timestamp: Number = Field(
        ...,
        description=(
            "Producer time (device uptime in ms) or server receipt time in epoch ms "
            "when the producer sent none."
        ),
    )

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True)
        for key in ("voltage", "current", "power"):
            payload[key] = as_number(payload[key])
        return payload


class LatestSnapshot(BaseModel):
    """Poll-side view of a ``GET /latest`` body, where every field may be absent."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    device_id: Optional[str] = Field(None, alias="deviceId")
    voltage: Optional[float] = None
    current: Optional[float] = None
    power: Optional[float] = None
    raw_adc: Optional[int] = Field(None, alias="rawAdc")
    timestamp: Optional[Number] = None

    @property
    def has_telemetry(self) -> bool:
        return any(value is not None for value in (self.voltage, self.current, self.power))


class IngestAck(BaseModel):
    """Acknowledgement returned for every accepted push."""

    ok: bool = True


class HealthStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    devices: int = Field(0, ge=0, description="Devices with a stored reading.")
    device_ids: List[str] = Field(default_factory=list, alias="deviceIds")
