"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    critical = "critical"
    warning = "warning"
    info = "info"


@dataclass(frozen=True, slots=True)
class ApplianceSample:
    """A row of the static appliance table shown when no device is live.

    Current here is in amps, unlike live readings.
    """

    name: str
    circuit: str
    current: float
    voltage: float
    power: float
    status: str


@dataclass(frozen=True, slots=True)
class AlertSample:
    type: str
    appliance: str
    time: str
    description: str
    severity: Severity


SAMPLE_APPLIANCES: tuple[ApplianceSample, ...] = (
    ApplianceSample("Air Conditioner", "Living Room", 8.5, 120.2, 1020, "On"),
    ApplianceSample("Refrigerator", "Kitchen", 2.1, 119.8, 252, "On"),
    ApplianceSample("Washing Machine", "Laundry Room", 0.0, 120.0, 0, "Off"),
    ApplianceSample("Television", "Living Room", 1.2, 120.1, 144, "On"),
    ApplianceSample("Microwave", "Kitchen", 12.5, 119.5, 1500, "On"),
    ApplianceSample("Dishwasher", "Kitchen", 0.0, 120.0, 0, "Off"),
    ApplianceSample("Coffee Maker", "Kitchen", 8.3, 120.3, 996, "On"),
    ApplianceSample("Laptop Charger", "Office", 0.5, 120.2, 60, "On"),
    ApplianceSample("LED Lights", "Living Room", 0.8, 120.0, 96, "On"),
    ApplianceSample("Heating Unit", "Basement", 0.0, 120.1, 0, "Off"),
)

SAMPLE_ALERTS: tuple[AlertSample, ...] = (
    AlertSample(
        "Overcurrent", "Microwave", "2 minutes ago",
        "Current spike detected: 12.5A", Severity.critical,
    ),
    AlertSample(
        "Unusual Spike", "Air Conditioner", "15 minutes ago",
        "Power consumption increased by 15%", Severity.warning,
    ),
    AlertSample(
        "Overvoltage", "Main Circuit", "1 hour ago",
        "Voltage reading: 125V (above normal)", Severity.warning,
    ),
)

SAMPLE_ALERT_HISTORY: tuple[AlertSample, ...] = (
    AlertSample(
        "Overcurrent", "Coffee Maker", "2 hours ago",
        "Current exceeded 8A threshold", Severity.warning,
    ),
    AlertSample(
        "Unusual Spike", "Television", "5 hours ago",
        "Sudden power increase detected", Severity.info,
    ),
    AlertSample(
        "Overvoltage", "Main Circuit", "1 day ago",
        "Voltage spike: 127V", Severity.critical,
    ),
    AlertSample(
        "Overcurrent", "Washing Machine", "2 days ago",
        "Startup current: 15A", Severity.warning,
    ),
    AlertSample(
        "Unusual Spike", "Refrigerator", "3 days ago",
        "Compressor cycle detected", Severity.info,
    ),
)
