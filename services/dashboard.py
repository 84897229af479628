"""Dashboard view model built from the latest snapshot and the static samples."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from app.schemas import LatestSnapshot
from models.records import (
    SAMPLE_ALERT_HISTORY,
    SAMPLE_ALERTS,
    SAMPLE_APPLIANCES,
    AlertSample,
    ApplianceSample,
)
from services.connection import ConnectionStatus, LinkState
from services.units import Quantity, format_line_voltage, format_unit, to_fixed

LOW_VOLTAGE = 115.0
HIGH_VOLTAGE = 125.0

SORTABLE_COLUMNS = ("name", "circuit", "current", "voltage", "power", "status")


@dataclass(frozen=True)
class DashboardData:
    """Live values mapped for display; current stays in milliamps end to end."""

    total_current: float
    total_power: float
    line_voltage: float
    today_energy: float = 0.0

    @classmethod
    def from_snapshot(cls, snapshot: LatestSnapshot) -> "DashboardData":
        # The live path carries no energy accumulation.
        return cls(
            total_current=snapshot.current or 0.0,
            total_power=snapshot.power or 0.0,
            line_voltage=snapshot.voltage or 0.0,
        )


@dataclass(frozen=True)
class Widget:
    label: str
    value: str


@dataclass
class DashboardView:
    status: ConnectionStatus
    widgets: List[Widget]
    appliances: Sequence[ApplianceSample] = field(default_factory=tuple)
    alerts: Sequence[AlertSample] = field(default_factory=tuple)
    alert_history: Sequence[AlertSample] = field(default_factory=tuple)

    @property
    def is_live(self) -> bool:
        return self.status.state is LinkState.live


def build_widgets(data: Optional[DashboardData]) -> List[Widget]:
    if data is None:
        return [
            Widget("Total Power", "--"),
            Widget("Total Current", "--"),
            Widget("Line Voltage (V)", "--"),
            Widget("Today's Energy Usage", "--"),
        ]

    power = format_unit(data.total_power, Quantity.power)
    current = format_unit(data.total_current, Quantity.current)
    energy = format_unit(data.today_energy, Quantity.energy)
    return [
        Widget(f"Total Power ({power.unit})", power.value),
        Widget(f"Total Current ({current.unit})", current.value),
        Widget("Line Voltage (V)", format_line_voltage(data.line_voltage) or "--"),
        Widget(f"Today's Energy Usage ({energy.unit})", energy.value),
    ]


def build_view(status: ConnectionStatus, snapshot: Optional[LatestSnapshot]) -> DashboardView:
    """Live widgets when the status is live, otherwise the static sample display."""
    if status.state is LinkState.live and snapshot is not None and snapshot.has_telemetry:
        return DashboardView(
            status=status,
            widgets=build_widgets(DashboardData.from_snapshot(snapshot)),
        )
    return DashboardView(
        status=status,
        widgets=build_widgets(None),
        appliances=SAMPLE_APPLIANCES,
        alerts=SAMPLE_ALERTS,
        alert_history=SAMPLE_ALERT_HISTORY,
    )


def voltage_indicator(voltage: float) -> str:
    if voltage < LOW_VOLTAGE:
        return "Low"
    if voltage > HIGH_VOLTAGE:
        return "High"
    return "Normal"


def current_shares(appliances: Iterable[ApplianceSample]) -> List[tuple[ApplianceSample, float]]:
    """Pair each appliance with its current as a percentage of the largest draw."""
    items = list(appliances)
    peak = max((item.current for item in items), default=0.0)
    return [
        (item, (item.current / peak) * 100 if peak > 0 else 0.0)
        for item in items
    ]


def sort_appliances(
    appliances: Iterable[ApplianceSample],
    column: str,
    descending: bool = False,
) -> List[ApplianceSample]:
    if column not in SORTABLE_COLUMNS:
        raise ValueError(
            f"Cannot sort by {column!r}; expected one of {', '.join(SORTABLE_COLUMNS)}."
        )

    def key(item: ApplianceSample) -> object:
        value = getattr(item, column)
        return value.lower() if isinstance(value, str) else value

    return sorted(appliances, key=key, reverse=descending)


def _searchable_text(item: ApplianceSample) -> Sequence[str]:
    return (
        item.name,
        item.circuit,
        to_fixed(item.current, 1),
        to_fixed(item.voltage, 1),
        to_fixed(item.power, 0),
        item.status,
    )


def filter_appliances(appliances: Iterable[ApplianceSample], term: str) -> List[ApplianceSample]:
    """Keep appliances whose table cells contain ``term``, ignoring case.

    Numbers are matched as the table shows them, so ``"12.5"`` finds the
    Microwave's current. An empty term keeps every row.
    """
    needle = term.lower()
    return [
        item
        for item in appliances
        if any(needle in text.lower() for text in _searchable_text(item))
    ]
