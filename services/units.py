"""Magnitude-based unit promotion for dashboard display values."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, NamedTuple, Optional, Union


class Quantity(str, Enum):
    """Physical quantities the dashboard displays, keyed by their input unit."""

    power = "power"  # W
    current = "current"  # mA
    voltage = "voltage"  # V
    energy = "energy"  # mWh


class FormattedValue(NamedTuple):
    value: str
    unit: str


EMPTY = FormattedValue("0.0", "")


def _to_finite(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_fixed(value: float, digits: int) -> str:
    """Round half away from zero on the exact binary value of ``value``."""
    exponent = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:.{digits}f}"


def _promote(number: float, quantity: Quantity) -> tuple[float, str]:
    if quantity is Quantity.power:
        return (number / 1000, "kW") if number >= 1000 else (number, "W")
    if quantity is Quantity.current:
        return (number / 1000, "A") if number >= 1000 else (number, "mA")
    if quantity is Quantity.energy:
        if number >= 1_000_000:
            return number / 1_000_000, "kWh"
        if number >= 1000:
            return number / 1000, "Wh"
        return number, "mWh"
    return number, "V"


def format_unit(value: Any, quantity: Union[Quantity, str]) -> FormattedValue:
    """Return the one-decimal display value and promoted unit for ``value``.

    Missing, non-numeric and non-finite inputs yield ``("0.0", "")``.

    >>> format_unit(1500, "power")
    FormattedValue(value='1.5', unit='kW')
    """
    number = _to_finite(value)
    if number is None:
        return EMPTY
    scaled, unit = _promote(number, Quantity(quantity))
    return FormattedValue(to_fixed(scaled, 1), unit)


def format_line_voltage(value: Any) -> Optional[str]:
    """Two-decimal voltage for the primary widget, matching the device's serial log."""
    number = _to_finite(value)
    if number is None:
        return None
    return to_fixed(number, 2)
