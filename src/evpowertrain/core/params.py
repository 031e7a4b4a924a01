"""Parameter input layer.

Turns user-entered text into validated engine inputs. Anything that does
not parse, or parses outside its documented range, falls back to the
documented default instead of raising.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from .constants import CAPACITY_BOUNDS_KWH, MOTOR_POWER_BOUNDS_KW, VOLTAGE_BOUNDS_V
from .types import DriveMode


# Leading decimal number, so "500 V" reads as 500
_LEADING_NUMBER = re.compile(r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def parse_input(text: str | float | None, lo: float, hi: float, default: float) -> float:
    """Parse a numeric entry, falling back to ``default``.

    Args:
        text: Raw entry text. Only its leading number is read, so trailing
            units or other suffixes are ignored. Numbers are accepted as-is.
        lo: Inclusive lower bound.
        hi: Inclusive upper bound.
        default: Value returned for unparseable or out-of-range input.

    Returns:
        Parsed value within [lo, hi], or ``default``.
    """
    if text is None:
        return default
    if isinstance(text, (int, float)):
        val = float(text)
    else:
        match = _LEADING_NUMBER.match(str(text))
        if match is None:
            return default
        val = float(match.group())
    if math.isnan(val) or val < lo or val > hi:
        return default
    return val


@dataclass(frozen=True)
class PowertrainParams:
    """Battery and motor ratings configured at start.

    Attributes:
        battery_voltage_v: Pack voltage (V), [100, 1000].
        battery_capacity_kwh: Usable capacity (kWh), [10, 200].
        motor_power_kw: Rated motor power (kW), [50, 500].
    """

    battery_voltage_v: float = VOLTAGE_BOUNDS_V[2]
    battery_capacity_kwh: float = CAPACITY_BOUNDS_KWH[2]
    motor_power_kw: float = MOTOR_POWER_BOUNDS_KW[2]

    @classmethod
    def from_text(
        cls,
        voltage: str | float | None,
        capacity: str | float | None,
        power: str | float | None,
    ) -> PowertrainParams:
        """Build from raw entry text with per-field fallback defaults."""
        return cls(
            battery_voltage_v=parse_input(voltage, *VOLTAGE_BOUNDS_V),
            battery_capacity_kwh=parse_input(capacity, *CAPACITY_BOUNDS_KWH),
            motor_power_kw=parse_input(power, *MOTOR_POWER_BOUNDS_KW),
        )


_MODE_ORDER = (DriveMode.ECO, DriveMode.NORMAL, DriveMode.SPORT)


def parse_drive_mode(text: str | int | DriveMode | None) -> DriveMode:
    """Map a name or selector index to a DriveMode (Normal when unknown)."""
    if isinstance(text, DriveMode):
        return text
    if isinstance(text, int) and not isinstance(text, bool):
        return _MODE_ORDER[text] if 0 <= text < len(_MODE_ORDER) else DriveMode.NORMAL
    if text is None:
        return DriveMode.NORMAL
    key = str(text).strip().lower()
    if key.isdigit():
        return parse_drive_mode(int(key))
    try:
        return DriveMode(key)
    except ValueError:
        return DriveMode.NORMAL


def regen_fraction(percent: float) -> float:
    """Convert a regen-efficiency percentage to a [0, 1] fraction."""
    pct = float(percent)
    if math.isnan(pct):
        return 0.0
    return min(max(pct, 0.0), 100.0) / 100.0
