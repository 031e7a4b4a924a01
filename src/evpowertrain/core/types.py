"""Core types for the simulation state and drive-mode profiles.

This module defines the canonical record shared between the engine
and whatever presentation layer reads it between ticks.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from .constants import (
    BATTERY_TEMP_INITIAL_C,
    CAPACITY_BOUNDS_KWH,
    MOTOR_POWER_BOUNDS_KW,
    REGEN_EFFICIENCY_DEFAULT,
    SOC_FULL,
    VOLTAGE_BOUNDS_V,
)


class DriveMode(str, Enum):
    """Discrete performance profile selected at start."""

    ECO = "eco"
    NORMAL = "normal"
    SPORT = "sport"


@dataclass(frozen=True)
class DriveModeProfile:
    """Acceleration ceiling and power multiplier of a drive mode.

    Attributes:
        max_accel: Symmetric clamp on commanded acceleration (m/s^2).
        power_factor: Multiplier applied to rated motor power.
    """

    max_accel: float
    power_factor: float

    def __post_init__(self) -> None:
        if self.max_accel <= 0:
            raise ValueError(f"max_accel must be positive, got {self.max_accel}")
        if self.power_factor <= 0:
            raise ValueError(f"power_factor must be positive, got {self.power_factor}")

    def clamp_acceleration(self, commanded: float) -> float:
        """Clamp a commanded acceleration to [-max_accel, +max_accel].

        NaN and infinite commands are treated as coasting (0.0).
        """
        commanded = float(commanded)
        if not math.isfinite(commanded):
            return 0.0
        return min(max(commanded, -self.max_accel), self.max_accel)


DRIVE_MODE_PROFILES: dict[DriveMode, DriveModeProfile] = {
    DriveMode.ECO: DriveModeProfile(max_accel=0.5, power_factor=0.7),
    DriveMode.NORMAL: DriveModeProfile(max_accel=1.0, power_factor=1.0),
    DriveMode.SPORT: DriveModeProfile(max_accel=1.5, power_factor=1.3),
}


def profile_for(mode: DriveMode) -> DriveModeProfile:
    """Return the limits for a drive mode."""
    return DRIVE_MODE_PROFILES[DriveMode(mode)]


@dataclass
class SimulationState:
    """Vehicle, battery and motor state vector plus run configuration.

    Owned by the engine; external readers treat it as read-only between
    ticks. Units are carried in field names.
    """

    battery_voltage_v: float = VOLTAGE_BOUNDS_V[2]
    battery_capacity_kwh: float = CAPACITY_BOUNDS_KWH[2]
    motor_power_kw: float = MOTOR_POWER_BOUNDS_KW[2]
    motor_torque_nm: float = 0.0
    motor_rpm: float = 0.0
    vehicle_speed_kmh: float = 0.0
    acceleration_ms2: float = 0.0
    soc_percent: float = SOC_FULL
    distance_km: float = 0.0
    energy_consumed_kwh: float = 0.0
    regen_efficiency: float = REGEN_EFFICIENCY_DEFAULT
    battery_temp_c: float = BATTERY_TEMP_INITIAL_C
    energy_efficiency_wh_per_km: float = 0.0
    drive_mode: DriveMode = DriveMode.NORMAL
    is_running: bool = False
    regen_braking_enabled: bool = False

    @property
    def profile(self) -> DriveModeProfile:
        """Limits of the configured drive mode."""
        return profile_for(self.drive_mode)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data["drive_mode"] = self.drive_mode.value
        return data


@dataclass(frozen=True)
class WaveformSample:
    """One recorded sample across the four waveform channels."""

    voltage: float
    current: float
    speed: float
    temperature: float
