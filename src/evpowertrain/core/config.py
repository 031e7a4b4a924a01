"""Configuration management with pydantic and YAML support."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .constants import (
    CAPACITY_BOUNDS_KWH,
    FIRST_TICK_DT_S,
    MOTOR_POWER_BOUNDS_KW,
    REGEN_EFFICIENCY_PCT_DEFAULT,
    VOLTAGE_BOUNDS_V,
    WAVE_POINTS,
)
from .params import PowertrainParams, regen_fraction
from .types import DriveMode


class PowertrainConfig(BaseModel):
    """Battery, motor and driver-assist settings applied at start."""

    battery_voltage_v: float = Field(
        default=VOLTAGE_BOUNDS_V[2], ge=VOLTAGE_BOUNDS_V[0], le=VOLTAGE_BOUNDS_V[1]
    )
    battery_capacity_kwh: float = Field(
        default=CAPACITY_BOUNDS_KWH[2], ge=CAPACITY_BOUNDS_KWH[0], le=CAPACITY_BOUNDS_KWH[1]
    )
    motor_power_kw: float = Field(
        default=MOTOR_POWER_BOUNDS_KW[2], ge=MOTOR_POWER_BOUNDS_KW[0], le=MOTOR_POWER_BOUNDS_KW[1]
    )
    drive_mode: DriveMode = DriveMode.NORMAL
    regen_braking: bool = True
    regen_efficiency_pct: float = Field(default=REGEN_EFFICIENCY_PCT_DEFAULT, ge=0.0, le=100.0)

    def params(self) -> PowertrainParams:
        """Ratings as engine start parameters."""
        return PowertrainParams(
            battery_voltage_v=self.battery_voltage_v,
            battery_capacity_kwh=self.battery_capacity_kwh,
            motor_power_kw=self.motor_power_kw,
        )

    @property
    def regen_efficiency(self) -> float:
        """Regen efficiency as a [0, 1] fraction."""
        return regen_fraction(self.regen_efficiency_pct)


class ProfileSegment(BaseModel):
    """Constant acceleration command held for a duration."""

    duration_s: float = Field(gt=0.0)
    acceleration_ms2: float = Field(ge=-1.5, le=1.5)


class RunConfig(BaseModel):
    """Fixed-step driver settings."""

    dt_s: float = Field(default=FIRST_TICK_DT_S, gt=0.0, le=10.0)
    n_ticks: int = Field(default=300, ge=1, le=1_000_000)
    acceleration_ms2: float = Field(default=0.0, ge=-1.5, le=1.5)
    profile: list[ProfileSegment] | None = None


class RecorderConfig(BaseModel):
    """Waveform recorder settings."""

    capacity: int = Field(default=WAVE_POINTS, ge=1, le=100_000)


class SimConfig(BaseModel):
    """Top-level simulation configuration."""

    powertrain: PowertrainConfig = Field(default_factory=PowertrainConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    recorder: RecorderConfig = Field(default_factory=RecorderConfig)


def load_config(path: str | Path) -> SimConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Parsed SimConfig object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return SimConfig.model_validate(data or {})


def save_config(config: SimConfig, path: str | Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration to save.
        path: Output path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False)


def default_config() -> SimConfig:
    """Return default configuration."""
    return SimConfig()


def merge_config(base: SimConfig, overrides: dict[str, Any]) -> SimConfig:
    """Merge overrides into base configuration.

    Args:
        base: Base configuration.
        overrides: Dictionary of override values.

    Returns:
        New configuration with overrides applied.
    """
    base_dict = base.model_dump(mode="json")

    def deep_merge(d1: dict, d2: dict) -> dict:
        result = d1.copy()
        for k, v in d2.items():
            if k in result and isinstance(result[k], dict) and isinstance(v, dict):
                result[k] = deep_merge(result[k], v)
            else:
                result[k] = v
        return result

    merged = deep_merge(base_dict, overrides)
    return SimConfig.model_validate(merged)
