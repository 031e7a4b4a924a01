"""Core module: types, parameters, configuration, utilities."""

from .params import PowertrainParams, parse_drive_mode, parse_input, regen_fraction
from .types import (
    DRIVE_MODE_PROFILES,
    DriveMode,
    DriveModeProfile,
    SimulationState,
    WaveformSample,
    profile_for,
)

__all__ = [
    "DRIVE_MODE_PROFILES",
    "DriveMode",
    "DriveModeProfile",
    "PowertrainParams",
    "SimulationState",
    "WaveformSample",
    "parse_drive_mode",
    "parse_input",
    "profile_for",
    "regen_fraction",
]
