"""Test core types."""

import math

import pytest

from evpowertrain.core.types import DriveMode, DriveModeProfile, SimulationState, profile_for


def test_drive_mode_profile_validation():
    with pytest.raises(ValueError):
        DriveModeProfile(max_accel=0.0, power_factor=1.0)
    with pytest.raises(ValueError):
        DriveModeProfile(max_accel=1.0, power_factor=-1.0)


def test_clamp_acceleration():
    profile = DriveModeProfile(max_accel=0.5, power_factor=0.7)
    assert profile.clamp_acceleration(2.0) == 0.5
    assert profile.clamp_acceleration(-2.0) == -0.5
    assert profile.clamp_acceleration(0.1) == 0.1
    assert profile.clamp_acceleration(math.nan) == 0.0
    assert profile.clamp_acceleration(-math.inf) == 0.0


def test_profile_for_accepts_values():
    assert profile_for("sport") is profile_for(DriveMode.SPORT)
    assert SimulationState(drive_mode=DriveMode.ECO).profile.max_accel == 0.5
