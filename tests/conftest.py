"""Pytest configuration for evpowertrain.

Shared fixtures build engines in known configurations. Log level is
restored after every test because the CLI and some tests change it.
"""

from __future__ import annotations

import pytest

from evpowertrain.core.logging import set_log_level
from evpowertrain.core.params import PowertrainParams
from evpowertrain.core.types import DriveMode
from evpowertrain.sim.engine import SimulationEngine


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _restore_log_level():
    set_log_level("WARN")
    yield
    set_log_level("WARN")


@pytest.fixture
def params() -> PowertrainParams:
    return PowertrainParams(battery_voltage_v=400.0, battery_capacity_kwh=60.0, motor_power_kw=150.0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(params, clock) -> SimulationEngine:
    """Started engine: 400 V / 60 kWh / 150 kW, Normal, regen at 50%."""
    eng = SimulationEngine(clock=clock)
    eng.start(params, DriveMode.NORMAL, regen_enabled=True, regen_efficiency=0.5)
    return eng


@pytest.fixture
def make_engine(params, clock):
    """Factory for started engines with a chosen mode and regen setting."""

    def _make(
        mode: DriveMode = DriveMode.NORMAL,
        regen: bool = False,
        regen_efficiency: float = 0.5,
        capacity: int = 200,
    ) -> SimulationEngine:
        eng = SimulationEngine(clock=clock, recorder_capacity=capacity)
        eng.start(params, mode, regen_enabled=regen, regen_efficiency=regen_efficiency)
        return eng

    return _make
