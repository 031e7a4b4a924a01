"""Driver loops that advance a SimulationEngine.

The engine never schedules itself. These loops are the external
scheduler: a deterministic fixed-step loop for batch runs and tests, and
a timer-style loop that lets the engine measure ``dt`` from its clock.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from ..core.logging import get_logger
from .engine import SimulationEngine

logger = get_logger(__name__)

# Numeric state fields captured per tick
TRACE_FIELDS = (
    "vehicle_speed_kmh",
    "acceleration_ms2",
    "motor_rpm",
    "motor_torque_nm",
    "distance_km",
    "energy_consumed_kwh",
    "soc_percent",
    "battery_temp_c",
    "energy_efficiency_wh_per_km",
)


@dataclass(frozen=True)
class AccelerationProfile:
    """Piecewise-constant acceleration schedule.

    Attributes:
        segments: ``(duration_s, acceleration_ms2)`` pairs, in order.
            The last command holds once the schedule is exhausted.
    """

    segments: tuple[tuple[float, float], ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("profile needs at least one segment")
        for duration, _ in self.segments:
            if duration <= 0:
                raise ValueError(f"segment duration must be positive, got {duration}")

    @classmethod
    def constant(cls, acceleration_ms2: float) -> AccelerationProfile:
        return cls(((1.0, float(acceleration_ms2)),))

    @classmethod
    def from_pairs(cls, pairs: Sequence[Sequence[float]]) -> AccelerationProfile:
        return cls(tuple((float(d), float(a)) for d, a in pairs))

    @property
    def duration_s(self) -> float:
        return float(sum(d for d, _ in self.segments))

    def at(self, t: float) -> float:
        """Command in effect at simulated time ``t`` (s)."""
        edge = 0.0
        for duration, accel in self.segments:
            edge += duration
            if t < edge:
                return accel
        return self.segments[-1][1]


Command = Union[AccelerationProfile, float, Callable[[float], float]]


def _as_command(command: Command) -> Callable[[float], float]:
    if isinstance(command, AccelerationProfile):
        return command.at
    if callable(command):
        return command
    value = float(command)
    return lambda _t: value


@dataclass
class RunTrace:
    """Per-tick record of a driver run.

    Attributes:
        time_s: Simulated time at the end of each tick.
        commanded: Acceleration requested before clamping.
        fields: One array per entry of ``TRACE_FIELDS``.
    """

    time_s: np.ndarray
    commanded: np.ndarray
    fields: dict[str, np.ndarray] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.time_s)

    def __getitem__(self, name: str) -> np.ndarray:
        if name == "time_s":
            return self.time_s
        if name == "commanded":
            return self.commanded
        return self.fields[name]

    def as_arrays(self) -> dict[str, np.ndarray]:
        return {"time_s": self.time_s, "commanded": self.commanded, **self.fields}


class _TraceBuilder:
    def __init__(self) -> None:
        self.time_s: list[float] = []
        self.commanded: list[float] = []
        self.rows: dict[str, list[float]] = {name: [] for name in TRACE_FIELDS}

    def append(self, engine: SimulationEngine, commanded: float) -> None:
        self.time_s.append(engine.elapsed_s)
        self.commanded.append(commanded)
        for name in TRACE_FIELDS:
            self.rows[name].append(float(getattr(engine.state, name)))

    def build(self) -> RunTrace:
        return RunTrace(
            time_s=np.asarray(self.time_s, dtype=np.float64),
            commanded=np.asarray(self.commanded, dtype=np.float64),
            fields={k: np.asarray(v, dtype=np.float64) for k, v in self.rows.items()},
        )


def run_fixed_step(
    engine: SimulationEngine,
    n_ticks: int,
    dt: float,
    command: Command = 0.0,
) -> RunTrace:
    """Tick the engine ``n_ticks`` times with a fixed ``dt``.

    Stops early if the engine stops running. The engine must already be
    started.

    Args:
        engine: Started engine.
        n_ticks: Number of ticks to attempt.
        dt: Step size (s).
        command: Constant acceleration, profile, or callable of time.

    Returns:
        RunTrace with one row per tick that advanced state.
    """
    accel_at = _as_command(command)
    builder = _TraceBuilder()

    with logger.timer("run_fixed_step") as summary:
        for _ in range(n_ticks):
            commanded = float(accel_at(engine.elapsed_s))
            if not engine.tick(dt, commanded):
                break
            builder.append(engine, commanded)
        summary["n_ticks"] = len(builder.time_s)
        summary["elapsed_s"] = engine.elapsed_s

    return builder.build()


def run_realtime(
    engine: SimulationEngine,
    period_s: float,
    n_ticks: int,
    command: Command = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> RunTrace:
    """Timer-style loop: sleep ``period_s`` then let the engine measure dt.

    ``sleep`` is injectable so tests can pair it with a fake engine clock.
    """
    accel_at = _as_command(command)
    builder = _TraceBuilder()

    for _ in range(n_ticks):
        commanded = float(accel_at(engine.elapsed_s))
        if not engine.tick(None, commanded):
            break
        builder.append(engine, commanded)
        sleep(period_s)

    return builder.build()
