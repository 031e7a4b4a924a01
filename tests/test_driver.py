"""Test the fixed-step and timer-style driver loops."""

import numpy as np
import pytest

from evpowertrain.core.constants import FIRST_TICK_DT_S
from evpowertrain.sim.driver import TRACE_FIELDS, AccelerationProfile, run_fixed_step, run_realtime
from evpowertrain.sim.engine import SimulationEngine


def test_profile_lookup():
    profile = AccelerationProfile(((10.0, 1.0), (5.0, -0.5)))

    assert profile.duration_s == 15.0
    assert profile.at(0.0) == 1.0
    assert profile.at(9.99) == 1.0
    assert profile.at(10.0) == -0.5
    assert profile.at(14.9) == -0.5
    assert profile.at(100.0) == -0.5, "last command holds after the schedule ends"


def test_profile_validation():
    with pytest.raises(ValueError):
        AccelerationProfile(())
    with pytest.raises(ValueError):
        AccelerationProfile(((0.0, 1.0),))
    assert AccelerationProfile.constant(0.7).at(1e6) == 0.7
    assert AccelerationProfile.from_pairs([[2, 1], [3, -1]]).segments == ((2.0, 1.0), (3.0, -1.0))


def test_fixed_step_trace_shape(engine):
    trace = run_fixed_step(engine, n_ticks=25, dt=0.5, command=1.0)

    assert len(trace) == 25
    np.testing.assert_allclose(trace.time_s, 0.5 * np.arange(1, 26))
    np.testing.assert_array_equal(trace.commanded, np.full(25, 1.0))
    assert set(trace.fields) == set(TRACE_FIELDS)
    assert trace["vehicle_speed_kmh"][-1] == engine.state.vehicle_speed_kmh
    assert set(trace.as_arrays()) == {"time_s", "commanded", *TRACE_FIELDS}


def test_fixed_step_records_raw_command(engine):
    """The trace keeps the request; the state keeps the clamped value."""
    trace = run_fixed_step(engine, n_ticks=3, dt=1.0, command=5.0)
    np.testing.assert_array_equal(trace.commanded, [5.0, 5.0, 5.0])
    np.testing.assert_array_equal(trace["acceleration_ms2"], [1.0, 1.0, 1.0])


def test_fixed_step_callable_command(engine):
    trace = run_fixed_step(engine, n_ticks=4, dt=1.0, command=lambda t: -0.1 * t)
    np.testing.assert_allclose(trace.commanded, [0.0, -0.1, -0.2, -0.3])


def test_fixed_step_on_stopped_engine_is_empty():
    trace = run_fixed_step(SimulationEngine(), n_ticks=10, dt=0.2, command=1.0)
    assert len(trace) == 0
    assert trace["soc_percent"].shape == (0,)


def test_fixed_step_stops_when_engine_stops(engine):
    def command(t: float) -> float:
        if t >= 3.0:
            engine.stop()
        return 1.0

    trace = run_fixed_step(engine, n_ticks=10, dt=1.0, command=command)
    assert len(trace) == 3


def test_realtime_loop_uses_engine_clock(engine, clock):
    trace = run_realtime(engine, period_s=0.25, n_ticks=4, command=0.5, sleep=clock.advance)

    expected = FIRST_TICK_DT_S + 0.25 * np.arange(4)
    np.testing.assert_allclose(trace.time_s, expected)
    assert engine.n_ticks == 4


def test_fixed_step_matches_manual_ticks(make_engine):
    a = make_engine()
    b = make_engine()

    trace = run_fixed_step(a, n_ticks=50, dt=0.2, command=0.6)
    for _ in range(50):
        b.tick(0.2, 0.6)

    assert a.state == b.state
    assert trace["distance_km"][-1] == b.state.distance_km
