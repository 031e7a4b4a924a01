"""Test structured logging and the engine's log records."""

import io
import json

import numpy as np
import pytest

from evpowertrain.core.logging import StructuredLogger, get_logger, set_log_level
from evpowertrain.core.types import DriveMode
from evpowertrain.sim.driver import run_fixed_step


def _records(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_structured_logger_levels():
    buf = io.StringIO()
    log = StructuredLogger("test", output=buf, min_level="WARN")

    log.info("hidden")
    log.warn("shown", soc=12.5)
    log.error("also shown")

    records = _records(buf.getvalue())
    assert [r["message"] for r in records] == ["shown", "also shown"]
    assert records[0]["level"] == "WARN"
    assert records[0]["soc"] == 12.5
    assert records[0]["logger"] == "test"


def test_timer_emits_debug_record():
    buf = io.StringIO()
    log = StructuredLogger("timer", output=buf, min_level="DEBUG")
    with log.timer("work") as summary:
        summary["n_ticks"] = 3

    (record,) = _records(buf.getvalue())
    assert record["message"] == "work completed"
    assert record["elapsed_ms"] >= 0.0
    assert record["n_ticks"] == 3


def test_numpy_values_are_serialised():
    buf = io.StringIO()
    log = StructuredLogger("np", output=buf, min_level="INFO")
    log.info("sample", speed=np.float32(12.5), channel=np.array([1.0, 2.0]))

    (record,) = _records(buf.getvalue())
    assert record["speed"] == 12.5
    assert record["channel"] == [1.0, 2.0]


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        StructuredLogger("bad", min_level="LOUD")


def test_run_fixed_step_reports_tick_count(engine, capsys):
    set_log_level("DEBUG")
    run_fixed_step(engine, 5, 0.2, 1.0)

    records = _records(capsys.readouterr().err)
    (done,) = [r for r in records if r["message"] == "run_fixed_step completed"]
    assert done["n_ticks"] == 5
    assert done["elapsed_s"] == pytest.approx(1.0)


def test_set_log_level_applies_to_cached_loggers():
    log = get_logger("evpowertrain.tests.cached")
    set_log_level("ERROR")
    assert not log.is_enabled("WARN")
    set_log_level("DEBUG")
    assert log.is_enabled("DEBUG")

    with pytest.raises(ValueError):
        set_log_level("LOUD")


def test_engine_logs_control_operations(engine, capsys, params):
    set_log_level("INFO")
    engine.start(params, DriveMode.ECO, True, 0.3)
    engine.reset()
    engine.stop()

    messages = [r["message"] for r in _records(capsys.readouterr().err)]
    assert messages == ["simulation started", "simulation reset", "simulation stopped"]


def test_engine_tick_debug_records(engine, capsys):
    set_log_level("DEBUG")
    engine.tick(0.2, 1.0)
    engine.tick(0.2, 1.0)

    ticks = [r for r in _records(capsys.readouterr().err) if r["message"] == "tick"]
    assert [r["n"] for r in ticks] == [1, 2]
    assert ticks[0]["accel_ms2"] == 1.0


def test_engine_warns_once_per_run(make_engine, capsys, params):
    engine = make_engine(DriveMode.SPORT)
    for _ in range(300):
        engine.tick(5.0, 1.5)

    records = _records(capsys.readouterr().err)
    warnings = [r["message"] for r in records if r["level"] == "WARN"]
    assert warnings.count("battery depleted") == 1
    assert warnings.count("battery temperature at ceiling") == 1

    # A new run re-arms the warnings
    engine.start(params, DriveMode.SPORT, False, 0.5)
    for _ in range(300):
        engine.tick(5.0, 1.5)
    warnings = [r["message"] for r in _records(capsys.readouterr().err) if r["level"] == "WARN"]
    assert warnings.count("battery depleted") == 1
