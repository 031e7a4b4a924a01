"""Single simulation run CLI.

Usage:
    python -m evpowertrain.cli.run_sim --mode sport --accel 1.5 --ticks 300
    python -m evpowertrain.cli.run_sim --config run.yaml --outdir out/run1

Outputs JSON with the final state, display readout and energy ledger to
stdout. Log records go to stderr.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    """Run one fixed-step simulation.

    Args:
        argv: Command-line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 = success).
    """
    parser = argparse.ArgumentParser(description="Run the EV powertrain simulation")
    parser.add_argument("--config", type=str, default=None, help="YAML config file")
    parser.add_argument("--voltage", type=str, default=None, help="Battery voltage (V), 100-1000")
    parser.add_argument("--capacity", type=str, default=None, help="Battery capacity (kWh), 10-200")
    parser.add_argument("--power", type=str, default=None, help="Motor power (kW), 50-500")
    parser.add_argument("--mode", type=str, default=None, help="Drive mode: eco, normal, sport")
    parser.add_argument(
        "--regen", action=argparse.BooleanOptionalAction, default=None, help="Regenerative braking"
    )
    parser.add_argument("--regen-efficiency", type=float, default=None, help="Regen efficiency (%%)")
    parser.add_argument("--accel", type=float, default=None, help="Commanded acceleration (m/s^2)")
    parser.add_argument("--dt", type=float, default=None, help="Step size (s)")
    parser.add_argument("--ticks", type=int, default=None, help="Number of ticks")
    parser.add_argument("--outdir", type=str, default=None, help="Write run archive here")
    parser.add_argument(
        "--log-level", type=str, default="WARN", choices=["DEBUG", "INFO", "WARN", "ERROR"]
    )

    args = parser.parse_args(argv)

    from ..core.archive_io import save_run
    from ..core.config import default_config, load_config
    from ..core.logging import set_log_level
    from ..core.params import PowertrainParams, parse_drive_mode, regen_fraction
    from ..sim.driver import AccelerationProfile, run_fixed_step
    from ..sim.engine import SimulationEngine
    from ..sim.readout import format_readout

    set_log_level(args.log_level)

    config = load_config(args.config) if args.config else default_config()
    pt = config.powertrain
    run = config.run

    # Unparseable or out-of-range entries fall back to the documented defaults
    params = PowertrainParams.from_text(
        args.voltage if args.voltage is not None else pt.battery_voltage_v,
        args.capacity if args.capacity is not None else pt.battery_capacity_kwh,
        args.power if args.power is not None else pt.motor_power_kw,
    )
    mode = parse_drive_mode(args.mode) if args.mode is not None else pt.drive_mode
    regen = pt.regen_braking if args.regen is None else args.regen
    regen_eff = (
        regen_fraction(args.regen_efficiency)
        if args.regen_efficiency is not None
        else pt.regen_efficiency
    )
    dt = args.dt if args.dt is not None else run.dt_s
    n_ticks = args.ticks if args.ticks is not None else run.n_ticks

    if args.accel is not None:
        command = AccelerationProfile.constant(args.accel)
    elif run.profile:
        command = AccelerationProfile.from_pairs(
            [(seg.duration_s, seg.acceleration_ms2) for seg in run.profile]
        )
    else:
        command = AccelerationProfile.constant(run.acceleration_ms2)

    engine = SimulationEngine(recorder_capacity=config.recorder.capacity)
    engine.start(params, mode, regen, regen_eff)
    trace = run_fixed_step(engine, n_ticks, dt, command)
    engine.stop()

    output = {
        "n_ticks": engine.n_ticks,
        "elapsed_s": engine.elapsed_s,
        "state": engine.state.to_dict(),
        "readout": format_readout(engine.state),
        "ledger": engine.ledger.to_dict(),
        "ledger_closed": engine.ledger.is_closed(engine.state.energy_consumed_kwh),
    }

    if args.outdir:
        snapshot = engine.recorder.snapshot()
        save_run(Path(args.outdir), trace.as_arrays(), snapshot.as_dict(), dict(output))
        output["outdir"] = args.outdir

    print(json.dumps(output, indent=2))

    return 0


if __name__ == "__main__":
    import sys

    sys.exit(main())
