"""Simulation module: engine, waveform recorder, driver loops."""

from .driver import AccelerationProfile, RunTrace, run_fixed_step, run_realtime
from .engine import SimulationEngine
from .ledger import EnergyLedger
from .recorder import WaveformRecorder, WaveformSnapshot

__all__ = [
    "AccelerationProfile",
    "EnergyLedger",
    "RunTrace",
    "SimulationEngine",
    "WaveformRecorder",
    "WaveformSnapshot",
    "run_fixed_step",
    "run_realtime",
]
