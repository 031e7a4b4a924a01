"""evpowertrain: EV powertrain simulation engine."""

from .core.params import PowertrainParams
from .core.types import DriveMode, SimulationState
from .sim.engine import SimulationEngine
from .sim.recorder import WaveformRecorder

__version__ = "0.1.0"

__all__ = [
    "DriveMode",
    "PowertrainParams",
    "SimulationEngine",
    "SimulationState",
    "WaveformRecorder",
]
