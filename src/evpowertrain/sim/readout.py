"""Display values for a status panel and waveform plot."""

from __future__ import annotations

from ..core.constants import PLOT_HEADROOM, SPEED_PLOT_MAX_KMH, TEMP_MAX_C, TEMP_MIN_C
from ..core.types import SimulationState


def format_readout(state: SimulationState) -> dict[str, str]:
    """Format the state for textual display, one string per quantity."""
    return {
        "speed": f"{state.vehicle_speed_kmh:.1f} km/h",
        "soc": f"{state.soc_percent:.1f} %",
        "distance": f"{state.distance_km:.2f} km",
        "energy": f"{state.energy_consumed_kwh:.2f} kWh",
        "torque": f"{state.motor_torque_nm:.1f} Nm",
        "rpm": f"{state.motor_rpm:.0f} RPM",
        "temperature": f"{state.battery_temp_c:.1f} °C",
        "efficiency": f"{state.energy_efficiency_wh_per_km:.0f} Wh/km",
    }


def waveform_scales(state: SimulationState) -> dict[str, tuple[float, float]]:
    """Plot range ``(lo, hi)`` per waveform channel."""
    max_current = state.motor_power_kw * 1000.0 / state.battery_voltage_v * PLOT_HEADROOM
    return {
        "voltage": (0.0, state.battery_voltage_v * PLOT_HEADROOM),
        "current": (0.0, max_current),
        "speed": (0.0, SPEED_PLOT_MAX_KMH),
        "temperature": (TEMP_MIN_C, TEMP_MAX_C),
    }
