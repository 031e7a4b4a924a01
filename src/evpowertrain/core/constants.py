"""Core constants for evpowertrain.

This module defines system-wide invariants such as:
- Vehicle body and environment constants used by the longitudinal model
- State clamps and reset values
- Parameter bounds and fallback defaults for the input layer
- Format/model version strings (for run archives)
"""

from __future__ import annotations

# Model versioning for archives
# Update when the tick update formulas change
MODEL_VERSION = "v1.0_ev_longitudinal"
TRACE_FORMAT_VERSION = "0.1"

# Vehicle body
VEHICLE_MASS_KG = 1500.0
DRAG_COEFF = 0.3
FRONTAL_AREA_M2 = 2.5
AIR_DENSITY = 1.225  # kg/m^3
ROLLING_RESISTANCE_COEFF = 0.01
GRAVITY = 9.81  # m/s^2

# Drivetrain / electrical
RPM_PER_KMH = 50.0
TORQUE_OMEGA_EPSILON = 0.1  # rad/s, keeps torque finite at rest
INVERTER_EFFICIENCY = 0.85
BASE_LOAD_FRACTION = 0.5
REGEN_RECOVERY_FRACTION = 0.5

# Thermal
THERMAL_DERATE_THRESHOLD_C = 40.0
THERMAL_DERATE_PER_C = 0.01
HEATING_COEFF = 0.1  # degC per second at full relative load
COOLING_RATE_C_PER_S = 0.05

# State clamps
SPEED_MIN_KMH = 0.0
SPEED_MAX_KMH = 180.0
SOC_MIN = 0.0
SOC_MAX = 100.0
TEMP_MIN_C = 10.0
TEMP_MAX_C = 70.0

# Reset values
SOC_FULL = 100.0
BATTERY_TEMP_INITIAL_C = 25.0

# Timing
FIRST_TICK_DT_S = 0.2  # first tick after start/reset, also the nominal cadence

# Waveform display
WAVE_POINTS = 200
VOLTAGE_RIPPLE_BASE = 0.95
VOLTAGE_RIPPLE_AMPLITUDE = 0.05
VOLTAGE_RIPPLE_RATE = 0.01  # rad/s
CURRENT_RIPPLE_BASE = 0.9
CURRENT_RIPPLE_AMPLITUDE = 0.1
CURRENT_RIPPLE_RATE = 0.02  # rad/s
SPEED_PLOT_MAX_KMH = 200.0
PLOT_HEADROOM = 1.2

# Parameter bounds: (lo, hi, default)
VOLTAGE_BOUNDS_V = (100.0, 1000.0, 400.0)
CAPACITY_BOUNDS_KWH = (10.0, 200.0, 60.0)
MOTOR_POWER_BOUNDS_KW = (50.0, 500.0, 150.0)
REGEN_EFFICIENCY_DEFAULT = 0.5
REGEN_EFFICIENCY_PCT_DEFAULT = 50.0
