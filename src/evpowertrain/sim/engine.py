"""Powertrain simulation engine.

Fixed-step explicit-Euler integrator for longitudinal vehicle dynamics,
motor torque/power coupling, battery state-of-charge depletion, thermal
drift and regenerative-braking recovery.

Interface:
    engine.start(params, drive_mode, regen_enabled, regen_efficiency)
    engine.tick(dt, commanded_acceleration) -> bool
    engine.stop() / engine.reset()

Flow of one tick:
    1. Clamp the acceleration command to the drive-mode ceiling
    2. Integrate speed from drive force, aero drag and rolling resistance
    3. Derive rpm/torque, accumulate distance
    4. Integrate battery energy (with thermal derating and regen), SoC
    5. Integrate battery temperature
    6. Record one waveform sample

Every numeric hazard is handled by a clamp; tick never raises.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable

from ..core.constants import (
    AIR_DENSITY,
    BASE_LOAD_FRACTION,
    BATTERY_TEMP_INITIAL_C,
    COOLING_RATE_C_PER_S,
    CURRENT_RIPPLE_AMPLITUDE,
    CURRENT_RIPPLE_BASE,
    CURRENT_RIPPLE_RATE,
    DRAG_COEFF,
    FIRST_TICK_DT_S,
    FRONTAL_AREA_M2,
    GRAVITY,
    HEATING_COEFF,
    INVERTER_EFFICIENCY,
    REGEN_RECOVERY_FRACTION,
    ROLLING_RESISTANCE_COEFF,
    RPM_PER_KMH,
    SOC_FULL,
    SOC_MAX,
    SOC_MIN,
    SPEED_MAX_KMH,
    SPEED_MIN_KMH,
    TEMP_MAX_C,
    TEMP_MIN_C,
    THERMAL_DERATE_PER_C,
    THERMAL_DERATE_THRESHOLD_C,
    TORQUE_OMEGA_EPSILON,
    VEHICLE_MASS_KG,
    VOLTAGE_RIPPLE_AMPLITUDE,
    VOLTAGE_RIPPLE_BASE,
    VOLTAGE_RIPPLE_RATE,
    WAVE_POINTS,
)
from ..core.logging import get_logger
from ..core.params import PowertrainParams
from ..core.types import DriveMode, SimulationState
from .ledger import EnergyLedger
from .recorder import WaveformRecorder

logger = get_logger(__name__)


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def _finite_step(dt: float) -> float:
    """Non-negative finite step; NaN and infinities become 0."""
    return dt if math.isfinite(dt) and dt > 0.0 else 0.0


def motor_torque(motor_power_kw: float, power_factor: float, motor_rpm: float) -> float:
    """Shaft torque (Nm) at the given rpm.

    The 0.1 rad/s offset in the denominator keeps torque finite at rest.
    """
    omega = motor_rpm / 60.0 * 2.0 * math.pi
    return motor_power_kw * power_factor * 1000.0 / (omega + TORQUE_OMEGA_EPSILON)


def road_load_n(speed_ms: float) -> float:
    """Aerodynamic drag plus rolling resistance (N)."""
    drag = 0.5 * DRAG_COEFF * FRONTAL_AREA_M2 * AIR_DENSITY * speed_ms * speed_ms
    rolling = ROLLING_RESISTANCE_COEFF * VEHICLE_MASS_KG * GRAVITY
    return drag + rolling


def thermal_efficiency(battery_temp_c: float) -> float:
    """Derating factor applied to battery output above 40 degC."""
    return 1.0 - max(0.0, (battery_temp_c - THERMAL_DERATE_THRESHOLD_C) * THERMAL_DERATE_PER_C)


class SimulationEngine:
    """Owns the simulation state, waveform recorder and energy ledger.

    The engine is single-threaded: callers must not invoke ``tick``
    re-entrantly or from several threads at once.

    Args:
        clock: Monotonic clock in seconds, used only when ``tick`` is
            called without an explicit ``dt``.
        recorder_capacity: Number of samples kept per waveform channel.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        recorder_capacity: int = WAVE_POINTS,
    ) -> None:
        self._clock = clock
        self.state = SimulationState()
        self.recorder = WaveformRecorder(recorder_capacity)
        self.ledger = EnergyLedger()
        self._last_tick_time: float | None = None
        self._elapsed_s = 0.0
        self._n_ticks = 0
        self._soc_depleted_logged = False
        self._temp_ceiling_logged = False

    @property
    def elapsed_s(self) -> float:
        """Simulated seconds since the last start/reset."""
        return self._elapsed_s

    @property
    def n_ticks(self) -> int:
        """Ticks that advanced state since the last start/reset."""
        return self._n_ticks

    # ------------------------------------------------------------------
    # Control operations
    # ------------------------------------------------------------------

    def start(
        self,
        params: PowertrainParams,
        drive_mode: DriveMode = DriveMode.NORMAL,
        regen_enabled: bool = False,
        regen_efficiency: float = 0.5,
    ) -> None:
        """Configure and start a fresh run.

        Inputs are a precondition: ratings must already be range-validated
        and ``regen_efficiency`` must be a fraction in [0, 1].
        """
        s = self.state
        s.battery_voltage_v = float(params.battery_voltage_v)
        s.battery_capacity_kwh = float(params.battery_capacity_kwh)
        s.motor_power_kw = float(params.motor_power_kw)
        s.drive_mode = DriveMode(drive_mode)
        s.regen_braking_enabled = bool(regen_enabled)
        s.regen_efficiency = float(regen_efficiency)
        self._reset_dynamics()
        s.is_running = True

        logger.info(
            "simulation started",
            battery_voltage_v=s.battery_voltage_v,
            battery_capacity_kwh=s.battery_capacity_kwh,
            motor_power_kw=s.motor_power_kw,
            drive_mode=s.drive_mode.value,
            regen_braking=s.regen_braking_enabled,
            regen_efficiency=s.regen_efficiency,
        )

    def stop(self) -> None:
        """Freeze the state; later ticks are no-ops."""
        self.state.is_running = False
        logger.info(
            "simulation stopped",
            n_ticks=self._n_ticks,
            distance_km=self.state.distance_km,
            soc_percent=self.state.soc_percent,
        )

    def reset(self) -> None:
        """Return dynamic fields to their ready values.

        Configuration and ``is_running`` are left untouched.
        """
        self._reset_dynamics()
        logger.info("simulation reset", is_running=self.state.is_running)

    def _reset_dynamics(self) -> None:
        s = self.state
        s.vehicle_speed_kmh = 0.0
        s.motor_rpm = 0.0
        s.motor_torque_nm = 0.0
        s.distance_km = 0.0
        s.energy_consumed_kwh = 0.0
        s.soc_percent = SOC_FULL
        s.battery_temp_c = BATTERY_TEMP_INITIAL_C
        s.energy_efficiency_wh_per_km = 0.0
        self.ledger.clear()
        self._last_tick_time = None
        self._elapsed_s = 0.0
        self._n_ticks = 0
        self._soc_depleted_logged = False
        self._temp_ceiling_logged = False

    # ------------------------------------------------------------------
    # Advance
    # ------------------------------------------------------------------

    def _resolve_dt(self, dt: float | None) -> float:
        if dt is not None:
            # The next clock-measured tick starts a fresh interval
            self._last_tick_time = None
            return _finite_step(float(dt))
        now = self._clock()
        prev, self._last_tick_time = self._last_tick_time, now
        if prev is None:
            return FIRST_TICK_DT_S
        return _finite_step(now - prev)

    def tick(
        self,
        dt: float | None,
        commanded_acceleration: float,
        elapsed_s: float | None = None,
    ) -> bool:
        """Advance the state by one step.

        Args:
            dt: Elapsed time (s). ``None`` lets the engine measure it from
                its clock; the first such tick after start, reset or an
                explicit-dt tick uses 0.2 s. Negative or non-finite values
                advance nothing.
            commanded_acceleration: Driver request (m/s^2), clamped to the
                drive-mode ceiling.
            elapsed_s: Ripple phase for the waveform sample. Defaults to the
                simulated time since the run's first tick.

        Returns:
            True if the state advanced, False when the engine is stopped.
        """
        s = self.state
        if not s.is_running:
            return False

        dt = self._resolve_dt(dt)
        profile = s.profile

        s.acceleration_ms2 = profile.clamp_acceleration(commanded_acceleration)

        # Longitudinal dynamics
        speed_ms = s.vehicle_speed_kmh / 3.6
        drive_force = VEHICLE_MASS_KG * s.acceleration_ms2
        net_force = drive_force - road_load_n(speed_ms)
        speed_ms += net_force / VEHICLE_MASS_KG * dt
        s.vehicle_speed_kmh = _clamp(speed_ms * 3.6, SPEED_MIN_KMH, SPEED_MAX_KMH)

        # Motor
        s.motor_rpm = s.vehicle_speed_kmh * RPM_PER_KMH
        s.motor_torque_nm = motor_torque(s.motor_power_kw, profile.power_factor, s.motor_rpm)

        s.distance_km += s.vehicle_speed_kmh / 3600.0 * dt

        # Battery energy
        temp_eff = thermal_efficiency(s.battery_temp_c)
        load = BASE_LOAD_FRACTION + (1.0 - BASE_LOAD_FRACTION) * abs(s.acceleration_ms2)
        power_use_kw = (
            s.motor_power_kw * profile.power_factor * load / (INVERTER_EFFICIENCY * temp_eff)
        )

        drawn_kwh = power_use_kw / 3600.0 * dt
        s.energy_consumed_kwh += drawn_kwh
        self.ledger.book_draw(drawn_kwh)
        s.soc_percent = max(SOC_MIN, self._soc_from_energy())

        if s.acceleration_ms2 < 0 and s.regen_braking_enabled:
            regen_kw = s.regen_efficiency * power_use_kw * REGEN_RECOVERY_FRACTION
            recovered_kwh = regen_kw / 3600.0 * dt
            s.energy_consumed_kwh -= recovered_kwh
            self.ledger.book_regen(recovered_kwh)
            s.soc_percent = _clamp(self._soc_from_energy(), SOC_MIN, SOC_MAX)

        # Thermal
        s.battery_temp_c += (power_use_kw / s.motor_power_kw) * HEATING_COEFF * dt
        s.battery_temp_c -= COOLING_RATE_C_PER_S * dt
        s.battery_temp_c = _clamp(s.battery_temp_c, TEMP_MIN_C, TEMP_MAX_C)

        if s.distance_km > 0:
            s.energy_efficiency_wh_per_km = s.energy_consumed_kwh * 1000.0 / s.distance_km
        else:
            s.energy_efficiency_wh_per_km = 0.0

        phase_s = self._elapsed_s
        if elapsed_s is not None and math.isfinite(elapsed_s):
            phase_s = float(elapsed_s)
        self._record_waveforms(phase_s)

        self._elapsed_s += dt
        self._n_ticks += 1
        self._log_tick(dt, power_use_kw)
        return True

    def _soc_from_energy(self) -> float:
        s = self.state
        return SOC_FULL - s.energy_consumed_kwh / s.battery_capacity_kwh * 100.0

    def _record_waveforms(self, phase_s: float) -> None:
        s = self.state
        voltage = s.battery_voltage_v * (
            VOLTAGE_RIPPLE_BASE + VOLTAGE_RIPPLE_AMPLITUDE * math.sin(phase_s * VOLTAGE_RIPPLE_RATE)
        )
        current = (s.motor_power_kw * 1000.0 / s.battery_voltage_v) * (
            CURRENT_RIPPLE_BASE + CURRENT_RIPPLE_AMPLITUDE * math.sin(phase_s * CURRENT_RIPPLE_RATE)
        )
        self.recorder.record(voltage, current, s.vehicle_speed_kmh, s.battery_temp_c)

    def _log_tick(self, dt: float, power_use_kw: float) -> None:
        s = self.state
        if s.soc_percent <= SOC_MIN and not self._soc_depleted_logged:
            self._soc_depleted_logged = True
            logger.warn(
                "battery depleted",
                elapsed_s=self._elapsed_s,
                energy_consumed_kwh=s.energy_consumed_kwh,
            )
        if s.battery_temp_c >= TEMP_MAX_C and not self._temp_ceiling_logged:
            self._temp_ceiling_logged = True
            logger.warn("battery temperature at ceiling", elapsed_s=self._elapsed_s)

        if logger.is_enabled("DEBUG"):
            logger.debug(
                "tick",
                n=self._n_ticks,
                dt=dt,
                speed_kmh=s.vehicle_speed_kmh,
                accel_ms2=s.acceleration_ms2,
                power_kw=power_use_kw,
                soc_percent=s.soc_percent,
                battery_temp_c=s.battery_temp_c,
            )
