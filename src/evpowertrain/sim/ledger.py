"""Energy accounting for battery-side verification.

Implements the closure check:
    E_drawn - E_recovered = energy_consumed

Regen recovery is booked separately from gross draw so the share of
energy returned by braking can be reported per run.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EnergyLedger:
    """Tracks battery energy flow over one run (kWh)."""

    # Gross energy drawn by the motor, including inverter and thermal losses
    drawn_kwh: float = 0.0

    # Energy returned to the pack by regenerative braking
    recovered_kwh: float = 0.0

    tolerance: float = 1e-9  # kWh

    def book_draw(self, kwh: float) -> None:
        self.drawn_kwh += kwh

    def book_regen(self, kwh: float) -> None:
        self.recovered_kwh += kwh

    def clear(self) -> None:
        self.drawn_kwh = 0.0
        self.recovered_kwh = 0.0

    @property
    def net_kwh(self) -> float:
        """Net energy taken from the pack."""
        return self.drawn_kwh - self.recovered_kwh

    @property
    def regen_share(self) -> float:
        """Fraction of drawn energy recovered by regen (0 when nothing drawn)."""
        if self.drawn_kwh <= 0.0:
            return 0.0
        return self.recovered_kwh / self.drawn_kwh

    def closure_error(self, energy_consumed_kwh: float) -> float:
        """Residual between the ledger and the engine's integrated energy."""
        return self.net_kwh - energy_consumed_kwh

    def is_closed(self, energy_consumed_kwh: float) -> bool:
        """Check if the energy balance is satisfied within tolerance."""
        scale = max(1.0, abs(energy_consumed_kwh))
        return abs(self.closure_error(energy_consumed_kwh)) <= self.tolerance * scale

    def to_dict(self) -> dict[str, float]:
        return {
            "drawn_kwh": self.drawn_kwh,
            "recovered_kwh": self.recovered_kwh,
            "net_kwh": self.net_kwh,
            "regen_share": self.regen_share,
        }

    def summarize(self) -> str:
        return (
            f"Drawn: {self.drawn_kwh:.4f} kWh | Recovered: {self.recovered_kwh:.4f} kWh\n"
            f"Net: {self.net_kwh:.4f} kWh | Regen share: {self.regen_share:.2%}"
        )
