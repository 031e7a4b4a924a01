"""Rolling waveform recorder.

Four parallel fixed-capacity circular buffers (voltage, current, speed,
temperature) share one write cursor. Buffers are zero-filled at
construction and never resized; once full, each write overwrites the
oldest sample.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from ..core.constants import WAVE_POINTS
from ..core.types import WaveformSample

CHANNELS = ("voltage", "current", "speed", "temperature")


@dataclass(frozen=True, eq=False)
class WaveformSnapshot:
    """Chronological view of the most recent samples.

    Iterating yields ``WaveformSample`` records oldest to newest. The view
    holds copies of the channel data, so it can be iterated any number of
    times and is unaffected by later writes to the recorder.
    """

    voltage: np.ndarray
    current: np.ndarray
    speed: np.ndarray
    temperature: np.ndarray

    def __len__(self) -> int:
        return len(self.voltage)

    def __iter__(self) -> Iterator[WaveformSample]:
        for i in range(len(self)):
            yield WaveformSample(
                voltage=float(self.voltage[i]),
                current=float(self.current[i]),
                speed=float(self.speed[i]),
                temperature=float(self.temperature[i]),
            )

    def channel(self, name: str) -> np.ndarray:
        """Return one channel as an array (oldest first)."""
        if name not in CHANNELS:
            raise KeyError(f"Unknown channel {name!r}, expected one of {CHANNELS}")
        return getattr(self, name)

    def as_dict(self) -> dict[str, np.ndarray]:
        """All channels keyed by name."""
        return {name: getattr(self, name) for name in CHANNELS}


class WaveformRecorder:
    """Fixed-size circular sample buffers for external plotting."""

    def __init__(self, capacity: int = WAVE_POINTS) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = int(capacity)
        self._buffers = np.zeros((len(CHANNELS), self._capacity), dtype=np.float64)
        self._cursor = 0
        self._n_written = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        """Index of the slot the next sample will be written to."""
        return self._cursor

    @property
    def n_written(self) -> int:
        """Total samples recorded since construction."""
        return self._n_written

    def record(self, voltage: float, current: float, speed: float, temperature: float) -> None:
        """Write one sample per channel at the cursor and advance it."""
        self._buffers[:, self._cursor] = (voltage, current, speed, temperature)
        self._cursor = (self._cursor + 1) % self._capacity
        self._n_written += 1

    def snapshot(self, count: int | None = None) -> WaveformSnapshot:
        """Most recent ``count`` samples per channel, oldest to newest.

        Slots never written still hold their initial zeros. Counts above
        capacity return the full buffer; counts below 1 return an empty view.

        Args:
            count: Number of samples (defaults to capacity).

        Returns:
            WaveformSnapshot over copies of the selected samples.
        """
        n = self._capacity if count is None else max(0, min(int(count), self._capacity))
        # Slots written longest ago first, ending just before the cursor
        idx = (self._cursor - n + np.arange(n)) % self._capacity
        data = self._buffers[:, idx].copy()
        return WaveformSnapshot(*data)
