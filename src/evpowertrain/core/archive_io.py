"""Run archive IO with format-version guards."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from .constants import MODEL_VERSION, TRACE_FORMAT_VERSION

META_FILENAME = "summary.json"
TRACE_FILENAME = "trace.npz"
WAVEFORM_FILENAME = "waveforms.npz"


def save_run(
    outdir: Path,
    trace: dict[str, np.ndarray],
    waveforms: dict[str, np.ndarray],
    summary: dict[str, Any],
) -> None:
    """Save per-tick trace, waveform snapshot and metadata."""
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    np.savez(outdir / TRACE_FILENAME, **trace)
    np.savez(outdir / WAVEFORM_FILENAME, **waveforms)

    summary = {
        **summary,
        "trace_format_version": TRACE_FORMAT_VERSION,
        "model_version": MODEL_VERSION,
        "trace_fields": sorted(trace),
        "n_ticks": int(len(next(iter(trace.values())))) if trace else 0,
    }
    with open(outdir / META_FILENAME, "w") as f:
        json.dump(summary, f, indent=2)


def load_run(
    outdir: Path,
) -> tuple[dict[str, np.ndarray], dict[str, np.ndarray], dict[str, Any]]:
    """Load a run archive. Raises on incompatible format version."""
    outdir = Path(outdir)
    summary_path = outdir / META_FILENAME
    if not summary_path.exists():
        raise FileNotFoundError(f"Missing {META_FILENAME} in {outdir}")

    with open(summary_path) as f:
        summary = json.load(f)

    fmt = summary.get("trace_format_version")
    if fmt != TRACE_FORMAT_VERSION:
        raise ValueError(f"Trace format mismatch: archive {fmt}, expected {TRACE_FORMAT_VERSION}")

    with np.load(outdir / TRACE_FILENAME, allow_pickle=False) as data:
        trace = {k: data[k] for k in data.files}
    with np.load(outdir / WAVEFORM_FILENAME, allow_pickle=False) as data:
        waveforms = {k: data[k] for k in data.files}

    if sorted(trace) != summary.get("trace_fields", sorted(trace)):
        raise ValueError(f"Trace fields mismatch: {sorted(trace)} vs {summary.get('trace_fields')}")

    return trace, waveforms, summary
