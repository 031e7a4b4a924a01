"""CLI modules for running simulations.

Note: avoid importing submodules at import-time. This keeps `python -m evpowertrain.cli.<cmd>`
free of `runpy` warnings and avoids side effects from eager imports.
"""

from __future__ import annotations


def run_sim_main(argv: list[str] | None = None) -> int:
    """Lazy wrapper for `evpowertrain.cli.run_sim.main`."""

    from .run_sim import main

    return main(argv)


__all__ = ["run_sim_main"]
