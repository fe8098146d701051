"""
Atomic data structures.

This module provides:
- Levels, multiplets, shells and configurations
- Symmetries, multipoles, gauges and atomic processes
- Angular-momentum selection rules
- A structure solver serving tabulated multiplets
"""

from atomcascade.atomic.structures import (
    AtomicProcess,
    Configuration,
    EmGauge,
    EmMultipole,
    EmProperty,
    Level,
    LevelArena,
    LevelSymmetry,
    Multiplet,
    NuclearModel,
    Parity,
    RadialGrid,
    Shell,
    UseGauge,
)


# Lazy import to avoid circular dependency
def __getattr__(name):
    if name == "TabulatedStructureSolver":
        from atomcascade.atomic.tabulated import TabulatedStructureSolver

        return TabulatedStructureSolver
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AtomicProcess",
    "Configuration",
    "EmGauge",
    "EmMultipole",
    "EmProperty",
    "Level",
    "LevelArena",
    "LevelSymmetry",
    "Multiplet",
    "NuclearModel",
    "Parity",
    "RadialGrid",
    "Shell",
    "UseGauge",
    "TabulatedStructureSolver",
]
