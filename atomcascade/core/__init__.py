"""
Core utilities.

This module provides:
- Physical constants and unit conversions
- Configuration and logging
- Exception hierarchy
- Abstract interfaces of the external atomic services
- Factory for cascade simulation methods
"""

from atomcascade.core import constants
from atomcascade.core import config
from atomcascade.core import logging_config
from atomcascade.core import exceptions
from atomcascade.core.abc import AmplitudeEvaluator, StructureSolver, TransitionLineEvaluator


# Lazy import to avoid circular dependency
def __getattr__(name):
    if name == "SimulationMethodFactory":
        from atomcascade.core.factory import SimulationMethodFactory

        return SimulationMethodFactory
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Modules
    "constants",
    "config",
    "logging_config",
    "exceptions",
    # Abstract base classes
    "StructureSolver",
    "AmplitudeEvaluator",
    "TransitionLineEvaluator",
    # Factories
    "SimulationMethodFactory",
]
