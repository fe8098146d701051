"""
Atomic decay cascades.

This module provides:
- Generation of the decay configurations
- Blocks and steps of a cascade computation
- Transition-line data and the level registry of the decay graph
- Probability propagation and cascade simulations
"""

from atomcascade.cascade.configurations import generate_configuration_list
from atomcascade.cascade.blocks import (
    Block,
    CascadeApproach,
    CascadeComputation,
    Step,
    determine_blocks,
    determine_steps,
)
from atomcascade.cascade.lines import (
    AugerLine,
    CascadeData,
    LineIndex,
    PhotoIonizationLine,
    RadiativeLine,
    compute_transition_lines,
    run_cascade,
)
from atomcascade.cascade.levels import CascadeLevel, LevelRegistry, extract_levels
from atomcascade.cascade.propagation import ProbabilityPropagator, PropagationResult

__all__ = [
    "generate_configuration_list",
    "Block",
    "CascadeApproach",
    "CascadeComputation",
    "Step",
    "determine_blocks",
    "determine_steps",
    "AugerLine",
    "CascadeData",
    "LineIndex",
    "PhotoIonizationLine",
    "RadiativeLine",
    "compute_transition_lines",
    "run_cascade",
    "CascadeLevel",
    "LevelRegistry",
    "extract_levels",
    "ProbabilityPropagator",
    "PropagationResult",
]
