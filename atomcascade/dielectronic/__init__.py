"""
Dielectronic recombination.

This module provides:
- Capture and stabilization channels
- Pathway enumeration and evaluation
- Resonance strengths
"""

from atomcascade.dielectronic.settings import Settings
from atomcascade.dielectronic.channels import (
    AugerChannel,
    DielectronicChannel,
    RadiativeChannel,
    determine_channels,
)
from atomcascade.dielectronic.pathways import (
    EvaluatedPathway,
    PathwaySkeleton,
    determine_pathways,
    evaluate_pathway,
)
from atomcascade.dielectronic.resonances import Resonance, determine_resonances
from atomcascade.dielectronic.computation import DielectronicResult, compute_pathways

__all__ = [
    "Settings",
    "AugerChannel",
    "RadiativeChannel",
    "DielectronicChannel",
    "determine_channels",
    "PathwaySkeleton",
    "EvaluatedPathway",
    "determine_pathways",
    "evaluate_pathway",
    "Resonance",
    "determine_resonances",
    "DielectronicResult",
    "compute_pathways",
]
