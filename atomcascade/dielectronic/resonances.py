"""
Dielectronic resonances: pathways summed over their final levels.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from atomcascade.atomic.structures import EmProperty, Level
from atomcascade.core.logging_config import get_logger
from atomcascade.dielectronic.pathways import EvaluatedPathway, partial_strength

logger = get_logger("dielectronic.resonances")


@dataclass(frozen=True)
class Resonance:
    """
    A resonance defined by an initial and an intermediate level.

    Attributes
    ----------
    initial_level : Level
        Initial level of the captured-electron system
    intermediate_level : Level
        Resonance level
    resonance_energy : float
        E(n) - E(i) in Hartree
    resonance_strength : EmProperty
        Strength due to stabilization into any final level (Bohr^2 Hartree)
    capture_rate : float
        Capture rate from the initial level into the resonance
    auger_rate : float
        Total Auger rate of the resonance into all initial levels
    photon_rate : EmProperty
        Total photon rate of the resonance into all final levels
    """

    initial_level: Level
    intermediate_level: Level
    resonance_energy: float
    resonance_strength: EmProperty
    capture_rate: float
    auger_rate: float
    photon_rate: EmProperty


def determine_resonances(pathways: List[EvaluatedPathway]) -> List[Resonance]:
    """
    Sum evaluated pathways over their final levels.

    Pathways are grouped by (initial, intermediate) level in the order in
    which the groups first occur. The photon rate of a resonance is the sum
    of the photon rates of its pathways.

    Parameters
    ----------
    pathways : List[EvaluatedPathway]
        Evaluated pathways

    Returns
    -------
    List[Resonance]
    """
    groups: Dict[Tuple[Level, Level], List[EvaluatedPathway]] = {}
    for pathway in pathways:
        groups.setdefault((pathway.initial_level, pathway.intermediate_level), []).append(pathway)

    # Total Auger width of each resonance over all initial levels
    auger_rates: Dict[Level, float] = {}
    for (_, n_level), members in groups.items():
        auger_rates[n_level] = auger_rates.get(n_level, 0.0) + members[0].capture_rate

    resonances = []
    for (i_level, n_level), members in groups.items():
        photon_rate = EmProperty()
        for pathway in members:
            photon_rate = photon_rate + pathway.photon_rate

        capture_rate = members[0].capture_rate
        auger_rate = auger_rates[n_level]
        resonance_energy = n_level.energy - i_level.energy
        electron_energy = members[0].electron_energy

        strength = EmProperty(
            _strength(
                electron_energy, n_level, i_level, capture_rate, auger_rate, photon_rate.coulomb
            ),
            _strength(
                electron_energy, n_level, i_level, capture_rate, auger_rate, photon_rate.babushkin
            ),
        )
        resonances.append(
            Resonance(
                initial_level=i_level,
                intermediate_level=n_level,
                resonance_energy=resonance_energy,
                resonance_strength=strength,
                capture_rate=capture_rate,
                auger_rate=auger_rate,
                photon_rate=photon_rate,
            )
        )

    logger.info(f"Combined {len(pathways)} pathways into {len(resonances)} resonances")
    return resonances


def _strength(
    electron_energy: float,
    n_level: Level,
    i_level: Level,
    capture_rate: float,
    auger_rate: float,
    photon_rate: float,
) -> float:
    """Resonance strength with the total Auger width in the denominator."""
    width = auger_rate + photon_rate
    if width <= 0.0:
        return 0.0
    # partial_strength divides by (capture + photon); rescale to the full width
    return partial_strength(electron_energy, n_level.g, i_level.g, capture_rate, photon_rate) * (
        (capture_rate + photon_rate) / width
    )
