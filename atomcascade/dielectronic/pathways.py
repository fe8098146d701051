"""
Dielectronic-recombination pathways.

A pathway is a triple (initial level i, intermediate resonance n, final
level f): an electron is captured into n and the resonance stabilizes by
photon emission into f. Pathways are first enumerated as
:class:`PathwaySkeleton` (levels, energies and channels only); evaluating
the channel amplitudes turns a skeleton into an :class:`EvaluatedPathway`.
"""

from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

import numpy as np

from atomcascade.atomic.structures import (
    EmGauge,
    EmMultipole,
    EmProperty,
    Level,
    Multiplet,
    RadialGrid,
)
from atomcascade.core.abc import AmplitudeEvaluator
from atomcascade.core.constants import ALPHA_FS
from atomcascade.core.logging_config import get_logger
from atomcascade.dielectronic.channels import (
    AugerChannel,
    DielectronicChannel,
    RadiativeChannel,
    determine_channels,
)
from atomcascade.dielectronic.settings import Settings

logger = get_logger("dielectronic.pathways")


class _PathwayLevelsMixin:
    """Shared accessors of pathway skeletons and evaluated pathways."""

    @property
    def level_indices(self) -> Tuple[int, int, int]:
        """1-based (i, n, f) indices within the three multiplets."""
        return (self.initial_level.index, self.intermediate_level.index, self.final_level.index)

    @property
    def multipoles(self) -> List[EmMultipole]:
        """Distinct multipoles of the channels, in channel order."""
        seen: List[EmMultipole] = []
        for ch in self.channels:
            if ch.radiative_channel.multipole not in seen:
                seen.append(ch.radiative_channel.multipole)
        return seen


@dataclass(frozen=True)
class PathwaySkeleton(_PathwayLevelsMixin):
    """
    A kinematically allowed pathway before its amplitudes are evaluated.

    Attributes
    ----------
    initial_level, intermediate_level, final_level : Level
        Levels of the pathway
    electron_energy : float
        Energy of the captured electron in Hartree
    photon_energy : float
        Energy of the emitted photon in Hartree
    channels : Tuple[DielectronicChannel, ...]
        Allowed channels; may be empty for selection-rule forbidden pathways
    """

    initial_level: Level
    intermediate_level: Level
    final_level: Level
    electron_energy: float
    photon_energy: float
    channels: Tuple[DielectronicChannel, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "channels", tuple(self.channels))


@dataclass(frozen=True)
class EvaluatedPathway(_PathwayLevelsMixin):
    """
    A pathway with evaluated amplitudes, rates and cross sections.

    Attributes
    ----------
    initial_level, intermediate_level, final_level : Level
        Levels of the pathway
    electron_energy, photon_energy : float
        Electron and photon energies in Hartree
    channels : Tuple[DielectronicChannel, ...]
        Channels carrying their evaluated amplitudes
    capture_rate : float
        Capture (Auger) rate n -> i in atomic units
    photon_rate : EmProperty
        Photon emission rate n -> f in atomic units
    cross_section : EmProperty
        Partial resonance strength of this pathway (Bohr^2 Hartree)
    angular_beta : EmProperty
        Anisotropy parameter of the photon emission
    polarization_p0, polarization_p2 : EmProperty
        Polarization parameters of the photon emission
    """

    initial_level: Level
    intermediate_level: Level
    final_level: Level
    electron_energy: float
    photon_energy: float
    channels: Tuple[DielectronicChannel, ...]
    capture_rate: float
    photon_rate: EmProperty
    cross_section: EmProperty
    angular_beta: EmProperty = EmProperty()
    polarization_p0: EmProperty = EmProperty()
    polarization_p2: EmProperty = EmProperty()

    @classmethod
    def from_skeleton(
        cls,
        skeleton: PathwaySkeleton,
        channels: List[DielectronicChannel],
        capture_rate: float,
        photon_rate: EmProperty,
        cross_section: EmProperty,
    ) -> "EvaluatedPathway":
        """Combine a skeleton with its evaluated channels and properties."""
        return cls(
            initial_level=skeleton.initial_level,
            intermediate_level=skeleton.intermediate_level,
            final_level=skeleton.final_level,
            electron_energy=skeleton.electron_energy,
            photon_energy=skeleton.photon_energy,
            channels=tuple(channels),
            capture_rate=capture_rate,
            photon_rate=photon_rate,
            cross_section=cross_section,
        )


def determine_pathways(
    final_multiplet: Multiplet,
    intermediate_multiplet: Multiplet,
    initial_multiplet: Multiplet,
    settings: Settings,
) -> List[PathwaySkeleton]:
    """
    Enumerate all pathways between three multiplets.

    Triples with a negative electron energy E(n) - E(i) or a negative photon
    energy E(n) - E(f) are skipped, as are triples outside an explicit
    selection and those below the minimum photon energy.

    Parameters
    ----------
    final_multiplet, intermediate_multiplet, initial_multiplet : Multiplet
        Multiplets of the final, resonance and initial levels
    settings : Settings
        Pathway selection, energy shifts and channel settings

    Returns
    -------
    List[PathwaySkeleton]
        Skeletons in (i, n, f) enumeration order
    """
    selected: Set[Tuple[int, int, int]] = set()
    if settings.select_pathways:
        selected = set(settings.selected_pathways)

    pathways: List[PathwaySkeleton] = []
    for i, i_level in enumerate(initial_multiplet.levels, start=1):
        for n, n_level in enumerate(intermediate_multiplet.levels, start=1):
            for f, f_level in enumerate(final_multiplet.levels, start=1):
                if settings.select_pathways and (i, n, f) not in selected:
                    continue
                e_energy = n_level.energy - i_level.energy
                p_energy = n_level.energy - f_level.energy
                if p_energy < 0.0 or e_energy < 0.0:
                    continue
                p_energy += settings.photon_energy_shift
                if p_energy < settings.minimum_photon_energy:
                    continue
                e_energy += settings.electron_energy_shift

                channels = determine_channels(f_level, n_level, i_level, settings)
                pathways.append(
                    PathwaySkeleton(i_level, n_level, f_level, e_energy, p_energy, tuple(channels))
                )

    logger.info(
        f"Determined {len(pathways)} dielectronic pathways from "
        f"{len(initial_multiplet)} x {len(intermediate_multiplet)} x {len(final_multiplet)} levels"
    )
    return pathways


def partial_strength(
    electron_energy: float,
    g_intermediate: int,
    g_initial: int,
    capture_rate: float,
    photon_rate: float,
) -> float:
    """
    Resonance strength (pi^2 / E_e) (g_n / 2 g_i) A_c A_r / (A_c + A_r).

    Returns 0 if the electron energy or the total width vanishes.
    """
    width = capture_rate + photon_rate
    if electron_energy <= 0.0 or width <= 0.0:
        return 0.0
    return (
        np.pi**2 / electron_energy * g_intermediate / (2.0 * g_initial) * capture_rate * photon_rate
    ) / width


def evaluate_pathway(
    skeleton: PathwaySkeleton,
    evaluator: AmplitudeEvaluator,
    grid: RadialGrid,
    settings: Settings,
) -> EvaluatedPathway:
    """
    Evaluate all channel amplitudes and the derived rates of a pathway.

    Capture amplitudes are requested once per partial wave and emission
    amplitudes once per (multipole, gauge).

    Raises
    ------
    AmplitudeError
        Propagated from the evaluator
    """
    capture_amplitudes: Dict[int, complex] = {}
    emission_amplitudes: Dict[Tuple[EmMultipole, EmGauge], complex] = {}
    new_channels: List[DielectronicChannel] = []

    for channel in skeleton.channels:
        a_channel = channel.auger_channel
        if a_channel.kappa not in capture_amplitudes:
            capture_amplitudes[a_channel.kappa] = evaluator.auger_amplitude(
                settings.capture_operator,
                a_channel,
                skeleton.electron_energy,
                skeleton.intermediate_level,
                skeleton.initial_level,
                grid,
                settings.continuum_options,
            )
        r_channel = channel.radiative_channel
        key = (r_channel.multipole, r_channel.gauge)
        if key not in emission_amplitudes:
            emission_amplitudes[key] = evaluator.radiative_amplitude(
                "emission",
                r_channel.multipole,
                r_channel.gauge,
                skeleton.photon_energy,
                skeleton.final_level,
                skeleton.intermediate_level,
                grid,
            )
        new_channels.append(
            DielectronicChannel(
                AugerChannel(
                    a_channel.kappa,
                    a_channel.symmetry,
                    a_channel.phase,
                    capture_amplitudes[a_channel.kappa],
                ),
                RadiativeChannel(r_channel.multipole, r_channel.gauge, emission_amplitudes[key]),
            )
        )

    capture_rate = 2.0 * np.pi * sum(abs(amp) ** 2 for amp in capture_amplitudes.values())

    coulomb = 0.0
    babushkin = 0.0
    for (mp, gauge), amp in emission_amplitudes.items():
        weight = abs(amp) ** 2
        if gauge is EmGauge.COULOMB:
            coulomb += weight
        elif gauge is EmGauge.BABUSHKIN:
            babushkin += weight
        else:
            coulomb += weight
            babushkin += weight
    prefactor = 8.0 * np.pi * ALPHA_FS * skeleton.photon_energy / skeleton.intermediate_level.g
    photon_rate = EmProperty(prefactor * coulomb, prefactor * babushkin)

    g_n = skeleton.intermediate_level.g
    g_i = skeleton.initial_level.g
    cross_section = EmProperty(
        partial_strength(skeleton.electron_energy, g_n, g_i, capture_rate, photon_rate.coulomb),
        partial_strength(skeleton.electron_energy, g_n, g_i, capture_rate, photon_rate.babushkin),
    )

    return EvaluatedPathway.from_skeleton(
        skeleton, new_channels, capture_rate, photon_rate, cross_section
    )
