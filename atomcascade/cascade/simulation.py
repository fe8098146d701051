"""
Simulation of cascade data: final ion and level distributions and line
intensities.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from atomcascade.atomic.structures import AtomicProcess, GaugeLike, LevelSymmetry, UseGauge
from atomcascade.cascade.levels import CascadeLevel, LevelRegistry, extract_levels
from atomcascade.cascade.lines import CascadeData
from atomcascade.cascade.propagation import PropagationResult
from atomcascade.core.factory import SimulationMethodFactory
from atomcascade.core.logging_config import get_logger

logger = get_logger("cascade.simulation")


class SimulationProperty(Enum):
    """Properties that can be obtained from the simulation of cascade data."""

    ION_DIST = "IonDist"
    FINAL_DIST = "FinalDist"
    ELECTRON_INTENSITY = "ElectronIntensity"
    PHOTON_INTENSITY = "PhotonIntensity"


class SimulationMethod(Enum):
    """Methods to simulate cascade data."""

    PROB_PROPAGATION = "ProbPropagation"
    MONTE_CARLO = "MonteCarlo"
    RATE_EQUATIONS = "RateEquations"


@dataclass(frozen=True)
class SimulationSettings:
    """
    Energy windows of the simulated spectra, in Hartree.

    Attributes
    ----------
    min_electron_energy, max_electron_energy : float
        Window for Auger electron lines
    min_photon_energy, max_photon_energy : float
        Window for photon lines
    """

    min_electron_energy: float = 0.0
    max_electron_energy: float = 1.0e6
    min_photon_energy: float = 0.0
    max_photon_energy: float = 1.0e6

    def __post_init__(self):
        if self.min_electron_energy > self.max_electron_energy:
            raise ValueError("min_electron_energy must not exceed max_electron_energy")
        if self.min_photon_energy > self.max_photon_energy:
            raise ValueError("min_photon_energy must not exceed max_photon_energy")


@dataclass(frozen=True)
class Simulation:
    """
    A simulation of some cascade data.

    Attributes
    ----------
    properties : List[SimulationProperty]
        Properties to be obtained
    method : SimulationMethod
        Simulation method
    settings : SimulationSettings
        Energy windows of the spectra
    gauge : UseGauge
        Gauge of the radiative rates
    max_rounds : int, optional
        Round limit of the probability propagation
    """

    properties: List[SimulationProperty] = field(
        default_factory=lambda: [SimulationProperty.ION_DIST]
    )
    method: SimulationMethod = SimulationMethod.PROB_PROPAGATION
    settings: SimulationSettings = field(default_factory=SimulationSettings)
    gauge: GaugeLike = UseGauge.BABUSHKIN
    max_rounds: Optional[int] = None


@dataclass
class SimulationResult:
    """
    Results of a cascade simulation.

    Attributes
    ----------
    name : str
        Name of the cascade
    propagation : PropagationResult
        Rounds, history and line fluxes of the propagation
    ion_distribution : Dict[int, float]
        Number of electrons -> summed occupation, most electrons first
    level_distribution : List[CascadeLevel]
        Levels with their final occupation, by electron count (descending)
        and energy (descending)
    electron_intensities : List[Tuple[float, float]]
        (electron energy, intensity) of the Auger lines in the window
    photon_intensities : List[Tuple[float, float]]
        (photon energy, intensity) of the radiative lines in the window
    """

    name: str
    propagation: PropagationResult
    ion_distribution: Dict[int, float] = field(default_factory=dict)
    level_distribution: List[CascadeLevel] = field(default_factory=list)
    electron_intensities: List[Tuple[float, float]] = field(default_factory=list)
    photon_intensities: List[Tuple[float, float]] = field(default_factory=list)


def ion_distribution(registry: LevelRegistry) -> Dict[int, float]:
    """Summed occupation per number of electrons, most electrons first."""
    dist: Dict[int, float] = {}
    for level in registry.levels:
        dist[level.n_electrons] = dist.get(level.n_electrons, 0.0) + level.relative_occ
    return {n: dist[n] for n in sorted(dist, reverse=True)}


def level_distribution(registry: LevelRegistry) -> List[CascadeLevel]:
    """Levels sorted by electron count and energy, both descending."""
    return sorted(registry.levels, key=lambda level: (-level.n_electrons, -level.energy))


def _line_intensities(
    data: CascadeData,
    propagation: PropagationResult,
    process: AtomicProcess,
    e_min: float,
    e_max: float,
) -> List[Tuple[float, float]]:
    intensities = []
    for index, flux in propagation.line_flux.items():
        if index.process is not process:
            continue
        line = data.line(index)
        energy = line.electron_energy if process is AtomicProcess.AUGER else line.photon_energy
        if e_min <= energy <= e_max:
            intensities.append((energy, flux))
    return sorted(intensities)


def simulate_level_distribution(simulation: Simulation, data: CascadeData) -> SimulationResult:
    """
    Propagate the occupations of the cascade levels and derive the requested
    properties.

    Parameters
    ----------
    simulation : Simulation
        Properties, method and settings
    data : CascadeData
        Lines and initial occupations of the cascade

    Returns
    -------
    SimulationResult

    Raises
    ------
    NotImplementedError
        For the Monte-Carlo and rate-equation methods
    """
    if simulation.method is not SimulationMethod.PROB_PROPAGATION:
        raise NotImplementedError(
            f"Simulation method {simulation.method.value} is not implemented"
        )

    registry = extract_levels(data)
    propagator = SimulationMethodFactory.create(
        simulation.method.value, gauge=simulation.gauge, max_rounds=simulation.max_rounds
    )
    propagation = propagator.propagate(registry, data)
    result = SimulationResult(name=data.name, propagation=propagation)

    if SimulationProperty.ION_DIST in simulation.properties:
        result.ion_distribution = ion_distribution(registry)
    if SimulationProperty.FINAL_DIST in simulation.properties:
        result.level_distribution = level_distribution(registry)
    settings = simulation.settings
    if SimulationProperty.ELECTRON_INTENSITY in simulation.properties:
        result.electron_intensities = _line_intensities(
            data,
            propagation,
            AtomicProcess.AUGER,
            settings.min_electron_energy,
            settings.max_electron_energy,
        )
    if SimulationProperty.PHOTON_INTENSITY in simulation.properties:
        result.photon_intensities = _line_intensities(
            data,
            propagation,
            AtomicProcess.RADIATIVE,
            settings.min_photon_energy,
            settings.max_photon_energy,
        )

    logger.info(
        f"Simulation of '{data.name}' finished after {propagation.rounds} rounds "
        f"for {len(registry)} levels"
    )
    return result


@dataclass(frozen=True)
class LevelTreeEntry:
    """
    A level with the levels it is populated from and decays into.

    ``parents`` and ``daughters`` hold (process, number of electrons,
    symmetry, energy) of the level at the other end of each line.
    """

    level: CascadeLevel
    parents: Tuple[Tuple[AtomicProcess, int, LevelSymmetry, float], ...]
    daughters: Tuple[Tuple[AtomicProcess, int, LevelSymmetry, float], ...]


def level_tree(registry: LevelRegistry, data: CascadeData) -> List[LevelTreeEntry]:
    """
    Parents and daughters of every level, ordered like the level distribution.

    This makes missing parent or daughter lines visible.
    """
    entries = []
    for level in level_distribution(registry):
        parents = []
        for index in level.parents:
            other = data.line(index).initial_level
            parents.append((index.process, other.n_electrons, other.symmetry, other.energy))
        daughters = []
        for index in level.daughters:
            other = data.line(index).final_level
            daughters.append((index.process, other.n_electrons, other.symmetry, other.energy))
        entries.append(LevelTreeEntry(level, tuple(parents), tuple(daughters)))
    return entries
