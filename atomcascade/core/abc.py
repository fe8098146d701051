"""
Abstract base classes for the external services used by AtomCascade.

The atomic structure solver, the continuum/amplitude evaluator and the
transition-line evaluator are black boxes: AtomCascade only depends on what
it sends to them and what they return. Implementations may wrap any atomic
structure package.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, TYPE_CHECKING

from atomcascade.atomic.structures import (
    Configuration,
    EmGauge,
    EmMultipole,
    Level,
    Multiplet,
    NuclearModel,
    RadialGrid,
)

if TYPE_CHECKING:
    from atomcascade.cascade.lines import AugerLine, RadiativeLine
    from atomcascade.dielectronic.channels import AugerChannel


class StructureSolver(ABC):
    """
    Abstract interface for atomic structure (SCF + CI) computations.

    Implementations must raise :class:`atomcascade.core.exceptions.ConvergenceError`
    when no multiplet can be produced for the given configurations.
    """

    @abstractmethod
    def compute_multiplet(
        self,
        configurations: Sequence[Configuration],
        nuclear_model: NuclearModel,
        grid: RadialGrid,
        settings: Dict[str, Any],
    ) -> Multiplet:
        """Compute the multiplet of a list of configurations."""
        pass


class AmplitudeEvaluator(ABC):
    """
    Abstract interface for capture (Auger) and radiative amplitudes.

    Implementations must raise :class:`atomcascade.core.exceptions.AmplitudeError`
    on failure.
    """

    @abstractmethod
    def auger_amplitude(
        self,
        operator: str,
        channel: "AugerChannel",
        electron_energy: float,
        intermediate_level: Level,
        initial_level: Level,
        grid: RadialGrid,
        continuum: Dict[str, bool],
    ) -> complex:
        """
        Capture amplitude <intermediate || V || initial + electron(kappa)>.

        Parameters
        ----------
        operator : str
            'Coulomb', 'Breit' or 'Coulomb+Breit'
        channel : AugerChannel
            Partial wave and total symmetry of the continuum state
        electron_energy : float
            Kinetic energy of the captured electron in Hartree
        intermediate_level, initial_level : Level
            Resonance and initial level
        grid : RadialGrid
            Radial grid for the continuum orbital
        continuum : dict
            Continuum-orbital options: 'include_exchange' (exchange with the
            bound-state density) and 'use_approximate_continuum'
        """
        pass

    @abstractmethod
    def radiative_amplitude(
        self,
        mode: str,
        multipole: EmMultipole,
        gauge: EmGauge,
        photon_energy: float,
        final_level: Level,
        intermediate_level: Level,
        grid: RadialGrid,
    ) -> complex:
        """
        Reduced multipole amplitude for photon emission or absorption.

        Parameters
        ----------
        mode : str
            'emission' or 'absorption'
        multipole : EmMultipole
            Multipole of the radiation field
        gauge : EmGauge
            Gauge of the amplitude
        photon_energy : float
            Photon energy in Hartree
        final_level, intermediate_level : Level
            Lower and upper level of the transition
        grid : RadialGrid
            Radial grid
        """
        pass


class TransitionLineEvaluator(ABC):
    """
    Abstract interface for computing all lines between two multiplets.

    Used by the cascade to turn each step into radiative or Auger lines.
    """

    @abstractmethod
    def compute_radiative_lines(
        self, initial_multiplet: Multiplet, final_multiplet: Multiplet, grid: RadialGrid
    ) -> List["RadiativeLine"]:
        """Radiative lines from the initial to the final multiplet."""
        pass

    @abstractmethod
    def compute_auger_lines(
        self, initial_multiplet: Multiplet, final_multiplet: Multiplet, grid: RadialGrid
    ) -> List["AugerLine"]:
        """Auger lines from the initial to the final multiplet."""
        pass
