"""
Settings for dielectronic-recombination pathway computations.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from atomcascade.atomic.structures import EmMultipole, UseGauge
from atomcascade.core.config import VALID_AUGER_OPERATORS
from atomcascade.core.logging_config import get_logger

logger = get_logger("dielectronic.settings")


@dataclass(frozen=True)
class Settings:
    """
    Parameters of a dielectronic-recombination computation.

    Attributes
    ----------
    multipoles : List[EmMultipole]
        Multipoles of the radiation field included in the stabilization step
    gauges : List[UseGauge]
        Gauges for the radiative amplitudes
    include_exchange : bool
        Include exchange with the bound-state density for continuum orbitals
    use_approximate_continuum : bool
        Use an approximate continuum orbital
    include_breit : bool
        Include the (zero-frequency) Breit interaction in capture amplitudes;
        turns the 'Coulomb' operator into 'Coulomb+Breit'
    list_before_computation : bool
        Log the pathway listing before amplitudes are evaluated
    select_pathways : bool
        Restrict the computation to ``selected_pathways``
    selected_pathways : List[Tuple[int, int, int]]
        1-based (initial, intermediate, final) level indices
    electron_energy_shift : float
        Overall shift of all electron energies in Hartree
    photon_energy_shift : float
        Overall shift of all photon energies in Hartree
    minimum_photon_energy : float
        Pathways with a smaller (shifted) photon energy are skipped
    auger_operator : str
        'Coulomb', 'Breit' or 'Coulomb+Breit'; see ``capture_operator`` for
        the operator actually used
    """

    multipoles: List[EmMultipole] = field(default_factory=lambda: [EmMultipole.E1])
    gauges: List[UseGauge] = field(
        default_factory=lambda: [UseGauge.COULOMB, UseGauge.BABUSHKIN]
    )
    include_exchange: bool = False
    use_approximate_continuum: bool = True
    include_breit: bool = False
    list_before_computation: bool = False
    select_pathways: bool = False
    selected_pathways: List[Tuple[int, int, int]] = field(default_factory=list)
    electron_energy_shift: float = 0.0
    photon_energy_shift: float = 0.0
    minimum_photon_energy: float = 0.0
    auger_operator: str = "Coulomb"

    def __post_init__(self):
        if self.auger_operator not in VALID_AUGER_OPERATORS:
            raise ValueError(
                f"Invalid Auger operator: {self.auger_operator}. "
                f"Must be one of: {VALID_AUGER_OPERATORS}"
            )
        if self.minimum_photon_energy < 0:
            raise ValueError("minimum_photon_energy must be non-negative")
        selected = [tuple(int(k) for k in sel) for sel in self.selected_pathways]
        object.__setattr__(self, "selected_pathways", selected)

    @property
    def capture_operator(self) -> str:
        """Interaction operator of the capture amplitudes."""
        if self.include_breit and self.auger_operator == "Coulomb":
            return "Coulomb+Breit"
        return self.auger_operator

    @property
    def continuum_options(self) -> Dict[str, bool]:
        """Options for the continuum orbitals of the captured electron."""
        return {
            "include_exchange": self.include_exchange,
            "use_approximate_continuum": self.use_approximate_continuum,
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Settings":
        """
        Create settings from the ``dielectronic`` section of a configuration.

        Parameters
        ----------
        config : dict
            Section with optional keys named like the attributes; multipoles
            and gauges are given by name ('E1', 'Coulomb', ...)

        Returns
        -------
        Settings
        """
        selected = [tuple(sel) for sel in config.get("selected_pathways", [])]
        return cls(
            multipoles=[EmMultipole(mp) for mp in config.get("multipoles", ["E1"])],
            gauges=[UseGauge(g) for g in config.get("gauges", ["Coulomb", "Babushkin"])],
            include_exchange=bool(config.get("include_exchange", False)),
            use_approximate_continuum=bool(config.get("use_approximate_continuum", True)),
            include_breit=bool(config.get("include_breit", False)),
            list_before_computation=bool(config.get("list_before_computation", False)),
            select_pathways=bool(config.get("select_pathways", bool(selected))),
            selected_pathways=selected,
            electron_energy_shift=float(config.get("electron_energy_shift", 0.0)),
            photon_energy_shift=float(config.get("photon_energy_shift", 0.0)),
            minimum_photon_energy=float(config.get("minimum_photon_energy", 0.0)),
            auger_operator=config.get("auger_operator", "Coulomb"),
        )
