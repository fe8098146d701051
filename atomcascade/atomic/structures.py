"""
Data structures for atomic levels, multiplets, shells and configurations.

All energies are total energies in Hartree. The records are immutable value
objects; the only mutable level representation is
:class:`atomcascade.cascade.levels.CascadeLevel`, which is owned by the
probability propagation.
"""

import itertools
import re
from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

_L_SYMBOLS = "spdfghik"
_SHELL_PATTERN = re.compile(r"^(\d+)([spdfghik])(?:\^?(\d+))?$")


class Parity(Enum):
    """Total parity of an atomic level."""

    PLUS = "+"
    MINUS = "-"

    @classmethod
    def from_string(cls, value: str) -> "Parity":
        """Parse '+', '-', 'even' or 'odd'."""
        value = value.strip().lower()
        if value in ("+", "even", "plus"):
            return cls.PLUS
        if value in ("-", "odd", "minus"):
            return cls.MINUS
        raise ValueError(f"Invalid parity: {value!r}")

    @classmethod
    def from_l(cls, l: int) -> "Parity":
        """Parity (-1)^l of an orbital with angular momentum l."""
        return cls.PLUS if l % 2 == 0 else cls.MINUS

    def __mul__(self, other: "Parity") -> "Parity":
        return Parity.PLUS if self is other else Parity.MINUS

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LevelSymmetry:
    """
    Level symmetry J^P.

    Attributes
    ----------
    J : float
        Total angular momentum (integer or half-integer)
    parity : Parity
        Total parity
    """

    J: float
    parity: Parity

    def __post_init__(self):
        two_j = 2.0 * self.J
        if self.J < 0 or abs(two_j - round(two_j)) > 1e-9:
            raise ValueError(f"J must be a non-negative (half-)integer, got {self.J}")

    @property
    def two_j(self) -> int:
        """Exact integer value of 2J."""
        return int(round(2.0 * self.J))

    def __str__(self) -> str:
        return f"{Fraction(self.two_j, 2)}{self.parity.value}"


@dataclass(frozen=True)
class Level:
    """
    A stationary atomic level as delivered by the structure solver.

    Attributes
    ----------
    energy : float
        Total energy in Hartree
    J : float
        Total angular momentum
    parity : Parity
        Total parity
    n_electrons : int
        Number of electrons of the ion
    index : int
        1-based position of the level in its multiplet
    handle : int, optional
        Identity assigned by :class:`LevelArena`. Levels are the same physical
        state exactly when their handles agree.
    """

    energy: float
    J: float
    parity: Parity
    n_electrons: int
    index: int = 0
    handle: Optional[int] = None

    @property
    def symmetry(self) -> LevelSymmetry:
        """Level symmetry J^P."""
        return LevelSymmetry(self.J, self.parity)

    @property
    def g(self) -> int:
        """Statistical weight 2J+1."""
        return self.symmetry.two_j + 1


@dataclass(frozen=True)
class Multiplet:
    """
    Ordered collection of levels from one configuration-interaction basis.

    Attributes
    ----------
    name : str
        Label of the multiplet (usually the configuration list)
    levels : Tuple[Level, ...]
        Levels in the order produced by the solver
    """

    name: str
    levels: Tuple[Level, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "levels", tuple(self.levels))

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self):
        return iter(self.levels)

    @property
    def energies(self) -> np.ndarray:
        """Level energies in Hartree."""
        return np.array([level.energy for level in self.levels], dtype=float)

    def energy_range(self) -> Tuple[float, float]:
        """(min, max) of the level energies."""
        if not self.levels:
            raise ValueError(f"Multiplet '{self.name}' has no levels")
        energies = self.energies
        return float(energies.min()), float(energies.max())


@dataclass(frozen=True, order=True)
class Shell:
    """
    Non-relativistic shell nl.

    Shells order by (n, l), which is the outward order used for hole
    migration.
    """

    n: int
    l: int

    def __post_init__(self):
        if self.n < 1 or not 0 <= self.l < self.n:
            raise ValueError(f"Invalid shell quantum numbers n={self.n}, l={self.l}")
        if self.l >= len(_L_SYMBOLS):
            raise ValueError(f"Unsupported orbital angular momentum l={self.l}")

    @property
    def capacity(self) -> int:
        """Maximum occupation 2(2l+1)."""
        return 2 * (2 * self.l + 1)

    @classmethod
    def from_string(cls, label: str) -> "Shell":
        """Parse a shell label such as '2p'."""
        match = _SHELL_PATTERN.match(label.strip())
        if not match or match.group(3) is not None:
            raise ValueError(f"Invalid shell label: {label!r}")
        return cls(int(match.group(1)), _L_SYMBOLS.index(match.group(2)))

    def __str__(self) -> str:
        return f"{self.n}{_L_SYMBOLS[self.l]}"


@dataclass(frozen=True)
class Configuration:
    """
    Assignment of electrons to non-relativistic shells.

    Attributes
    ----------
    shells : Tuple[Tuple[Shell, int], ...]
        (shell, occupation) pairs sorted by shell. Shells with zero
        occupation are dropped, so "2s^2 2p^6 3s^0" and "2s^2 2p^6" are the
        same configuration
    n_electrons : int
        Total number of electrons
    """

    shells: Tuple[Tuple[Shell, int], ...]
    n_electrons: int

    def __post_init__(self):
        canonical = tuple(sorted((shell, int(occ)) for shell, occ in self.shells))

        seen = set()
        for shell, occ in canonical:
            if shell in seen:
                raise ValueError(f"Shell {shell} occurs twice in configuration")
            seen.add(shell)
            if not 0 <= occ <= shell.capacity:
                raise ValueError(f"Occupation {occ} of shell {shell} outside [0, {shell.capacity}]")

        total = sum(occ for _, occ in canonical)
        if total != self.n_electrons:
            raise ValueError(
                f"Occupations sum to {total} but configuration has {self.n_electrons} electrons"
            )

        occupied = tuple((shell, occ) for shell, occ in canonical if occ > 0)
        object.__setattr__(self, "shells", occupied)

    @classmethod
    def from_dict(cls, occupations: Dict[Shell, int]) -> "Configuration":
        """Create a configuration from a shell -> occupation mapping."""
        return cls(tuple(occupations.items()), sum(occupations.values()))

    @classmethod
    def from_string(cls, text: str) -> "Configuration":
        """
        Parse a configuration such as '1s^2 2s 2p^6'.

        A shell without exponent holds one electron.
        """
        occupations: Dict[Shell, int] = {}
        for token in text.split():
            match = _SHELL_PATTERN.match(token)
            if not match:
                raise ValueError(f"Invalid configuration token: {token!r}")
            shell = Shell(int(match.group(1)), _L_SYMBOLS.index(match.group(2)))
            if shell in occupations:
                raise ValueError(f"Shell {shell} occurs twice in {text!r}")
            occupations[shell] = int(match.group(3)) if match.group(3) is not None else 1
        if not occupations:
            raise ValueError("Empty configuration string")
        return cls.from_dict(occupations)

    def as_dict(self) -> Dict[Shell, int]:
        """Shell -> occupation mapping (a fresh copy)."""
        return dict(self.shells)

    def occupation(self, shell: Shell) -> int:
        """Occupation of a shell, 0 if the shell is not part of the configuration."""
        return self.as_dict().get(shell, 0)

    def __str__(self) -> str:
        parts = []
        for shell, occ in self.shells:
            parts.append(f"{shell}" if occ == 1 else f"{shell}^{occ}")
        return " ".join(parts)


class AtomicProcess(Enum):
    """Atomic processes that connect the levels of a cascade."""

    RADIATIVE = "Radiative"
    AUGER = "Auger"
    PHOTOIONIZATION = "PhotoIonization"

    @classmethod
    def from_string(cls, value: str) -> "AtomicProcess":
        for process in cls:
            if process.value.lower() == value.strip().lower():
                return process
        raise ValueError(f"Unknown atomic process: {value!r}")


class EmMultipole(Enum):
    """Multipole components of the radiation field."""

    E1 = "E1"
    M1 = "M1"
    E2 = "E2"
    M2 = "M2"
    E3 = "E3"
    M3 = "M3"
    E4 = "E4"
    M4 = "M4"

    @property
    def L(self) -> int:
        """Multipole order."""
        return int(self.value[1:])

    @property
    def is_electric(self) -> bool:
        return self.value[0] == "E"


class UseGauge(Enum):
    """Gauges that can be requested for radiative amplitudes."""

    COULOMB = "Coulomb"
    BABUSHKIN = "Babushkin"


class EmGauge(Enum):
    """Gauge attached to an individual radiative channel."""

    COULOMB = "Coulomb"
    BABUSHKIN = "Babushkin"
    MAGNETIC = "Magnetic"


GaugeLike = Union[UseGauge, EmGauge]


@dataclass(frozen=True)
class EmProperty:
    """
    A gauge-dependent quantity, given in Coulomb and Babushkin gauge.

    Attributes
    ----------
    coulomb : float
        Value in Coulomb (velocity) gauge
    babushkin : float
        Value in Babushkin (length) gauge
    """

    coulomb: float = 0.0
    babushkin: float = 0.0

    def __add__(self, other: "EmProperty") -> "EmProperty":
        return EmProperty(self.coulomb + other.coulomb, self.babushkin + other.babushkin)

    def scale(self, factor: float) -> "EmProperty":
        return EmProperty(self.coulomb * factor, self.babushkin * factor)

    def get(self, gauge: GaugeLike) -> float:
        """Value in the given gauge."""
        if gauge.value == "Coulomb":
            return self.coulomb
        if gauge.value == "Babushkin":
            return self.babushkin
        raise ValueError(f"EmProperty has no value for gauge {gauge.value}")


@dataclass(frozen=True)
class NuclearModel:
    """
    Nuclear model passed to the structure and continuum services.

    Attributes
    ----------
    charge : float
        Nuclear charge Z
    model : str
        Charge distribution ('Fermi' or 'point')
    mass_number : float, optional
        Mass number, if required by the model
    """

    charge: float
    model: str = "Fermi"
    mass_number: Optional[float] = None

    def __post_init__(self):
        if self.charge <= 0:
            raise ValueError("Nuclear charge must be positive")
        if self.model not in ("Fermi", "point"):
            raise ValueError(f"Unsupported nuclear model: {self.model}")


@dataclass(frozen=True)
class RadialGrid:
    """Parameters of the radial grid used by the external services."""

    rnt: float = 2.0e-6
    h: float = 5.0e-2
    hp: float = 0.0
    n_points: int = 390


class LevelArena:
    """
    Issues integer handles for levels.

    Every multiplet computed during a cascade is registered once; the
    returned copy carries levels with unique handles and their 1-based
    multiplet index.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._levels: Dict[int, Level] = {}

    def __len__(self) -> int:
        return len(self._levels)

    def register(self, multiplet: Multiplet) -> Multiplet:
        """Assign handles to all levels of a multiplet."""
        levels: List[Level] = []
        for index, level in enumerate(multiplet.levels, start=1):
            handled = replace(level, index=index, handle=next(self._counter))
            self._levels[handled.handle] = handled
            levels.append(handled)
        return Multiplet(multiplet.name, tuple(levels))

    def get(self, handle: int) -> Level:
        """Level registered under the given handle."""
        return self._levels[handle]

    def levels(self) -> Iterable[Level]:
        return self._levels.values()
