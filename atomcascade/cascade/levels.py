"""
Levels of a cascade and the decay graph that connects them.

Every level that occurs in any line of the cascade data is registered once,
keyed by its arena handle. A level keeps references to the lines that
populate it (parents) and the lines through which it decays (daughters).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from atomcascade.atomic.structures import (
    AtomicProcess,
    GaugeLike,
    Level,
    LevelSymmetry,
    Parity,
    UseGauge,
)
from atomcascade.cascade.lines import CascadeData, LineIndex
from atomcascade.core.exceptions import (
    LevelIdentityError,
    LevelLookupError,
    UnsupportedProcessError,
)
from atomcascade.core.logging_config import get_logger

logger = get_logger("cascade.levels")


@dataclass
class CascadeLevel:
    """
    A level of the cascade together with its relative occupation.

    Attributes
    ----------
    handle : int
        Arena handle of the level
    energy : float
        Total energy in Hartree
    J : float
        Total angular momentum
    parity : Parity
        Total parity
    n_electrons : int
        Number of electrons of the ion
    relative_occ : float
        Current relative occupation
    parents : List[LineIndex]
        Lines that populate the level
    daughters : List[LineIndex]
        Lines through which the level decays
    """

    handle: int
    energy: float
    J: float
    parity: Parity
    n_electrons: int
    relative_occ: float = 0.0
    parents: List[LineIndex] = field(default_factory=list)
    daughters: List[LineIndex] = field(default_factory=list)

    @classmethod
    def from_level(cls, level: Level, relative_occ: float = 0.0) -> "CascadeLevel":
        if level.handle is None:
            raise LevelIdentityError(
                f"Level {level.symmetry} at {level.energy} Hartree has no handle"
            )
        return cls(
            level.handle, level.energy, level.J, level.parity, level.n_electrons, relative_occ
        )

    @property
    def symmetry(self) -> LevelSymmetry:
        return LevelSymmetry(self.J, self.parity)

    def same_state(self, level: Level) -> bool:
        """Whether a level agrees with this one in its quantum numbers."""
        return self.symmetry == level.symmetry and self.n_electrons == level.n_electrons


def line_rate(data: CascadeData, index: LineIndex, gauge: GaugeLike = UseGauge.BABUSHKIN) -> float:
    """
    Decay rate of a line.

    Radiative lines contribute their photon rate in the given gauge, Auger
    lines their total rate.

    Raises
    ------
    UnsupportedProcessError
        For photoionization lines, which do not depopulate a level on their own
    """
    line = data.line(index)
    if index.process is AtomicProcess.RADIATIVE:
        return line.photon_rate.get(gauge)
    if index.process is AtomicProcess.AUGER:
        return line.total_rate
    raise UnsupportedProcessError(
        f"Process {index.process.value} cannot depopulate a level during probability propagation"
    )


class LevelRegistry(Mapping):
    """
    Mapping of level handles to cascade levels, in registration order.

    Besides the levels, the registry keeps every line as a directed edge
    (initial handle, final handle), which gives the decay graph.
    """

    def __init__(self):
        self._levels: Dict[int, CascadeLevel] = {}
        self._edges: List[Tuple[int, int, LineIndex]] = []

    def __getitem__(self, handle: int) -> CascadeLevel:
        return self._levels[handle]

    def __iter__(self) -> Iterator[int]:
        return iter(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    @property
    def levels(self) -> List[CascadeLevel]:
        """Cascade levels in registration order."""
        return list(self._levels.values())

    @property
    def edges(self) -> List[Tuple[int, int, LineIndex]]:
        return list(self._edges)

    def find(self, handle: int) -> CascadeLevel:
        """
        Level registered under a handle.

        Raises
        ------
        LevelLookupError
            If no level is registered under the handle
        """
        try:
            return self._levels[handle]
        except KeyError:
            raise LevelLookupError(f"No cascade level with handle {handle}") from None

    def _merge(self, level: Level) -> CascadeLevel:
        cascade_level = self._levels.get(level.handle)
        if cascade_level is None:
            cascade_level = CascadeLevel.from_level(level)
            self._levels[cascade_level.handle] = cascade_level
        elif not cascade_level.same_state(level):
            raise LevelIdentityError(
                f"Handle {level.handle} refers to {cascade_level.symmetry} with "
                f"{cascade_level.n_electrons} electrons and to {level.symmetry} with "
                f"{level.n_electrons} electrons"
            )
        return cascade_level

    def add_line(self, index: LineIndex, initial_level: Level, final_level: Level) -> None:
        """Register both levels of a line and connect them."""
        self._merge(initial_level).daughters.append(index)
        self._merge(final_level).parents.append(index)
        self._edges.append((initial_level.handle, final_level.handle, index))

    def positions(self) -> Dict[int, int]:
        """Handle -> position in registration order."""
        return {handle: k for k, handle in enumerate(self._levels)}

    def occupations(self) -> np.ndarray:
        """Relative occupations in registration order."""
        return np.array([level.relative_occ for level in self._levels.values()], dtype=float)

    def to_sparse(self, data: CascadeData, gauge: GaugeLike = UseGauge.BABUSHKIN) -> csr_matrix:
        """
        Rate matrix of the decay graph.

        Entry (i, j) is the summed rate of all radiative and Auger lines from
        level i to level j, with levels in registration order. Photoionization
        lines are not included.

        Parameters
        ----------
        data : CascadeData
            Lines referenced by the registry
        gauge : UseGauge
            Gauge of the radiative rates

        Returns
        -------
        csr_matrix
        """
        pos = self.positions()
        rows, cols, rates = [], [], []
        for source, target, index in self._edges:
            if index.process is AtomicProcess.PHOTOIONIZATION:
                continue
            rows.append(pos[source])
            cols.append(pos[target])
            rates.append(line_rate(data, index, gauge))
        n = len(self)
        return csr_matrix((rates, (rows, cols)), shape=(n, n), dtype=float)

    def find_cycles(self) -> List[List[int]]:
        """
        Groups of levels that can be reached from themselves.

        Returns
        -------
        List[List[int]]
            Handles of each strongly connected component with more than one
            level, and of single levels that decay into themselves
        """
        n = len(self)
        if n == 0:
            return []
        pos = self.positions()
        handles = list(self._levels)

        rows = [pos[source] for source, _, _ in self._edges]
        cols = [pos[target] for _, target, _ in self._edges]
        adjacency = csr_matrix((np.ones(len(rows)), (rows, cols)), shape=(n, n))
        n_components, labels = connected_components(
            adjacency, directed=True, connection="strong"
        )

        self_loops = {pos[source] for source, target, _ in self._edges if source == target}
        cycles = []
        for component in range(n_components):
            members = np.flatnonzero(labels == component)
            if len(members) > 1 or (len(members) == 1 and members[0] in self_loops):
                cycles.append([handles[k] for k in members])
        return cycles


def extract_levels(data: CascadeData) -> LevelRegistry:
    """
    Collect all levels of the cascade data into a registry.

    Radiative, Auger and photoionization lines are visited in this order;
    the initial level of a line gets the line as daughter, the final level
    as parent. Levels are merged by handle and start with the occupations
    given in ``data.initial_occupations``.

    Parameters
    ----------
    data : CascadeData
        Lines of the cascade

    Returns
    -------
    LevelRegistry

    Raises
    ------
    LevelIdentityError
        If a level has no handle or one handle refers to different states
    LevelLookupError
        If an initial occupation refers to a level without lines
    """
    registry = LevelRegistry()
    for process in (AtomicProcess.RADIATIVE, AtomicProcess.AUGER, AtomicProcess.PHOTOIONIZATION):
        for k, line in enumerate(data.lines(process)):
            registry.add_line(LineIndex(process, k), line.initial_level, line.final_level)

    for handle, occupation in data.initial_occupations.items():
        registry.find(handle).relative_occ = occupation

    logger.info(f"Extracted {len(registry)} levels from {len(data)} lines of '{data.name}'")
    return registry
