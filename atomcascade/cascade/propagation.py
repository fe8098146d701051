"""
Propagation of level occupations through the decay graph of a cascade.

In every round, each active level (non-zero occupation and at least one
decay channel) hands its whole occupation to its daughter levels, weighted
by the branching ratios of its lines. All moves of one round are computed
from the occupations at the start of the round, so the result does not
depend on the order of the levels. The propagation stops with the first
round in which no occupation moves.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from atomcascade.atomic.structures import GaugeLike, UseGauge
from atomcascade.cascade.levels import CascadeLevel, LevelRegistry, line_rate
from atomcascade.cascade.lines import CascadeData, LineIndex
from atomcascade.core.exceptions import CascadeCycleError, PropagationError
from atomcascade.core.logging_config import get_logger

logger = get_logger("cascade.propagation")

# (target position, branching ratio, line)
Branch = Tuple[int, float, LineIndex]


@dataclass
class PropagationResult:
    """
    Outcome of a probability propagation.

    Attributes
    ----------
    rounds : int
        Number of rounds, including the final round without any change
    history : List[float]
        Occupation moved in each round
    line_flux : Dict[LineIndex, float]
        Occupation carried through each line
    totals : List[float]
        Total occupation of all levels after each round
    """

    rounds: int = 0
    history: List[float] = field(default_factory=list)
    line_flux: Dict[LineIndex, float] = field(default_factory=dict)
    totals: List[float] = field(default_factory=list)


class ProbabilityPropagator:
    """
    Propagates relative level occupations until a fixed point is reached.

    Parameters
    ----------
    gauge : UseGauge
        Gauge of the radiative rates used as branching weights
    max_rounds : int, optional
        Upper bound for the number of rounds; defaults to the number of
        levels plus one, which an acyclic graph never exceeds
    """

    def __init__(self, gauge: GaugeLike = UseGauge.BABUSHKIN, max_rounds: Optional[int] = None):
        if max_rounds is not None and max_rounds < 1:
            raise ValueError("max_rounds must be positive")
        self.gauge = gauge
        self.max_rounds = max_rounds

    def _branches(
        self,
        level: CascadeLevel,
        registry: LevelRegistry,
        positions: Dict[int, int],
        data: CascadeData,
    ) -> List[Branch]:
        """Branching of a level into its daughters; empty if it cannot decay."""
        if not level.daughters:
            return []
        rates = np.array([line_rate(data, index, self.gauge) for index in level.daughters])
        total = rates.sum()
        if total <= 0.0:
            logger.warning(
                f"Level {level.handle} ({level.symmetry}, {level.n_electrons} electrons) has "
                f"{len(level.daughters)} daughter lines but no decay rate; treated as stable"
            )
            return []

        branches = []
        for index, rate in zip(level.daughters, rates):
            target = registry.find(data.line(index).final_level.handle)
            branches.append((positions[target.handle], float(rate / total), index))
        return branches

    def propagate(self, registry: LevelRegistry, data: CascadeData) -> PropagationResult:
        """
        Propagate the occupations of all levels through the cascade.

        The final occupations are written back to the levels of the registry.

        Parameters
        ----------
        registry : LevelRegistry
            Levels with their initial occupations
        data : CascadeData
            Lines referenced by the levels

        Returns
        -------
        PropagationResult

        Raises
        ------
        CascadeCycleError
            If the decay graph contains a cycle
        PropagationError
            If no fixed point is reached within ``max_rounds`` rounds
        UnsupportedProcessError
            If an occupied level has a photoionization daughter
        LevelLookupError
            If a line leads to a level that is not registered
        """
        cycles = registry.find_cycles()
        if cycles:
            raise CascadeCycleError(
                f"Decay graph contains {len(cycles)} cycle(s); first cycle through "
                f"level handles {cycles[0]}"
            )

        levels = registry.levels
        positions = registry.positions()
        occupations = registry.occupations()
        max_rounds = self.max_rounds if self.max_rounds is not None else len(levels) + 1
        branch_cache: Dict[int, List[Branch]] = {}

        result = PropagationResult()
        logger.info(f"Probability propagation through {len(levels)} levels of the cascade")
        while True:
            if result.rounds >= max_rounds:
                raise PropagationError(
                    f"No fixed point reached after {max_rounds} rounds; "
                    f"the last round still moved {result.history[-1]:.6e} occupation"
                )
            result.rounds += 1

            active = []
            for k in np.flatnonzero(occupations > 0.0):
                level = levels[k]
                if level.handle not in branch_cache:
                    branch_cache[level.handle] = self._branches(level, registry, positions, data)
                if branch_cache[level.handle]:
                    active.append(k)

            updated = occupations.copy()
            updated[active] = 0.0
            moved = 0.0
            for k in active:
                prob = occupations[k]
                moved += prob
                for target, ratio, index in branch_cache[levels[k].handle]:
                    updated[target] += prob * ratio
                    result.line_flux[index] = result.line_flux.get(index, 0.0) + prob * ratio

            occupations = updated
            result.history.append(float(moved))
            result.totals.append(float(occupations.sum()))
            logger.info(f"Round {result.rounds} has propagated a total of {moved:.6e} occupation")
            if moved == 0.0:
                break

        for level, occupation in zip(levels, occupations):
            level.relative_occ = float(occupation)
        return result
