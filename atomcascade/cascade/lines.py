"""
Transition lines of a cascade and the computation of all lines of its steps.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Union

from atomcascade.atomic.structures import AtomicProcess, EmProperty, Level, Multiplet
from atomcascade.cascade.blocks import (
    Block,
    BlockStatus,
    CascadeComputation,
    determine_blocks,
    determine_steps,
    modify_steps,
)
from atomcascade.cascade.configurations import generate_configuration_list
from atomcascade.core.abc import StructureSolver, TransitionLineEvaluator
from atomcascade.core.exceptions import (
    AmplitudeError,
    ConfigurationError,
    ConvergenceError,
    UnsupportedProcessError,
)
from atomcascade.core.logging_config import get_logger

logger = get_logger("cascade.lines")


@dataclass(frozen=True)
class RadiativeLine:
    """
    Radiative transition between two levels.

    Attributes
    ----------
    initial_level, final_level : Level
        Upper and lower level
    photon_energy : float
        Transition energy in Hartree
    photon_rate : EmProperty
        Emission rate in atomic units, in Coulomb and Babushkin gauge
    """

    initial_level: Level
    final_level: Level
    photon_energy: float
    photon_rate: EmProperty


@dataclass(frozen=True)
class AugerLine:
    """
    Auger transition into the next charge state.

    Attributes
    ----------
    initial_level, final_level : Level
        Level before and after the electron emission
    electron_energy : float
        Kinetic energy of the emitted electron in Hartree
    total_rate : float
        Auger rate in atomic units, summed over all partial waves
    """

    initial_level: Level
    final_level: Level
    electron_energy: float
    total_rate: float


@dataclass(frozen=True)
class PhotoIonizationLine:
    """Photoionization of the initial level into the final level."""

    initial_level: Level
    final_level: Level
    photon_energy: float
    cross_section: EmProperty


Line = Union[RadiativeLine, AugerLine, PhotoIonizationLine]


@dataclass(frozen=True)
class LineIndex:
    """
    Reference to one line of :class:`CascadeData`.

    Attributes
    ----------
    process : AtomicProcess
        Selects the line list
    index : int
        0-based position in that list
    """

    process: AtomicProcess
    index: int

    def __str__(self) -> str:
        return f"{self.process.value}[{self.index}]"


@dataclass
class CascadeData:
    """
    All lines computed for a cascade.

    Attributes
    ----------
    name : str
        Name of the cascade
    lines_r : List[RadiativeLine]
        Radiative lines
    lines_a : List[AugerLine]
        Auger lines
    lines_p : List[PhotoIonizationLine]
        Photoionization lines
    initial_occupations : Dict[int, float]
        Level handle -> relative occupation at the start of the cascade
    """

    name: str = ""
    lines_r: List[RadiativeLine] = field(default_factory=list)
    lines_a: List[AugerLine] = field(default_factory=list)
    lines_p: List[PhotoIonizationLine] = field(default_factory=list)
    initial_occupations: Dict[int, float] = field(default_factory=dict)

    def lines(self, process: AtomicProcess) -> List[Line]:
        """Line list of a process."""
        if process is AtomicProcess.RADIATIVE:
            return self.lines_r
        if process is AtomicProcess.AUGER:
            return self.lines_a
        return self.lines_p

    def line(self, index: LineIndex) -> Line:
        """
        Line referenced by a line index.

        Raises
        ------
        IndexError
            If the index points outside the line list
        """
        lines = self.lines(index.process)
        if not 0 <= index.index < len(lines):
            raise IndexError(f"No line {index} in cascade data '{self.name}'")
        return lines[index.index]

    def __len__(self) -> int:
        return len(self.lines_r) + len(self.lines_a) + len(self.lines_p)


def compute_transition_lines(
    computation: CascadeComputation, evaluator: TransitionLineEvaluator
) -> CascadeData:
    """
    Compute the lines of all steps of a cascade computation.

    A step whose amplitudes cannot be evaluated is logged and skipped.

    Parameters
    ----------
    computation : CascadeComputation
        Computation carrying the steps
    evaluator : TransitionLineEvaluator
        External line evaluator

    Returns
    -------
    CascadeData

    Raises
    ------
    UnsupportedProcessError
        If a step has a process other than radiative or Auger decay
    """
    data = CascadeData(name=computation.name)
    n_steps = len(computation.steps)
    logger.info(f"Computing transition lines for {n_steps} steps of cascade '{computation.name}'")

    for k, step in enumerate(computation.steps, start=1):
        n_pairs = len(step.initial_multiplet) * len(step.final_multiplet)
        logger.debug(f"Step {k}: {step.process.value} for up to {n_pairs} lines")
        try:
            if step.process is AtomicProcess.AUGER:
                new_lines = evaluator.compute_auger_lines(
                    step.initial_multiplet, step.final_multiplet, computation.grid
                )
                data.lines_a.extend(new_lines)
            elif step.process is AtomicProcess.RADIATIVE:
                new_lines = evaluator.compute_radiative_lines(
                    step.initial_multiplet, step.final_multiplet, computation.grid
                )
                data.lines_r.extend(new_lines)
            else:
                raise UnsupportedProcessError(
                    f"Unsupported atomic process in cascade computations: {step.process.value}"
                )
        except AmplitudeError as e:
            logger.error(f"Step {k} ({step.process.value}) skipped: {e}")
            continue
        logger.info(f"Step {k}/{n_steps}: {len(new_lines)} {step.process.value} lines")

    logger.info(f"Computed {len(data.lines_r)} radiative and {len(data.lines_a)} Auger lines")
    return data


def _initial_multiplet(computation: CascadeComputation, blocks: List[Block]) -> Multiplet:
    """Levels of the blocks built from the initial configurations, in block order."""
    levels = []
    for block in blocks:
        if not any(conf in computation.initial_confs for conf in block.confs):
            continue
        if block.status is not BlockStatus.COMPUTED:
            raise ConvergenceError(
                f"Multiplet of the initial configurations "
                f"{', '.join(str(c) for c in block.confs)} is not available"
            )
        levels.extend(block.multiplet.levels)
    return Multiplet("initial", tuple(levels))


def run_cascade(
    computation: CascadeComputation,
    solver: StructureSolver,
    evaluator: TransitionLineEvaluator,
) -> CascadeData:
    """
    Run all stages of a cascade computation.

    Generates the configurations, computes the blocks, determines the steps,
    computes their lines and sets the initial occupations given by
    ``computation.initial_levels``.

    Parameters
    ----------
    computation : CascadeComputation
        Cascade setup
    solver : StructureSolver
        External structure solver
    evaluator : TransitionLineEvaluator
        External line evaluator

    Returns
    -------
    CascadeData

    Raises
    ------
    ConfigurationError
        If an initial level index is outside the initial multiplet
    ConvergenceError
        If the multiplet of an initial configuration cannot be computed
    """
    confs = generate_configuration_list(
        computation.initial_confs,
        computation.max_electron_loss,
        computation.n_shake_displacements,
    )
    blocks = determine_blocks(computation, confs, solver)
    steps = determine_steps(computation, blocks)
    computation = modify_steps(computation, steps)

    initial = _initial_multiplet(computation, blocks)
    occupations: Dict[int, float] = {}
    for index, occupation in computation.initial_levels:
        if not 1 <= index <= len(initial):
            raise ConfigurationError(
                f"Initial level {index} outside the {len(initial)} levels "
                f"of the initial configurations"
            )
        handle = initial.levels[index - 1].handle
        occupations[handle] = occupations.get(handle, 0.0) + occupation

    data = compute_transition_lines(computation, evaluator)
    data.initial_occupations = occupations
    return data
