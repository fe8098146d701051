"""
Blocks and steps of a cascade computation.

A block is a group of configurations whose levels are computed together in
one multiplet; a step is a pair of blocks connected by one atomic process.
Only the average single-configuration approach is supported, in which every
configuration forms its own block.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from atomcascade.atomic.structures import (
    AtomicProcess,
    Configuration,
    LevelArena,
    Multiplet,
    NuclearModel,
    RadialGrid,
    Shell,
)
from atomcascade.core.abc import StructureSolver
from atomcascade.core.config import (
    VALID_BLOCK_LIMIT_POLICIES,
    VALID_STEP_ENERGY_GATES,
    validate_cascade_config,
)
from atomcascade.core.exceptions import (
    ConfigurationError,
    ConvergenceError,
    ResourceLimitError,
    UnsupportedApproachError,
    UnsupportedProcessError,
)
from atomcascade.core.logging_config import get_logger

logger = get_logger("cascade.blocks")


class CascadeApproach(Enum):
    """Computational approach used to generate and evaluate a cascade."""

    AVERAGE_SCA = "averageSCA"

    @classmethod
    def from_string(cls, value: str) -> "CascadeApproach":
        for approach in cls:
            if approach.value == value:
                return approach
        raise UnsupportedApproachError(f"Unsupported cascade approach: {value!r}")


class BlockStatus(Enum):
    """Computation state of a block multiplet."""

    PENDING = "pending"
    COMPUTED = "computed"
    FAILED = "failed"


@dataclass(frozen=True)
class Block:
    """
    Configurations treated together in one multiplet computation.

    Attributes
    ----------
    n_electrons : int
        Number of electrons of the block
    confs : Tuple[Configuration, ...]
        Configurations of the block
    status : BlockStatus
        Whether the multiplet has been computed
    multiplet : Multiplet, optional
        Levels of the block, with arena handles
    """

    n_electrons: int
    confs: Tuple[Configuration, ...]
    status: BlockStatus = BlockStatus.PENDING
    multiplet: Optional[Multiplet] = None

    @property
    def has_multiplet(self) -> bool:
        return self.status is BlockStatus.COMPUTED and self.multiplet is not None


@dataclass(frozen=True)
class Step:
    """
    A pair of blocks connected by one atomic process.

    Attributes
    ----------
    process : AtomicProcess
        Process that connects the blocks
    initial_confs, final_confs : Tuple[Configuration, ...]
        Configurations of the initial and final block
    initial_multiplet, final_multiplet : Multiplet
        Full block multiplets; lines between individual levels are
        computed later
    """

    process: AtomicProcess
    initial_confs: Tuple[Configuration, ...]
    final_confs: Tuple[Configuration, ...]
    initial_multiplet: Multiplet
    final_multiplet: Multiplet


@dataclass
class CascadeComputation:
    """
    Physical and computational setup of a decay cascade.

    Attributes
    ----------
    name : str
        Name of the cascade
    nuclear_model : NuclearModel
        Model of the nucleus
    grid : RadialGrid
        Radial grid for all multiplet and line computations
    asf_settings : dict
        Settings passed to the structure solver
    approach : CascadeApproach
        Approach used to define blocks and steps
    processes : List[AtomicProcess]
        Atomic processes included in the cascade
    initial_confs : List[Configuration]
        Configurations of the levels from which the cascade starts
    initial_levels : List[Tuple[int, float]]
        1-based level indices within the initial configurations and their
        relative occupation
    max_electron_loss : int
        Maximum number of electrons lost during the cascade
    n_shake_displacements : int
        Maximum number of shake displacements per step
    shake_from_shells, shake_to_shells : List[Shell]
        Shells from and into which shake transitions may occur
    max_blocks : int, optional
        Maximum number of blocks whose multiplets are computed
    block_limit_policy : str
        'raise' or 'truncate' when there are more than ``max_blocks`` blocks
    step_energy_gate : str
        'minimum' requires all level pairs of two blocks to be energetically
        open, 'maximum' requires at least one such pair
    steps : List[Step]
        Steps of the cascade, once determined
    arena : LevelArena
        Issues the level handles of all block multiplets
    """

    name: str
    nuclear_model: NuclearModel
    grid: RadialGrid = field(default_factory=RadialGrid)
    asf_settings: Dict[str, Any] = field(default_factory=dict)
    approach: CascadeApproach = CascadeApproach.AVERAGE_SCA
    processes: List[AtomicProcess] = field(default_factory=lambda: [AtomicProcess.AUGER])
    initial_confs: List[Configuration] = field(default_factory=list)
    initial_levels: List[Tuple[int, float]] = field(default_factory=lambda: [(1, 1.0)])
    max_electron_loss: int = 0
    n_shake_displacements: int = 0
    shake_from_shells: List[Shell] = field(default_factory=list)
    shake_to_shells: List[Shell] = field(default_factory=list)
    max_blocks: Optional[int] = None
    block_limit_policy: str = "raise"
    step_energy_gate: str = "minimum"
    steps: List[Step] = field(default_factory=list)
    arena: LevelArena = field(default_factory=LevelArena, repr=False, compare=False)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check the computational bounds and switches.

        Also called before blocks and steps are determined, since the
        attributes may be changed after construction.

        Raises
        ------
        ConfigurationError
            If the block limit, its policy or the step energy gate is invalid
        """
        if self.block_limit_policy not in VALID_BLOCK_LIMIT_POLICIES:
            raise ConfigurationError(
                f"Invalid block_limit_policy: {self.block_limit_policy!r}. "
                f"Must be one of: {VALID_BLOCK_LIMIT_POLICIES}"
            )
        if self.step_energy_gate not in VALID_STEP_ENERGY_GATES:
            raise ConfigurationError(
                f"Invalid step_energy_gate: {self.step_energy_gate!r}. "
                f"Must be one of: {VALID_STEP_ENERGY_GATES}"
            )
        if self.max_blocks is not None and self.max_blocks <= 0:
            raise ConfigurationError(f"max_blocks must be positive, got {self.max_blocks}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CascadeComputation":
        """
        Create a computation from a configuration dictionary.

        Parameters
        ----------
        config : dict
            Configuration with a ``cascade`` section (see
            :func:`atomcascade.core.config.validate_cascade_config`)

        Returns
        -------
        CascadeComputation
        """
        validate_cascade_config(config)
        cascade = config["cascade"]

        nuclear = cascade.get("nuclear_model", {})
        nuclear_model = NuclearModel(
            charge=float(nuclear.get("charge", cascade.get("nuclear_charge", 0.0))),
            model=nuclear.get("model", "Fermi"),
            mass_number=nuclear.get("mass_number"),
        )

        return cls(
            name=cascade.get("name", ""),
            nuclear_model=nuclear_model,
            grid=RadialGrid(**cascade.get("grid", {})),
            asf_settings=dict(cascade.get("asf_settings", {})),
            approach=CascadeApproach.from_string(cascade.get("approach", "averageSCA")),
            processes=[AtomicProcess.from_string(p) for p in cascade.get("processes", ["Auger"])],
            initial_confs=[Configuration.from_string(c) for c in cascade["initial_configurations"]],
            initial_levels=[
                (int(index), float(occ)) for index, occ in cascade.get("initial_levels", [(1, 1.0)])
            ],
            max_electron_loss=int(cascade["max_electron_loss"]),
            n_shake_displacements=int(cascade.get("shake_displacements", 0)),
            shake_from_shells=[Shell.from_string(s) for s in cascade.get("shake_from_shells", [])],
            shake_to_shells=[Shell.from_string(s) for s in cascade.get("shake_to_shells", [])],
            max_blocks=cascade.get("max_blocks"),
            block_limit_policy=cascade.get("block_limit_policy", "raise"),
            step_energy_gate=cascade.get("step_energy_gate", "minimum"),
        )


def _check_setup(computation: CascadeComputation) -> None:
    computation.validate()
    if computation.approach is not CascadeApproach.AVERAGE_SCA:
        raise UnsupportedApproachError(
            f"Unsupported cascade approach: {computation.approach!r}"
        )


def determine_blocks(
    computation: CascadeComputation,
    confs: List[Configuration],
    solver: StructureSolver,
) -> List[Block]:
    """
    Determine and compute the blocks of a cascade.

    Every configuration forms its own block. Blocks are ordered by electron
    count, most electrons first, and keep the input order within one count.
    Block energies are only known once the solver has run, so this order
    stands in for the energy order: a cascade only loses electrons on its
    way down, and the generated configurations within one count come in
    the order of the hole migration. With the 'truncate' policy the
    first ``max_blocks`` blocks of this order are computed.
    The multiplet of each block is computed by the structure solver and
    registered in the computation's level arena. A block whose computation
    fails is marked ``FAILED`` and the remaining blocks are still computed.

    Parameters
    ----------
    computation : CascadeComputation
        Cascade setup
    confs : List[Configuration]
        Configurations of the cascade
    solver : StructureSolver
        External structure solver

    Returns
    -------
    List[Block]
        All blocks; with the 'truncate' policy, blocks beyond ``max_blocks``
        stay ``PENDING``

    Raises
    ------
    ConfigurationError
        If the computation has an invalid block limit, policy or energy gate
    UnsupportedApproachError
        If the approach is not supported
    ResourceLimitError
        If there are more than ``max_blocks`` blocks and the policy is 'raise'
    """
    _check_setup(computation)

    ordered = sorted(confs, key=lambda conf: -conf.n_electrons)
    blocks = [Block(conf.n_electrons, (conf,)) for conf in ordered]

    n_compute = len(blocks)
    limit = computation.max_blocks
    if limit is not None and len(blocks) > limit:
        if computation.block_limit_policy == "truncate":
            logger.warning(
                f"{len(blocks)} blocks determined but only {limit} are computed; "
                f"{len(blocks) - limit} blocks are dropped"
            )
            n_compute = limit
        else:
            raise ResourceLimitError(
                f"{len(blocks)} blocks exceed the limit of {limit} blocks "
                f"(set block_limit_policy='truncate' to compute only the first {limit})"
            )

    result = []
    for k, block in enumerate(blocks):
        if k >= n_compute:
            result.append(block)
            continue
        label = ", ".join(str(conf) for conf in block.confs)
        try:
            multiplet = solver.compute_multiplet(
                list(block.confs),
                computation.nuclear_model,
                computation.grid,
                computation.asf_settings,
            )
        except ConvergenceError as e:
            logger.warning(f"Multiplet computation for {label} failed: {e}")
            result.append(replace(block, status=BlockStatus.FAILED))
            continue

        multiplet = computation.arena.register(multiplet)
        logger.info(
            f"Multiplet computation for {label} with {block.n_electrons} electrons: "
            f"{len(multiplet)} levels"
        )
        result.append(replace(block, status=BlockStatus.COMPUTED, multiplet=multiplet))

    n_failed = sum(1 for block in result if block.status is BlockStatus.FAILED)
    logger.info(f"Determined {len(result)} blocks ({n_failed} failed)")
    return result


def _energy_window(block_a: Block, block_b: Block) -> Tuple[float, float]:
    """Minimum and maximum of E(a_p) - E(b_q) over all level pairs."""
    diffs = block_a.multiplet.energies[:, None] - block_b.multiplet.energies[None, :]
    return float(diffs.min()), float(diffs.max())


def determine_steps(computation: CascadeComputation, blocks: List[Block]) -> List[Step]:
    """
    Determine all steps between pairs of computed blocks.

    For every ordered pair (a, b) of different blocks and every process, a
    step is created if the pair passes the energy gate and the electron
    counts fit the process: equal counts for radiative steps, one electron
    less in b for Auger steps. Blocks without a multiplet are ignored.

    Parameters
    ----------
    computation : CascadeComputation
        Cascade setup (approach, processes, energy gate)
    blocks : List[Block]
        Blocks from :func:`determine_blocks`

    Returns
    -------
    List[Step]
        Steps in (a, b, process) order

    Raises
    ------
    ConfigurationError
        If the computation has an invalid block limit, policy or energy gate
    UnsupportedApproachError
        If the approach is not supported
    UnsupportedProcessError
        If a process other than radiative or Auger decay is requested
    """
    _check_setup(computation)
    for process in computation.processes:
        if process not in (AtomicProcess.RADIATIVE, AtomicProcess.AUGER):
            raise UnsupportedProcessError(
                f"Unsupported atomic process in cascade computations: {process.value}"
            )

    computed = [block for block in blocks if block.has_multiplet and len(block.multiplet) > 0]
    use_maximum = computation.step_energy_gate == "maximum"

    steps: List[Step] = []
    for a, block_a in enumerate(computed):
        for b, block_b in enumerate(computed):
            if a == b:
                continue
            min_en, max_en = _energy_window(block_a, block_b)
            gate = max_en if use_maximum else min_en
            if gate < 0.0:
                continue
            for process in computation.processes:
                if process is AtomicProcess.RADIATIVE:
                    allowed = block_a.n_electrons == block_b.n_electrons
                else:
                    allowed = block_a.n_electrons == block_b.n_electrons + 1
                if allowed:
                    steps.append(
                        Step(
                            process,
                            block_a.confs,
                            block_b.confs,
                            block_a.multiplet,
                            block_b.multiplet,
                        )
                    )

    logger.info(f"Determined {len(steps)} steps between {len(computed)} computed blocks")
    return steps


def modify_steps(computation: CascadeComputation, steps: List[Step]) -> CascadeComputation:
    """Return a copy of the computation that carries the given steps."""
    return replace(computation, steps=list(steps))
