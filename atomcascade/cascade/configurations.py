"""
Generation of the decay configurations of a cascade.

Starting from the seed configurations, holes migrate outwards in repeated
rounds: a hole is filled by one electron from a shell further out, either
with the electron count kept (radiative-like step) or with a second outer
electron removed (Auger-like step).

Configurations only store occupied shells. The shells a hole can occupy
or move through are the union of the shells of all seeds, passed around as
an ordered ``shells`` list; without it, the shells of the configuration
itself are used.
"""

from typing import Dict, Iterable, List, Optional

from atomcascade.atomic.shells import ordered_shells, shell_position
from atomcascade.atomic.structures import Configuration, Shell
from atomcascade.core.logging_config import get_logger

logger = get_logger("cascade.configurations")


def determine_hole_shells(
    conf: Configuration, shells: Optional[List[Shell]] = None
) -> List[Shell]:
    """
    Shells whose occupation is below their capacity, innermost first.

    Parameters
    ----------
    conf : Configuration
        Configuration to inspect
    shells : List[Shell], optional
        Ordered shells to consider, including empty ones; defaults to the
        occupied shells of ``conf``
    """
    if shells is None:
        shells = ordered_shells([conf])
    return [shell for shell in shells if conf.occupation(shell) < shell.capacity]


def _move(occupations: Dict[Shell, int], hole_shell: Shell, *outer: Shell) -> Dict[Shell, int]:
    """Fill the hole with one electron and empty one electron per outer shell."""
    new = dict(occupations)
    for shell in outer:
        new[shell] -= 1
    new[hole_shell] = new.get(hole_shell, 0) + 1
    return new


def generate_configurations_with_1_outer_hole(
    conf: Configuration, hole_shell: Shell, shells: Optional[List[Shell]] = None
) -> List[Configuration]:
    """
    Configurations in which the hole of ``hole_shell`` has moved outwards.

    One electron of every occupied shell further out fills the hole; the
    electron count is unchanged.

    Raises
    ------
    ValueError
        If ``hole_shell`` is not one of the considered shells
    """
    if shells is None:
        shells = ordered_shells([conf])
    i0 = shell_position(hole_shell, shells)

    occupations = conf.as_dict()
    confs = []
    for outer in shells[i0 + 1 :]:
        if occupations.get(outer, 0) >= 1:
            new = _move(occupations, hole_shell, outer)
            confs.append(Configuration(tuple(new.items()), conf.n_electrons))
    return confs


def generate_configurations_with_2_outer_holes(
    conf: Configuration, hole_shell: Shell, shells: Optional[List[Shell]] = None
) -> List[Configuration]:
    """
    Configurations in which the hole is filled and two outer holes are created.

    Either two electrons are taken from one outer shell or one electron from
    each of two different outer shells; one of them fills the hole and the
    other leaves the ion, so the electron count drops by one. Both orders of
    a pair of different shells are generated, duplicates are removed later
    by the caller.

    Raises
    ------
    ValueError
        If ``hole_shell`` is not one of the considered shells
    """
    if shells is None:
        shells = ordered_shells([conf])
    i0 = shell_position(hole_shell, shells)
    outer_shells = shells[i0 + 1 :]

    occupations = conf.as_dict()
    confs = []
    for first in outer_shells:
        n_first = occupations.get(first, 0)
        if n_first >= 2:
            new = _move(occupations, hole_shell, first, first)
            confs.append(Configuration(tuple(new.items()), conf.n_electrons - 1))

        for second in outer_shells:
            if first != second and n_first >= 1 and occupations.get(second, 0) >= 1:
                new = _move(occupations, hole_shell, first, second)
                confs.append(Configuration(tuple(new.items()), conf.n_electrons - 1))
    return confs


def exclude_doubles(confs: Iterable[Configuration]) -> List[Configuration]:
    """Remove duplicate configurations, keeping the first occurrence."""
    return list(dict.fromkeys(confs))


def generate_configuration_list(
    initial_confs: List[Configuration], further: int, n_shake: int = 0
) -> List[Configuration]:
    """
    Generate all decay configurations with up to ``further`` additional holes.

    Hole migration is repeated ``further + 1`` times, each round starting
    from the configurations generated in the previous round. Holes move
    within the shells of all seeds, so shells emptied on the way stay
    available. Afterwards only configurations that lost at most ``further``
    electrons relative to the first seed are kept.

    Parameters
    ----------
    initial_confs : List[Configuration]
        Seed configurations; the first one defines the reference electron
        count
    further : int
        Maximum number of electrons lost
    n_shake : int
        Number of shake displacements. Accepted for completeness; shake
        configurations are not generated.

    Returns
    -------
    List[Configuration]
        Seeds followed by the generated configurations, without duplicates

    Raises
    ------
    ValueError
        If no seed is given or a bound is negative
    """
    if not initial_confs:
        raise ValueError("At least one initial configuration is required")
    if further < 0:
        raise ValueError("'further' must be non-negative")
    if n_shake < 0:
        raise ValueError("Number of shake displacements must be non-negative")

    n_initial = initial_confs[0].n_electrons
    shells = ordered_shells(initial_confs)
    conf_list = list(initial_confs)
    frontier = list(initial_confs)

    for round_ in range(1, further + 2):
        new_confs: List[Configuration] = []
        for conf in frontier:
            for hole_shell in determine_hole_shells(conf, shells):
                new_confs.extend(
                    generate_configurations_with_1_outer_hole(conf, hole_shell, shells)
                )
                new_confs.extend(
                    generate_configurations_with_2_outer_holes(conf, hole_shell, shells)
                )
        frontier = exclude_doubles(new_confs)
        conf_list.extend(frontier)
        logger.debug(f"Hole migration round {round_}: {len(frontier)} configurations")

    kept = [conf for conf in conf_list if conf.n_electrons + further >= n_initial]
    kept = exclude_doubles(kept)
    logger.info(
        f"Generated {len(kept)} configurations from {len(initial_confs)} seed(s) "
        f"with up to {further} further hole(s)"
    )
    return kept


def group_configurations(confs: Iterable[Configuration]) -> Dict[int, List[Configuration]]:
    """
    Group configurations by their number of electrons.

    Returns
    -------
    Dict[int, List[Configuration]]
        Electron count -> configurations in input order, most electrons first
    """
    groups: Dict[int, List[Configuration]] = {}
    for conf in confs:
        groups.setdefault(conf.n_electrons, []).append(conf)
    return {n: groups[n] for n in sorted(groups, reverse=True)}
