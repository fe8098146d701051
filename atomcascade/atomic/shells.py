"""
Shell ordering utilities.
"""

from typing import Iterable, List

from atomcascade.atomic.structures import Configuration, Shell


def ordered_shells(configurations: Iterable[Configuration]) -> List[Shell]:
    """
    All shells occurring in the given configurations, in outward order.

    Shells are ordered by principal quantum number and then by orbital
    angular momentum (1s, 2s, 2p, 3s, 3p, 3d, ...); a larger position in
    the returned list means further out.

    Parameters
    ----------
    configurations : Iterable[Configuration]
        Configurations whose shells are collected

    Returns
    -------
    List[Shell]
        Distinct shells, innermost first
    """
    shells = set()
    for conf in configurations:
        shells.update(shell for shell, _ in conf.shells)
    return sorted(shells)


def shell_position(shell: Shell, shells: List[Shell]) -> int:
    """
    Position of a shell in an ordered shell list.

    Raises
    ------
    ValueError
        If the shell is not part of the list
    """
    try:
        return shells.index(shell)
    except ValueError:
        raise ValueError(f"Shell {shell} not found in ordered shell list") from None
