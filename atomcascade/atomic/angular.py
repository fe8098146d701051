"""
Angular-momentum selection rules for capture and radiative channels.

Single-electron states are labelled by the relativistic quantum number
kappa: j = |kappa| - 1/2 and l = kappa for kappa > 0, l = -kappa - 1 for
kappa < 0.
"""

from typing import List, Tuple

from atomcascade.atomic.structures import EmMultipole, LevelSymmetry, Parity


def kappa_to_lj(kappa: int) -> Tuple[int, float]:
    """
    Orbital and total angular momentum of a single-electron state.

    Parameters
    ----------
    kappa : int
        Relativistic angular quantum number (non-zero)

    Returns
    -------
    Tuple[int, float]
        (l, j)
    """
    if kappa == 0:
        raise ValueError("kappa must be non-zero")
    l = kappa if kappa > 0 else -kappa - 1
    j = abs(kappa) - 0.5
    return l, j


def kappa_label(kappa: int) -> str:
    """Spectroscopic label such as 'p_3/2' for kappa = -2."""
    l, j = kappa_to_lj(kappa)
    return f"{'spdfghik'[l]}_{int(2 * j)}/2"


def triangle(two_a: int, two_b: int, two_c: int) -> bool:
    """Triangle rule |a-b| <= c <= a+b with integer steps, in units of 1/2."""
    if (two_a + two_b + two_c) % 2 != 0:
        return False
    return abs(two_a - two_b) <= two_c <= two_a + two_b


def allowed_kappas(sym_a: LevelSymmetry, sym_b: LevelSymmetry) -> List[int]:
    """
    Partial waves that couple symmetry ``sym_a`` to ``sym_b``.

    A free electron with quantum number kappa couples the (N-electron)
    symmetry ``sym_a`` to the (N+1)-electron symmetry ``sym_b`` if the
    triangle rule holds for (J_a, j, J_b) and the parities satisfy
    P_b = P_a (-1)^l.

    Returns
    -------
    List[int]
        Allowed kappa values, ordered by j and, for equal j, negative kappa
        first
    """
    kappas: List[int] = []
    two_j_min = abs(sym_a.two_j - sym_b.two_j)
    two_j_max = sym_a.two_j + sym_b.two_j
    if two_j_min % 2 == 0:
        # Integer j cannot belong to a single electron
        return kappas

    for two_j in range(max(two_j_min, 1), two_j_max + 1, 2):
        j_plus_half = (two_j + 1) // 2
        for kappa in (-j_plus_half, j_plus_half):
            l, _ = kappa_to_lj(kappa)
            if sym_a.parity * Parity.from_l(l) is sym_b.parity:
                kappas.append(kappa)
    return kappas


def is_allowed_multipole(
    sym_a: LevelSymmetry, multipole: EmMultipole, sym_b: LevelSymmetry
) -> bool:
    """
    Whether a multipole connects the two level symmetries.

    Electric multipoles EL change parity by (-1)^L, magnetic multipoles ML
    by (-1)^(L+1); the angular momenta must satisfy the triangle rule
    (J_a, L, J_b).
    """
    if not triangle(sym_a.two_j, 2 * multipole.L, sym_b.two_j):
        return False
    parity_change = multipole.L if multipole.is_electric else multipole.L + 1
    return sym_a.parity * Parity.from_l(parity_change) is sym_b.parity
