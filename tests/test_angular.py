"""
Tests for angular-momentum selection rules.
"""

import pytest

from atomcascade.atomic.angular import (
    allowed_kappas,
    is_allowed_multipole,
    kappa_label,
    kappa_to_lj,
    triangle,
)
from atomcascade.atomic.structures import EmMultipole, LevelSymmetry, Parity


def test_kappa_to_lj():
    """Test orbital and total angular momentum of kappa."""
    assert kappa_to_lj(-1) == (0, 0.5)
    assert kappa_to_lj(1) == (1, 0.5)
    assert kappa_to_lj(-2) == (1, 1.5)
    assert kappa_to_lj(2) == (2, 1.5)
    assert kappa_label(-2) == "p_3/2"
    with pytest.raises(ValueError):
        kappa_to_lj(0)


def test_triangle():
    """Test the triangle rule in units of 1/2."""
    assert triangle(1, 2, 1)
    assert triangle(0, 2, 2)
    assert not triangle(0, 2, 4)
    assert not triangle(1, 1, 1)


def test_allowed_kappas_closed_shell():
    """Test partial waves coupling J=0+ to J=1/2."""
    assert allowed_kappas(LevelSymmetry(0.0, Parity.PLUS), LevelSymmetry(0.5, Parity.PLUS)) == [-1]
    assert allowed_kappas(LevelSymmetry(0.0, Parity.PLUS), LevelSymmetry(0.5, Parity.MINUS)) == [1]


def test_allowed_kappas_multiple_partial_waves():
    """Test ordering of several allowed partial waves."""
    kappas = allowed_kappas(LevelSymmetry(1.0, Parity.PLUS), LevelSymmetry(1.5, Parity.MINUS))
    assert kappas == [1, -2, 3]


def test_allowed_kappas_integer_j_forbidden():
    """Test that symmetries requiring an integer j give no partial wave."""
    assert allowed_kappas(LevelSymmetry(0.0, Parity.PLUS), LevelSymmetry(1.0, Parity.MINUS)) == []


def test_is_allowed_multipole():
    """Test multipole selection rules."""
    even = LevelSymmetry(0.5, Parity.PLUS)
    odd = LevelSymmetry(0.5, Parity.MINUS)
    assert is_allowed_multipole(odd, EmMultipole.E1, even)
    assert not is_allowed_multipole(even, EmMultipole.E1, even)
    assert is_allowed_multipole(even, EmMultipole.M1, even)
    assert not is_allowed_multipole(odd, EmMultipole.M1, even)
    # 1/2 -> 1/2 cannot be reached by a quadrupole
    assert not is_allowed_multipole(even, EmMultipole.E2, even)
