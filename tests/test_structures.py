"""
Tests for atomic data structures.
"""

import numpy as np
import pytest

from atomcascade.atomic.structures import (
    AtomicProcess,
    Configuration,
    EmGauge,
    EmMultipole,
    EmProperty,
    Level,
    LevelArena,
    LevelSymmetry,
    Multiplet,
    NuclearModel,
    Parity,
    Shell,
    UseGauge,
)


def test_parity_from_string():
    """Test parsing parities."""
    assert Parity.from_string("+") is Parity.PLUS
    assert Parity.from_string("odd") is Parity.MINUS
    with pytest.raises(ValueError, match="Invalid parity"):
        Parity.from_string("x")


def test_parity_product():
    """Test multiplication of parities."""
    assert Parity.PLUS * Parity.PLUS is Parity.PLUS
    assert Parity.MINUS * Parity.MINUS is Parity.PLUS
    assert Parity.PLUS * Parity.MINUS is Parity.MINUS
    assert Parity.from_l(1) is Parity.MINUS


def test_level_symmetry():
    """Test level symmetry validation and formatting."""
    sym = LevelSymmetry(1.5, Parity.MINUS)
    assert sym.two_j == 3
    assert str(sym) == "3/2-"
    assert str(LevelSymmetry(2.0, Parity.PLUS)) == "2+"

    with pytest.raises(ValueError):
        LevelSymmetry(0.3, Parity.PLUS)
    with pytest.raises(ValueError):
        LevelSymmetry(-0.5, Parity.PLUS)


def test_level_properties():
    """Test derived level properties."""
    level = Level(energy=-1.0, J=1.5, parity=Parity.PLUS, n_electrons=3)
    assert level.g == 4
    assert level.symmetry == LevelSymmetry(1.5, Parity.PLUS)
    assert level.handle is None


def test_multiplet_energies():
    """Test multiplet energy accessors."""
    multiplet = Multiplet(
        "test",
        [Level(-2.0, 0.0, Parity.PLUS, 2), Level(-1.0, 1.0, Parity.MINUS, 2)],
    )
    assert isinstance(multiplet.levels, tuple)
    assert len(multiplet) == 2
    np.testing.assert_array_equal(multiplet.energies, [-2.0, -1.0])
    assert multiplet.energy_range() == (-2.0, -1.0)

    with pytest.raises(ValueError, match="no levels"):
        Multiplet("empty").energy_range()


def test_shell_ordering_and_capacity():
    """Test shell parsing, ordering and capacity."""
    assert Shell.from_string("2p") == Shell(2, 1)
    assert Shell(2, 1).capacity == 6
    assert sorted([Shell(3, 0), Shell(2, 1), Shell(1, 0), Shell(2, 0)]) == [
        Shell(1, 0),
        Shell(2, 0),
        Shell(2, 1),
        Shell(3, 0),
    ]
    with pytest.raises(ValueError):
        Shell(2, 2)
    with pytest.raises(ValueError):
        Shell.from_string("2p^3")


def test_configuration_from_string():
    """Test parsing and formatting of configurations."""
    conf = Configuration.from_string("1s^2 2s 2p^6")
    assert conf.n_electrons == 9
    assert conf.occupation(Shell(2, 0)) == 1
    assert conf.occupation(Shell(3, 0)) == 0
    assert str(conf) == "1s^2 2s 2p^6"


def test_configuration_equality_is_structural():
    """Test that configurations with the same shells compare equal."""
    a = Configuration.from_string("2p^6 2s^2")
    b = Configuration.from_string("2s^2 2p^6")
    assert a == b
    assert hash(a) == hash(b)
    assert a != Configuration.from_string("2s^2 2p^5 3s")


def test_configuration_ignores_empty_shells():
    """Test that empty shells do not change the identity of a configuration."""
    a = Configuration.from_string("2s^2 2p^6 3s^0")
    b = Configuration.from_string("2s^2 2p^6")
    assert a == b
    assert hash(a) == hash(b)
    assert str(a) == "2s^2 2p^6"
    assert a.occupation(Shell(3, 0)) == 0
    assert Configuration(((Shell(1, 0), 2), (Shell(2, 1), 0)), 2).shells == ((Shell(1, 0), 2),)


def test_configuration_validation():
    """Test rejection of invalid configurations."""
    with pytest.raises(ValueError, match="outside"):
        Configuration.from_string("2p^7")
    with pytest.raises(ValueError, match="twice"):
        Configuration.from_string("2s 2s")
    with pytest.raises(ValueError, match="sum to"):
        Configuration(((Shell(1, 0), 2),), 3)
    with pytest.raises(ValueError):
        Configuration.from_string("")


def test_atomic_process_from_string():
    """Test parsing atomic processes."""
    assert AtomicProcess.from_string("auger") is AtomicProcess.AUGER
    assert AtomicProcess.from_string("Radiative") is AtomicProcess.RADIATIVE
    with pytest.raises(ValueError):
        AtomicProcess.from_string("Compton")


def test_multipole_properties():
    """Test multipole order and type."""
    assert EmMultipole.E2.L == 2
    assert EmMultipole.E1.is_electric
    assert not EmMultipole.M1.is_electric


def test_em_property():
    """Test arithmetic and gauge selection of gauge-dependent values."""
    total = EmProperty(1.0, 2.0) + EmProperty(0.5, 0.5)
    assert total == EmProperty(1.5, 2.5)
    assert total.scale(2.0) == EmProperty(3.0, 5.0)
    assert total.get(UseGauge.COULOMB) == 1.5
    assert total.get(EmGauge.BABUSHKIN) == 2.5
    with pytest.raises(ValueError):
        total.get(EmGauge.MAGNETIC)


def test_nuclear_model_validation():
    """Test nuclear model validation."""
    assert NuclearModel(26.0).model == "Fermi"
    with pytest.raises(ValueError):
        NuclearModel(0.0)
    with pytest.raises(ValueError):
        NuclearModel(26.0, model="shell")


def test_level_arena_assigns_unique_handles():
    """Test that every registered level gets its own handle and index."""
    arena = LevelArena()
    multiplet = Multiplet("m", [Level(-1.0, 0.0, Parity.PLUS, 2), Level(-0.5, 1.0, Parity.PLUS, 2)])

    first = arena.register(multiplet)
    second = arena.register(multiplet)

    handles = [lev.handle for lev in first.levels + second.levels]
    assert handles == [1, 2, 3, 4]
    assert [lev.index for lev in second.levels] == [1, 2]
    assert len(arena) == 4
    assert arena.get(3).energy == -1.0
    # Same quantum numbers, different physical states
    assert first.levels[0] != second.levels[0]
