"""
Tests for the tabulated structure solver.
"""

import os
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from atomcascade.atomic.structures import Configuration, Parity, RadialGrid
from atomcascade.atomic.tabulated import TabulatedStructureSolver, multiplet_key
from atomcascade.core.config import save_config
from atomcascade.core.exceptions import ConvergenceError


def test_compute_multiplet(structure_solver, nuclear_model):
    """Test serving the levels of one configuration."""
    conf = Configuration.from_string("2s^2 2p^5 3s^2")
    multiplet = structure_solver.compute_multiplet([conf], nuclear_model, RadialGrid(), {})

    assert multiplet.name == "2s^2 2p^5 3s^2"
    assert len(multiplet) == 2
    assert [lev.index for lev in multiplet.levels] == [1, 2]
    assert multiplet.levels[0].J == 1.5
    assert multiplet.levels[0].parity is Parity.MINUS
    assert all(lev.n_electrons == 9 for lev in multiplet.levels)
    assert all(lev.handle is None for lev in multiplet.levels)


def test_compute_multiplet_several_configurations(structure_solver, nuclear_model):
    """Test that levels of several configurations are concatenated."""
    confs = [Configuration.from_string("2s 2p^6 3s^2"), Configuration.from_string("2s^2 2p^6 3s")]
    multiplet = structure_solver.compute_multiplet(confs, nuclear_model, RadialGrid(), {})

    assert multiplet.name == multiplet_key(confs)
    assert multiplet.energies.tolist() == [-100.0, -120.0]
    assert [lev.index for lev in multiplet.levels] == [1, 2]


def test_compute_multiplet_unknown_configuration(structure_solver, nuclear_model):
    """Test that a configuration without levels fails like a solver."""
    conf = Configuration.from_string("2s^2 2p^6 3p")
    with pytest.raises(ConvergenceError, match="3p"):
        structure_solver.compute_multiplet([conf], nuclear_model, RadialGrid(), {})


def test_configuration_keys_are_canonical(nuclear_model):
    """Test that configurations are matched independent of their spelling."""
    table = pd.DataFrame(
        [{"configuration": "2p^6 2s", "energy": -1.0, "J": 0.5, "parity": "even"}]
    )
    solver = TabulatedStructureSolver(table)
    conf = Configuration.from_string("2s 2p^6")
    assert len(solver.compute_multiplet([conf], nuclear_model, RadialGrid(), {})) == 1


def test_empty_shells_in_table_keys(nuclear_model):
    """Test that tables with and without empty shells serve the same configuration."""
    table = pd.DataFrame(
        [
            {"configuration": "2s^2 2p^6", "energy": -108.0, "J": 0.0, "parity": "+"},
            {"configuration": "2s^2 2p^5 3s^0", "energy": -107.0, "J": 1.5, "parity": "-"},
        ]
    )
    solver = TabulatedStructureSolver(table)

    closed = Configuration.from_string("2s^2 2p^6 3s^0")
    multiplet = solver.compute_multiplet([closed], nuclear_model, RadialGrid(), {})
    assert multiplet.name == "2s^2 2p^6"
    assert multiplet.energies.tolist() == [-108.0]

    open_shell = Configuration.from_string("2s^2 2p^5")
    assert len(solver.compute_multiplet([open_shell], nuclear_model, RadialGrid(), {})) == 1


def test_missing_columns():
    """Test that the table must contain all level columns."""
    with pytest.raises(ValueError, match="missing required columns"):
        TabulatedStructureSolver(pd.DataFrame([{"configuration": "1s", "energy": -0.5}]))


def test_from_config(cascade_config, nuclear_model):
    """Test creating the solver from a multiplets section."""
    solver = TabulatedStructureSolver.from_config(cascade_config)
    assert len(solver) == 6

    with pytest.raises(ValueError, match="multiplets"):
        TabulatedStructureSolver.from_config({})


def test_from_file_csv(level_table):
    """Test loading a level table from CSV."""
    table_fd, table_path = tempfile.mkstemp(suffix=".csv")
    os.close(table_fd)

    try:
        with open(table_path, "w") as f:
            f.write("# levels of the 2s-hole cascade\n")
            level_table.to_csv(f, index=False)

        solver = TabulatedStructureSolver.from_file(table_path)
        assert len(solver) == 6
    finally:
        Path(table_path).unlink()


def test_from_file_yaml(cascade_config):
    """Test loading a level table from YAML."""
    table_fd, table_path = tempfile.mkstemp(suffix=".yaml")
    os.close(table_fd)

    try:
        save_config({"multiplets": cascade_config["multiplets"]}, table_path)
        solver = TabulatedStructureSolver.from_file(table_path)
        assert len(solver) == 6
    finally:
        Path(table_path).unlink()


def test_from_file_not_found():
    """Test loading a missing level table."""
    with pytest.raises(FileNotFoundError):
        TabulatedStructureSolver.from_file("nonexistent.csv")
