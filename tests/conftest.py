"""
Pytest configuration and shared fixtures for AtomCascade tests.

This module provides:
- Fake external services (structure solver, amplitude and line evaluators)
- Small hand-built multiplets and cascade data
- Temporary configuration files
"""

import os
import tempfile
from pathlib import Path

import pandas as pd
import pytest
import yaml

from atomcascade.atomic.structures import (
    EmProperty,
    Level,
    LevelArena,
    Multiplet,
    NuclearModel,
    Parity,
)
from atomcascade.atomic.tabulated import TabulatedStructureSolver
from atomcascade.cascade.lines import AugerLine, CascadeData, RadiativeLine
from atomcascade.core.abc import AmplitudeEvaluator, TransitionLineEvaluator
from atomcascade.core.exceptions import AmplitudeError

# Levels of the Ne-like 2s-hole cascade used throughout the tests, in Hartree.
# The 2s-hole seed lies above all 8-electron levels, so it can Auger decay.
CASCADE_LEVELS = {
    "2s 2p^6 3s^2": [(-100.0, 0.5, "+")],
    "2s^2 2p^5 3s^2": [(-110.0, 1.5, "-"), (-109.5, 0.5, "-")],
    "2s^2 2p^6 3s": [(-120.0, 0.5, "+")],
    "2s^2 2p^4 3s^2": [(-104.0, 2.0, "+")],
    "2s^2 2p^5 3s": [(-106.0, 1.0, "-")],
    "2s^2 2p^6": [(-108.0, 0.0, "+")],
}


class FakeAmplitudeEvaluator(AmplitudeEvaluator):
    """Returns fixed amplitudes and records every request."""

    def __init__(self, capture=0.1 + 0.0j, emission=0.2 + 0.0j, fail_for=None):
        self.capture = capture
        self.emission = emission
        self.fail_for = fail_for or set()
        self.auger_calls = []
        self.continuum_options = []
        self.radiative_calls = []

    def auger_amplitude(
        self, operator, channel, electron_energy, intermediate_level, initial_level, grid, continuum
    ):
        self.auger_calls.append((operator, channel.kappa, intermediate_level.index))
        self.continuum_options.append(continuum)
        if intermediate_level.index in self.fail_for:
            raise AmplitudeError(f"No continuum orbital for level {intermediate_level.index}")
        return self.capture

    def radiative_amplitude(
        self, mode, multipole, gauge, photon_energy, final_level, intermediate_level, grid
    ):
        self.radiative_calls.append((mode, multipole, gauge))
        return self.emission


class FakeLineEvaluator(TransitionLineEvaluator):
    """Creates one line per energetically open level pair with fixed rates."""

    def __init__(self, photon_rate=1.0e-3, auger_rate=3.0e-3, fail_auger=False):
        self.photon_rate = photon_rate
        self.auger_rate = auger_rate
        self.fail_auger = fail_auger

    def compute_radiative_lines(self, initial_multiplet, final_multiplet, grid):
        return [
            RadiativeLine(
                i_level,
                f_level,
                i_level.energy - f_level.energy,
                EmProperty(self.photon_rate, self.photon_rate),
            )
            for i_level in initial_multiplet
            for f_level in final_multiplet
            if i_level.energy > f_level.energy
        ]

    def compute_auger_lines(self, initial_multiplet, final_multiplet, grid):
        if self.fail_auger:
            raise AmplitudeError("Auger amplitudes not available")
        return [
            AugerLine(i_level, f_level, i_level.energy - f_level.energy, self.auger_rate)
            for i_level in initial_multiplet
            for f_level in final_multiplet
            if i_level.energy > f_level.energy
        ]


def make_level(energy, J, parity="+", n_electrons=2, index=0, handle=None):
    """Create a level with a parity given as string."""
    return Level(energy, J, Parity.from_string(parity), n_electrons, index, handle)


@pytest.fixture
def level_table():
    """Level table of the 2s-hole cascade."""
    rows = []
    for conf, levels in CASCADE_LEVELS.items():
        for energy, J, parity in levels:
            rows.append({"configuration": conf, "energy": energy, "J": J, "parity": parity})
    return pd.DataFrame(rows)


@pytest.fixture
def structure_solver(level_table):
    """Tabulated structure solver for the 2s-hole cascade."""
    return TabulatedStructureSolver(level_table)


@pytest.fixture
def nuclear_model():
    """Neon nucleus."""
    return NuclearModel(charge=10.0)


@pytest.fixture
def amplitude_evaluator():
    """Amplitude evaluator with fixed amplitudes."""
    return FakeAmplitudeEvaluator()


@pytest.fixture
def line_evaluator():
    """Line evaluator with fixed rates."""
    return FakeLineEvaluator()


@pytest.fixture
def dr_multiplets():
    """
    Initial, intermediate and final multiplets of a dielectronic
    recombination of a He-like ion.

    The third resonance lies below the initial level and the second final
    level lies above the first resonance.
    """
    initial = Multiplet("1s^2", (make_level(0.0, 0.0, "+", 2, 1),))
    intermediate = Multiplet(
        "1s 2s^2, 1s 2s 2p",
        (
            make_level(10.0, 0.5, "+", 3, 1),
            make_level(12.0, 0.5, "-", 3, 2),
            make_level(-1.0, 0.5, "+", 3, 3),
        ),
    )
    final = Multiplet(
        "1s^2 2s, 1s^2 2p",
        (
            make_level(2.0, 0.5, "+", 3, 1),
            make_level(11.0, 1.5, "-", 3, 2),
        ),
    )
    return initial, intermediate, final


@pytest.fixture
def chain_data():
    """
    Cascade data of a small decay chain with level handles.

    A (9 electrons) decays radiatively into B and by Auger decay into C;
    B decays by Auger decay into D. With Babushkin rates the branching of A
    is 1/4 into B and 3/4 into C.
    """
    arena = LevelArena()
    upper = arena.register(
        Multiplet(
            "9 electrons",
            (make_level(0.0, 0.5, "+", 9), make_level(-1.0, 1.5, "-", 9)),
        )
    )
    lower = arena.register(
        Multiplet(
            "8 electrons",
            (make_level(-2.0, 0.0, "+", 8), make_level(-3.0, 1.0, "-", 8)),
        )
    )
    a, b = upper.levels
    c, d = lower.levels

    return CascadeData(
        name="chain",
        lines_r=[RadiativeLine(a, b, 1.0, EmProperty(3.0, 1.0))],
        lines_a=[AugerLine(a, c, 2.0, 3.0), AugerLine(b, d, 2.0, 1.0)],
        initial_occupations={a.handle: 1.0},
    )


@pytest.fixture
def cascade_config():
    """Configuration dictionary of the 2s-hole cascade."""
    return {
        "cascade": {
            "name": "Ne 2s hole",
            "nuclear_model": {"charge": 10.0, "model": "Fermi", "mass_number": 20.0},
            "approach": "averageSCA",
            "processes": ["Radiative", "Auger"],
            "initial_configurations": ["2s 2p^6 3s^2"],
            "initial_levels": [[1, 1.0]],
            "max_electron_loss": 1,
        },
        "multiplets": {
            conf: [{"energy": e, "J": J, "parity": p} for e, J, p in levels]
            for conf, levels in CASCADE_LEVELS.items()
        },
    }


@pytest.fixture
def dielectronic_config():
    """Configuration dictionary of a dielectronic computation."""
    return {
        "dielectronic": {
            "multipoles": ["E1", "M1"],
            "gauges": ["Coulomb", "Babushkin"],
            "initial_multiplet": {
                "name": "1s^2",
                "levels": [{"energy": 0.0, "J": 0.0, "parity": "+", "n_electrons": 2}],
            },
            "intermediate_multiplet": {
                "name": "1s 2s 2p",
                "levels": [
                    {"energy": 10.0, "J": 0.5, "parity": "+", "n_electrons": 3},
                    {"energy": 12.0, "J": 0.5, "parity": "-", "n_electrons": 3},
                ],
            },
            "final_multiplet": {
                "name": "1s^2 2s, 1s^2 2p",
                "levels": [
                    {"energy": 2.0, "J": 0.5, "parity": "+", "n_electrons": 3},
                    {"energy": 3.0, "J": 0.5, "parity": "-", "n_electrons": 3},
                ],
            },
        }
    }


@pytest.fixture
def temp_config_file(cascade_config):
    """Temporary YAML file with the cascade configuration."""
    config_fd, config_path = tempfile.mkstemp(suffix=".yaml")
    os.close(config_fd)
    with open(config_path, "w") as f:
        yaml.dump(cascade_config, f)

    yield config_path

    Path(config_path).unlink(missing_ok=True)
