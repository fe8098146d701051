"""
Tests for cascade simulations.
"""

import pytest

from atomcascade.atomic.structures import AtomicProcess, UseGauge
from atomcascade.cascade.levels import extract_levels
from atomcascade.cascade.propagation import ProbabilityPropagator
from atomcascade.cascade.simulation import (
    Simulation,
    SimulationMethod,
    SimulationProperty,
    SimulationSettings,
    ion_distribution,
    level_distribution,
    level_tree,
    simulate_level_distribution,
)
from atomcascade.core.factory import SimulationMethodFactory


def test_simulation_defaults():
    """Test default simulation setup."""
    simulation = Simulation()
    assert simulation.properties == [SimulationProperty.ION_DIST]
    assert simulation.method is SimulationMethod.PROB_PROPAGATION
    assert simulation.gauge is UseGauge.BABUSHKIN


def test_simulation_settings_validation():
    """Test energy windows of the simulated spectra."""
    with pytest.raises(ValueError, match="electron"):
        SimulationSettings(min_electron_energy=2.0, max_electron_energy=1.0)
    with pytest.raises(ValueError, match="photon"):
        SimulationSettings(min_photon_energy=2.0, max_photon_energy=1.0)


def test_ion_distribution(chain_data):
    """Test the final ion distribution of a decay chain."""
    result = simulate_level_distribution(Simulation(), chain_data)

    assert result.name == "chain"
    assert list(result.ion_distribution.keys()) == [9, 8]
    assert result.ion_distribution[9] == pytest.approx(0.0)
    assert result.ion_distribution[8] == pytest.approx(1.0)
    assert result.level_distribution == []


def test_final_level_distribution(chain_data):
    """Test the final level distribution ordering."""
    simulation = Simulation(properties=[SimulationProperty.FINAL_DIST])
    result = simulate_level_distribution(simulation, chain_data)

    levels = result.level_distribution
    assert [level.handle for level in levels] == [1, 2, 3, 4]
    assert levels[2].relative_occ == pytest.approx(0.75)
    assert result.ion_distribution == {}


def test_line_intensities(chain_data):
    """Test electron and photon line intensities."""
    simulation = Simulation(
        properties=[SimulationProperty.ELECTRON_INTENSITY, SimulationProperty.PHOTON_INTENSITY]
    )
    result = simulate_level_distribution(simulation, chain_data)

    assert result.photon_intensities == [(1.0, pytest.approx(0.25))]
    energies = [energy for energy, _ in result.electron_intensities]
    assert energies == [2.0, 2.0]
    assert sum(i for _, i in result.electron_intensities) == pytest.approx(1.0)


def test_line_intensities_window(chain_data):
    """Test that lines outside the energy window are left out."""
    simulation = Simulation(
        properties=[SimulationProperty.PHOTON_INTENSITY],
        settings=SimulationSettings(min_photon_energy=1.5),
    )
    result = simulate_level_distribution(simulation, chain_data)
    assert result.photon_intensities == []


def test_unsupported_methods(chain_data):
    """Test that only probability propagation is available."""
    for method in (SimulationMethod.MONTE_CARLO, SimulationMethod.RATE_EQUATIONS):
        with pytest.raises(NotImplementedError):
            simulate_level_distribution(Simulation(method=method), chain_data)


def test_simulation_round_limit(chain_data):
    """Test that the round limit is passed to the propagator."""
    from atomcascade.core.exceptions import PropagationError

    with pytest.raises(PropagationError):
        simulate_level_distribution(Simulation(max_rounds=1), chain_data)


def test_level_tree(chain_data):
    """Test parents and daughters of each level."""
    registry = extract_levels(chain_data)
    tree = level_tree(registry, chain_data)

    assert [entry.level.handle for entry in tree] == [1, 2, 3, 4]
    top = tree[0]
    assert top.parents == ()
    assert [d[0] for d in top.daughters] == [AtomicProcess.RADIATIVE, AtomicProcess.AUGER]
    assert top.daughters[1][1] == 8
    assert tree[3].parents[0][0] is AtomicProcess.AUGER
    assert tree[3].parents[0][3] == -1.0


def test_helpers_on_registry(chain_data):
    """Test distribution helpers on a propagated registry."""
    registry = extract_levels(chain_data)
    ProbabilityPropagator().propagate(registry, chain_data)

    assert sum(ion_distribution(registry).values()) == pytest.approx(1.0)
    assert level_distribution(registry)[0].energy == 0.0


def test_factory_default_method():
    """Test the registered simulation methods."""
    assert "ProbPropagation" in SimulationMethodFactory.list_methods()
    method = SimulationMethodFactory.create("ProbPropagation", gauge=UseGauge.COULOMB)
    assert isinstance(method, ProbabilityPropagator)
    assert method.gauge is UseGauge.COULOMB


def test_factory_unknown_method():
    """Test creating an unknown method."""
    with pytest.raises(ValueError, match="Unknown simulation method"):
        SimulationMethodFactory.create("MonteCarlo")


def test_factory_register():
    """Test registering a new method."""

    class CustomPropagator(ProbabilityPropagator):
        pass

    SimulationMethodFactory.register("Custom", CustomPropagator)
    try:
        assert isinstance(SimulationMethodFactory.create("Custom"), CustomPropagator)
    finally:
        SimulationMethodFactory._methods.pop("Custom")
