"""
Tests for dielectronic resonances and the dielectronic computation driver.
"""

import logging

import pytest

from atomcascade.atomic.structures import EmMultipole, RadialGrid
from atomcascade.dielectronic.computation import compute_pathways
from atomcascade.dielectronic.pathways import determine_pathways, evaluate_pathway
from atomcascade.dielectronic.resonances import determine_resonances
from atomcascade.dielectronic.settings import Settings

from conftest import FakeAmplitudeEvaluator


@pytest.fixture
def e1_m1_settings():
    """Settings with electric and magnetic dipole stabilization."""
    return Settings(multipoles=[EmMultipole.E1, EmMultipole.M1])


def _evaluated(dr_multiplets, settings):
    initial, intermediate, final = dr_multiplets
    evaluator = FakeAmplitudeEvaluator()
    return [
        evaluate_pathway(skeleton, evaluator, RadialGrid(), settings)
        for skeleton in determine_pathways(final, intermediate, initial, settings)
    ]


def test_resonances_grouped_by_initial_and_intermediate(dr_multiplets, e1_m1_settings):
    """Test that pathways are summed over their final levels."""
    pathways = _evaluated(dr_multiplets, e1_m1_settings)
    resonances = determine_resonances(pathways)

    assert len(pathways) == 3
    assert len(resonances) == 2
    assert [res.intermediate_level.index for res in resonances] == [1, 2]
    assert resonances[1].resonance_energy == pytest.approx(12.0)


def test_resonance_photon_rate_is_sum(dr_multiplets, e1_m1_settings):
    """Test that the photon rate of a resonance sums all its final levels."""
    pathways = _evaluated(dr_multiplets, e1_m1_settings)
    resonances = determine_resonances(pathways)

    members = [p for p in pathways if p.intermediate_level.index == 2]
    assert len(members) == 2
    expected = members[0].photon_rate + members[1].photon_rate
    assert resonances[1].photon_rate.coulomb == pytest.approx(expected.coulomb)
    assert resonances[1].photon_rate.babushkin == pytest.approx(expected.babushkin)


def test_resonance_strength_positive(dr_multiplets, e1_m1_settings):
    """Test capture, Auger rates and strength of a resonance with one initial level."""
    pathways = _evaluated(dr_multiplets, e1_m1_settings)
    resonance = determine_resonances(pathways)[1]

    assert resonance.capture_rate == pytest.approx(pathways[1].capture_rate)
    assert resonance.auger_rate == pytest.approx(resonance.capture_rate)
    assert resonance.resonance_strength.coulomb > 0.0
    assert resonance.resonance_strength.babushkin > 0.0


def test_determine_resonances_empty():
    """Test that no pathways give no resonances."""
    assert determine_resonances([]) == []


def test_compute_pathways(dr_multiplets, amplitude_evaluator, e1_m1_settings):
    """Test the full dielectronic computation."""
    initial, intermediate, final = dr_multiplets
    result = compute_pathways(
        final, intermediate, initial, amplitude_evaluator, RadialGrid(), e1_m1_settings
    )

    assert len(result.pathways) == 3
    assert len(result.resonances) == 2
    assert result.failed == []


def test_compute_pathways_skips_failed(dr_multiplets, e1_m1_settings, caplog):
    """Test that pathways with failing amplitudes are recorded and skipped."""
    initial, intermediate, final = dr_multiplets
    evaluator = FakeAmplitudeEvaluator(fail_for={2})

    with caplog.at_level(logging.ERROR, logger="atomcascade.dielectronic.computation"):
        result = compute_pathways(
            final, intermediate, initial, evaluator, RadialGrid(), e1_m1_settings
        )

    assert [p.level_indices for p in result.failed] == [(1, 2, 1), (1, 2, 2)]
    assert [p.level_indices for p in result.pathways] == [(1, 1, 1)]
    assert len(result.resonances) == 1
    assert "skipped" in caplog.text


def test_compute_pathways_lists_before_computation(dr_multiplets, amplitude_evaluator, caplog):
    """Test the pathway listing logged before the amplitudes are evaluated."""
    initial, intermediate, final = dr_multiplets
    settings = Settings(list_before_computation=True)

    with caplog.at_level(logging.INFO, logger="atomcascade.dielectronic.computation"):
        compute_pathways(final, intermediate, initial, amplitude_evaluator, RadialGrid(), settings)

    assert "Selected dielectronic pathways" in caplog.text
    assert "electron_energy_eV" in caplog.text
