"""
Driver for dielectronic-recombination computations.
"""

from dataclasses import dataclass, field
from typing import List

from atomcascade.atomic.structures import Multiplet, RadialGrid
from atomcascade.core.abc import AmplitudeEvaluator
from atomcascade.core.exceptions import AmplitudeError
from atomcascade.core.logging_config import get_logger
from atomcascade.dielectronic.pathways import (
    EvaluatedPathway,
    PathwaySkeleton,
    determine_pathways,
    evaluate_pathway,
)
from atomcascade.dielectronic.resonances import Resonance, determine_resonances
from atomcascade.dielectronic.settings import Settings

logger = get_logger("dielectronic.computation")


@dataclass
class DielectronicResult:
    """
    Result of a dielectronic-recombination computation.

    Attributes
    ----------
    pathways : List[EvaluatedPathway]
        Successfully evaluated pathways, in enumeration order
    resonances : List[Resonance]
        Pathways summed over final levels
    failed : List[PathwaySkeleton]
        Pathways whose amplitudes could not be evaluated; they do not
        contribute to the resonances
    """

    pathways: List[EvaluatedPathway] = field(default_factory=list)
    resonances: List[Resonance] = field(default_factory=list)
    failed: List[PathwaySkeleton] = field(default_factory=list)


def compute_pathways(
    final_multiplet: Multiplet,
    intermediate_multiplet: Multiplet,
    initial_multiplet: Multiplet,
    evaluator: AmplitudeEvaluator,
    grid: RadialGrid,
    settings: Settings,
) -> DielectronicResult:
    """
    Enumerate and evaluate all dielectronic pathways between three multiplets.

    A pathway whose amplitudes fail is logged, recorded in
    ``DielectronicResult.failed`` and skipped.

    Parameters
    ----------
    final_multiplet, intermediate_multiplet, initial_multiplet : Multiplet
        Multiplets of the final, resonance and initial levels
    evaluator : AmplitudeEvaluator
        External amplitude service
    grid : RadialGrid
        Radial grid handed to the evaluator
    settings : Settings
        Computation settings

    Returns
    -------
    DielectronicResult
    """
    logger.info("Computation of dielectronic resonance strengths starts")
    skeletons = determine_pathways(
        final_multiplet, intermediate_multiplet, initial_multiplet, settings
    )

    if settings.list_before_computation:
        from atomcascade.io.reports import pathways_to_dataframe

        listing = pathways_to_dataframe(skeletons).to_string()
        logger.info(f"Selected dielectronic pathways:\n{listing}")

    result = DielectronicResult()
    for skeleton in skeletons:
        try:
            result.pathways.append(evaluate_pathway(skeleton, evaluator, grid, settings))
        except AmplitudeError as e:
            logger.error(f"Pathway {skeleton.level_indices} skipped: {e}")
            result.failed.append(skeleton)

    result.resonances = determine_resonances(result.pathways)
    logger.info(
        f"Evaluated {len(result.pathways)} pathways "
        f"({len(result.failed)} failed), {len(result.resonances)} resonances"
    )
    return result
