"""
Tabular listings of pathways, resonances, blocks, steps and simulation
results.

Listings are pandas DataFrames with one row per record, in the order of the
records; energies are converted to eV. :func:`export_csv` writes a
listing with a commented metadata header.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from atomcascade import __version__
from atomcascade.atomic.structures import EmProperty
from atomcascade.cascade.blocks import Block, Step
from atomcascade.cascade.levels import CascadeLevel
from atomcascade.core.constants import HARTREE_TO_EV
from atomcascade.core.logging_config import get_logger
from atomcascade.dielectronic.pathways import EvaluatedPathway, PathwaySkeleton
from atomcascade.dielectronic.resonances import Resonance

logger = get_logger("io.reports")

PathLike = Union[str, Path]

LEVEL_COLUMNS = ["n_electrons", "symmetry", "energy_eV", "relative_occupation"]


def _energy_range(energies) -> str:
    if len(energies) == 0:
        return ""
    return f"{min(energies) * HARTREE_TO_EV:.4f} ... {max(energies) * HARTREE_TO_EV:.4f}"


def pathways_to_dataframe(
    pathways: Sequence[Union[PathwaySkeleton, EvaluatedPathway]]
) -> pd.DataFrame:
    """
    Listing of dielectronic pathways.

    Skeletons without channels are listed as well. Rates and cross sections
    are only filled for evaluated pathways.
    """
    rows = []
    for pathway in pathways:
        i, n, f = pathway.level_indices
        row = {
            "initial": i,
            "intermediate": n,
            "final": f,
            "symmetries": (
                f"{pathway.initial_level.symmetry} -> {pathway.intermediate_level.symmetry}"
                f" -> {pathway.final_level.symmetry}"
            ),
            "electron_energy_eV": pathway.electron_energy * HARTREE_TO_EV,
            "photon_energy_eV": pathway.photon_energy * HARTREE_TO_EV,
            "multipoles": " ".join(mp.value for mp in pathway.multipoles),
            "n_channels": len(pathway.channels),
        }
        if isinstance(pathway, EvaluatedPathway):
            row.update(
                {
                    "capture_rate": pathway.capture_rate,
                    "photon_rate_coulomb": pathway.photon_rate.coulomb,
                    "photon_rate_babushkin": pathway.photon_rate.babushkin,
                    "cross_section_coulomb": pathway.cross_section.coulomb,
                    "cross_section_babushkin": pathway.cross_section.babushkin,
                }
            )
        rows.append(row)
    return pd.DataFrame(rows)


def resonances_to_dataframe(resonances: Sequence[Resonance]) -> pd.DataFrame:
    """Listing of dielectronic resonances with their strengths and widths."""
    rows = []
    for res in resonances:
        strength: EmProperty = res.resonance_strength
        rows.append(
            {
                "initial": res.initial_level.index,
                "intermediate": res.intermediate_level.index,
                "symmetries": f"{res.initial_level.symmetry} -> {res.intermediate_level.symmetry}",
                "resonance_energy_eV": res.resonance_energy * HARTREE_TO_EV,
                "strength_coulomb": strength.coulomb,
                "strength_babushkin": strength.babushkin,
                "capture_rate": res.capture_rate,
                "auger_rate": res.auger_rate,
                "photon_rate_coulomb": res.photon_rate.coulomb,
                "photon_rate_babushkin": res.photon_rate.babushkin,
            }
        )
    return pd.DataFrame(rows)


def blocks_to_dataframe(blocks: Sequence[Block]) -> pd.DataFrame:
    """Listing of cascade blocks with their status and energy range in eV."""
    rows = []
    for k, block in enumerate(blocks, start=1):
        energies = list(block.multiplet.energies) if block.has_multiplet else []
        rows.append(
            {
                "block": k,
                "configurations": ", ".join(str(conf) for conf in block.confs),
                "n_electrons": block.n_electrons,
                "status": block.status.value,
                "n_levels": len(energies),
                "energy_range_eV": _energy_range(energies),
            }
        )
    return pd.DataFrame(rows)


def steps_to_dataframe(steps: Sequence[Step]) -> pd.DataFrame:
    """Listing of cascade steps with the range of transition energies in eV."""
    rows = []
    for k, step in enumerate(steps, start=1):
        diffs = [
            a - b for a in step.initial_multiplet.energies for b in step.final_multiplet.energies
        ]
        rows.append(
            {
                "step": k,
                "process": step.process.value,
                "initial_configurations": ", ".join(str(c) for c in step.initial_confs),
                "final_configurations": ", ".join(str(c) for c in step.final_confs),
                "n_lines": len(step.initial_multiplet) * len(step.final_multiplet),
                "energy_range_eV": _energy_range(diffs),
            }
        )
    return pd.DataFrame(rows)


def ion_distribution_to_dataframe(distribution: Dict[int, float]) -> pd.DataFrame:
    """Listing of the ion distribution, most electrons first."""
    return pd.DataFrame(
        {
            "n_electrons": list(distribution.keys()),
            "relative_occupation": list(distribution.values()),
        }
    )


def level_distribution_to_dataframe(levels: Sequence[CascadeLevel]) -> pd.DataFrame:
    """Listing of levels with their relative occupation."""
    rows = [
        {
            "n_electrons": level.n_electrons,
            "symmetry": str(level.symmetry),
            "energy_eV": level.energy * HARTREE_TO_EV,
            "relative_occupation": level.relative_occ,
        }
        for level in levels
    ]
    return pd.DataFrame(rows, columns=LEVEL_COLUMNS)


def export_csv(
    df: pd.DataFrame,
    path: PathLike,
    metadata: Optional[Dict[str, Any]] = None,
    float_format: str = "%.6g",
) -> Path:
    """
    Write a listing to CSV with a commented metadata header.

    Parameters
    ----------
    df : pd.DataFrame
        Listing
    path : str or Path
        Output file path
    metadata : dict, optional
        Additional entries written as ``# key: value`` lines
    float_format : str
        Format string for floating point numbers

    Returns
    -------
    Path
        Path the listing was written to
    """
    path = Path(path)
    timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    lines: List[str] = [
        "# AtomCascade Export",
        f"# Timestamp: {timestamp}",
        f"# Version: {__version__}",
    ]
    if metadata:
        for key, value in metadata.items():
            lines.append(f"# {key}: {value}")
    lines.append("#")

    with open(path, "w") as f:
        f.write("\n".join(lines))
        f.write("\n")
        df.to_csv(f, index=False, float_format=float_format)

    logger.info(f"Exported {len(df)} rows to CSV: {path}")
    return path
