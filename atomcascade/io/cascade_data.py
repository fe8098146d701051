"""
JSON persistence of cascade data and multiplets.

Cascade data are stored with all level handles, so that a saved cascade can
be simulated again without recomputing any line.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from atomcascade.atomic.structures import EmProperty, Level, Multiplet, Parity
from atomcascade.cascade.lines import (
    AugerLine,
    CascadeData,
    PhotoIonizationLine,
    RadiativeLine,
)
from atomcascade.core.logging_config import get_logger

logger = get_logger("io.cascade_data")

PathLike = Union[str, Path]

FORMAT_VERSION = 1


def level_to_dict(level: Level) -> Dict[str, Any]:
    """Convert a level to a JSON-compatible dictionary."""
    return {
        "energy": level.energy,
        "J": level.J,
        "parity": level.parity.value,
        "n_electrons": level.n_electrons,
        "index": level.index,
        "handle": level.handle,
    }


def level_from_dict(entry: Dict[str, Any]) -> Level:
    """Create a level from a dictionary written by :func:`level_to_dict`."""
    handle = entry.get("handle")
    return Level(
        energy=float(entry["energy"]),
        J=float(entry["J"]),
        parity=Parity.from_string(str(entry["parity"])),
        n_electrons=int(entry["n_electrons"]),
        index=int(entry.get("index", 0)),
        handle=int(handle) if handle is not None else None,
    )


def _em_to_dict(value: EmProperty) -> Dict[str, float]:
    return {"coulomb": value.coulomb, "babushkin": value.babushkin}


def _em_from_dict(entry: Dict[str, float]) -> EmProperty:
    return EmProperty(float(entry["coulomb"]), float(entry["babushkin"]))


def multiplet_to_dict(multiplet: Multiplet) -> Dict[str, Any]:
    """Convert a multiplet to a JSON-compatible dictionary."""
    return {"name": multiplet.name, "levels": [level_to_dict(lev) for lev in multiplet.levels]}


def load_multiplet(entry: Dict[str, Any]) -> Multiplet:
    """
    Create a multiplet from a dictionary.

    Parameters
    ----------
    entry : dict
        ``name`` and a list of ``levels`` with energy, J, parity and
        n_electrons. Levels without an explicit index are numbered in list
        order, starting at 1.

    Returns
    -------
    Multiplet

    Raises
    ------
    ValueError
        If the multiplet has no levels
    """
    if not entry.get("levels"):
        raise ValueError(f"Multiplet '{entry.get('name', '')}' has no levels")

    levels = []
    for k, level_entry in enumerate(entry["levels"], start=1):
        level_entry = dict(level_entry)
        level_entry.setdefault("index", k)
        levels.append(level_from_dict(level_entry))
    return Multiplet(str(entry.get("name", "")), tuple(levels))


def cascade_data_to_dict(data: CascadeData) -> Dict[str, Any]:
    """Convert cascade data to a JSON-compatible dictionary."""
    return {
        "format_version": FORMAT_VERSION,
        "name": data.name,
        "lines_r": [
            {
                "initial_level": level_to_dict(line.initial_level),
                "final_level": level_to_dict(line.final_level),
                "photon_energy": line.photon_energy,
                "photon_rate": _em_to_dict(line.photon_rate),
            }
            for line in data.lines_r
        ],
        "lines_a": [
            {
                "initial_level": level_to_dict(line.initial_level),
                "final_level": level_to_dict(line.final_level),
                "electron_energy": line.electron_energy,
                "total_rate": line.total_rate,
            }
            for line in data.lines_a
        ],
        "lines_p": [
            {
                "initial_level": level_to_dict(line.initial_level),
                "final_level": level_to_dict(line.final_level),
                "photon_energy": line.photon_energy,
                "cross_section": _em_to_dict(line.cross_section),
            }
            for line in data.lines_p
        ],
        "initial_occupations": {
            str(handle): occ for handle, occ in data.initial_occupations.items()
        },
    }


def cascade_data_from_dict(entry: Dict[str, Any]) -> CascadeData:
    """Create cascade data from a dictionary written by :func:`cascade_data_to_dict`."""
    version = entry.get("format_version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported cascade data format version: {version}")

    lines_r = [
        RadiativeLine(
            level_from_dict(line["initial_level"]),
            level_from_dict(line["final_level"]),
            float(line["photon_energy"]),
            _em_from_dict(line["photon_rate"]),
        )
        for line in entry.get("lines_r", [])
    ]
    lines_a = [
        AugerLine(
            level_from_dict(line["initial_level"]),
            level_from_dict(line["final_level"]),
            float(line["electron_energy"]),
            float(line["total_rate"]),
        )
        for line in entry.get("lines_a", [])
    ]
    lines_p = [
        PhotoIonizationLine(
            level_from_dict(line["initial_level"]),
            level_from_dict(line["final_level"]),
            float(line["photon_energy"]),
            _em_from_dict(line["cross_section"]),
        )
        for line in entry.get("lines_p", [])
    ]
    occupations = {
        int(handle): float(occ) for handle, occ in entry.get("initial_occupations", {}).items()
    }
    return CascadeData(entry.get("name", ""), lines_r, lines_a, lines_p, occupations)


def save_cascade_data(data: CascadeData, path: PathLike) -> Path:
    """
    Save cascade data to a JSON file.

    Parameters
    ----------
    data : CascadeData
        Cascade data
    path : str or Path
        Output file path

    Returns
    -------
    Path
        Path the data were written to
    """
    path = Path(path)
    with open(path, "w") as f:
        json.dump(cascade_data_to_dict(data), f, indent=2)
    logger.info(f"Saved cascade data '{data.name}' with {len(data)} lines to {path}")
    return path


def load_cascade_data(path: PathLike) -> CascadeData:
    """
    Load cascade data from a JSON file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Cascade data file not found: {path}")
    with open(path, "r") as f:
        data = cascade_data_from_dict(json.load(f))
    logger.info(f"Loaded cascade data '{data.name}' with {len(data)} lines from {path}")
    return data
