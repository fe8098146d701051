"""
Structure solver backed by tabulated multiplets.

The table lists precomputed levels per configuration (for instance exported
from a separate atomic-structure run) so that cascades can be set up and
re-run without the structure code.
"""

from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import pandas as pd

from atomcascade.atomic.structures import (
    Configuration,
    Level,
    Multiplet,
    NuclearModel,
    Parity,
    RadialGrid,
)
from atomcascade.core.abc import StructureSolver
from atomcascade.core.config import load_config
from atomcascade.core.exceptions import ConvergenceError
from atomcascade.core.logging_config import get_logger

logger = get_logger("atomic.tabulated")

REQUIRED_COLUMNS = ["configuration", "energy", "J", "parity"]


def multiplet_key(configurations: Sequence[Configuration]) -> str:
    """Lookup key (and multiplet name) of a list of configurations."""
    return ", ".join(str(conf) for conf in configurations)


class TabulatedStructureSolver(StructureSolver):
    """
    Serves multiplets from a level table.

    The table has one row per level with the columns ``configuration``,
    ``energy`` (Hartree), ``J`` and ``parity``. Levels of a configuration
    keep the row order of the table.

    Parameters
    ----------
    table : pd.DataFrame
        Level table
    """

    def __init__(self, table: pd.DataFrame):
        missing = [col for col in REQUIRED_COLUMNS if col not in table.columns]
        if missing:
            raise ValueError(f"Level table missing required columns: {missing}")

        self._multiplets: Dict[str, List[Dict[str, Any]]] = {}
        for _, row in table.iterrows():
            conf = Configuration.from_string(str(row["configuration"]))
            self._multiplets.setdefault(str(conf), []).append(
                {
                    "energy": float(row["energy"]),
                    "J": float(row["J"]),
                    "parity": Parity.from_string(str(row["parity"])),
                    "n_electrons": conf.n_electrons,
                }
            )
        logger.info(f"Loaded level table with {len(table)} levels in {len(self)} configurations")

    def __len__(self) -> int:
        return len(self._multiplets)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TabulatedStructureSolver":
        """
        Load a level table from CSV, YAML or JSON.

        YAML/JSON files contain a ``multiplets`` section mapping each
        configuration string to a list of ``{energy, J, parity}`` entries.
        """
        path = Path(path)
        if path.suffix.lower() == ".csv":
            if not path.exists():
                raise FileNotFoundError(f"Level table not found: {path}")
            return cls(pd.read_csv(path, comment="#"))
        return cls.from_config(load_config(path))

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TabulatedStructureSolver":
        """Create the solver from the ``multiplets`` section of a configuration."""
        if "multiplets" not in config:
            raise ValueError("Configuration must contain 'multiplets' section")

        rows = []
        for conf, levels in config["multiplets"].items():
            for level in levels:
                rows.append(
                    {
                        "configuration": conf,
                        "energy": level["energy"],
                        "J": level["J"],
                        "parity": level["parity"],
                    }
                )
        return cls(pd.DataFrame(rows, columns=REQUIRED_COLUMNS))

    def compute_multiplet(
        self,
        configurations: Sequence[Configuration],
        nuclear_model: NuclearModel,
        grid: RadialGrid,
        settings: Dict[str, Any],
    ) -> Multiplet:
        """
        Multiplet of the given configurations.

        Levels of several configurations are concatenated in the given
        order.

        Raises
        ------
        ConvergenceError
            If a configuration is not part of the table
        """
        levels = []
        for conf in configurations:
            entries = self._multiplets.get(str(conf))
            if entries is None:
                raise ConvergenceError(f"No tabulated levels for configuration {conf}")
            levels.extend(Level(**entry) for entry in entries)

        levels = [
            Level(lev.energy, lev.J, lev.parity, lev.n_electrons, index=k)
            for k, lev in enumerate(levels, start=1)
        ]
        key = multiplet_key(configurations)
        logger.debug(f"Tabulated multiplet for {key}: {len(levels)} levels")
        return Multiplet(key, tuple(levels))
