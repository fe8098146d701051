"""
Configuration management for AtomCascade.

Provides utilities for loading and validating YAML/JSON configuration files
for cascade computations, cascade simulations and dielectronic-recombination
pathway computations.
"""

import json
from pathlib import Path
from typing import Dict, Any, Union

import yaml

from atomcascade.core.logging_config import get_logger

logger = get_logger("core.config")

VALID_APPROACHES = ["averageSCA"]
VALID_PROCESSES = ["Radiative", "Auger"]
VALID_AUGER_OPERATORS = ["Coulomb", "Breit", "Coulomb+Breit"]
VALID_GAUGES = ["Coulomb", "Babushkin"]
VALID_BLOCK_LIMIT_POLICIES = ["raise", "truncate"]
VALID_STEP_ENERGY_GATES = ["minimum", "maximum"]


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters
    ----------
    config_path : str or Path
        Path to configuration file (.yaml, .yml, or .json)

    Returns
    -------
    dict
        Configuration dictionary

    Raises
    ------
    FileNotFoundError
        If config file does not exist
    ValueError
        If file format is not supported
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, "r") as f:
        if suffix in [".yaml", ".yml"]:
            config = yaml.safe_load(f)
        elif suffix == ".json":
            config = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. " "Use .yaml, .yml, or .json"
            )

    if config is None:
        config = {}

    logger.info(f"Loaded configuration from {config_path}")
    return config


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> Path:
    """
    Save configuration to YAML or JSON file.

    Parameters
    ----------
    config : dict
        Configuration dictionary
    config_path : str or Path
        Path to output file; unknown suffixes are replaced by '.yaml'

    Returns
    -------
    Path
        Path the configuration was written to
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()

    if suffix not in [".yaml", ".yml", ".json"]:
        config_path = config_path.with_suffix(".yaml")
        suffix = ".yaml"

    with open(config_path, "w") as f:
        if suffix == ".json":
            json.dump(config, f, indent=2)
        else:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")
    return config_path


def validate_cascade_config(config: Dict[str, Any]) -> bool:
    """
    Validate cascade configuration structure.

    Parameters
    ----------
    config : dict
        Configuration dictionary

    Returns
    -------
    bool
        True if valid

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    if "cascade" not in config:
        raise ValueError("Configuration must contain 'cascade' section")

    cascade = config["cascade"]

    required = ["initial_configurations", "max_electron_loss"]
    for field in required:
        if field not in cascade:
            raise ValueError(f"Cascade config missing required field: {field}")

    if not isinstance(cascade["initial_configurations"], list) or not cascade[
        "initial_configurations"
    ]:
        raise ValueError("'initial_configurations' must be a non-empty list")

    if int(cascade["max_electron_loss"]) < 0:
        raise ValueError("'max_electron_loss' must be non-negative")

    if int(cascade.get("shake_displacements", 0)) < 0:
        raise ValueError("'shake_displacements' must be non-negative")

    approach = cascade.get("approach", "averageSCA")
    if approach not in VALID_APPROACHES:
        raise ValueError(
            f"Invalid cascade approach: {approach}. Must be one of: {VALID_APPROACHES}"
        )

    for process in cascade.get("processes", ["Auger"]):
        if process not in VALID_PROCESSES:
            raise ValueError(f"Invalid process: {process}. Must be one of: {VALID_PROCESSES}")

    max_blocks = cascade.get("max_blocks")
    if max_blocks is not None and int(max_blocks) <= 0:
        raise ValueError("'max_blocks' must be positive")

    policy = cascade.get("block_limit_policy", "raise")
    if policy not in VALID_BLOCK_LIMIT_POLICIES:
        raise ValueError(f"Invalid block_limit_policy: {policy}. Must be 'raise' or 'truncate'")

    gate = cascade.get("step_energy_gate", "minimum")
    if gate not in VALID_STEP_ENERGY_GATES:
        raise ValueError(f"Invalid step_energy_gate: {gate}. Must be 'minimum' or 'maximum'")

    for entry in cascade.get("initial_levels", []):
        if len(entry) != 2:
            raise ValueError("'initial_levels' entries must be [level_index, occupation] pairs")
        if float(entry[1]) < 0:
            raise ValueError("Initial level occupations must be non-negative")

    return True


def validate_dielectronic_config(config: Dict[str, Any]) -> bool:
    """
    Validate dielectronic-recombination configuration structure.

    Parameters
    ----------
    config : dict
        Configuration dictionary

    Returns
    -------
    bool
        True if valid

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    if "dielectronic" not in config:
        raise ValueError("Configuration must contain 'dielectronic' section")

    dr = config["dielectronic"]

    for field in ["initial_multiplet", "intermediate_multiplet", "final_multiplet"]:
        if field not in dr:
            raise ValueError(f"Dielectronic config missing required field: {field}")

    for gauge in dr.get("gauges", VALID_GAUGES):
        if gauge not in VALID_GAUGES:
            raise ValueError(f"Invalid gauge: {gauge}. Must be one of: {VALID_GAUGES}")

    operator = dr.get("auger_operator", "Coulomb")
    if operator not in VALID_AUGER_OPERATORS:
        raise ValueError(
            f"Invalid Auger operator: {operator}. Must be one of: {VALID_AUGER_OPERATORS}"
        )

    for selected in dr.get("selected_pathways", []):
        if len(selected) != 3:
            raise ValueError("'selected_pathways' entries must be (initial, intermediate, final)")

    if float(dr.get("minimum_photon_energy", 0.0)) < 0:
        raise ValueError("'minimum_photon_energy' must be non-negative")

    return True
