"""
Input/output utilities.

This module provides:
- JSON persistence of cascade data and multiplets
- Tabular listings and CSV export
"""

from atomcascade.io.cascade_data import (
    load_cascade_data,
    load_multiplet,
    multiplet_to_dict,
    save_cascade_data,
)
from atomcascade.io.reports import export_csv

__all__ = [
    "load_cascade_data",
    "save_cascade_data",
    "load_multiplet",
    "multiplet_to_dict",
    "export_csv",
]
