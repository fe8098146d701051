"""
Command-line interface for AtomCascade.

This module provides CLI tools for:
- Generating cascade configurations
- Determining blocks and steps from tabulated multiplets
- Simulating saved cascade data
- Listing dielectronic pathways
"""

__all__ = []
