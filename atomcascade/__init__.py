"""
AtomCascade: atomic decay cascades and dielectronic recombination

A Python library for setting up and simulating the decay cascades of inner-shell
excited atoms and for enumerating and evaluating dielectronic-recombination
pathways, on top of an external atomic-structure and amplitude code.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
