"""
Physical constants for AtomCascade calculations.

All quantities inside the library are in Hartree atomic units
(hbar = m_e = e = 1). The conversion factors below are used when
results are reported in laboratory units.
"""

import numpy as np

# ============================================================================
# Fundamental Constants
# ============================================================================

# Fine structure constant
ALPHA_FS = 7.2973525693e-3

# Speed of light in atomic units (1 / alpha)
C_LIGHT_AU = 1.0 / ALPHA_FS

# Bohr radius
A_BOHR = 5.29177210903e-11  # m

# ============================================================================
# Conversion Factors
# ============================================================================

# Energy conversions
HARTREE_TO_EV = 27.211386245988  # eV per Hartree
EV_TO_HARTREE = 1.0 / HARTREE_TO_EV
HARTREE_TO_KAYSER = 219474.6313632  # cm^-1 per Hartree

# Rate conversion: 1 / (atomic unit of time)
AU_RATE_TO_PER_SECOND = 4.134137333518e16  # s^-1

# Area conversions
BOHR2_TO_CM2 = (A_BOHR * 1e2) ** 2  # cm^2
BOHR2_TO_BARN = BOHR2_TO_CM2 * 1e24  # b

# Combined conversion for resonance strengths (area x energy)
STRENGTH_AU_TO_CM2_EV = BOHR2_TO_CM2 * HARTREE_TO_EV  # cm^2 eV

# ============================================================================
# Numerical Constants
# ============================================================================

# Small number for numerical stability
EPSILON = np.finfo(np.float64).eps

# Tolerance for comparing propagated probability sums
PROBABILITY_TOLERANCE = 1e-12
