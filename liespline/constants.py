"""Numerical constants shared across liespline."""

import numpy as np

# Cutoff on squared tangent norms below which closed-form expressions switch to
# their small-angle series.
FLOAT32_EPSILON = 1e-5
FLOAT64_EPSILON = 1e-10

# Central-difference step for `liespline.diff.dr`: cube root of float64 machine
# epsilon.
DEFAULT_DIFF_STEP = float(np.cbrt(np.finfo(np.float64).eps))

# Squared-norm deviation from 1 above which `normalize()` logs a warning.
NORMALIZATION_WARNING_TOL = 1e-3

# Squared-angle cutoff for Jacobian coefficients whose closed forms divide by
# the fourth or fifth power of the angle (SE(3) coupling block).
JACOBIAN_SERIES_CUTOFF = 1e-4
