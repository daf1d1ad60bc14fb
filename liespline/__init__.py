"""liespline: Lie group calculus and B-splines on Lie groups."""

from .diff import dr
from .exceptions import (
    InvalidDegree,
    InvalidKnotSpacing,
    InvalidWindowSize,
    LieSplineError,
    ReadOnlyStorage,
    UnsupportedStorage,
)
from .interp import (
    BSpline,
    BSplineEvaluation,
    bspline_eval,
    bspline_eval_diff,
    card_coeffmat,
    cum_card_coeffmat,
)
from .lie import SE2, SE3, SO2, SO3, LieGroup, MappedBuffer

__version__ = "0.0.1"

__all__ = (
    "LieGroup",
    "SO2",
    "SO3",
    "SE2",
    "SE3",
    "MappedBuffer",
    "BSpline",
    "BSplineEvaluation",
    "bspline_eval",
    "bspline_eval_diff",
    "card_coeffmat",
    "cum_card_coeffmat",
    "dr",
    "LieSplineError",
    "InvalidWindowSize",
    "InvalidDegree",
    "InvalidKnotSpacing",
    "UnsupportedStorage",
    "ReadOnlyStorage",
)
