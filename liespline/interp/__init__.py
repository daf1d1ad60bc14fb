"""Interpolation on Lie groups."""

from .bspline import BSpline, BSplineEvaluation, bspline_eval, bspline_eval_diff
from .coefficients import card_coeffmat, cum_card_coeffmat

__all__ = (
    "BSpline",
    "BSplineEvaluation",
    "bspline_eval",
    "bspline_eval_diff",
    "card_coeffmat",
    "cum_card_coeffmat",
)
