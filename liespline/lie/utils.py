import logging

import numpy as np

from ..constants import FLOAT32_EPSILON, FLOAT64_EPSILON, NORMALIZATION_WARNING_TOL


def get_epsilon(dtype: np.dtype) -> float:
    """Small-angle cutoff for the given scalar type."""
    if np.dtype(dtype) == np.float32:
        return FLOAT32_EPSILON
    return FLOAT64_EPSILON


def skew(x: np.ndarray) -> np.ndarray:
    """Returns the 3x3 matrix such that `skew(x) @ y == np.cross(x, y)`."""
    assert x.shape == (3,)
    assert np.issubdtype(x.dtype, np.number)
    wx, wy, wz = x
    return np.array(
        [
            [0.0, -wz, wy],
            [wz, 0.0, -wx],
            [-wy, wx, 0.0],
        ]
    )


def unskew(m: np.ndarray) -> np.ndarray:
    """Inverse of `skew`."""
    assert m.shape == (3, 3)
    assert np.allclose(m, -m.T)
    return np.array([m[2, 1], m[0, 2], m[1, 0]])


def normalize_unit(x: np.ndarray, label: str) -> np.ndarray:
    """Projects `x` onto the unit sphere, warning if it was far from it."""
    norm_sq = x @ x
    if abs(norm_sq - 1.0) > NORMALIZATION_WARNING_TOL:
        logging.warning(
            f"Normalizing {label} with squared norm {norm_sq:.4f}; the element "
            "drifted far from the group."
        )
    return x / np.sqrt(norm_sq)


def check_tangent(tangent: np.ndarray, dim: int) -> None:
    if tangent.shape != (dim,):
        raise ValueError(
            f"Expected a {dim}-dimensional tangent vector but got {tangent.shape}."
        )
