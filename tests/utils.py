"""Helpers shared by the test modules."""

import numpy as np

from liespline.lie.base import LieGroup


def assert_transforms_close(a: LieGroup, b: LieGroup, atol: float = 1e-8) -> None:
    """Compares two elements through their matrices, which are unique."""
    np.testing.assert_allclose(a.as_matrix(), b.as_matrix(), atol=atol)


def sample_near_identity(group, scale: float = 0.5) -> LieGroup:
    """Samples an element away from the cut locus of `log`."""
    return group.exp(scale * np.random.randn(group.tangent_dim))


def sample_walk(group, num_points: int, step: float = 0.3):
    """Control points whose consecutive differences stay small."""
    points = [group.sample_uniform()]
    for _ in range(num_points - 1):
        points.append(points[-1] + step * np.random.randn(group.tangent_dim))
    return points
