from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Type

import numpy as np

from . import storage
from .base import LieGroup
from .utils import check_tangent, normalize_unit

_IDENTITY_UNIT_COMPLEX = np.array([1.0, 0.0], dtype=np.float64)


@dataclass(frozen=True, eq=False)
class SO2(LieGroup):
    """Special orthogonal group for 2D rotations.

    Internal parameterization is (cos, sin). Tangent parameterization is
    (omega,).
    """

    unit_complex: np.ndarray
    matrix_dim: ClassVar[int] = 2
    parameters_dim: ClassVar[int] = 2
    tangent_dim: ClassVar[int] = 1
    space_dim: ClassVar[int] = 2

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "unit_complex",
            storage.adopt(self.unit_complex, self.parameters_dim, "unit_complex"),
        )

    def __repr__(self) -> str:
        unit_complex = np.round(self.unit_complex, 5)
        return f"{self.__class__.__name__}(unit_complex={unit_complex})"

    def parameters(self) -> np.ndarray:
        return self.unit_complex

    @classmethod
    def from_radians(cls: Type[SO2], theta: float) -> SO2:
        """Creates an SO2 instance from a rotation angle."""
        return SO2(unit_complex=np.array([np.cos(theta), np.sin(theta)]))

    def as_radians(self) -> float:
        """Returns the rotation angle in (-pi, pi]."""
        return float(self.log()[0])

    @classmethod
    def from_matrix(cls: Type[SO2], matrix: np.ndarray) -> SO2:
        if matrix.shape != (SO2.matrix_dim, SO2.matrix_dim):
            raise ValueError(f"Expected a 2x2 matrix but got {matrix.shape}.")
        return SO2(unit_complex=matrix[:, 0])

    @classmethod
    def identity(cls: Type[SO2]) -> SO2:
        return SO2(unit_complex=_IDENTITY_UNIT_COMPLEX)

    @classmethod
    def sample_uniform(cls: Type[SO2]) -> SO2:
        return SO2.from_radians(np.random.uniform(-np.pi, np.pi))

    def as_matrix(self) -> np.ndarray:
        cos, sin = self.unit_complex
        return np.array([[cos, -sin], [sin, cos]])

    def inverse(self) -> SO2:
        sign = np.array([1.0, -1.0], dtype=self.unit_complex.dtype)
        return SO2(unit_complex=self.unit_complex * sign)

    def normalize(self) -> SO2:
        return SO2(unit_complex=normalize_unit(self.unit_complex, "SO2 unit complex"))

    def apply(self, target: np.ndarray) -> np.ndarray:
        if target.shape != (SO2.space_dim,):
            raise ValueError(f"Expected a 2-dimensional vector but got {target.shape}.")
        return self.as_matrix() @ target

    def multiply(self, other: SO2) -> SO2:
        return SO2(unit_complex=self.as_matrix() @ other.unit_complex)

    @classmethod
    def exp(cls: Type[SO2], tangent: np.ndarray) -> SO2:
        check_tangent(tangent, SO2.tangent_dim)
        return SO2.from_radians(tangent[0])

    def log(self) -> np.ndarray:
        cos, sin = self.unit_complex
        return np.array([np.arctan2(sin, cos)])

    # The group is abelian, so all of the following are trivial.

    def adjoint(self) -> np.ndarray:
        return np.eye(1)

    @classmethod
    def ad(cls: Type[SO2], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SO2.tangent_dim)
        return np.zeros((1, 1))

    @classmethod
    def dr_exp(cls: Type[SO2], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SO2.tangent_dim)
        return np.eye(1)

    @classmethod
    def dr_expinv(cls: Type[SO2], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SO2.tangent_dim)
        return np.eye(1)
