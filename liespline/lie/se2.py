from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Type

import numpy as np

from . import storage
from .base import LieGroup
from .so2 import SO2
from .utils import check_tangent, get_epsilon, normalize_unit

_IDENTITY_UNIT_COMPLEX_XY = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)


def _v_coefficients(theta: float, dtype: np.dtype) -> Tuple[float, float, float, float]:
    """Returns sin(t)/t, (1-cos(t))/t, (1-cos(t))/t^2 and (t-sin(t))/t^2."""
    theta_sq = theta * theta
    if theta_sq < get_epsilon(dtype):
        sin_over_theta = 1.0 - theta_sq / 6.0
        a = 0.5 - theta_sq / 24.0
        b = theta / 6.0 - theta * theta_sq / 120.0
    else:
        sin_over_theta = np.sin(theta) / theta
        a = (1.0 - np.cos(theta)) / theta_sq
        b = (theta - np.sin(theta)) / theta_sq
    return sin_over_theta, a * theta, a, b


@dataclass(frozen=True, eq=False)
class SE2(LieGroup):
    """Special Euclidean group for proper rigid transforms in 2D.

    Internal parameterization is (cos, sin, x, y). Tangent parameterization is
    (vx, vy, omega).
    """

    unit_complex_xy: np.ndarray
    matrix_dim: ClassVar[int] = 3
    parameters_dim: ClassVar[int] = 4
    tangent_dim: ClassVar[int] = 3
    space_dim: ClassVar[int] = 2

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "unit_complex_xy",
            storage.adopt(self.unit_complex_xy, self.parameters_dim, "unit_complex_xy"),
        )

    def __repr__(self) -> str:
        unit_complex = np.round(self.unit_complex_xy[:2], 5)
        xy = np.round(self.unit_complex_xy[2:], 5)
        return f"{self.__class__.__name__}(unit_complex={unit_complex}, xy={xy})"

    def parameters(self) -> np.ndarray:
        return self.unit_complex_xy

    @classmethod
    def from_rotation_and_translation(
        cls: Type[SE2], rotation: SO2, translation: np.ndarray
    ) -> SE2:
        if translation.shape != (SE2.space_dim,):
            raise ValueError(
                f"Expected a 2-dimensional translation but got {translation.shape}."
            )
        return SE2(
            unit_complex_xy=np.concatenate([rotation.unit_complex, translation])
        )

    def rotation(self) -> SO2:
        return SO2(unit_complex=self.unit_complex_xy[:2])

    def translation(self) -> np.ndarray:
        return self.unit_complex_xy[2:]

    @classmethod
    def from_matrix(cls: Type[SE2], matrix: np.ndarray) -> SE2:
        if matrix.shape != (SE2.matrix_dim, SE2.matrix_dim):
            raise ValueError(f"Expected a 3x3 matrix but got {matrix.shape}.")
        return SE2.from_rotation_and_translation(
            rotation=SO2.from_matrix(matrix[:2, :2]),
            translation=matrix[:2, 2],
        )

    @classmethod
    def identity(cls: Type[SE2]) -> SE2:
        return SE2(unit_complex_xy=_IDENTITY_UNIT_COMPLEX_XY)

    @classmethod
    def sample_uniform(cls: Type[SE2]) -> SE2:
        return SE2.from_rotation_and_translation(
            rotation=SO2.sample_uniform(),
            translation=np.random.uniform(-1.0, 1.0, size=(SE2.space_dim,)),
        )

    def as_matrix(self) -> np.ndarray:
        matrix = np.eye(3)
        matrix[:2, :2] = self.rotation().as_matrix()
        matrix[:2, 2] = self.translation()
        return matrix

    def inverse(self) -> SE2:
        inverse_rotation = self.rotation().inverse()
        return SE2.from_rotation_and_translation(
            rotation=inverse_rotation,
            translation=-(inverse_rotation @ self.translation()),
        )

    def normalize(self) -> SE2:
        return SE2(
            unit_complex_xy=np.concatenate(
                [
                    normalize_unit(self.unit_complex_xy[:2], "SE2 unit complex"),
                    self.unit_complex_xy[2:],
                ]
            )
        )

    def apply(self, target: np.ndarray) -> np.ndarray:
        if target.shape != (SE2.space_dim,):
            raise ValueError(f"Expected a 2-dimensional vector but got {target.shape}.")
        return self.rotation() @ target + self.translation()

    def multiply(self, other: SE2) -> SE2:
        return SE2.from_rotation_and_translation(
            rotation=self.rotation() @ other.rotation(),
            translation=(self.rotation() @ other.translation()) + self.translation(),
        )

    @classmethod
    def exp(cls: Type[SE2], tangent: np.ndarray) -> SE2:
        check_tangent(tangent, SE2.tangent_dim)
        theta = tangent[2]
        s, c, _, _ = _v_coefficients(theta, tangent.dtype)
        V = np.array([[s, -c], [c, s]])
        return SE2.from_rotation_and_translation(
            rotation=SO2.from_radians(theta),
            translation=V @ tangent[:2],
        )

    def log(self) -> np.ndarray:
        theta = self.rotation().log()[0]
        s, c, _, _ = _v_coefficients(theta, self.unit_complex_xy.dtype)
        V_inv = np.array([[s, c], [-c, s]]) / (s * s + c * c)
        return np.concatenate([V_inv @ self.translation(), [theta]])

    def adjoint(self) -> np.ndarray:
        x, y = self.translation()
        adjoint = np.eye(3)
        adjoint[:2, :2] = self.rotation().as_matrix()
        adjoint[:2, 2] = [y, -x]
        return adjoint

    @classmethod
    def ad(cls: Type[SE2], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SE2.tangent_dim)
        vx, vy, omega = tangent
        return np.array(
            [
                [0.0, -omega, vy],
                [omega, 0.0, -vx],
                [0.0, 0.0, 0.0],
            ]
        )

    # Ref: Sola et al., "A micro Lie theory for state estimation in robotics",
    # Eqn. 163.
    @classmethod
    def dr_exp(cls: Type[SE2], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SE2.tangent_dim)
        rho_x, rho_y, theta = tangent
        s, c, a, b = _v_coefficients(theta, tangent.dtype)
        return np.array(
            [
                [s, c, rho_x * b - rho_y * a],
                [-c, s, rho_x * a + rho_y * b],
                [0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def dr_expinv(cls: Type[SE2], tangent: np.ndarray) -> np.ndarray:
        return np.linalg.inv(cls.dr_exp(tangent))
