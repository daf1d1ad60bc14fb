from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Type

import numpy as np

from ..constants import JACOBIAN_SERIES_CUTOFF
from . import storage
from .base import LieGroup
from .so3 import SO3
from .utils import check_tangent, normalize_unit, skew

_IDENTITY_WXYZ_XYZ = np.array([1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float64)


def _getQ(tangent: np.ndarray) -> np.ndarray:
    """Coupling block of the SE(3) left Jacobian.

    Ref: Barfoot, "State Estimation for Robotics", Eqn. 7.86.
    """
    v, omega = tangent[:3], tangent[3:]
    theta_sq = omega @ omega
    if theta_sq < JACOBIAN_SERIES_CUTOFF:
        theta_pow_4 = theta_sq * theta_sq
        A = 1.0 / 6.0 - theta_sq / 120.0 + theta_pow_4 / 5040.0
        C = 1.0 / 24.0 - theta_sq / 720.0 + theta_pow_4 / 40320.0
        D = 1.0 / 120.0 - theta_sq / 2520.0 + theta_pow_4 / 120960.0
    else:
        theta = np.sqrt(theta_sq)
        sin_theta = np.sin(theta)
        cos_theta = np.cos(theta)
        A = (theta - sin_theta) / (theta_sq * theta)
        C = (theta_sq + 2.0 * cos_theta - 2.0) / (2.0 * theta_sq * theta_sq)
        D = (2.0 * theta - 3.0 * sin_theta + theta * cos_theta) / (
            2.0 * theta_sq * theta_sq * theta
        )
    V = skew(v)
    W = skew(omega)
    WV = W @ V
    VW = V @ W
    WVW = WV @ W
    WW = W @ W
    return (
        0.5 * V
        + A * (WV + VW + WVW)
        + C * (WW @ V + VW @ W - 3.0 * WVW)
        + D * (WVW @ W + WW @ VW)
    )


@dataclass(frozen=True, eq=False)
class SE3(LieGroup):
    """Special Euclidean group for proper rigid transforms in 3D.

    Internal parameterization is (qw, qx, qy, qz, x, y, z). Tangent parameterization
    is (vx, vy, vz, omega_x, omega_y, omega_z).
    """

    wxyz_xyz: np.ndarray
    matrix_dim: ClassVar[int] = 4
    parameters_dim: ClassVar[int] = 7
    tangent_dim: ClassVar[int] = 6
    space_dim: ClassVar[int] = 3

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "wxyz_xyz",
            storage.adopt(self.wxyz_xyz, self.parameters_dim, "wxyz_xyz"),
        )

    def __repr__(self) -> str:
        quat = np.round(self.wxyz_xyz[:4], 5)
        xyz = np.round(self.wxyz_xyz[4:], 5)
        return f"{self.__class__.__name__}(wxyz={quat}, xyz={xyz})"

    def parameters(self) -> np.ndarray:
        return self.wxyz_xyz

    @classmethod
    def from_rotation_and_translation(
        cls: Type[SE3], rotation: SO3, translation: np.ndarray
    ) -> SE3:
        if translation.shape != (SE3.space_dim,):
            raise ValueError(
                f"Expected a 3-dimensional translation but got {translation.shape}."
            )
        return SE3(wxyz_xyz=np.concatenate([rotation.wxyz, translation]))

    @classmethod
    def from_rotation(cls: Type[SE3], rotation: SO3) -> SE3:
        return SE3.from_rotation_and_translation(
            rotation=rotation, translation=np.zeros(SE3.space_dim)
        )

    @classmethod
    def from_translation(cls: Type[SE3], translation: np.ndarray) -> SE3:
        return SE3.from_rotation_and_translation(
            rotation=SO3.identity(), translation=translation
        )

    def rotation(self) -> SO3:
        return SO3(wxyz=self.wxyz_xyz[:4])

    def translation(self) -> np.ndarray:
        return self.wxyz_xyz[4:]

    @classmethod
    def from_matrix(cls: Type[SE3], matrix: np.ndarray) -> SE3:
        if matrix.shape != (SE3.matrix_dim, SE3.matrix_dim):
            raise ValueError(f"Expected a 4x4 matrix but got {matrix.shape}.")
        return SE3.from_rotation_and_translation(
            rotation=SO3.from_matrix(matrix[:3, :3]),
            translation=matrix[:3, 3],
        )

    @classmethod
    def identity(cls: Type[SE3]) -> SE3:
        return SE3(wxyz_xyz=_IDENTITY_WXYZ_XYZ)

    @classmethod
    def sample_uniform(cls: Type[SE3]) -> SE3:
        return SE3.from_rotation_and_translation(
            rotation=SO3.sample_uniform(),
            translation=np.random.uniform(-1.0, 1.0, size=(SE3.space_dim,)),
        )

    def as_matrix(self) -> np.ndarray:
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation().as_matrix()
        matrix[:3, 3] = self.translation()
        return matrix

    def inverse(self) -> SE3:
        inverse_rotation = self.rotation().inverse()
        return SE3.from_rotation_and_translation(
            rotation=inverse_rotation,
            translation=-(inverse_rotation @ self.translation()),
        )

    def normalize(self) -> SE3:
        return SE3(
            wxyz_xyz=np.concatenate(
                [
                    normalize_unit(self.wxyz_xyz[:4], "SE3 quaternion"),
                    self.wxyz_xyz[4:],
                ]
            )
        )

    def apply(self, target: np.ndarray) -> np.ndarray:
        if target.shape != (SE3.space_dim,):
            raise ValueError(f"Expected a 3-dimensional vector but got {target.shape}.")
        return self.rotation() @ target + self.translation()

    def multiply(self, other: SE3) -> SE3:
        return SE3.from_rotation_and_translation(
            rotation=self.rotation() @ other.rotation(),
            translation=(self.rotation() @ other.translation()) + self.translation(),
        )

    @classmethod
    def exp(cls: Type[SE3], tangent: np.ndarray) -> SE3:
        check_tangent(tangent, SE3.tangent_dim)
        omega = tangent[3:]
        # The left Jacobian of SO3 maps the linear velocity to the translation.
        return SE3.from_rotation_and_translation(
            rotation=SO3.exp(omega),
            translation=SO3.dr_exp(-omega) @ tangent[:3],
        )

    def log(self) -> np.ndarray:
        omega = self.rotation().log()
        v = SO3.dr_expinv(-omega) @ self.translation()
        return np.concatenate([v, omega])

    def adjoint(self) -> np.ndarray:
        R = self.rotation().as_matrix()
        return np.block(
            [
                [R, skew(self.translation()) @ R],
                [np.zeros((3, 3)), R],
            ]
        )

    @classmethod
    def ad(cls: Type[SE3], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SE3.tangent_dim)
        V = skew(tangent[:3])
        W = skew(tangent[3:])
        return np.block([[W, V], [np.zeros((3, 3)), W]])

    @classmethod
    def dr_exp(cls: Type[SE3], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SE3.tangent_dim)
        J = SO3.dr_exp(tangent[3:])
        return np.block([[J, _getQ(-tangent)], [np.zeros((3, 3)), J]])

    @classmethod
    def dr_expinv(cls: Type[SE3], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SE3.tangent_dim)
        J_inv = SO3.dr_expinv(tangent[3:])
        return np.block(
            [
                [J_inv, -J_inv @ _getQ(-tangent) @ J_inv],
                [np.zeros((3, 3)), J_inv],
            ]
        )
