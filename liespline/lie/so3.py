from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Type

import mujoco
import numpy as np

from . import storage
from .base import LieGroup
from .utils import check_tangent, get_epsilon, normalize_unit, skew

_IDENTITY_WXYZ = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)
_INVERT_QUAT_SIGN = np.array([1.0, -1.0, -1.0, -1.0], dtype=np.float64)


def _f64(x: np.ndarray) -> np.ndarray:
    # MuJoCo's quaternion routines only accept contiguous float64 buffers.
    return np.ascontiguousarray(x, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class SO3(LieGroup):
    """Special orthogonal group for 3D rotations.

    Internal parameterization is (qw, qx, qy, qz). Tangent parameterization is
    (omega_x, omega_y, omega_z).
    """

    wxyz: np.ndarray
    matrix_dim: ClassVar[int] = 3
    parameters_dim: ClassVar[int] = 4
    tangent_dim: ClassVar[int] = 3
    space_dim: ClassVar[int] = 3

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "wxyz", storage.adopt(self.wxyz, self.parameters_dim, "wxyz")
        )

    def __repr__(self) -> str:
        wxyz = np.round(self.wxyz, 5)
        return f"{self.__class__.__name__}(wxyz={wxyz})"

    def parameters(self) -> np.ndarray:
        """Returns the internal parameterization of the rotation."""
        return self.wxyz

    @classmethod
    def from_matrix(cls: Type[SO3], matrix: np.ndarray) -> SO3:
        """Creates an SO3 instance from a rotation matrix."""
        if matrix.shape != (SO3.matrix_dim, SO3.matrix_dim):
            raise ValueError(f"Expected a 3x3 matrix but got {matrix.shape}.")
        wxyz = np.zeros(SO3.parameters_dim, dtype=np.float64)
        mujoco.mju_mat2Quat(wxyz, _f64(matrix).ravel())
        return SO3(wxyz=wxyz)

    @classmethod
    def identity(cls: Type[SO3]) -> SO3:
        return SO3(wxyz=_IDENTITY_WXYZ)

    @classmethod
    def sample_uniform(cls: Type[SO3]) -> SO3:
        # Ref: https://lavalle.pl/planning/node198.html
        u1, u2, u3 = np.random.uniform(
            low=np.zeros(shape=(3,)),
            high=np.array([1.0, 2.0 * np.pi, 2.0 * np.pi]),
        )
        a = np.sqrt(1.0 - u1)
        b = np.sqrt(u1)
        wxyz = np.array(
            [
                a * np.sin(u2),
                a * np.cos(u2),
                b * np.sin(u3),
                b * np.cos(u3),
            ],
            dtype=np.float64,
        )
        return SO3(wxyz=wxyz)

    def as_matrix(self) -> np.ndarray:
        mat = np.zeros(9, dtype=np.float64)
        mujoco.mju_quat2Mat(mat, _f64(self.wxyz))
        return mat.reshape(3, 3).astype(self.wxyz.dtype, copy=False)

    def inverse(self) -> SO3:
        return SO3(wxyz=self.wxyz * _INVERT_QUAT_SIGN.astype(self.wxyz.dtype))

    def normalize(self) -> SO3:
        return SO3(wxyz=normalize_unit(self.wxyz, "SO3 quaternion"))

    def apply(self, target: np.ndarray) -> np.ndarray:
        if target.shape != (SO3.space_dim,):
            raise ValueError(f"Expected a 3-dimensional vector but got {target.shape}.")
        padded_target = np.concatenate([np.zeros(1, dtype=np.float64), target])
        return (self @ SO3(wxyz=padded_target) @ self.inverse()).wxyz[1:]

    def multiply(self, other: SO3) -> SO3:
        res = np.empty(self.parameters_dim, dtype=np.float64)
        mujoco.mju_mulQuat(res, _f64(self.wxyz), _f64(other.wxyz))
        return SO3(wxyz=res.astype(self.wxyz.dtype, copy=False))

    @classmethod
    def exp(cls: Type[SO3], tangent: np.ndarray) -> SO3:
        check_tangent(tangent, SO3.tangent_dim)
        theta_squared = tangent @ tangent
        theta_pow_4 = theta_squared * theta_squared
        use_taylor = theta_squared < get_epsilon(tangent.dtype)
        safe_theta = 1.0 if use_taylor else np.sqrt(theta_squared)
        safe_half_theta = 0.5 * safe_theta
        if use_taylor:
            real = 1.0 - theta_squared / 8.0 + theta_pow_4 / 384.0
            imaginary = 0.5 - theta_squared / 48.0 + theta_pow_4 / 3840.0
        else:
            real = np.cos(safe_half_theta)
            imaginary = np.sin(safe_half_theta) / safe_theta
        wxyz = np.concatenate([np.array([real]), imaginary * tangent])
        return SO3(wxyz=wxyz)

    def log(self) -> np.ndarray:
        w = self.wxyz[0]
        norm_sq = self.wxyz[1:] @ self.wxyz[1:]
        use_taylor = norm_sq < get_epsilon(self.wxyz.dtype)
        norm_safe = 1.0 if use_taylor else np.sqrt(norm_sq)
        w_safe = w if use_taylor else 1.0
        atan_n_over_w = np.arctan2(-norm_safe if w < 0 else norm_safe, abs(w))
        if use_taylor:
            atan_factor = 2.0 / w_safe - 2.0 / 3.0 * norm_sq / w_safe**3
        else:
            if abs(w) < get_epsilon(self.wxyz.dtype):
                scl = 1.0 if w > 0.0 else -1.0
                atan_factor = scl * np.pi / norm_safe
            else:
                atan_factor = 2.0 * atan_n_over_w / norm_safe
        return atan_factor * self.wxyz[1:]

    def adjoint(self) -> np.ndarray:
        return self.as_matrix()

    @classmethod
    def ad(cls: Type[SO3], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SO3.tangent_dim)
        return skew(tangent)

    @classmethod
    def dr_exp(cls: Type[SO3], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SO3.tangent_dim)
        theta_sq = tangent @ tangent
        if theta_sq < get_epsilon(tangent.dtype):
            A = 0.5 - theta_sq / 24.0
            B = 1.0 / 6.0 - theta_sq / 120.0
        else:
            theta = np.sqrt(theta_sq)
            A = (1.0 - np.cos(theta)) / theta_sq
            B = (theta - np.sin(theta)) / (theta_sq * theta)
        skew_tangent = skew(tangent)
        return np.eye(3) - A * skew_tangent + B * (skew_tangent @ skew_tangent)

    @classmethod
    def dr_expinv(cls: Type[SO3], tangent: np.ndarray) -> np.ndarray:
        check_tangent(tangent, SO3.tangent_dim)
        theta_sq = tangent @ tangent
        if theta_sq < get_epsilon(tangent.dtype):
            A = (1.0 / 12.0) * (1.0 + theta_sq / 60.0 * (1.0 + theta_sq / 42.0))
        else:
            half_theta = 0.5 * np.sqrt(theta_sq)
            A = (1.0 - half_theta / np.tan(half_theta)) / theta_sq
        skew_tangent = skew(tangent)
        return np.eye(3) + 0.5 * skew_tangent + A * (skew_tangent @ skew_tangent)
