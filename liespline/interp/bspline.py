"""Cardinal B-splines on Lie groups.

A degree K spline segment is written as a product of exponentials

    g(u) = g_0 * prod_{i=1}^{K} exp(Btilde_i(u) * v_i),   v_i = log(g_{i-1}^{-1} g_i)

where Btilde_i are the cumulative basis functions of :mod:`.coefficients` and
g_0, ..., g_K are the K + 1 control points of the segment. Only the abstract
:class:`~liespline.lie.base.LieGroup` operations are used, so any group works.
"""

import logging
import math
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple, Type

import numpy as np

from ..exceptions import InvalidDegree, InvalidKnotSpacing, InvalidWindowSize
from ..lie.base import LieGroup
from .coefficients import cum_card_coeffmat


class BSplineEvaluation(NamedTuple):
    """Value of a spline together with the requested derivatives."""

    value: LieGroup
    """Curve value."""
    velocity: Optional[np.ndarray] = None
    """Body velocity, of shape (tangent_dim,)."""
    acceleration: Optional[np.ndarray] = None
    """Body acceleration, of shape (tangent_dim,)."""
    jacobian: Optional[np.ndarray] = None
    """Derivative of the value w.r.t. right perturbations of the K + 1 control
    points of the window, of shape (tangent_dim, tangent_dim * (K + 1))."""
    index: int = 0
    """Index of the first control point of the evaluated window."""


def _power_vectors(degree: int, u: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Returns [1, u, ..., u^K] and its first two derivatives w.r.t. u."""
    uvec = np.zeros(degree + 1)
    duvec = np.zeros(degree + 1)
    d2uvec = np.zeros(degree + 1)
    uvec[0] = 1.0
    for k in range(1, degree + 1):
        uvec[k] = u * uvec[k - 1]
        duvec[k] = k * uvec[k - 1]
        d2uvec[k] = k * duvec[k - 1]
    return uvec, duvec, d2uvec


def bspline_eval_diff(
    degree: int,
    g_0: LieGroup,
    diff_points: Iterable[np.ndarray],
    u: float,
    velocity: bool = False,
    acceleration: bool = False,
    jacobian: bool = False,
) -> BSplineEvaluation:
    r"""Evaluate a cardinal B-spline segment given its tangent differences.

    .. math::

        g = g_0 \prod_{i=1}^{K} \exp(\tilde B_i(u) v_i)

    Args:
        degree: Spline degree K.
        g_0: First control point of the segment.
        diff_points: The K differences `v_i = log(g_{i-1}^{-1} g_i)`.
        u: Segment location `(t - t_i) / dt`, normally in [0, 1]. Not checked.
        velocity: Whether to compute the first derivative w.r.t. `u`.
        acceleration: Whether to compute the second derivative w.r.t. `u`.
        jacobian: Whether to compute the derivative w.r.t. the K + 1 control
            points.

    Returns:
        The segment value and the requested derivatives.

    Raises:
        InvalidDegree: If `degree` is negative.
        InvalidWindowSize: If `diff_points` does not hold exactly K elements.
    """
    if degree < 0:
        raise InvalidDegree(degree)
    diff_points = [np.asarray(v) for v in diff_points]
    if len(diff_points) != degree:
        raise InvalidWindowSize("diff_points", degree, len(diff_points))

    G = type(g_0)
    M = cum_card_coeffmat(degree)
    uvec, duvec, d2uvec = _power_vectors(degree, u)
    Btilde = uvec @ M
    dBtilde = duvec @ M
    d2Btilde = d2uvec @ M

    vel = np.zeros(G.tangent_dim)
    acc = np.zeros(G.tangent_dim)

    g = g_0.copy()
    for j, v in enumerate(diff_points, start=1):
        g = g @ G.exp(Btilde[j] * v)

        if velocity or acceleration:
            # Pull the running derivative into the frame of the new factor.
            Ad = G.exp(-Btilde[j] * v).adjoint()
            vel = Ad @ vel + dBtilde[j] * v
            if acceleration:
                acc = Ad @ acc + dBtilde[j] * G.ad(vel) @ v + d2Btilde[j] * v

    der = None
    if jacobian:
        dof = G.tangent_dim
        der = np.zeros((dof, dof * (degree + 1)))
        z2inv = G.identity()

        # Control point j enters v_j and v_{j+1}.
        for j in range(degree, -1, -1):
            block = slice(j * dof, (j + 1) * dof)
            if j != degree:
                vjp = diff_points[j]
                sjp = Btilde[j + 1] * vjp
                der[:, block] -= (
                    Btilde[j + 1]
                    * z2inv.adjoint()
                    @ G.dr_exp(sjp)
                    @ G.dl_expinv(vjp)
                )
                z2inv = z2inv @ G.exp(-sjp)
            if j == 0:
                der[:, block] += Btilde[0] * z2inv.adjoint()
            else:
                vj = diff_points[j - 1]
                der[:, block] += (
                    Btilde[j]
                    * z2inv.adjoint()
                    @ G.dr_exp(Btilde[j] * vj)
                    @ G.dr_expinv(vj)
                )

    return BSplineEvaluation(
        value=g,
        velocity=vel if velocity else None,
        acceleration=acc if acceleration else None,
        jacobian=der,
    )


def bspline_eval(
    degree: int,
    ctrl_points: Iterable[LieGroup],
    u: float,
    velocity: bool = False,
    acceleration: bool = False,
    jacobian: bool = False,
) -> BSplineEvaluation:
    r"""Evaluate a cardinal B-spline segment given its control points.

    .. math::

        g = g_0 \prod_{i=1}^{K} \exp(\tilde B_i(u) \log(g_{i-1}^{-1} g_i))

    Args:
        degree: Spline degree K.
        ctrl_points: The K + 1 control points of the segment.
        u: Segment location `(t - t_i) / dt`, normally in [0, 1]. Not checked.
        velocity: Whether to compute the first derivative w.r.t. `u`.
        acceleration: Whether to compute the second derivative w.r.t. `u`.
        jacobian: Whether to compute the derivative w.r.t. the control points.

    Returns:
        The segment value and the requested derivatives.

    Raises:
        InvalidDegree: If `degree` is negative.
        InvalidWindowSize: If `ctrl_points` does not hold exactly K + 1 elements.
    """
    if degree < 0:
        raise InvalidDegree(degree)
    ctrl_points = list(ctrl_points)
    if len(ctrl_points) != degree + 1:
        raise InvalidWindowSize("ctrl_points", degree + 1, len(ctrl_points))

    diff_points = [
        (g_prev.inverse() @ g_next).log()
        for g_prev, g_next in zip(ctrl_points[:-1], ctrl_points[1:])
    ]
    return bspline_eval_diff(
        degree,
        ctrl_points[0],
        diff_points,
        u,
        velocity=velocity,
        acceleration=acceleration,
        jacobian=jacobian,
    )


class BSpline:
    """Cardinal B-spline of degree K on a Lie group, parameterized by time.

    Control points map to knots as follows::

        KNOT  -K  -K+1  -K+2  ...   0   1  ...  N-K
        CTRL   0     1     2  ...   K  K+1       N
                                    ^            ^
                                  t_min        t_max

    The first K control points lie outside the support of the spline, which is
    [t0, t0 + (N - K) * dt]. Outside the support the spline is held constant at
    its end values.

    For interpolation use an odd degree and set `t0` to the timestamp of the
    first control point plus `dt * K / 2`, which aligns every control point
    with the peak of its basis function.
    """

    def __init__(
        self,
        group: Type[LieGroup],
        degree: int,
        t0: float = 0.0,
        dt: float = 1.0,
        ctrl_points: Optional[Iterable[LieGroup]] = None,
    ):
        """Constructor.

        Args:
            group: Lie group the spline takes values in.
            degree: Spline degree K.
            t0: Start of the support in [s].
            dt: Knot spacing in [s].
            ctrl_points: At least K + 1 control points. They are copied, so
                later changes to the caller's elements do not affect the
                spline. If None, the spline is a constant identity on
                [t0, t0 + dt).
        """
        if degree < 0:
            raise InvalidDegree(degree)
        if dt <= 0.0:
            raise InvalidKnotSpacing(dt)
        if ctrl_points is None:
            ctrl_points = [group.identity() for _ in range(degree + 1)]
        points = []
        for point in ctrl_points:
            if type(point) is not group:
                raise TypeError(
                    f"Expected control points of type {group.__name__} but got "
                    f"{type(point).__name__}."
                )
            point = point.copy()
            # Control points are fixed for the lifetime of the spline.
            point.parameters().flags.writeable = False
            points.append(point)
        ctrl_points = tuple(points)
        if len(ctrl_points) < degree + 1:
            raise InvalidWindowSize("ctrl_points", degree + 1, len(ctrl_points))

        self.group = group
        self.degree = degree
        self.t0 = t0
        self.dt = dt
        self._ctrl_points = ctrl_points

    @property
    def ctrl_points(self) -> Sequence[LieGroup]:
        return self._ctrl_points

    def t_min(self) -> float:
        return self.t0

    def t_max(self) -> float:
        return self.t0 + (len(self._ctrl_points) - self.degree) * self.dt

    def eval(
        self,
        t: float,
        velocity: bool = False,
        acceleration: bool = False,
        jacobian: bool = False,
    ) -> BSplineEvaluation:
        """Evaluate the spline at time `t`.

        Args:
            t: Time in [s]. Values outside [t_min, t_max] are clamped.
            velocity: Whether to compute the body velocity w.r.t. time.
            acceleration: Whether to compute the body acceleration w.r.t. time.
            jacobian: Whether to compute the derivative w.r.t. the K + 1
                control points starting at the returned `index`.

        Returns:
            The spline value and the requested derivatives.
        """
        K = self.degree
        num_points = len(self._ctrl_points)

        istar = math.floor((t - self.t0) / self.dt)
        if istar < 0:
            logging.debug(f"t={t} is before t_min={self.t_min()}, clamping.")
            istar = 0
            u = 0.0
        elif istar + K + 1 > num_points:
            logging.debug(f"t={t} is after t_max={self.t_max()}, clamping.")
            istar = num_points - K - 1
            u = 1.0
        else:
            u = (t - self.t0 - istar * self.dt) / self.dt

        result = bspline_eval(
            K,
            self._ctrl_points[istar : istar + K + 1],
            u,
            velocity=velocity,
            acceleration=acceleration,
            jacobian=jacobian,
        )

        vel = result.velocity
        acc = result.acceleration
        if vel is not None:
            vel = vel / self.dt
        if acc is not None:
            acc = acc / (self.dt * self.dt)
        return result._replace(velocity=vel, acceleration=acc, index=istar)
