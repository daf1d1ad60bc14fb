"""Tests for B-splines on Lie groups."""

import itertools
from typing import Type

import numpy as np
from absl.testing import absltest, parameterized

from liespline.diff import dr
from liespline.exceptions import (
    InvalidDegree,
    InvalidKnotSpacing,
    InvalidWindowSize,
    ReadOnlyStorage,
)
from liespline.interp.bspline import BSpline, bspline_eval, bspline_eval_diff
from liespline.lie.base import LieGroup
from liespline.lie.se2 import SE2
from liespline.lie.se3 import SE3
from liespline.lie.so2 import SO2
from liespline.lie.so3 import SO3

from .utils import assert_transforms_close, sample_walk

DEGREES = (1, 2, 3, 5)


class TestWindowSize(absltest.TestCase):
    def test_diff_points_size(self):
        g_0 = SO3.identity()
        for size in (2, 4):
            with self.assertRaises(InvalidWindowSize) as cm:
                bspline_eval_diff(3, g_0, [np.zeros(3)] * size, 0.5)
            self.assertEqual(cm.exception.expected, 3)
            self.assertEqual(cm.exception.actual, size)
            self.assertIn("must be of size 3", str(cm.exception))
            self.assertIn(f"got {size}", str(cm.exception))

    def test_ctrl_points_size(self):
        for size in (3, 5):
            with self.assertRaises(InvalidWindowSize) as cm:
                bspline_eval(3, [SO3.identity()] * size, 0.5)
            self.assertEqual(cm.exception.expected, 4)
            self.assertEqual(cm.exception.actual, size)

    def test_size_error_is_value_error(self):
        with self.assertRaises(ValueError):
            bspline_eval(1, [SE3.identity()], 0.5)

    def test_negative_degree(self):
        with self.assertRaises(InvalidDegree):
            bspline_eval(-1, [], 0.5)
        with self.assertRaises(InvalidDegree):
            bspline_eval_diff(-1, SO3.identity(), [], 0.5)


class TestSegment(absltest.TestCase):
    def setUp(self):
        np.random.seed(12345)

    def test_identity_control_points(self):
        result = bspline_eval(
            1,
            [SO3.identity(), SO3.identity()],
            0.5,
            velocity=True,
            acceleration=True,
            jacobian=True,
        )
        self.assertTrue(result.value.isapprox(SO3.identity()))
        np.testing.assert_allclose(result.velocity, np.zeros(3), atol=1e-15)
        np.testing.assert_allclose(result.acceleration, np.zeros(3), atol=1e-15)
        np.testing.assert_allclose(
            result.jacobian, np.hstack([0.5 * np.eye(3), 0.5 * np.eye(3)])
        )

    def test_derivatives_not_requested(self):
        result = bspline_eval(2, sample_walk(SO3, 3), 0.5)
        self.assertIsNone(result.velocity)
        self.assertIsNone(result.acceleration)
        self.assertIsNone(result.jacobian)

    def test_linear_is_geodesic(self):
        g_0, g_1 = sample_walk(SE3, 2, step=1.0)
        for u in (0.0, 0.25, 0.7, 1.0):
            result = bspline_eval(1, [g_0, g_1], u, velocity=True)
            assert_transforms_close(result.value, g_0 + u * (g_1 - g_0))
            np.testing.assert_allclose(result.velocity, g_1 - g_0, atol=1e-12)

    def test_constant(self):
        g = SE2.sample_uniform()
        result = bspline_eval(0, [g], 0.3, velocity=True, jacobian=True)
        self.assertTrue(result.value.isapprox(g))
        np.testing.assert_array_equal(result.velocity, np.zeros(3))
        np.testing.assert_allclose(result.jacobian, np.eye(3))

    def test_eval_diff_matches_eval(self):
        ctrl_points = sample_walk(SE3, 4)
        diff_points = [b - a for a, b in zip(ctrl_points[:-1], ctrl_points[1:])]
        a = bspline_eval(3, ctrl_points, 0.4, velocity=True, acceleration=True)
        b = bspline_eval_diff(
            3, ctrl_points[0], diff_points, 0.4, velocity=True, acceleration=True
        )
        self.assertTrue(a.value.isapprox(b.value))
        np.testing.assert_allclose(a.velocity, b.velocity)
        np.testing.assert_allclose(a.acceleration, b.acceleration)

    def test_eval_diff_accepts_generators(self):
        diffs = (0.1 * np.ones(3) for _ in range(2))
        result = bspline_eval_diff(2, SO3.identity(), diffs, 0.5)
        self.assertIsInstance(result.value, SO3)


@parameterized.named_parameters(
    ("SO2", SO2),
    ("SO3", SO3),
    ("SE2", SE2),
    ("SE3", SE3),
)
class TestSegmentDerivatives(parameterized.TestCase):
    def setUp(self):
        np.random.seed(12345)

    def test_velocity(self, group: Type[LieGroup]):
        for degree, u in itertools.product(DEGREES, (0.1, 0.5, 0.9)):
            ctrl_points = sample_walk(group, degree + 1)
            result = bspline_eval(degree, ctrl_points, u, velocity=True)
            _, jac = dr(lambda x: bspline_eval(degree, ctrl_points, x).value, u)
            np.testing.assert_allclose(result.velocity, jac[:, 0], atol=1e-7)

    def test_acceleration(self, group: Type[LieGroup]):
        for degree, u in itertools.product(DEGREES, (0.1, 0.5, 0.9)):
            ctrl_points = sample_walk(group, degree + 1)
            result = bspline_eval(degree, ctrl_points, u, acceleration=True)
            _, jac = dr(
                lambda x: bspline_eval(degree, ctrl_points, x, velocity=True).velocity,
                u,
            )
            np.testing.assert_allclose(result.acceleration, jac[:, 0], atol=1e-7)

    def test_jacobian_blocks(self, group: Type[LieGroup]):
        u = 0.37
        dof = group.tangent_dim
        for degree in DEGREES:
            ctrl_points = sample_walk(group, degree + 1)
            result = bspline_eval(degree, ctrl_points, u, jacobian=True)
            self.assertEqual(result.jacobian.shape, (dof, dof * (degree + 1)))

            for j in range(degree + 1):

                def f(x, j=j):
                    points = list(ctrl_points)
                    points[j] = x
                    return bspline_eval(degree, points, u).value

                _, jac = dr(f, ctrl_points[j])
                np.testing.assert_allclose(
                    result.jacobian[:, j * dof : (j + 1) * dof], jac, atol=1e-6
                )

    def test_jacobian_uniform_perturbation(self, group: Type[LieGroup]):
        # Moving every control point by the same right perturbation moves the
        # curve by the sum of the Jacobian blocks.
        degree = 3
        ctrl_points = sample_walk(group, degree + 1)
        u = 0.6
        result = bspline_eval(degree, ctrl_points, u, jacobian=True)
        dof = group.tangent_dim
        block_sum = sum(
            result.jacobian[:, j * dof : (j + 1) * dof] for j in range(degree + 1)
        )
        _, jac = dr(
            lambda a: bspline_eval(degree, [g + a for g in ctrl_points], u).value,
            np.zeros(dof),
        )
        np.testing.assert_allclose(block_sum, jac, atol=1e-6)

    def test_constant_curve_from_equal_control_points(self, group: Type[LieGroup]):
        g = group.sample_uniform()
        result = bspline_eval(3, [g] * 4, 0.3, velocity=True, acceleration=True)
        assert_transforms_close(result.value, g)
        np.testing.assert_allclose(
            result.velocity, np.zeros(group.tangent_dim), atol=1e-12
        )
        np.testing.assert_allclose(
            result.acceleration, np.zeros(group.tangent_dim), atol=1e-12
        )


class TestBSpline(parameterized.TestCase):
    def setUp(self):
        np.random.seed(12345)

    def test_default_is_identity(self):
        spline = BSpline(SO3, 3)
        self.assertEqual(spline.t_min(), 0.0)
        self.assertEqual(spline.t_max(), 1.0)
        self.assertLen(spline.ctrl_points, 4)
        result = spline.eval(0.3, velocity=True)
        self.assertTrue(result.value.isapprox(SO3.identity()))
        np.testing.assert_allclose(result.velocity, np.zeros(3), atol=1e-12)

    def test_support(self):
        spline = BSpline(SE3, 3, t0=1.0, dt=0.5, ctrl_points=sample_walk(SE3, 6))
        self.assertEqual(spline.t_min(), 1.0)
        self.assertEqual(spline.t_max(), 2.5)

    def test_invalid_construction(self):
        with self.assertRaises(InvalidKnotSpacing):
            BSpline(SO3, 3, dt=0.0)
        with self.assertRaises(InvalidKnotSpacing):
            BSpline(SO3, 3, dt=-1.0)
        with self.assertRaises(InvalidWindowSize):
            BSpline(SO3, 3, ctrl_points=sample_walk(SO3, 3))
        with self.assertRaises(TypeError):
            BSpline(SO3, 1, ctrl_points=[SO3.identity(), SE3.identity()])
        with self.assertRaises(InvalidDegree):
            BSpline(SO3, -1)

    def test_control_points_are_copied(self):
        ctrl_points = sample_walk(SO3, 4)
        spline = BSpline(SO3, 3, ctrl_points=ctrl_points)
        before = spline.eval(0.5).value.parameters().copy()
        ctrl_points[1].set_identity()
        ctrl_points[2] += np.ones(3)
        np.testing.assert_array_equal(spline.eval(0.5).value.parameters(), before)

    def test_control_points_from_mapped_buffer(self):
        buf = np.concatenate([g.parameters() for g in sample_walk(SE2, 3)])
        mapped = [SE2.map(buf, 4 * i) for i in range(3)]
        spline = BSpline(SE2, 2, ctrl_points=mapped)
        before = spline.eval(0.3).value.parameters().copy()
        buf[:] = np.tile(SE2.identity().parameters(), 3)
        np.testing.assert_array_equal(spline.eval(0.3).value.parameters(), before)
        self.assertTrue(all(g.is_owning() for g in spline.ctrl_points))

    def test_stored_control_points_are_read_only(self):
        spline = BSpline(SO2, 1, ctrl_points=sample_walk(SO2, 2))
        with self.assertRaises(ReadOnlyStorage):
            spline.ctrl_points[0].set_identity()
        with self.assertRaises(ReadOnlyStorage):
            spline.ctrl_points[1] += np.ones(1)

    def test_clamps_outside_support(self):
        spline = BSpline(SO3, 3, t0=1.0, dt=0.5, ctrl_points=sample_walk(SO3, 6))
        kwargs = dict(velocity=True, acceleration=True, jacobian=True)
        for t_out, t_edge in ((0.2, spline.t_min()), (3.7, spline.t_max())):
            with self.assertLogs(level="DEBUG"):
                outside = spline.eval(t_out, **kwargs)
            edge = spline.eval(t_edge, **kwargs)
            self.assertEqual(outside.index, edge.index)
            np.testing.assert_array_equal(
                outside.value.parameters(), edge.value.parameters()
            )
            np.testing.assert_array_equal(outside.velocity, edge.velocity)
            np.testing.assert_array_equal(outside.acceleration, edge.acceleration)
            np.testing.assert_array_equal(outside.jacobian, edge.jacobian)

    def test_window_index(self):
        spline = BSpline(SO3, 3, t0=1.0, dt=0.5, ctrl_points=sample_walk(SO3, 6))
        self.assertEqual(spline.eval(1.0).index, 0)
        self.assertEqual(spline.eval(1.6).index, 1)
        self.assertEqual(spline.eval(2.2).index, 2)
        self.assertEqual(spline.eval(2.5).index, 2)

    def test_continuous_across_knots(self):
        spline = BSpline(SE3, 3, t0=0.0, dt=0.5, ctrl_points=sample_walk(SE3, 7))
        for knot in (0.5, 1.0, 1.5):
            before = spline.eval(knot - 1e-9, velocity=True, acceleration=True)
            after = spline.eval(knot, velocity=True, acceleration=True)
            assert_transforms_close(before.value, after.value, atol=1e-7)
            np.testing.assert_allclose(before.velocity, after.velocity, atol=1e-6)
            np.testing.assert_allclose(
                before.acceleration, after.acceleration, atol=1e-5
            )

    def test_velocity_scaled_by_knot_spacing(self):
        dt = 0.25
        spline = BSpline(SE2, 2, t0=0.0, dt=dt, ctrl_points=sample_walk(SE2, 5))
        t = 0.4
        result = spline.eval(t, velocity=True, acceleration=True)
        _, jac = dr(lambda x: spline.eval(x).value, t)
        np.testing.assert_allclose(result.velocity, jac[:, 0], atol=1e-6)
        _, jac = dr(lambda x: spline.eval(x, velocity=True).velocity, t)
        np.testing.assert_allclose(result.acceleration, jac[:, 0], atol=1e-5)

    def test_piecewise_constant(self):
        ctrl_points = sample_walk(SO2, 3)
        spline = BSpline(SO2, 0, ctrl_points=ctrl_points)
        self.assertEqual(spline.t_max(), 3.0)
        self.assertTrue(spline.eval(1.5).value.isapprox(ctrl_points[1]))
        self.assertTrue(spline.eval(2.999).value.isapprox(ctrl_points[2]))

    def test_interpolates_linear_control_points(self):
        ctrl_points = sample_walk(SE3, 4)
        spline = BSpline(SE3, 1, ctrl_points=ctrl_points)
        for i, g in enumerate(ctrl_points):
            assert_transforms_close(spline.eval(float(i)).value, g)


if __name__ == "__main__":
    absltest.main()
