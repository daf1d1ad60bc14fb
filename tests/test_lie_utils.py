"""Tests utils.py."""

import numpy as np
from absl.testing import absltest

from liespline.lie import utils


class TestUtils(absltest.TestCase):
    def test_skew_throws_assertion_error_if_shape_invalid(self):
        with self.assertRaises(AssertionError):
            utils.skew(np.zeros((5,)))

    def test_skew_throws_assertion_error_if_not_1d_array(self):
        with self.assertRaises(AssertionError):
            utils.skew(np.zeros((3, 3)))

    def test_skew_throws_assertion_error_if_not_numeric(self):
        with self.assertRaises(AssertionError):
            utils.skew(np.array(["a", "b", "c"]))

    def test_skew_equals_negative(self):
        m = utils.skew(np.random.randn(3))
        np.testing.assert_allclose(m.T, -m)

    def test_skew_returns_correct_skew_symmetric_matrix(self):
        v = np.array([1, 2, 3])
        expected = np.array([[0, -3, 2], [3, 0, -1], [-2, 1, 0]])
        np.testing.assert_allclose(utils.skew(v), expected)

    def test_skew_is_cross_product(self):
        x = np.random.randn(3)
        y = np.random.randn(3)
        np.testing.assert_allclose(utils.skew(x) @ y, np.cross(x, y), atol=1e-12)

    def test_unskew_throws_assertion_error_if_shape_invalid(self):
        with self.assertRaises(AssertionError):
            utils.unskew(np.zeros((5, 5)))

    def test_unskew_throws_assertion_error_if_not_skew_symmetric(self):
        with self.assertRaises(AssertionError):
            utils.unskew(np.array([[0, 1, 2], [3, 0, 4], [5, 6, 0]]))

    def test_unskew_returns_correct_vector(self):
        m = np.array([[0, -3, 2], [3, 0, -1], [-2, 1, 0]])
        np.testing.assert_allclose(utils.unskew(m), np.array([1, 2, 3]))

    def test_get_epsilon(self):
        self.assertEqual(utils.get_epsilon(np.float64), 1e-10)
        self.assertEqual(utils.get_epsilon(np.float32), 1e-5)
        self.assertEqual(utils.get_epsilon(np.dtype("float32")), 1e-5)

    def test_check_tangent(self):
        utils.check_tangent(np.zeros(3), 3)
        with self.assertRaisesRegex(ValueError, "3-dimensional"):
            utils.check_tangent(np.zeros(4), 3)

    def test_normalize_unit(self):
        x = np.array([1.0 + 1e-6, 0.0])
        y = utils.normalize_unit(x, "vector")
        np.testing.assert_allclose(np.linalg.norm(y), 1.0)


if __name__ == "__main__":
    absltest.main()
