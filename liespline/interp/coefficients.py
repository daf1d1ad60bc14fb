"""Coefficient matrices of cardinal B-spline bases.

A degree K cardinal B-spline basis on u in [0, 1) is described by a (K+1, K+1)
matrix M such that the i-th basis function is

    B_i(u) = sum_k u^k * M[k, i].

Rows index powers of u and columns index basis functions. Matrices are
computed once per degree, cached and returned read-only.
"""

import functools

import numpy as np

from ..exceptions import InvalidDegree


@functools.lru_cache(maxsize=None)
def card_coeffmat(degree: int) -> np.ndarray:
    """Coefficient matrix of the degree `degree` cardinal B-spline basis.

    Built from the degree K-1 matrix with the de Boor recursion specialized to
    uniform knots, starting from the constant basis [[1]].
    """
    if degree < 0:
        raise InvalidDegree(degree)
    if degree == 0:
        ret = np.ones((1, 1))
        ret.flags.writeable = False
        return ret

    K = degree
    coeff_mat_km1 = card_coeffmat(K - 1)

    low = np.zeros((K + 1, K))
    high = np.zeros((K + 1, K))
    low[:K, :] = coeff_mat_km1
    high[1:, :] = coeff_mat_km1

    left = np.zeros((K, K + 1))
    right = np.zeros((K, K + 1))
    for k in range(K):
        left[k, k + 1] = (K - (k + 1)) / K
        left[k, k] = 1.0 - left[k, k + 1]
        right[k, k + 1] = 1.0 / K
        right[k, k] = -right[k, k + 1]

    ret = low @ left + high @ right
    ret.flags.writeable = False
    return ret


@functools.lru_cache(maxsize=None)
def cum_card_coeffmat(degree: int) -> np.ndarray:
    """Coefficient matrix of the cumulative cardinal B-spline basis.

    Column i holds the coefficients of Btilde_i(u) = sum_{j >= i} B_j(u), so
    column 0 is the constant 1.
    """
    ret = card_coeffmat(degree).copy()
    K = degree
    for j in range(K):
        ret[:, K - 1 - j] += ret[:, K - j]
    ret.flags.writeable = False
    return ret
