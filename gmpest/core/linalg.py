# gmpest/core/linalg.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Linear-algebra utilities shared across gmpest.core modules.

This file hosts:
- The Gill-Murray-Wright modified Cholesky factorization and the
  associated triangular solves, used for Newton steps on possibly
  indefinite information matrices.
- A block-diagonal Cholesky factorization of the covariance matrix,
  used to apply Omega^{-1} event by event.
"""
from math import sqrt

import gmpest.num as gnp


def modified_cholesky(A, delta: float = 1e-16):
    """Modified Cholesky factor of a symmetric matrix.

    Computes a lower-triangular L such that L Lᵀ = A + E, with E a
    nonnegative diagonal perturbation that is zero when A is
    sufficiently positive definite (Gill, Murray and Wright, Practical
    Optimization, Section 4.4.2.2).

    Parameters
    ----------
    A : array_like, shape (n, n)
        Symmetric matrix, possibly indefinite or rank-deficient.
    delta : float, optional
        Floor on the diagonal terms of the factorization.

    Returns
    -------
    L : ndarray, shape (n, n)
        Lower-triangular factor with strictly positive diagonal.

    Notes
    -----
    The bound on the factor elements is

    .. math::
        \\beta^2 = \\max(\\eta, \\xi / \\sqrt{n^2 - 1}, \\delta)

    where :math:`\\eta` and :math:`\\xi` are the largest absolute
    diagonal and off-diagonal entries of A. Each diagonal term is
    :math:`d_j = \\max(|c_{jj}|, \\theta_j^2 / \\beta^2, \\delta)` with
    :math:`\\theta_j` the largest absolute entry below the diagonal in
    column j of the partially reduced matrix.
    """
    A = gnp.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError("A must be a square matrix")
    n = A.shape[0]

    eta = float(gnp.max(gnp.abs(gnp.diag(A))))
    if n > 1:
        offdiag = gnp.abs(A[~gnp.eye(n, dtype=bool)])
        xi = float(gnp.max(offdiag)) / sqrt(n * n - 1.0)
    else:
        xi = 0.0
    beta2 = max(eta, xi, delta)

    c = gnp.zeros((n, n))
    l = gnp.eye(n)
    d = gnp.zeros(n)
    for j in range(n):
        c[j, j] = A[j, j] - gnp.sum(d[:j] * l[j, :j] ** 2)
        if j == n - 1:
            d[j] = max(abs(c[j, j]), delta)
        else:
            c[j + 1 :, j] = A[j + 1 :, j] - (l[j + 1 :, :j] * l[j, :j]) @ d[:j]
            theta = float(gnp.max(gnp.abs(c[j + 1 :, j])))
            d[j] = max(abs(c[j, j]), theta ** 2 / beta2, delta)
            l[j + 1 :, j] = c[j + 1 :, j] / d[j]
    return l * gnp.sqrt(d)


def forward_substitution(L, b):
    """Solve L z = b for lower-triangular L."""
    return gnp.solve_triangular(L, b, lower=True)


def backward_substitution(L, z):
    """Solve Lᵀ p = z for lower-triangular L."""
    return gnp.solve_triangular(L.T, z, lower=False)


def solve_modified_cholesky(A, b, delta: float = 1e-16):
    """Solve A p = b through the modified Cholesky factor of A.

    The system actually solved is (A + E) p = b, where A + E is the
    positive definite perturbation of A given by `modified_cholesky`.
    This never fails on a finite symmetric A, even when A is singular.

    Parameters
    ----------
    A : array_like, shape (n, n)
        Symmetric matrix.
    b : array_like, shape (n,) or (n, k)
        Right-hand side.

    Returns
    -------
    p : ndarray
        Solution with the same shape as `b`.
    """
    L = modified_cholesky(A, delta=delta)
    z = forward_substitution(L, gnp.asarray(b))
    return backward_substitution(L, z)


class BlockCholesky:
    """Cholesky factorization of a block-diagonal SPD matrix.

    Parameters
    ----------
    blocks : sequence of ndarray
        Diagonal blocks, in order.
    slices : sequence of slice
        Row slices of each block in the full matrix.

    Raises
    ------
    NumericalError
        If a block is not square or not positive definite.
    """

    def __init__(self, blocks, slices):
        if len(blocks) != len(slices):
            raise ValueError("blocks and slices must have the same length")
        self.slices = tuple(slices)
        self.factors = [gnp.cholesky(b) for b in blocks]
        self.n = sum(b.shape[0] for b in blocks)

    def __len__(self):
        return len(self.factors)

    def logdet(self):
        """log|Omega| as the sum of the block log-determinants."""
        return float(sum(2.0 * gnp.sum(gnp.log(gnp.diag(C))) for C in self.factors))

    def solve(self, b):
        """Return Omega^{-1} b for b of shape (n,) or (n, k)."""
        b = gnp.asarray(b)
        out = gnp.empty(b.shape)
        for sl, C in zip(self.slices, self.factors):
            out[sl] = gnp.cho_solve((C, True), b[sl])
        return out

    def solve_block(self, k, b):
        """Return Omega_k^{-1} b for the k-th block."""
        return gnp.cho_solve((self.factors[k], True), b)
