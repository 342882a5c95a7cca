import numpy as np
import pytest

import gmpest.num as gnp
from gmpest.core.linalg import (
    BlockCholesky,
    backward_substitution,
    forward_substitution,
    modified_cholesky,
    solve_modified_cholesky,
)
from gmpest.errors import NumericalError


def test_modified_cholesky_of_positive_definite_matrix():
    A = gnp.array([[4.0, 1.0, 0.5], [1.0, 3.0, 0.2], [0.5, 0.2, 2.0]])
    L = modified_cholesky(A)
    assert gnp.allclose(L, np.linalg.cholesky(A))
    assert gnp.allclose(L, np.tril(L))


def test_modified_cholesky_of_indefinite_matrix():
    A = gnp.array([[1.0, 2.0], [2.0, 1.0]])
    L = modified_cholesky(A)
    E = L @ L.T - A
    # the perturbation is diagonal and nonnegative
    assert abs(E[0, 1]) < 1e-12 and abs(E[1, 0]) < 1e-12
    assert gnp.all(gnp.diag(E) >= -1e-12)
    assert gnp.all(gnp.diag(L) > 0.0)


def test_solve_never_fails_on_singular_input():
    p = solve_modified_cholesky(gnp.zeros((3, 3)), gnp.ones(3))
    assert gnp.all(gnp.isfinite(p))
    p = solve_modified_cholesky(gnp.ones((3, 3)), gnp.array([1.0, -1.0, 0.5]))
    assert gnp.all(gnp.isfinite(p))


def test_one_by_one():
    L = modified_cholesky(gnp.array([[-3.0]]))
    assert L[0, 0] == pytest.approx(np.sqrt(3.0))
    p = solve_modified_cholesky(gnp.array([[4.0]]), gnp.array([2.0]))
    assert p[0] == pytest.approx(0.5)


def test_solve_matches_exact_solution_when_positive_definite():
    rng = np.random.default_rng(3)
    X = rng.standard_normal((10, 4))
    A = X.T @ X + 4.0 * np.eye(4)
    b = rng.standard_normal(4)
    assert gnp.allclose(solve_modified_cholesky(A, b), np.linalg.solve(A, b))


def test_triangular_substitutions():
    L = gnp.array([[2.0, 0.0], [1.0, 3.0]])
    b = gnp.array([2.0, 7.0])
    z = forward_substitution(L, b)
    assert gnp.allclose(L @ z, b)
    p = backward_substitution(L, z)
    assert gnp.allclose(L.T @ p, z)


def test_modified_cholesky_rejects_non_square():
    with pytest.raises(ValueError):
        modified_cholesky(gnp.ones((2, 3)))


def test_block_cholesky():
    A1 = gnp.array([[2.0, 0.5], [0.5, 1.0]])
    A2 = gnp.array([[3.0]])
    A3 = gnp.array([[4.0, 1.0, 0.0], [1.0, 2.0, 0.3], [0.0, 0.3, 1.0]])
    slices = (slice(0, 2), slice(2, 3), slice(3, 6))
    chol = BlockCholesky([A1, A2, A3], slices)
    K = gnp.block_diag(A1, A2, A3)
    b = np.arange(1.0, 7.0)
    B = np.column_stack([b, b ** 2])

    assert len(chol) == 3 and chol.n == 6
    assert chol.logdet() == pytest.approx(np.linalg.slogdet(K)[1])
    assert gnp.allclose(chol.solve(b), np.linalg.solve(K, b))
    assert gnp.allclose(chol.solve(B), np.linalg.solve(K, B))
    assert gnp.allclose(chol.solve_block(2, b[3:]), np.linalg.solve(A3, b[3:]))


def test_block_cholesky_not_positive_definite():
    with pytest.raises(NumericalError):
        BlockCholesky([gnp.array([[1.0, 2.0], [2.0, 1.0]])], (slice(0, 2),))
    with pytest.raises(NumericalError):
        gnp.cholesky(gnp.ones((2, 3)))
    assert gnp._is_linalg_exception(NumericalError("x"))
