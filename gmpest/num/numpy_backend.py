# gmpest/num/numpy_backend.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""NumPy numerical backend for gmpest.

This module defines the NumPy/SciPy implementation of the gmpest.num API.
"""

import builtins
from typing import Optional

from gmpest.config import get_config
from gmpest.errors import NumericalError

_config = get_config()

_LINALG_ERROR_KEYWORDS = (
    "singular",
    "not positive definite",
    "not positive-definite",
    "cholesky",
    "decomposition",
    "factorization",
    "matrix is not invertible",
    "inverse",
    "ill-conditioned",
    "linalg",
    "lapack",
    "array must not contain infs or nans",
)


# -----------------------------------------------------
#
#                      NUMPY
#
# -----------------------------------------------------

import numpy

_np_dtype = numpy.float64
_config.dtype_resolved = _np_dtype

from numpy import (
    where,
    any,
    isfinite,
    allclose,
    unique,
    vstack,
    column_stack,
    concatenate,
    empty_like,
    diag,
    arange,
    argsort,
    bincount,
    linspace,
    abs,
    sqrt,
    exp,
    log,
    sin,
    cos,
    sum,
    cumsum,
    max,
    maximum,
    trace,
    tril,
    all,
)
from numpy.linalg import cond, inv
from numpy import pi
from numpy import finfo
from scipy.linalg import (
    block_diag,
    cholesky as _scipy_cholesky,
    cho_solve,
    solve,
    solve_triangular,
)
from scipy.stats import norm as normal
from scipy.stats import multivariate_normal as scipy_mvnormal

# ..................................................

eps = finfo(_np_dtype).eps

# ..................................................


def _is_linalg_exception(exc: Exception) -> bool:
    if isinstance(exc, (numpy.linalg.LinAlgError, NumericalError)):
        return True
    msg = str(exc).lower()
    return builtins.any(keyword in msg for keyword in _LINALG_ERROR_KEYWORDS)


# ..................................................


def array(x, dtype=None):
    if dtype is not None:
        return numpy.array(x, dtype=dtype)
    out = numpy.array(x)
    if numpy.issubdtype(out.dtype, numpy.number):
        return out.astype(_np_dtype, copy=False)
    return out


def asarray(x, dtype=None):
    if dtype is not None:
        return numpy.asarray(x, dtype=dtype)
    if isinstance(x, numpy.ndarray):
        if numpy.issubdtype(x.dtype, numpy.floating):
            return x.astype(_np_dtype, copy=False)
        return x
    elif isinstance(x, (int, float)):
        return numpy.array([x], dtype=_np_dtype)
    else:
        out = numpy.asarray(x)
        if numpy.issubdtype(out.dtype, numpy.floating):
            return out.astype(_np_dtype, copy=False)
        return out


def empty(shape, dtype=None):
    return numpy.empty(shape, dtype=_np_dtype if dtype is None else dtype)


def zeros(shape, dtype=None):
    return numpy.zeros(shape, dtype=_np_dtype if dtype is None else dtype)


def ones(shape, dtype=None):
    return numpy.ones(shape, dtype=_np_dtype if dtype is None else dtype)


def full(shape, fill_value, dtype=None):
    return numpy.full(
        shape, fill_value, dtype=_np_dtype if dtype is None else dtype
    )


def eye(n, m=None, k=0, dtype=None):
    return numpy.eye(n, M=m, k=k, dtype=_np_dtype if dtype is None else dtype)


# ..................................................


def cholesky(A):
    """Lower Cholesky factor of a square positive definite matrix.

    Raises
    ------
    NumericalError
        If `A` is not square or not positive definite.
    """
    A = numpy.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise NumericalError(f"Cholesky factorization needs a square matrix, got shape {A.shape}")
    try:
        return _scipy_cholesky(A, lower=True, check_finite=True)
    except (numpy.linalg.LinAlgError, ValueError) as exc:
        raise NumericalError(f"Matrix is not positive definite: {exc}") from exc


def cholesky_logdet(A):
    """Log-determinant of a positive definite matrix from its Cholesky factor."""
    C = cholesky(A)
    return 2.0 * sum(log(diag(C)))


def rcond(A):
    """Reciprocal condition number of A in the 1-norm (0 when singular)."""
    c = cond(A, 1)
    if not numpy.isfinite(c):
        return 0.0
    return 1.0 / c


# ..................................................

# Build one global RNG (or let the user set the seed somewhere):
_np_rng = numpy.random.default_rng(seed=_config.seed)


def set_seed(seed: int) -> None:
    """Set the global NumPy generator seed."""
    global _np_rng
    _config.seed = seed
    _np_rng = numpy.random.default_rng(seed=seed)


def default_rng(seed: Optional[int] = None):
    """Independent generator; falls back to the global one when seed is None."""
    if seed is None:
        return _np_rng
    return numpy.random.default_rng(seed=seed)


class multivariate_normal:
    @staticmethod
    def logpdf(x, mean=0.0, cov=1.0):
        x = numpy.asarray(x)
        cov = numpy.asarray(cov)
        if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
            raise ValueError("cov must be a square 2D matrix.")
        m = numpy.asarray(mean)
        if m.ndim == 0:
            m = numpy.full((cov.shape[0],), float(m), dtype=_np_dtype)
        return scipy_mvnormal.logpdf(x, mean=m, cov=cov)
