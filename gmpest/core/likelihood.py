# gmpest/core/likelihood.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Profile log-likelihood of the ground-motion model.

For given nonlinear coefficients gamma and covariance parameters
theta_trans, the linear coefficients beta are eliminated by generalized
least squares,

.. math::
    \\beta = (B^T \\Omega^{-1} B)^{-1} B^T \\Omega^{-1} y,

and the Gaussian log-likelihood is evaluated at (beta, gamma, theta).
"""
from dataclasses import dataclass
from typing import List

import numpy as np

import gmpest.num as gnp
from .linalg import BlockCholesky
from .mean import evaluate_design


@dataclass
class ProfileState:
    """All quantities attached to one iterate of the scoring algorithm.

    Attributes
    ----------
    gamma : ndarray (q,)
        Nonlinear mean coefficients.
    theta_trans : ndarray (r,)
        Unconstrained covariance parameters, log(theta).
    B : ndarray (n, p)
        Design matrix at gamma.
    blocks : list of ndarray
        Per-event covariance blocks.
    chol : BlockCholesky
        Cholesky factors of the blocks.
    beta : ndarray (p,)
        GLS estimate of the linear coefficients.
    residual : ndarray (n,)
        y - B beta.
    logdet : float
        log|Omega|.
    ll : float
        Log-likelihood value.
    """

    gamma: np.ndarray
    theta_trans: np.ndarray
    B: np.ndarray
    blocks: List[np.ndarray]
    chol: BlockCholesky
    beta: np.ndarray
    residual: np.ndarray
    logdet: float
    ll: float

    @property
    def theta(self):
        return gnp.exp(self.theta_trans)


def gls_coefficients(B, y, chol):
    """Generalized least squares estimate of beta.

    Parameters
    ----------
    B : ndarray (n, p)
        Design matrix.
    y : ndarray (n,)
        Observations.
    chol : BlockCholesky
        Factorization of the covariance matrix.

    Returns
    -------
    beta : ndarray (p,)
    Ibb : ndarray (p, p)
        Bᵀ Omega^{-1} B.
    """
    Oinv_B = chol.solve(B)
    Ibb = B.T @ Oinv_B
    beta = gnp.solve(Ibb, Oinv_B.T @ y, assume_a="pos")
    return beta, Ibb


def gaussian_log_likelihood(residual, logdet, chol):
    """-n/2 log(2 pi) - 1/2 log|Omega| - 1/2 rᵀ Omega^{-1} r."""
    n = residual.shape[0]
    norm2 = float(residual @ chol.solve(residual))
    return -0.5 * n * gnp.log(2.0 * gnp.pi) - 0.5 * logdet - 0.5 * norm2


def profile_likelihood(mean_function, covariance_model, y, x, dist, gamma, theta_trans):
    """Evaluate the profile log-likelihood at (gamma, theta_trans).

    Parameters
    ----------
    mean_function : gmpest.core.MeanFunction
        Provides the design matrix B(x, gamma).
    covariance_model : gmpest.kernel.CovarianceModel
        Provides the covariance blocks.
    y : ndarray (n,)
        Observations, grouped by event.
    x : ndarray (n, ...)
        Mean-function covariates, grouped by event.
    dist : gmpest.core.distance.SeparationDistances
        Separation distances for the same grouping.
    gamma, theta_trans : ndarray
        Current parameters.

    Returns
    -------
    ProfileState

    Raises
    ------
    NumericalError
        If a covariance block is not positive definite.
    """
    gamma = gnp.asarray(gamma).reshape(-1)
    theta_trans = gnp.asarray(theta_trans).reshape(-1)
    B = evaluate_design(mean_function, x, gamma, y.shape[0])
    blocks = covariance_model.covariance_blocks(theta_trans, dist)
    chol = BlockCholesky(blocks, dist.groups.slices)
    beta, _ = gls_coefficients(B, y, chol)
    residual = y - B @ beta
    logdet = chol.logdet()
    ll = float(gaussian_log_likelihood(residual, logdet, chol))
    return ProfileState(
        gamma=gamma,
        theta_trans=theta_trans,
        B=B,
        blocks=blocks,
        chol=chol,
        beta=beta,
        residual=residual,
        logdet=logdet,
        ll=ll,
    )
