# gmpest/core/fisher.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Scores and expected (Fisher) information matrices.

This module provides, at a given iterate:
- the score with respect to gamma and to theta_trans,
- the expected information blocks Igg, Igb, Ibb and Itt,
all computed event by event from the block-diagonal covariance.
"""
from dataclasses import dataclass

import numpy as np

import gmpest.num as gnp


@dataclass
class ScoringQuantities:
    """Scores and information blocks at one iterate.

    Attributes
    ----------
    Sg : ndarray (q,)
        Score w.r.t. gamma.
    St : ndarray (r,)
        Score w.r.t. theta_trans.
    Igg : ndarray (q, q)
    Igb : ndarray (q, p)
    Ibb : ndarray (p, p)
    Itt : ndarray (r, r)
    """

    Sg: np.ndarray
    St: np.ndarray
    Igg: np.ndarray
    Igb: np.ndarray
    Ibb: np.ndarray
    Itt: np.ndarray

    def schur_gamma(self):
        """Information on gamma with beta profiled out:
        Igg - Igb Ibb^{-1} Igbᵀ."""
        return self.Igg - self.Igb @ gnp.solve(self.Ibb, self.Igb.T, assume_a="pos")


def mean_information(state, mean_gradients):
    """Score and information blocks for the mean parameters.

    Parameters
    ----------
    state : gmpest.core.likelihood.ProfileState
        Current iterate.
    mean_gradients : list of ndarray (n, p)
        dB/dgamma_i, one per nonlinear coefficient.

    Returns
    -------
    Sg, Igg, Igb, Ibb
        With M = [dB/dgamma_1 beta, ..., dB/dgamma_q beta]:
        Sg = Mᵀ Omega^{-1} r, Igg = Mᵀ Omega^{-1} M,
        Igb = Mᵀ Omega^{-1} B, Ibb = Bᵀ Omega^{-1} B.
    """
    M = gnp.column_stack([G @ state.beta for G in mean_gradients])
    Oinv_M = state.chol.solve(M)
    Sg = Oinv_M.T @ state.residual
    Igg = M.T @ Oinv_M
    Igb = Oinv_M.T @ state.B
    Ibb = state.B.T @ state.chol.solve(state.B)
    return Sg, 0.5 * (Igg + Igg.T), Igb, 0.5 * (Ibb + Ibb.T)


def covariance_information(state, covariance_gradients):
    """Score and information block for the covariance parameters.

    Parameters
    ----------
    state : gmpest.core.likelihood.ProfileState
        Current iterate.
    covariance_gradients : list of list of ndarray
        ``covariance_gradients[i][k]`` is dOmega_k / dtheta_trans_i.

    Returns
    -------
    St : ndarray (r,)
        St_i = -1/2 tr(Omega^{-1} G_i (I - Omega^{-1} r rᵀ)).
    Itt : ndarray (r, r)
        Itt_ij = 1/2 tr(Omega^{-1} G_i Omega^{-1} G_j).

    Notes
    -----
    With u = Omega^{-1} r, the trace in St_i splits over events as
    sum_k tr(Omega_k^{-1} G_ik) - u_kᵀ G_ik u_k.
    """
    r = len(covariance_gradients)
    u = state.chol.solve(state.residual)
    St = gnp.zeros(r)
    Itt = gnp.zeros((r, r))
    for k, sl in enumerate(state.chol.slices):
        uk = u[sl]
        W = [state.chol.solve_block(k, G[k]) for G in covariance_gradients]
        for i in range(r):
            Gik = covariance_gradients[i][k]
            St[i] += -0.5 * (gnp.trace(W[i]) - uk @ Gik @ uk)
            for j in range(i, r):
                # tr(W_i W_j) without forming the product
                Itt[i, j] += 0.5 * gnp.sum(W[i] * W[j].T)
    Itt = gnp.tril(Itt.T, -1) + Itt
    return St, Itt


def scoring_quantities(state, mean_gradients, covariance_gradients):
    """Gather all scores and information blocks at the current iterate."""
    Sg, Igg, Igb, Ibb = mean_information(state, mean_gradients)
    St, Itt = covariance_information(state, covariance_gradients)
    return ScoringQuantities(Sg=Sg, St=St, Igg=Igg, Igb=Igb, Ibb=Ibb, Itt=Itt)
