# gmpest/core/inference.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Asymptotic inference after convergence of the scoring algorithm.

Standard errors come from the expected information matrices, with the
delta method for theta = exp(theta_trans). Confidence intervals are
symmetric in (beta, gamma, theta_trans) and mapped to theta by
exponentiation.
"""
from math import log

import gmpest.num as gnp
from gmpest.config import get_logger
from gmpest.errors import ConfigurationError
from .result import EstimationResult, InformationCriteria, ParameterSet

_logger = get_logger()


def standard_errors(quantities):
    """Asymptotic standard errors of (beta, gamma, theta_trans).

    Parameters
    ----------
    quantities : gmpest.core.fisher.ScoringQuantities
        Information blocks at the estimates.

    Returns
    -------
    se_beta, se_gamma, se_theta_trans : ndarray
    degraded : bool
        True if Itt could not be reliably inverted, in which case
        se_theta_trans is zero.

    Notes
    -----
    With S = Igg - Igb Ibb^{-1} Igbᵀ,

    - Var(gamma) = S^{-1},
    - Var(beta) = Ibb^{-1} + Ibb^{-1} Igbᵀ S^{-1} Igb Ibb^{-1},
    - Var(theta_trans) = Itt^{-1}.
    """
    Ibb_inv = gnp.inv(quantities.Ibb)
    S_inv = gnp.inv(quantities.schur_gamma())
    A = Ibb_inv @ quantities.Igb.T
    se_gamma = gnp.sqrt(gnp.diag(S_inv))
    se_beta = gnp.sqrt(gnp.diag(Ibb_inv + A @ S_inv @ A.T))

    Itt = quantities.Itt
    degraded = gnp.rcond(Itt) < gnp.eps
    if degraded:
        _logger.warning(
            "Information matrix of the covariance parameters is singular "
            "to working precision; their standard errors are set to zero."
        )
        se_theta_trans = gnp.zeros(Itt.shape[0])
    else:
        se_theta_trans = gnp.sqrt(gnp.diag(gnp.inv(Itt)))
    return se_beta, se_gamma, se_theta_trans, degraded


def normal_quantile(confidence_level):
    """Two-sided standard normal quantile for a level given in percent."""
    if not 0.0 < confidence_level < 100.0:
        raise ConfigurationError("confidence_level must be in (0, 100)")
    return float(gnp.normal.ppf(1.0 - (1.0 - confidence_level / 100.0) / 2.0))


def confidence_intervals(estimates, se, confidence_level):
    """Symmetric intervals estimates -/+ z se as a (k, 2) array."""
    half = gnp.asarray(se) * normal_quantile(confidence_level)
    estimates = gnp.asarray(estimates)
    return gnp.column_stack([estimates - half, estimates + half])


def information_criteria(ll, num_params, n):
    """AIC = -2 ll + 2 k and BIC = -2 ll + k log(n)."""
    return InformationCriteria(
        aic=-2.0 * ll + 2.0 * num_params,
        bic=-2.0 * ll + num_params * log(n),
    )


def report(scoring_result, covariance_model, confidence_level):
    """Build the EstimationResult of a converged scoring run.

    Parameters
    ----------
    scoring_result : gmpest.core.scoring.ScoringResult
    covariance_model : gmpest.kernel.CovarianceModel
    confidence_level : float
        Level of the confidence intervals, in percent.

    Returns
    -------
    EstimationResult
    """
    state = scoring_result.state
    p, q = state.beta.shape[0], state.gamma.shape[0]
    se_beta, se_gamma, se_theta_trans, degraded = standard_errors(scoring_result.quantities)

    # unconstrained parameterization
    est_trans = gnp.concatenate([state.beta, state.gamma, state.theta_trans])
    se_trans = gnp.concatenate([se_beta, se_gamma, se_theta_trans])
    ci_trans = confidence_intervals(est_trans, se_trans, confidence_level)

    # natural parameterization, delta method for theta
    theta = gnp.exp(state.theta_trans)
    ci = gnp.array(ci_trans)
    ci[p + q :, :] = gnp.exp(ci[p + q :, :])

    n = state.residual.shape[0]
    num_params = est_trans.shape[0]
    return EstimationResult(
        log_likelihood=state.ll,
        estimates=ParameterSet(beta=state.beta, gamma=state.gamma, theta=theta),
        standard_errors=ParameterSet(beta=se_beta, gamma=se_gamma, theta=se_theta_trans * theta),
        confidence_intervals=ParameterSet(
            beta=ci[:p], gamma=ci[p : p + q], theta=ci[p + q :]
        ),
        information_criteria=information_criteria(state.ll, num_params, n),
        confidence_level=float(confidence_level),
        covariance_type=covariance_model.name,
        param_names=tuple(covariance_model.param_names),
        iterations=scoring_result.iterations,
        converged=scoring_result.converged,
        loglikelihood_history=list(scoring_result.history),
        theta_standard_errors_degraded=bool(degraded),
        theta_trans=state.theta_trans,
        theta_trans_standard_errors=se_theta_trans,
        theta_trans_confidence_intervals=ci_trans[p + q :],
    )
