# gmpest/core/result.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""Result records returned by the estimator."""
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

import gmpest.num as gnp
from gmpest.misc.dataframe import DataFrame


@dataclass
class ParameterSet:
    """Values attached to (beta, gamma, theta)."""

    beta: np.ndarray
    gamma: np.ndarray
    theta: np.ndarray

    def stacked(self):
        return gnp.concatenate([self.beta, self.gamma, self.theta], axis=0)

    def as_dict(self):
        return {"beta": self.beta, "gamma": self.gamma, "theta": self.theta}


@dataclass
class InformationCriteria:
    aic: float
    bic: float

    def as_dict(self):
        return {"AIC": self.aic, "BIC": self.bic}


@dataclass
class EstimationResult:
    """Maximum likelihood estimates and their asymptotic inference.

    Attributes
    ----------
    log_likelihood : float
        Maximized log-likelihood.
    estimates, standard_errors : ParameterSet
        Point estimates and asymptotic standard errors, with theta in its
        natural parameterization (tau2, sigma2, h, ...).
    confidence_intervals : ParameterSet
        (k, 2) arrays of lower and upper bounds.
    information_criteria : InformationCriteria
    confidence_level : float
        Level of the intervals, in percent.
    covariance_type : str
        Token of the covariance model.
    param_names : tuple of str
        Names of the theta entries.
    iterations : int
        Number of scoring iterations.
    converged : bool
    loglikelihood_history : list of float
        Accepted log-likelihood values, non-decreasing.
    theta_standard_errors_degraded : bool
        True when Itt was numerically singular and the standard errors of
        theta were set to zero.
    theta_trans, theta_trans_standard_errors, theta_trans_confidence_intervals
        The same quantities for theta_trans = log(theta).
    """

    log_likelihood: float
    estimates: ParameterSet
    standard_errors: ParameterSet
    confidence_intervals: ParameterSet
    information_criteria: InformationCriteria
    confidence_level: float
    covariance_type: str
    param_names: tuple
    iterations: int
    converged: bool
    loglikelihood_history: List[float] = field(default_factory=list)
    theta_standard_errors_degraded: bool = False
    theta_trans: Optional[np.ndarray] = None
    theta_trans_standard_errors: Optional[np.ndarray] = None
    theta_trans_confidence_intervals: Optional[np.ndarray] = None

    @property
    def num_params(self):
        return int(self.estimates.stacked().shape[0])

    def as_dict(self):
        """Nested dictionary with the layout of the original output record."""
        return {
            "LogLikelihood": self.log_likelihood,
            "ParameterEstimates": self.estimates.as_dict(),
            "StandardError": self.standard_errors.as_dict(),
            "ConfidenceInterval": self.confidence_intervals.as_dict(),
            "InformationCriteria": self.information_criteria.as_dict(),
        }

    def rownames(self):
        est = self.estimates
        return (
            [f"beta{i}" for i in range(est.beta.shape[0])]
            + [f"gamma{i}" for i in range(est.gamma.shape[0])]
            + list(self.param_names)
        )

    def summary(self):
        """Table of estimates, standard errors and interval bounds."""
        ci = self.confidence_intervals.stacked()
        data = gnp.column_stack(
            [self.estimates.stacked(), self.standard_errors.stacked(), ci[:, 0], ci[:, 1]]
        )
        level = f"{self.confidence_level:g}%"
        return DataFrame(data, ["estimate", "std err", f"{level} low", f"{level} up"], self.rownames())

    def __str__(self):
        ic = self.information_criteria
        return (
            f"Estimation result ({self.covariance_type} covariance):\n"
            f"  Log-likelihood: {self.log_likelihood:.4f}\n"
            f"  Iterations: {self.iterations}\n"
            f"  AIC: {ic.aic:.4f}  BIC: {ic.bic:.4f}\n"
            f"{self.summary()}"
        )
