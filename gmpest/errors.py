# gmpest/errors.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""Exceptions raised by gmpest."""


class GMPEstError(Exception):
    """Base class for all gmpest errors."""


class ConfigurationError(GMPEstError, ValueError):
    """Invalid estimation setup (unknown covariance type, bad inputs...)."""


class NumericalError(GMPEstError, RuntimeError):
    """A matrix that must be square and positive definite is not."""


class NonConvergenceError(GMPEstError, RuntimeError):
    """The scoring iterations could not make progress.

    Attributes
    ----------
    iterations : int
        Number of accepted outer iterations before the failure.
    log_likelihood : float
        Last accepted log-likelihood value.
    """

    def __init__(self, message, iterations=None, log_likelihood=None):
        super().__init__(message)
        self.iterations = iterations
        self.log_likelihood = log_likelihood
