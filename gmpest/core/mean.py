# gmpest/core/mean.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Mean-function interface of the ground-motion model.

The mean of the observations is B(x, gamma) @ beta, where B is a design
matrix that depends linearly on the coefficients beta and nonlinearly
on gamma. The estimator needs two things from the user: the design
matrix B and its derivatives with respect to each entry of gamma.
Both must be pure functions of (x, gamma).
"""
from abc import ABC, abstractmethod

import gmpest.num as gnp
from gmpest.errors import ConfigurationError


class MeanFunction(ABC):
    """Nonlinear mean function with linear coefficients.

    Subclasses implement

    - ``design(x, gamma)`` returning B with shape (n, p),
    - ``gradient(x, gamma)`` returning a list of len(gamma) arrays of
      shape (n, p), the i-th being dB/dgamma_i.
    """

    @abstractmethod
    def design(self, x, gamma):
        """Design matrix of the linear coefficients."""

    @abstractmethod
    def gradient(self, x, gamma):
        """Derivatives of the design matrix w.r.t. gamma."""


class CallableMeanFunction(MeanFunction):
    """Wrap a pair of callables ``design(x, gamma)`` and ``gradient(x, gamma)``.

    Examples
    --------
    >>> mean = CallableMeanFunction(
    ...     lambda x, g: gnp.column_stack([gnp.ones(x.shape[0]), gnp.log(x[:, 0] + g[0])]),
    ...     lambda x, g: [gnp.column_stack([gnp.zeros(x.shape[0]), 1.0 / (x[:, 0] + g[0])])],
    ... )
    """

    def __init__(self, design, gradient):
        if not callable(design) or not callable(gradient):
            raise TypeError("design and gradient must be callable")
        self._design = design
        self._gradient = gradient

    def __repr__(self):
        name = getattr(self._design, "__name__", repr(self._design))
        return f"<gmpest.core.CallableMeanFunction design={name}>"

    def design(self, x, gamma):
        return self._design(x, gamma)

    def gradient(self, x, gamma):
        return self._gradient(x, gamma)


def as_mean_function(mean_function=None, mean_design=None, mean_gradient=None):
    """Return a MeanFunction from either an instance or a pair of callables."""
    if mean_function is not None:
        if mean_design is not None or mean_gradient is not None:
            raise ConfigurationError(
                "Provide either mean_function or (mean_design, mean_gradient), not both."
            )
        if isinstance(mean_function, MeanFunction):
            return mean_function
        if isinstance(mean_function, (tuple, list)) and len(mean_function) == 2:
            return CallableMeanFunction(*mean_function)
        raise ConfigurationError(
            "mean_function must be a MeanFunction or a (design, gradient) pair"
        )
    if mean_design is None or mean_gradient is None:
        raise ConfigurationError("Provide mean_function or (mean_design, mean_gradient).")
    return CallableMeanFunction(mean_design, mean_gradient)


def evaluate_design(mean_function, x, gamma, n):
    """Call ``mean_function.design`` and check the shape of the result."""
    B = gnp.asarray(mean_function.design(x, gamma))
    if B.ndim == 1:
        B = B.reshape(-1, 1)
    if B.ndim != 2 or B.shape[0] != n:
        raise ConfigurationError(
            f"design(x, gamma) must return an ({n}, p) matrix, got shape {B.shape}"
        )
    return B


def evaluate_gradient(mean_function, x, gamma, shape):
    """Call ``mean_function.gradient`` and check it returns one (n, p) matrix
    per nonlinear coefficient."""
    grads = [gnp.asarray(g) for g in mean_function.gradient(x, gamma)]
    if len(grads) != gnp.asarray(gamma).reshape(-1).shape[0]:
        raise ConfigurationError(
            f"gradient(x, gamma) must return {len(gamma)} matrices, got {len(grads)}"
        )
    for i, g in enumerate(grads):
        if g.ndim == 1:
            g = g.reshape(-1, 1)
            grads[i] = g
        if g.shape != shape:
            raise ConfigurationError(
                f"gradient(x, gamma)[{i}] has shape {g.shape}, expected {shape}"
            )
    return grads
