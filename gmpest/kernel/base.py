# gmpest/kernel/base.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Covariance model interface for event-grouped residuals.

A covariance model maps unconstrained parameters
``theta_trans = log(theta)`` and the per-event separation distances
to a block-diagonal covariance matrix (one block per event), its
log-determinant, and its partial derivatives with respect to each
entry of ``theta_trans``.

Every block has the form

.. math::
    \\Omega_k = \\tau^2 \\mathbf{1}\\mathbf{1}^T + \\sigma^2 R_k(\\theta)

where :math:`\\tau^2 = e^{\\theta_1}` is the inter-event variance and
:math:`\\sigma^2 R_k` the intra-event part.
"""
from abc import ABC, abstractmethod

import gmpest.num as gnp
from gmpest.errors import ConfigurationError

_REGISTRY = {}


def register_covariance_model(cls):
    """Class decorator adding a covariance model to the token registry."""
    _REGISTRY[cls.name] = cls
    return cls


def available_covariance_models():
    """Return the tokens of all registered covariance models."""
    return tuple(_REGISTRY)


def get_covariance_model(covariance_type):
    """Return the covariance model selected by `covariance_type`.

    Parameters
    ----------
    covariance_type : str or CovarianceModel
        One of the registered tokens ('No', 'Exp', 'SExp', 'Matern1.5',
        'ExpAni'), matched case-insensitively, or a model instance
        (returned unchanged).

    Raises
    ------
    ConfigurationError
        If the token is not supported.
    """
    if isinstance(covariance_type, CovarianceModel):
        return covariance_type
    if isinstance(covariance_type, str):
        if covariance_type in _REGISTRY:
            return _REGISTRY[covariance_type]()
        for name, cls in _REGISTRY.items():
            if name.lower() == covariance_type.lower():
                return cls()
    raise ConfigurationError(
        f"Unsupported covariance type {covariance_type!r}; "
        f"expected one of {available_covariance_models()}"
    )


class CovarianceModel(ABC):
    """Block-diagonal covariance model (strategy interface).

    Subclasses set `name` and `param_names`, and implement `_block`
    and `_gradient_block` for a single event. Instances hold no state.
    """

    name = None
    param_names = ()

    def __repr__(self):
        return f"<gmpest.kernel.{type(self).__name__} '{self.name}'>"

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    @property
    def num_params(self):
        return len(self.param_names)

    def check_params(self, theta_trans):
        """Return `theta_trans` as a 1D array, checking its length."""
        theta_trans = gnp.asarray(theta_trans).reshape(-1)
        if theta_trans.shape[0] != self.num_params:
            raise ConfigurationError(
                f"Covariance model '{self.name}' takes {self.num_params} "
                f"parameters {self.param_names}, got {theta_trans.shape[0]}"
            )
        return theta_trans

    # ------------------------------------------------------------------
    # per-event hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _block(self, theta_trans, dist, k):
        """Covariance block of event `k`."""

    @abstractmethod
    def _gradient_block(self, theta_trans, dist, k):
        """List of derivatives of block `k`, one per parameter."""

    @abstractmethod
    def correlation(self, theta_trans, h):
        """Intra-event correlation at distances `h` (isotropic part)."""

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def covariance_blocks(self, theta_trans, dist):
        """List of per-event covariance blocks, in group order."""
        theta_trans = self.check_params(theta_trans)
        return [self._block(theta_trans, dist, k) for k in range(len(dist))]

    def covariance(self, theta_trans, dist):
        """Block-diagonal covariance matrix Omega (n x n)."""
        return gnp.block_diag(*self.covariance_blocks(theta_trans, dist))

    def logdet(self, theta_trans, dist, blocks=None):
        """Log-determinant of Omega, summed over events.

        Each block is factorized by Cholesky; a block that is not
        positive definite raises `NumericalError`.
        """
        if blocks is None:
            blocks = self.covariance_blocks(theta_trans, dist)
        return sum(float(gnp.cholesky_logdet(b)) for b in blocks)

    def gradient_blocks(self, theta_trans, dist):
        """Derivatives of Omega w.r.t. theta_trans, block by block.

        Returns
        -------
        list of list of ndarray
            ``out[i][k]`` is the derivative of block `k` with respect to
            ``theta_trans[i]``.
        """
        theta_trans = self.check_params(theta_trans)
        per_event = [self._gradient_block(theta_trans, dist, k) for k in range(len(dist))]
        return [[g[i] for g in per_event] for i in range(self.num_params)]

    def gradient(self, theta_trans, dist):
        """List of block-diagonal matrices dOmega/dtheta_trans[i]."""
        return [gnp.block_diag(*g) for g in self.gradient_blocks(theta_trans, dist)]


class IsotropicCovarianceModel(CovarianceModel):
    """Models of the form tau2 + sigma2 * rho(d / h)."""

    param_names = ("tau2", "sigma2", "h")

    @abstractmethod
    def _intra(self, theta_trans, d):
        """Intra-event part sigma2 * rho(d / h)."""

    @abstractmethod
    def _intra_range_derivative(self, theta_trans, d):
        """Derivative of the intra-event part w.r.t. log(h)."""

    def correlation(self, theta_trans, h):
        theta_trans = self.check_params(theta_trans)
        t = gnp.array(theta_trans)
        t[1] = 0.0
        return self._intra(t, gnp.asarray(h))

    def _block(self, theta_trans, dist, k):
        d = dist.distance[k]
        return gnp.exp(theta_trans[0]) + self._intra(theta_trans, d)

    def _gradient_block(self, theta_trans, dist, k):
        d = dist.distance[k]
        return [
            gnp.full(d.shape, gnp.exp(theta_trans[0])),
            self._intra(theta_trans, d),
            self._intra_range_derivative(theta_trans, d),
        ]
