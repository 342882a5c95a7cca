# gmpest/kernel/squared_exponential.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import gmpest.num as gnp
from .base import IsotropicCovarianceModel, register_covariance_model


def squared_exponential_kernel(h):
    """Squared exponential (Gaussian) kernel.

    .. math::
        k(h) = \\exp(-h^2 / 2)
    """
    return gnp.exp(-0.5 * h ** 2)


@register_covariance_model
class SquaredExponential(IsotropicCovarianceModel):
    """Squared exponential correlation with range h.

    .. math::
        \\Omega_k = e^{\\theta_1} + e^{\\theta_2 - d^2 e^{-2\\theta_3} / 2}
    """

    name = "SExp"

    def _intra(self, theta_trans, d):
        return gnp.exp(theta_trans[1]) * squared_exponential_kernel(d * gnp.exp(-theta_trans[2]))

    def _intra_range_derivative(self, theta_trans, d):
        return d ** 2 * gnp.exp(
            theta_trans[1] - 0.5 * d ** 2 * gnp.exp(-2.0 * theta_trans[2]) - 2.0 * theta_trans[2]
        )
