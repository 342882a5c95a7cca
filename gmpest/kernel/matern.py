# gmpest/kernel/matern.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
from math import sqrt
import gmpest.num as gnp
from .base import IsotropicCovarianceModel, register_covariance_model


def matern32_kernel(h):
    """Matérn kernel with regularity :math:`\\nu = 3/2`.

    .. math::
        K(h) = (1 + \\sqrt{3}\\,h) \\exp(-\\sqrt{3}\\,h)

    Parameters
    ----------
    h : gnp.array
        Distances scaled by the range.

    Returns
    -------
    gnp.array
        Kernel values.
    """
    t = sqrt(3.0) * h
    return (1.0 + t) * gnp.exp(-t)


@register_covariance_model
class Matern15(IsotropicCovarianceModel):
    """Matérn 3/2 correlation with range h.

    .. math::
        \\Omega_k = e^{\\theta_1}
            + e^{\\theta_2 - \\sqrt{3} d e^{-\\theta_3}}
              (1 + \\sqrt{3} d e^{-\\theta_3})
    """

    name = "Matern1.5"

    def _intra(self, theta_trans, d):
        return gnp.exp(theta_trans[1]) * matern32_kernel(d * gnp.exp(-theta_trans[2]))

    def _intra_range_derivative(self, theta_trans, d):
        # 3 d^2 exp(theta_2 - sqrt(3) d / h - 2 theta_3)
        return 3.0 * d ** 2 * gnp.exp(
            theta_trans[1] - sqrt(3.0) * d * gnp.exp(-theta_trans[2]) - 2.0 * theta_trans[2]
        )
