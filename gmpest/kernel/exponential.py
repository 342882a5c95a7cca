# gmpest/kernel/exponential.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import gmpest.num as gnp
from .base import (
    CovarianceModel,
    IsotropicCovarianceModel,
    register_covariance_model,
)


def exponential_kernel(h):
    """Exponential kernel.

    .. math::
        k(h) = \\exp(-h)

    Parameters
    ----------
    h : gnp.array
        Distances scaled by the range.

    Returns
    -------
    gnp.array
        Kernel values.
    """
    return gnp.exp(-h)


@register_covariance_model
class Exponential(IsotropicCovarianceModel):
    """Exponential correlation with range h.

    .. math::
        \\Omega_k = e^{\\theta_1} + e^{\\theta_2 - d\\, e^{-\\theta_3}}
    """

    name = "Exp"

    def _intra(self, theta_trans, d):
        return gnp.exp(theta_trans[1]) * exponential_kernel(d * gnp.exp(-theta_trans[2]))

    def _intra_range_derivative(self, theta_trans, d):
        return d * gnp.exp(theta_trans[1] - d * gnp.exp(-theta_trans[2]) - theta_trans[2])


@register_covariance_model
class AnisotropicExponential(CovarianceModel):
    """Exponential correlation with geometric anisotropy along the fault.

    .. math::
        r = \\sqrt{d_{par}^2 + e^{\\theta_4} d_{nor}^2}, \\qquad
        \\Omega_k = e^{\\theta_1} + e^{\\theta_2 - r\\, e^{-\\theta_3}}

    Parameters are [log(tau2), log(sigma2), log(h), log(a^2)] where a is
    the anisotropy ratio between fault-normal and fault-parallel decay.
    """

    name = "ExpAni"
    param_names = ("tau2", "sigma2", "h", "anisotropy2")

    @staticmethod
    def anisotropic_distance(theta_trans, parallel, normal):
        return gnp.sqrt(parallel ** 2 + gnp.exp(theta_trans[3]) * normal ** 2)

    def correlation(self, theta_trans, h):
        theta_trans = self.check_params(theta_trans)
        return exponential_kernel(gnp.asarray(h) * gnp.exp(-theta_trans[2]))

    def _intra(self, theta_trans, r):
        return gnp.exp(theta_trans[1] - r * gnp.exp(-theta_trans[2]))

    def _block(self, theta_trans, dist, k):
        r = self.anisotropic_distance(theta_trans, dist.parallel[k], dist.normal[k])
        return gnp.exp(theta_trans[0]) + self._intra(theta_trans, r)

    def _gradient_block(self, theta_trans, dist, k):
        normal = dist.normal[k]
        r = self.anisotropic_distance(theta_trans, dist.parallel[k], normal)
        intra = self._intra(theta_trans, r)
        # dr/dtheta_4 is 0/0 for a station paired with itself; its limit
        # contribution is zero
        positive = r > 0.0
        inv_r = gnp.where(positive, 1.0 / gnp.where(positive, r, 1.0), 0.0)
        return [
            gnp.full(r.shape, gnp.exp(theta_trans[0])),
            intra,
            r * gnp.exp(-theta_trans[2]) * intra,
            -0.5 * normal ** 2 * inv_r * gnp.exp(theta_trans[3] - theta_trans[2]) * intra,
        ]
