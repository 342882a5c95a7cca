# gmpest/kernel/nugget.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import gmpest.num as gnp
from .base import CovarianceModel, register_covariance_model


@register_covariance_model
class NoCorrelation(CovarianceModel):
    """Inter-event variance and independent intra-event residuals.

    .. math::
        \\Omega_k = e^{\\theta_1} \\mathbf{1}\\mathbf{1}^T + e^{\\theta_2} I

    Parameters are [log(tau2), log(sigma2)]; there is no range.
    """

    name = "No"
    param_names = ("tau2", "sigma2")

    def correlation(self, theta_trans, h):
        h = gnp.asarray(h)
        return gnp.where(h == 0.0, 1.0, 0.0)

    def _block(self, theta_trans, dist, k):
        m = dist.distance[k].shape[0]
        return gnp.exp(theta_trans[0]) * gnp.ones((m, m)) + gnp.exp(theta_trans[1]) * gnp.eye(m)

    def _gradient_block(self, theta_trans, dist, k):
        m = dist.distance[k].shape[0]
        return [
            gnp.exp(theta_trans[0]) * gnp.ones((m, m)),
            gnp.exp(theta_trans[1]) * gnp.eye(m),
        ]
