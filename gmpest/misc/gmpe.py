# gmpest/misc/gmpe.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Reference ground-motion prediction equation.

A simple functional form with a magnitude-dependent geometric spreading
and a fictitious depth h, the only nonlinear coefficient:

.. math::
    \\ln Y = b_0 + b_1 (M - M_{ref})
           + (b_2 + b_3 (M - M_{ref})) \\ln\\left(\\sqrt{R^2 + h^2} / R_{ref}\\right)

Covariates are given as x = [M, R] (magnitude, source-to-site distance
in km), one row per record.

h enters through h**2 only, so h and -h fit equally well and h = 0 is a
stationary point of the profiled likelihood. Start h away from 0 and use
data with records at distances comparable to h, otherwise the scoring
iterations drift toward h = 0.
"""
import gmpest.num as gnp
from gmpest.core.mean import MeanFunction


class FictitiousDepthGMPE(MeanFunction):
    """GMPE with linear coefficients (b0, b1, b2, b3) and gamma = [h].

    Parameters
    ----------
    mref : float
        Reference magnitude.
    rref : float
        Reference distance in km.
    """

    def __init__(self, mref=5.0, rref=1.0):
        self.mref = mref
        self.rref = rref

    def __repr__(self):
        return f"<gmpest.misc.gmpe.FictitiousDepthGMPE mref={self.mref} rref={self.rref}>"

    @staticmethod
    def _split(x):
        x = gnp.asarray(x)
        return x[:, 0], x[:, 1]

    def design(self, x, gamma):
        M, R = self._split(x)
        h = gamma[0]
        dm = M - self.mref
        lnr = 0.5 * gnp.log(R ** 2 + h ** 2) - gnp.log(self.rref)
        return gnp.column_stack([gnp.ones(M.shape[0]), dm, lnr, dm * lnr])

    def gradient(self, x, gamma):
        M, R = self._split(x)
        h = gamma[0]
        dm = M - self.mref
        dlnr = h / (R ** 2 + h ** 2)
        zero = gnp.zeros(M.shape[0])
        return [gnp.column_stack([zero, zero, dlnr, dm * dlnr])]
