""" Estimate a ground-motion model with spatially correlated residuals
on a synthetic dataset

Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
"""
import gmpest.num as gnp
import gmpest as gm
import gmpest.misc.plotutils
from gmpest.misc.gmpe import FictitiousDepthGMPE
from gmpest.misc.synthetic import simulate_dataset


def main(show=True, covariance_type="Exp"):
    # -- dataset

    gmpe = FictitiousDepthGMPE(mref=5.0, rref=1.0)
    beta = gnp.array([1.5, 1.2, -1.1, 0.2])
    gamma = gnp.array([10.0])
    theta = gnp.array([0.2, 0.3, 12.0])

    data = simulate_dataset(
        gmpe,
        beta,
        gamma,
        theta,
        covariance_type=covariance_type,
        num_events=20,
        stations_per_event=25,
        shuffle=True,
        seed=42,
    )

    # -- estimation

    model = gm.Model(gmpe, covariance_type=covariance_type)
    result = model.estimate(
        data.y,
        data.x,
        data.w,
        data.event_id,
        gamma0=[8.0],
        theta0=[0.15, 0.25, 10.0],
        verbosity=1,
    )
    print(result)
    print("true theta:", theta)

    # -- plots

    gm.misc.plotutils.plot_loglikelihood_history(result, show=show)
    gm.misc.plotutils.plot_correlation(result, show=show)
    return result


if __name__ == '__main__':
    main()
