""" Plot the intra-event correlation functions of the covariance models

Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
"""
import gmpest.num as gnp
import gmpest as gm
import gmpest.misc.plotutils


def main(show=True):
    h = gnp.linspace(0.0, 50.0, 500)
    theta_trans = gnp.log(gnp.array([0.1, 1.0, 10.0]))

    fig = gm.misc.plotutils.Figure()

    for name in ["Exp", "SExp", "Matern1.5"]:
        model = gm.kernel.get_covariance_model(name)
        fig.plot(h, model.correlation(theta_trans, h), label=name)

    fig.title('Correlation functions, range h = 10 km')
    fig.xylabels('separation distance (km)', 'correlation')
    if show:
        fig.show(grid=True, legend=True)


if __name__ == '__main__':
    main()
