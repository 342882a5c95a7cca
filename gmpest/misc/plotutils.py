## --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
## --------------------------------------------------------------
import sys
import numpy as np
import matplotlib.pyplot as plt
from matplotlib import interactive

from gmpest.kernel import get_covariance_model


class Figure:
    """Figures manager class.

    Thin wrapper around a matplotlib figure with a grid of axes and a
    current axis `ax`.
    """

    def __init__(self, nrows=1, ncols=1, isinteractive=True, boxoff=True, **kargs):
        # Check if we run in interpreter mode
        self.interpreter = False
        try:
            if sys.ps1:
                self.interpreter = True
        except AttributeError:
            self.interpreter = False
            if sys.flags.interactive:
                self.interpreter = True

        if isinteractive & self.interpreter:
            interactive(True)

        self.boxoff = boxoff

        self.fig = plt.figure(**kargs)

        self.nrows = nrows
        self.ncols = ncols
        self.axes = []
        for i in range(nrows * ncols):
            self.axes.append(self.fig.add_subplot(nrows, ncols, i + 1))
        self.ax = self.axes[0]
        if self.boxoff:
            self.set_boxoff()

    def set_boxoff(self):
        self.ax.spines["right"].set_visible(False)
        self.ax.spines["top"].set_visible(False)
        self.ax.tick_params(direction="in")

    def show(self, grid=None, legend=None):
        if grid:
            self.grid()
        if legend:
            self.ax.legend()
        plt.show()

    def plot(self, x, z, *args, **kargs):
        self.ax.plot(x, z, *args, **kargs)

    def xylabels(self, sx="", sy=""):
        self.ax.set_xlabel(sx)
        self.ax.set_ylabel(sy)

    def title(self, s):
        self.ax.set_title(s)

    def grid(self, visible=True, which="major", linestyle=(0, (1, 5)), linewidth=0.5, **kwargs):
        self.ax.grid(visible, which, linestyle=linestyle, linewidth=linewidth, **kwargs)


def plot_loglikelihood_history(result, show=True):
    """Log-likelihood of the accepted iterates of a scoring run.

    Parameters
    ----------
    result : gmpest.core.EstimationResult
    show : bool
        Call plt.show() at the end.

    Returns
    -------
    Figure
    """
    history = np.asarray(result.loglikelihood_history)
    fig = Figure()
    fig.plot(np.arange(history.shape[0]), history, "ko-", markersize=4)
    fig.xylabels("iteration", "log-likelihood")
    fig.title(f"Fisher scoring ({result.covariance_type} covariance)")
    fig.grid()
    if show:
        fig.show()
    return fig


def plot_correlation(result, hmax=None, nt=200, show=True):
    """Fitted intra-event correlation as a function of separation
    distance, with the curves at the bounds of the range interval.

    Parameters
    ----------
    result : gmpest.core.EstimationResult
    hmax : float, optional
        Largest distance displayed, 3 ranges by default.
    nt : int
        Number of distances.
    show : bool

    Returns
    -------
    Figure
    """
    model = get_covariance_model(result.covariance_type)
    theta_trans = np.asarray(result.theta_trans)
    if hmax is None:
        hmax = 3.0 * float(np.exp(theta_trans[2])) if theta_trans.shape[0] > 2 else 1.0
    h = np.linspace(0.0, hmax, nt)

    fig = Figure()
    fig.plot(h, model.correlation(theta_trans, h), "#F2404C", linewidth=2.0, label="estimate")
    if theta_trans.shape[0] > 2 and result.theta_trans_confidence_intervals is not None:
        ci = np.asarray(result.theta_trans_confidence_intervals)
        for bound, label in zip(ci[2], ["lower range", "upper range"]):
            t = np.array(theta_trans)
            t[2] = bound
            fig.plot(h, model.correlation(t, h), "k--", linewidth=0.5, label=label)
    fig.xylabels("separation distance", "correlation")
    fig.title(f"Intra-event correlation ({result.covariance_type})")
    fig.grid()
    fig.ax.legend()
    if show:
        fig.show()
    return fig
