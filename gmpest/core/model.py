# gmpest/core/model.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Ground-motion model class and estimation entry point.
"""
import gmpest.num as gnp
from gmpest.config import get_logger
from gmpest.kernel import get_covariance_model

from . import inference
from . import likelihood
from . import utils
from .distance import separation_distances
from .linalg import BlockCholesky
from .mean import as_mean_function, evaluate_design
from .scoring import ScoringOptimizer

_logger = get_logger()


class Model:
    """Ground-motion model with spatially correlated residuals.

    The observations are modeled as

    .. math::
        y = B(x, \\gamma) \\beta + \\varepsilon, \\qquad
        \\varepsilon \\sim \\mathcal{N}(0, \\Omega(\\theta)),

    where B is the design matrix given by the mean function and Omega is
    block-diagonal with one block per event.

    Attributes
    ----------
    mean_function : MeanFunction
        Design matrix builder and its gradient w.r.t. gamma.
    covariance_model : gmpest.kernel.CovarianceModel
        Covariance strategy selected from `covariance_type`.
    strike : float
        Strike angle (degrees from North), used by 'ExpAni'.

    Examples
    --------
    >>> import gmpest
    >>> from gmpest.misc.gmpe import FictitiousDepthGMPE
    >>> model = gmpest.Model(FictitiousDepthGMPE(), covariance_type="Exp")
    >>> result = model.estimate(y, x, w, event_id, gamma0=[5.0], theta0=[0.1, 0.2, 10.0])
    >>> print(result)
    """

    def __init__(
        self,
        mean_function=None,
        covariance_type="Exp",
        strike=0.0,
        mean_design=None,
        mean_gradient=None,
    ):
        """
        Parameters
        ----------
        mean_function : MeanFunction or (callable, callable), optional
            Mean function, or a (design, gradient) pair of callables.
        covariance_type : str or CovarianceModel, optional
            One of 'No', 'Exp', 'SExp', 'Matern1.5', 'ExpAni'.
        strike : float, optional
            Strike angle of the fault in degrees.
        mean_design, mean_gradient : callable, optional
            Alternative to `mean_function`.
        """
        self.mean_function = as_mean_function(mean_function, mean_design, mean_gradient)
        self.covariance_model = get_covariance_model(covariance_type)
        self.strike = float(strike)

    def __repr__(self):
        output = str("<gmpest.core.Model object> " + hex(id(self)))
        return output

    def __str__(self):
        return (
            f"Ground-motion model:\n"
            f"  Mean Function: {self.mean_function!r}\n"
            f"  Covariance Type: {self.covariance_model.name}\n"
            f"  Covariance Parameters: {self.covariance_model.param_names}\n"
            f"  Strike: {self.strike}"
        )

    @property
    def covariance_type(self):
        return self.covariance_model.name

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def prepare(self, y, x, w, event_id):
        """Group the observations by event (see `utils.prepare_observations`)."""
        return utils.prepare_observations(y, x, w, event_id, strike=self.strike)

    def covariance(self, w, event_id, theta, grouped=True):
        """Covariance matrix of the residuals.

        Parameters
        ----------
        w : array_like, shape (n, 2)
            Station coordinates.
        event_id : array_like, shape (n,)
            Event identifiers.
        theta : array_like
            Covariance parameters in natural scale (tau2, sigma2, ...).
        grouped : bool, optional
            If True (default), rows are in grouped order, each event
            contiguous. Otherwise rows follow the input order.

        Returns
        -------
        ndarray (n, n)
        """
        theta_trans = gnp.log(gnp.asarray(theta).reshape(-1))
        dist = separation_distances(w, event_id, strike=self.strike)
        K = self.covariance_model.covariance(theta_trans, dist)
        if grouped:
            return K
        inverse = gnp.argsort(dist.groups.order, kind="stable")
        return K[inverse][:, inverse]

    def log_likelihood(self, y, x, w, event_id, gamma, theta, beta=None):
        """Gaussian log-likelihood of the observations.

        Parameters
        ----------
        y, x, w, event_id : array_like
            Observation set.
        gamma : array_like
            Nonlinear mean coefficients.
        theta : array_like
            Covariance parameters in natural scale.
        beta : array_like, optional
            Linear coefficients. If None, beta is profiled out by GLS.

        Returns
        -------
        float
        """
        obs = self.prepare(y, x, w, event_id)
        theta_trans = gnp.log(gnp.asarray(theta).reshape(-1))
        if beta is None:
            state = likelihood.profile_likelihood(
                self.mean_function, self.covariance_model, obs.y, obs.x, obs.dist,
                gamma, theta_trans,
            )
            return state.ll
        gamma = gnp.asarray(gamma).reshape(-1)
        B = evaluate_design(self.mean_function, obs.x, gamma, obs.num_obs)
        blocks = self.covariance_model.covariance_blocks(theta_trans, obs.dist)
        chol = BlockCholesky(blocks, obs.groups.slices)
        residual = obs.y - B @ gnp.asarray(beta).reshape(-1)
        return float(likelihood.gaussian_log_likelihood(residual, chol.logdet(), chol))

    def estimate(
        self,
        y,
        x,
        w,
        event_id,
        gamma0,
        theta0,
        tol=1e-6,
        confidence_level=95.0,
        max_halvings=None,
        max_iterations=None,
        verbosity=0,
    ):
        """Maximum likelihood estimation by profiled Fisher scoring.

        Parameters
        ----------
        y : array_like, shape (n,)
            Observations (e.g. log ground-motion intensities).
        x : array_like, shape (n, q)
            Covariates of the mean function.
        w : array_like, shape (n, 2)
            Station coordinates.
        event_id : array_like, shape (n,)
            Event identifier of every observation.
        gamma0 : array_like
            Initial nonlinear mean coefficients.
        theta0 : array_like
            Initial covariance parameters, natural scale, strictly
            positive.
        tol : float, optional
            Tolerance on the relative parameter change.
        confidence_level : float, optional
            Level of the confidence intervals, in percent.
        max_halvings, max_iterations : int, optional
            Limits of the scoring loop (defaults in `gmpest.config`).
        verbosity : int, optional
            1 to log iteration progress at INFO level.

        Returns
        -------
        EstimationResult

        Raises
        ------
        ConfigurationError
            For invalid inputs.
        NonConvergenceError
            If the scoring iterations fail to converge.
        """
        utils.validate_options(tol, confidence_level)
        gamma0, theta0 = utils.validate_initial_params(self.covariance_model, gamma0, theta0)
        obs = self.prepare(y, x, w, event_id)
        _logger.debug(
            "Estimating with '%s' covariance: %d observations, %d events",
            self.covariance_model.name, obs.num_obs, obs.groups.num_events,
        )

        optimizer = ScoringOptimizer(
            self.mean_function,
            self.covariance_model,
            tol=tol,
            max_halvings=max_halvings,
            max_iterations=max_iterations,
            verbosity=verbosity,
        )
        scoring_result = optimizer.run(obs.y, obs.x, obs.dist, gamma0, theta0)
        return inference.report(scoring_result, self.covariance_model, confidence_level)


def estimate(
    y,
    x,
    w,
    event_id,
    mean_function,
    gamma0,
    theta0,
    tol=1e-6,
    confidence_level=95.0,
    covariance_type="Exp",
    strike=0.0,
    *,
    mean_design=None,
    mean_gradient=None,
    max_halvings=None,
    max_iterations=None,
    verbosity=0,
):
    """Estimate a ground-motion model with spatially correlated residuals.

    Shortcut for ``Model(mean_function, covariance_type, strike).estimate(...)``;
    pass ``mean_function=None`` together with `mean_design` and
    `mean_gradient` to use plain callables.

    Returns
    -------
    EstimationResult
    """
    model = Model(
        mean_function,
        covariance_type=covariance_type,
        strike=strike,
        mean_design=mean_design,
        mean_gradient=mean_gradient,
    )
    return model.estimate(
        y,
        x,
        w,
        event_id,
        gamma0,
        theta0,
        tol=tol,
        confidence_level=confidence_level,
        max_halvings=max_halvings,
        max_iterations=max_iterations,
        verbosity=verbosity,
    )
