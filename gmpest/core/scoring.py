# gmpest/core/scoring.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Fisher scoring with dimension reduction.

The linear coefficients beta are profiled out by GLS at every iterate.
Each outer iteration computes the scores and expected information for
(gamma, theta_trans), a Newton direction for gamma through the Schur
complement eliminating beta, a Newton direction for theta_trans through
the modified Cholesky factor of Itt, and then halves the step until the
log-likelihood strictly increases.

Reference: Ming, D., Huang, C., Peters, G.W., and Galasso, C. (2019).
An advanced estimation algorithm for ground-motion models with spatial
correlation. Bulletin of the Seismological Society of America, 109(2).
"""
import time
from dataclasses import dataclass, field
from typing import List, Optional

import gmpest.num as gnp
from gmpest.config import get_config, get_logger
from gmpest.errors import ConfigurationError, NonConvergenceError
from .fisher import ScoringQuantities, scoring_quantities
from .likelihood import ProfileState, profile_likelihood
from .linalg import solve_modified_cholesky
from .mean import evaluate_gradient

_logger = get_logger()


def newton_directions(quantities: ScoringQuantities):
    """Newton directions (dgamma, dtheta_trans).

    dgamma = (Igg - Igb Ibb^{-1} Igbᵀ)^{-1} Sg, and dtheta_trans solves
    Itt dtheta_trans = St with the modified Cholesky factor of Itt.
    """
    dgamma = gnp.solve(quantities.schur_gamma(), quantities.Sg, assume_a="sym")
    dtheta = solve_modified_cholesky(quantities.Itt, quantities.St)
    return dgamma, dtheta


def relative_change(gamma_old, theta_old, gamma_new, theta_new):
    """Stopping criterion max(|change| / max(|new value|, 10))."""
    diff = gnp.abs(gnp.concatenate([gamma_new - gamma_old, theta_new - theta_old]))
    mag = gnp.abs(gnp.concatenate([gamma_new, theta_new]))
    return float(gnp.max(diff / gnp.maximum(mag, 10.0)))


@dataclass
class ScoringResult:
    """Outcome of a scoring run.

    Attributes
    ----------
    state : ProfileState
        Final iterate.
    quantities : ScoringQuantities
        Scores and information evaluated at the final iterate.
    iterations : int
        Number of outer iterations performed.
    converged : bool
        True when the stopping rule was met.
    history : list of float
        Accepted log-likelihood values, starting from the initial point.
    stopping : float
        Last value of the stopping criterion.
    time : float
        Wall-clock duration in seconds.
    """

    state: ProfileState
    quantities: ScoringQuantities
    iterations: int
    converged: bool
    history: List[float] = field(default_factory=list)
    stopping: float = float("inf")
    time: float = 0.0


class ScoringOptimizer:
    """Profiled Fisher-scoring optimizer with step halving.

    Parameters
    ----------
    mean_function : gmpest.core.MeanFunction
        Design matrix builder and its gradient.
    covariance_model : gmpest.kernel.CovarianceModel
        Covariance strategy, fixed for the whole run.
    tol : float
        Tolerance on the relative parameter change.
    max_halvings : int, optional
        Number of step halvings tried before giving up on an iteration.
        Defaults to ``get_config().max_halvings``.
    max_iterations : int, optional
        Cap on the number of outer iterations.
        Defaults to ``get_config().max_iterations``.
    verbosity : int, optional
        0: progress logged at DEBUG level, 1: at INFO level.
    """

    def __init__(
        self,
        mean_function,
        covariance_model,
        tol=1e-6,
        max_halvings=None,
        max_iterations=None,
        verbosity=0,
    ):
        config = get_config()
        if not tol > 0:
            raise ConfigurationError("tol must be positive")
        self.mean_function = mean_function
        self.covariance_model = covariance_model
        self.tol = tol
        self.max_halvings = config.max_halvings if max_halvings is None else int(max_halvings)
        self.max_iterations = (
            config.max_iterations if max_iterations is None else int(max_iterations)
        )
        if self.max_halvings < 0 or self.max_iterations < 1:
            raise ConfigurationError("max_halvings must be >= 0 and max_iterations >= 1")
        self.verbosity = verbosity

    def _log(self, msg, *args):
        if self.verbosity >= 1:
            _logger.info(msg, *args)
        else:
            _logger.debug(msg, *args)

    def profile(self, y, x, dist, gamma, theta_trans) -> ProfileState:
        return profile_likelihood(
            self.mean_function, self.covariance_model, y, x, dist, gamma, theta_trans
        )

    def quantities(self, state, x, dist) -> ScoringQuantities:
        mean_gradients = evaluate_gradient(self.mean_function, x, state.gamma, state.B.shape)
        cov_gradients = self.covariance_model.gradient_blocks(state.theta_trans, dist)
        return scoring_quantities(state, mean_gradients, cov_gradients)

    def step_halving(self, state, y, x, dist, dgamma, dtheta) -> Optional[ProfileState]:
        """Return the first trial iterate with a strictly larger
        log-likelihood, or None if none is found within max_halvings."""
        delta = 1.0
        for attempt in range(self.max_halvings + 1):
            try:
                trial = self.profile(
                    y, x, dist, state.gamma + delta * dgamma, state.theta_trans + delta * dtheta
                )
            except Exception as exc:
                if not gnp._is_linalg_exception(exc):
                    raise
                _logger.debug("step %.3g rejected: %s", delta, exc)
                trial = None
            if trial is not None and gnp.isfinite(trial.ll) and trial.ll > state.ll:
                if attempt > 0:
                    _logger.debug("step accepted after %d halvings (delta=%.3g)", attempt, delta)
                return trial
            delta = delta / 2.0
        return None

    def run(self, y, x, dist, gamma0, theta0) -> ScoringResult:
        """Run the scoring iterations from (gamma0, theta0).

        Parameters
        ----------
        y : ndarray (n,)
            Observations, grouped by event.
        x : ndarray
            Mean-function covariates, grouped by event.
        dist : SeparationDistances
            Separation distances for the same grouping.
        gamma0 : array_like (q,)
            Initial nonlinear coefficients.
        theta0 : array_like (r,)
            Initial covariance parameters, strictly positive.

        Returns
        -------
        ScoringResult

        Raises
        ------
        NonConvergenceError
            If no improving step is found away from a stationary point,
            or if max_iterations is reached.
        """
        tic = time.time()
        theta0 = gnp.asarray(theta0).reshape(-1)
        if not gnp.all(gnp.isfinite(theta0)) or gnp.any(theta0 <= 0.0):
            raise ConfigurationError("theta0 must be finite and strictly positive")
        state = self.profile(y, x, dist, gnp.asarray(gamma0).reshape(-1), gnp.log(theta0))
        history = [state.ll]
        stopping = float("inf")
        it = 0

        while True:
            self._log("Iteration %i Loglikelihood %10.4f", it, state.ll)
            if it >= self.max_iterations:
                raise NonConvergenceError(
                    f"Scoring did not converge in {self.max_iterations} iterations "
                    f"(stopping criterion {stopping:.3g} > tol {self.tol:.3g})",
                    iterations=it,
                    log_likelihood=state.ll,
                )
            quantities = self.quantities(state, x, dist)
            dgamma, dtheta = newton_directions(quantities)
            it += 1

            trial = self.step_halving(state, y, x, dist, dgamma, dtheta)
            if trial is None:
                # no strict increase left: accept only if the full step is
                # already below tolerance
                stopping = relative_change(
                    state.gamma, state.theta_trans,
                    state.gamma + dgamma, state.theta_trans + dtheta,
                )
                if stopping <= self.tol:
                    break
                raise NonConvergenceError(
                    f"Step halving found no increase of the log-likelihood after "
                    f"{self.max_halvings} halvings at iteration {it}",
                    iterations=it,
                    log_likelihood=state.ll,
                )

            stopping = relative_change(
                state.gamma, state.theta_trans, trial.gamma, trial.theta_trans
            )
            state = trial
            history.append(state.ll)
            if stopping <= self.tol:
                break

        self._log("Converged! Iterations %i Loglikelihood %10.4f", it, state.ll)
        return ScoringResult(
            state=state,
            quantities=self.quantities(state, x, dist),
            iterations=it,
            converged=True,
            history=history,
            stopping=stopping,
            time=time.time() - tic,
        )
