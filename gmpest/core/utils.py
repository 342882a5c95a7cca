# gmpest/core/utils.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Small utilities used across `gmpest.core` modules.

This file hosts:
- Shape/type validation of the observation set (y, x, w, event_id)
- Event grouping and row reordering of the observation set
- Validation of the initial parameters and of the run options
"""
from dataclasses import dataclass

import numpy as np

import gmpest.num as gnp
from gmpest.errors import ConfigurationError
from .distance import EventGroups, SeparationDistances, group_events, separation_distances


@dataclass
class Observations:
    """Observation set with rows grouped by event.

    Attributes
    ----------
    y : ndarray (n,)
    x : ndarray (n, ...)
    dist : SeparationDistances
    """

    y: np.ndarray
    x: np.ndarray
    dist: SeparationDistances

    @property
    def groups(self) -> EventGroups:
        return self.dist.groups

    @property
    def num_obs(self):
        return int(self.y.shape[0])


def ensure_shapes_and_type(y, x, w, event_id):
    """Validate and adjust shapes/types of the observation arrays.

    Returns
    -------
    tuple
        (y, x, w, event_id) with y as a 1D float array and x, w as 2D
        float arrays.

    Raises
    ------
    ConfigurationError
        If the arrays do not have matching numbers of rows.

    Notes
    -----
    - `y` given as a 2D column (n, 1) is reshaped to (n,).
    - A 1D `x` is taken as a single covariate column.
    """
    y = gnp.asarray(y)
    if y.ndim == 2 and y.shape[1] == 1:
        y = y.reshape(-1)
    if y.ndim != 1:
        raise ConfigurationError("y should be 1D or a 2D column array")
    x = gnp.asarray(x)
    if x.ndim == 1:
        x = x.reshape(-1, 1)
    w = gnp.asarray(w)
    event_id = np.asarray(event_id).reshape(-1)

    n = y.shape[0]
    if n == 0:
        raise ConfigurationError("y must contain at least one observation")
    for name, a in (("x", x), ("w", w), ("event_id", event_id)):
        if a.shape[0] != n:
            raise ConfigurationError(f"{name} and y must have the same number of rows")
    if not gnp.all(gnp.isfinite(y)):
        raise ConfigurationError("y must be finite")
    return y, x, w, event_id


def prepare_observations(y, x, w, event_id, strike=0.0) -> Observations:
    """Group the observations by event and compute separation distances.

    Rows are reordered once with a stable sort so that each event is
    contiguous, in first-occurrence order of the event ids; `y`, `x` and
    the distance blocks share that order.
    """
    y, x, w, event_id = ensure_shapes_and_type(y, x, w, event_id)
    groups = group_events(event_id)
    dist = separation_distances(w, event_id, strike=strike, groups=groups)
    return Observations(y=groups.sort(y), x=groups.sort(x), dist=dist)


def validate_initial_params(covariance_model, gamma0, theta0):
    """Check (gamma0, theta0) and return them as 1D arrays.

    Raises
    ------
    ConfigurationError
        If theta0 has the wrong length for the covariance model or is
        not finite and strictly positive, or if gamma0 is not finite.
    """
    gamma0 = gnp.asarray(gamma0).reshape(-1)
    theta0 = gnp.asarray(theta0).reshape(-1)
    if not gnp.all(gnp.isfinite(gamma0)):
        raise ConfigurationError("gamma0 must be finite")
    if theta0.shape[0] != covariance_model.num_params:
        raise ConfigurationError(
            f"theta0 must have {covariance_model.num_params} entries "
            f"{covariance_model.param_names} for covariance type "
            f"'{covariance_model.name}', got {theta0.shape[0]}"
        )
    if not gnp.all(gnp.isfinite(theta0)) or gnp.any(theta0 <= 0.0):
        raise ConfigurationError("theta0 must be finite and strictly positive")
    return gamma0, theta0


def validate_options(tol, confidence_level):
    if not tol > 0.0:
        raise ConfigurationError("tol must be positive")
    if not 0.0 < confidence_level < 100.0:
        raise ConfigurationError("confidence_level must be in (0, 100)")
