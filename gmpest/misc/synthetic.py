# gmpest/misc/synthetic.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Synthetic ground-motion datasets drawn from a known model.

Used to exercise the estimator on data whose generating parameters are
known: events with random magnitudes and epicenters in a square region,
stations scattered within a disk around each epicenter, and residuals
drawn from the block-diagonal covariance of the chosen covariance model.
"""
from dataclasses import dataclass

import numpy as np

import gmpest.num as gnp
from gmpest.core.distance import separation_distances
from gmpest.kernel import get_covariance_model


@dataclass
class SyntheticDataset:
    """Observations row-aligned with their covariates.

    Attributes
    ----------
    y : ndarray (n,)
    x : ndarray (n, 2)
        [magnitude, epicentral distance].
    w : ndarray (n, 2)
        Station coordinates in km.
    event_id : ndarray (n,)
    mean : ndarray (n,)
        Noise-free mean B(x, gamma) beta.
    """

    y: np.ndarray
    x: np.ndarray
    w: np.ndarray
    event_id: np.ndarray
    mean: np.ndarray

    def __len__(self):
        return self.y.shape[0]


def simulate_layout(
    num_events, stations_per_event, extent=100.0, max_distance=50.0, magnitude_range=(4.0, 7.0), rng=None
):
    """Draw magnitudes, epicenters and station positions.

    Parameters
    ----------
    num_events : int
    stations_per_event : int or sequence of int
    extent : float
        Side of the square region holding the epicenters (km).
    max_distance : float
        Largest epicentral distance of a station (km). Distances are
        uniform on [0, max_distance] so that near-source records, which
        constrain the fictitious depth, are always present.
    magnitude_range : (float, float)
    rng : numpy.random.Generator, optional

    Returns
    -------
    x, w, event_id : ndarray
    """
    rng = gnp.default_rng() if rng is None else rng
    if isinstance(stations_per_event, int):
        stations_per_event = [stations_per_event] * num_events
    if len(stations_per_event) != num_events:
        raise ValueError("stations_per_event must have num_events entries")

    x, w, event_id = [], [], []
    for e, m in enumerate(stations_per_event):
        magnitude = rng.uniform(*magnitude_range)
        epicenter = rng.uniform(0.0, extent, size=2)
        r = rng.uniform(0.0, max_distance, size=m)
        azimuth = rng.uniform(0.0, 2.0 * gnp.pi, size=m)
        stations = epicenter + gnp.column_stack([r * gnp.cos(azimuth), r * gnp.sin(azimuth)])
        x.append(gnp.column_stack([gnp.full(m, magnitude), r]))
        w.append(stations)
        event_id.append(gnp.full(m, e, dtype=int))
    return gnp.vstack(x), gnp.vstack(w), gnp.concatenate(event_id)


def simulate_dataset(
    mean_function,
    beta,
    gamma,
    theta,
    covariance_type="Exp",
    num_events=10,
    stations_per_event=15,
    strike=0.0,
    extent=100.0,
    max_distance=50.0,
    noise=True,
    shuffle=False,
    seed=None,
):
    """Simulate y = B(x, gamma) beta + e with e ~ N(0, Omega(theta)).

    Parameters
    ----------
    mean_function : gmpest.core.MeanFunction
    beta, gamma, theta : array_like
        Generating parameters, theta in natural scale.
    covariance_type : str
        Token of the covariance model.
    num_events : int
    stations_per_event : int or sequence of int
    strike : float
        Strike angle in degrees (anisotropic model).
    extent : float
        Side of the square region holding the epicenters (km).
    max_distance : float
        Largest epicentral distance of a station (km).
    noise : bool
        If False, y is the noise-free mean.
    shuffle : bool
        If True, rows are returned in random order (events interleaved).
    seed : int, optional
        Seed of a dedicated generator; the global one is used if None.

    Returns
    -------
    SyntheticDataset
    """
    rng = gnp.default_rng(seed)
    model = get_covariance_model(covariance_type)
    x, w, event_id = simulate_layout(
        num_events, stations_per_event, extent=extent, max_distance=max_distance, rng=rng
    )

    mean = mean_function.design(x, gnp.asarray(gamma).reshape(-1)) @ gnp.asarray(beta).reshape(-1)
    y = gnp.array(mean)
    if noise:
        dist = separation_distances(w, event_id, strike=strike)
        theta_trans = gnp.log(gnp.asarray(theta).reshape(-1))
        for block, sl in zip(model.covariance_blocks(theta_trans, dist), dist.groups.slices):
            L = gnp.cholesky(block)
            y[sl] += L @ rng.standard_normal(block.shape[0])

    if shuffle:
        perm = rng.permutation(y.shape[0])
        x, w, event_id, y, mean = x[perm], w[perm], event_id[perm], y[perm], mean[perm]
    return SyntheticDataset(y=y, x=x, w=w, event_id=event_id, mean=mean)
