# gmpest/core/distance.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Event grouping and separation distances between stations.

Observations are grouped by event with a stable group-by in
first-occurrence order of the event ids. For each event, the full
matrix of pairwise station distances is computed, together with the
absolute fault-parallel and fault-normal components obtained after
rotating the station coordinates by (90 - strike) degrees.
"""
from dataclasses import dataclass
from typing import Tuple

import numpy as np

import gmpest.num as gnp
from gmpest.errors import ConfigurationError


@dataclass(frozen=True)
class EventGroups:
    """Stable grouping of observations by event.

    Attributes
    ----------
    labels : ndarray, shape (n_events,)
        Distinct event ids, in first-occurrence order.
    index : ndarray of int, shape (n,)
        Group index of every observation (in input row order).
    order : ndarray of int, shape (n,)
        Stable permutation gathering the rows of each event together.
        ``y[order]`` lists the observations event by event.
    sizes : ndarray of int, shape (n_events,)
        Number of observations in each event.
    """

    labels: np.ndarray
    index: np.ndarray
    order: np.ndarray
    sizes: np.ndarray

    @property
    def num_events(self) -> int:
        return int(self.sizes.shape[0])

    @property
    def num_obs(self) -> int:
        return int(self.order.shape[0])

    @property
    def slices(self) -> Tuple[slice, ...]:
        """Row slices of each event once the data are in ``order``."""
        stops = gnp.cumsum(self.sizes)
        starts = stops - self.sizes
        return tuple(slice(int(a), int(b)) for a, b in zip(starts, stops))

    def sort(self, a):
        """Reorder the rows of `a` so that each event is contiguous."""
        return a[self.order]


def group_events(event_id) -> EventGroups:
    """Group observations by event id, in first-occurrence order.

    Parameters
    ----------
    event_id : array_like, shape (n,)
        Event identifier of every observation (any hashable dtype
        accepted by ``numpy.unique``).

    Returns
    -------
    EventGroups
    """
    event_id = np.asarray(event_id).reshape(-1)
    if event_id.shape[0] == 0:
        raise ConfigurationError("event_id must contain at least one observation")
    labels, first, inverse = gnp.unique(event_id, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)
    # rank of each sorted label in first-occurrence order
    appearance = gnp.argsort(first, kind="stable")
    rank = gnp.empty_like(appearance)
    rank[appearance] = gnp.arange(appearance.shape[0])
    index = rank[inverse]
    order = gnp.argsort(index, kind="stable")
    sizes = gnp.bincount(index, minlength=labels.shape[0])
    return EventGroups(labels=labels[appearance], index=index, order=order, sizes=sizes)


@dataclass(frozen=True)
class SeparationDistances:
    """Per-event separation distance matrices.

    The three tuples are parallel and indexed by event, in group order.

    Attributes
    ----------
    groups : EventGroups
    distance : tuple of ndarray (m, m)
        Euclidean distances between stations.
    parallel : tuple of ndarray (m, m)
        Absolute distance along the fault-parallel axis.
    normal : tuple of ndarray (m, m)
        Absolute distance along the fault-normal axis.
    strike : float
        Strike angle (degrees from North) used for the rotation.
    """

    groups: EventGroups
    distance: Tuple[np.ndarray, ...]
    parallel: Tuple[np.ndarray, ...]
    normal: Tuple[np.ndarray, ...]
    strike: float = 0.0

    def __len__(self):
        return len(self.distance)

    @property
    def sizes(self):
        return self.groups.sizes


def rotation_matrix(strike):
    """Rotation by (90 - strike) degrees, mapping North-East axes to
    fault-parallel / fault-normal axes."""
    angle = (90.0 - strike) / 180.0 * gnp.pi
    c, s = gnp.cos(angle), gnp.sin(angle)
    return gnp.array([[c, -s], [s, c]])


def pairwise_differences(coords):
    """Differences coords[j] - coords[i] for every ordered pair (i, j).

    Returns an array of shape (m, m, d).
    """
    return coords[None, :, :] - coords[:, None, :]


def separation_distances(w, event_id, strike=0.0, groups=None) -> SeparationDistances:
    """Compute per-event separation distances between stations.

    Parameters
    ----------
    w : array_like, shape (n, 2)
        Station coordinates (e.g. km east, km north), row-aligned with
        the observations. Extra columns are ignored.
    event_id : array_like, shape (n,)
        Event identifier of every observation.
    strike : float, optional
        Strike angle of the fault in degrees measured from North.
    groups : EventGroups, optional
        Precomputed grouping of `event_id`.

    Returns
    -------
    SeparationDistances

    Notes
    -----
    Every ordered pair of stations is used, self-pairs included, so the
    diagonal of each matrix is zero and an event with a single station
    gives 1x1 zero matrices.
    """
    w = gnp.asarray(w)
    if w.ndim != 2 or w.shape[1] < 2:
        raise ConfigurationError("w should be a 2D array with at least two columns")
    if groups is None:
        groups = group_events(event_id)
    if w.shape[0] != groups.num_obs:
        raise ConfigurationError("w and event_id must have the same number of rows")

    coords = groups.sort(w[:, :2])
    R = rotation_matrix(strike)

    distance, parallel, normal = [], [], []
    for sl in groups.slices:
        sub = coords[sl]
        diff = pairwise_differences(sub)
        distance.append(gnp.sqrt(diff[..., 0] ** 2 + diff[..., 1] ** 2))

        diff_rotated = pairwise_differences(sub @ R.T)
        parallel.append(gnp.abs(diff_rotated[..., 0]))
        normal.append(gnp.abs(diff_rotated[..., 1]))

    return SeparationDistances(
        groups=groups,
        distance=tuple(distance),
        parallel=tuple(parallel),
        normal=tuple(normal),
        strike=float(strike),
    )
