import logging

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

import gmpest as gm
import gmpest.num as gnp
import gmpest.misc.plotutils as plotutils
from gmpest.config import get_config, get_logger, set_log_level
from gmpest.misc.gmpe import FictitiousDepthGMPE
from gmpest.misc.synthetic import simulate_dataset, simulate_layout


def test_config():
    config = get_config()
    assert config.version == gm.__version__
    assert config.max_halvings == 30
    assert config.max_iterations == 200
    assert get_logger().name == "gmpest"
    with pytest.raises(AttributeError):
        config.update(max_halving=3)
    previous = config.max_halvings
    config.update(max_halvings=5)
    try:
        assert config.max_halvings == 5
    finally:
        config.update(max_halvings=previous)


def test_set_log_level():
    logger = get_logger()
    level = logger.level
    set_log_level(logging.DEBUG)
    try:
        assert logger.isEnabledFor(logging.DEBUG)
    finally:
        set_log_level(level)


def test_simulate_layout():
    rng = gnp.default_rng(1)
    x, w, event_id = simulate_layout(3, [2, 5, 1], extent=50.0, max_distance=20.0, rng=rng)
    assert x.shape == (8, 2) and w.shape == (8, 2)
    assert list(np.bincount(event_id)) == [2, 5, 1]
    assert gnp.all((x[:, 1] >= 0.0) & (x[:, 1] <= 20.0))
    assert gnp.all((w >= -20.0) & (w <= 70.0))
    # one magnitude per event, stations on a circle of radius r around it
    for e in range(3):
        assert np.unique(x[event_id == e, 0]).shape[0] == 1
    we, re = w[event_id == 1], x[event_id == 1, 1]
    d = np.sqrt(np.sum((we[:, None, :] - we[None, :, :]) ** 2, axis=2))
    assert gnp.all(d <= re[:, None] + re[None, :] + 1e-9)
    with pytest.raises(ValueError):
        simulate_layout(2, [3], rng=rng)


def test_simulate_dataset():
    gmpe = FictitiousDepthGMPE()
    args = (gmpe, [1.0, 1.0, -1.0, 0.1], [5.0], [0.1, 0.3, 10.0])
    clean = simulate_dataset(*args, num_events=4, stations_per_event=6, noise=False, seed=0)
    assert len(clean) == 24
    assert gnp.allclose(clean.y, clean.mean)
    noisy = simulate_dataset(*args, num_events=4, stations_per_event=6, seed=0)
    assert not gnp.allclose(noisy.y, noisy.mean)
    again = simulate_dataset(*args, num_events=4, stations_per_event=6, seed=0)
    assert np.array_equal(noisy.y, again.y)
    shuffled = simulate_dataset(*args, num_events=4, stations_per_event=6, shuffle=True, seed=0)
    assert sorted(shuffled.event_id) == sorted(noisy.event_id)


def test_plots():
    gmpe = FictitiousDepthGMPE()
    data = simulate_dataset(
        gmpe, [1.0, 1.0, -1.0, 0.1], [10.0], [0.3, 0.3, 10.0],
        num_events=12, stations_per_event=10, seed=9,
    )
    result = gm.estimate(data.y, data.x, data.w, data.event_id, gmpe, [8.0], [0.25, 0.25, 8.0])
    fig = plotutils.plot_loglikelihood_history(result, show=False)
    assert len(fig.ax.lines) == 1
    fig = plotutils.plot_correlation(result, show=False)
    assert len(fig.ax.lines) == 3
    matplotlib.pyplot.close("all")
