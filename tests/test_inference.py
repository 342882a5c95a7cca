import logging
import math

import numpy as np
import pytest

import gmpest.num as gnp
from gmpest.core.fisher import ScoringQuantities
from gmpest.core.inference import (
    confidence_intervals,
    information_criteria,
    normal_quantile,
    standard_errors,
)
from gmpest.errors import ConfigurationError


def make_quantities(Itt):
    return ScoringQuantities(
        Sg=gnp.zeros(1),
        St=gnp.zeros(Itt.shape[0]),
        Igg=gnp.array([[5.0]]),
        Igb=gnp.array([[1.0, 0.0]]),
        Ibb=gnp.array([[2.0, 0.0], [0.0, 4.0]]),
        Itt=Itt,
    )


def test_normal_quantile():
    assert normal_quantile(95.0) == pytest.approx(1.959963984540054)
    assert normal_quantile(99.0) == pytest.approx(2.5758293035489)
    for level in (0.0, 100.0, -5.0, 120.0):
        with pytest.raises(ConfigurationError):
            normal_quantile(level)


def test_standard_errors():
    Itt = gnp.array([[4.0, 0.0], [0.0, 16.0]])
    se_beta, se_gamma, se_theta, degraded = standard_errors(make_quantities(Itt))
    # S = 5 - 1 * 1/2 * 1 = 4.5
    assert se_gamma[0] == pytest.approx(math.sqrt(1.0 / 4.5))
    # Var(beta) = Ibb^-1 + Ibb^-1 Igbᵀ S^-1 Igb Ibb^-1
    assert se_beta[0] == pytest.approx(math.sqrt(0.5 + 0.25 / 4.5))
    assert se_beta[1] == pytest.approx(0.5)
    assert gnp.allclose(se_theta, [0.5, 0.25])
    assert not degraded


def test_singular_information_degrades_theta_errors(caplog):
    with caplog.at_level(logging.WARNING, logger="gmpest"):
        se_beta, se_gamma, se_theta, degraded = standard_errors(make_quantities(gnp.zeros((3, 3))))
    assert degraded
    assert gnp.all(se_theta == 0.0)
    assert gnp.all(se_beta > 0.0)
    assert "singular" in caplog.text


def test_confidence_intervals_contain_estimates():
    est = gnp.array([1.0, -2.0, 0.0])
    se = gnp.array([0.1, 0.5, 0.0])
    ci = confidence_intervals(est, se, 95.0)
    assert ci.shape == (3, 2)
    assert gnp.all(ci[:, 0] <= est) and gnp.all(est <= ci[:, 1])
    assert ci[0, 1] - ci[0, 0] == pytest.approx(2 * 1.959963984540054 * 0.1)
    assert ci[2, 0] == ci[2, 1] == 0.0
    narrow = confidence_intervals(est, se, 68.0)
    assert gnp.all(narrow[:, 1] - narrow[:, 0] <= ci[:, 1] - ci[:, 0])


def test_information_criteria():
    ic = information_criteria(-10.0, 5, 100)
    assert ic.aic == pytest.approx(30.0)
    assert ic.bic == pytest.approx(20.0 + 5 * np.log(100))
    assert ic.as_dict() == {"AIC": ic.aic, "BIC": ic.bic}
