import numpy as np
import pytest

import gmpest as gm
import gmpest.num as gnp
from gmpest.core.mean import CallableMeanFunction, as_mean_function, evaluate_design, evaluate_gradient
from gmpest.errors import ConfigurationError
from gmpest.misc.gmpe import FictitiousDepthGMPE
from gmpest.misc.synthetic import simulate_dataset


@pytest.fixture(scope="module")
def data():
    return simulate_dataset(
        FictitiousDepthGMPE(), [1.0, 1.0, -1.0, 0.1], [5.0], [0.1, 0.3, 10.0, 2.0],
        covariance_type="ExpAni", num_events=3, stations_per_event=[4, 2, 5],
        strike=45.0, shuffle=True, seed=7,
    )


def test_model_repr_and_str():
    model = gm.Model(FictitiousDepthGMPE(), covariance_type="matern1.5", strike=10.0)
    assert model.covariance_type == "Matern1.5"
    assert "Matern1.5" in str(model)
    assert repr(model).startswith("<gmpest.core.Model object>")


def test_covariance_in_input_order(data):
    model = gm.Model(FictitiousDepthGMPE(), covariance_type="ExpAni", strike=45.0)
    theta = [0.1, 0.3, 10.0, 2.0]
    K = model.covariance(data.w, data.event_id, theta, grouped=False)
    same_event = data.event_id[:, None] == data.event_id[None, :]
    assert gnp.all(K[~same_event] == 0.0)
    assert gnp.allclose(np.diag(K), 0.4)
    Kg = model.covariance(data.w, data.event_id, theta)
    order = np.argsort(
        [list(dict.fromkeys(data.event_id)).index(e) for e in data.event_id], kind="stable"
    )
    assert gnp.allclose(Kg, K[order][:, order])


def test_log_likelihood(data):
    model = gm.Model(FictitiousDepthGMPE(), covariance_type="ExpAni", strike=45.0)
    theta = [0.1, 0.3, 10.0, 2.0]
    beta = gnp.array([1.0, 1.0, -1.0, 0.1])
    ll = model.log_likelihood(data.y, data.x, data.w, data.event_id, [5.0], theta, beta=beta)
    K = model.covariance(data.w, data.event_id, theta, grouped=False)
    mean = FictitiousDepthGMPE().design(data.x, gnp.array([5.0])) @ beta
    assert ll == pytest.approx(gnp.multivariate_normal.logpdf(data.y, mean=mean, cov=K))
    # profiling beta can only increase the likelihood
    ll_profile = model.log_likelihood(data.y, data.x, data.w, data.event_id, [5.0], theta)
    assert ll_profile >= ll


def test_as_mean_function():
    gmpe = FictitiousDepthGMPE()
    assert as_mean_function(gmpe) is gmpe
    f = as_mean_function((gmpe.design, gmpe.gradient))
    assert isinstance(f, CallableMeanFunction)
    with pytest.raises(ConfigurationError):
        as_mean_function(gmpe, mean_design=gmpe.design)
    with pytest.raises(ConfigurationError):
        as_mean_function(mean_design=gmpe.design)
    with pytest.raises(ConfigurationError):
        as_mean_function("linear")
    with pytest.raises(TypeError):
        CallableMeanFunction(gmpe.design, None)


def test_mean_function_shape_checks():
    x = gnp.array([[5.0, 10.0], [6.0, 20.0]])
    f = CallableMeanFunction(lambda x, g: gnp.ones((3, 2)), lambda x, g: [gnp.ones((2, 2))])
    with pytest.raises(ConfigurationError):
        evaluate_design(f, x, gnp.array([1.0]), 2)
    with pytest.raises(ConfigurationError):
        evaluate_gradient(f, x, gnp.array([1.0, 2.0]), (2, 2))
    with pytest.raises(ConfigurationError):
        evaluate_gradient(f, x, gnp.array([1.0]), (2, 3))


def test_gmpe_gradient():
    gmpe = FictitiousDepthGMPE(mref=5.5, rref=10.0)
    x = gnp.array([[4.5, 1.0], [6.0, 30.0], [7.2, 120.0]])
    h = 7.0
    B = gmpe.design(x, gnp.array([h]))
    assert B.shape == (3, 4)
    assert gnp.allclose(B[:, 0], 1.0)
    assert gnp.allclose(B[:, 2], np.log(np.sqrt(x[:, 1] ** 2 + h ** 2) / 10.0))
    (dB,) = gmpe.gradient(x, gnp.array([h]))
    dB_fd = gnp.derivative_finite_diff(lambda t: gmpe.design(x, gnp.array([t])), h, 1e-4)
    assert gnp.allclose(dB, dB_fd, rtol=1e-7, atol=1e-10)
