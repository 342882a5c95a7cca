import numpy as np
import pytest

import gmpest.num as gnp
from gmpest.core.fisher import scoring_quantities
from gmpest.core.likelihood import gls_coefficients, profile_likelihood
from gmpest.core.linalg import BlockCholesky
from gmpest.core.mean import evaluate_gradient
from gmpest.core.utils import prepare_observations
from gmpest.kernel import get_covariance_model
from gmpest.misc.gmpe import FictitiousDepthGMPE
from gmpest.misc.synthetic import simulate_dataset

BETA = [1.0, 1.1, -1.2, 0.15]
GAMMA = [6.0]


def make_problem(covariance_type, theta):
    gmpe = FictitiousDepthGMPE()
    data = simulate_dataset(
        gmpe, BETA, GAMMA, theta, covariance_type=covariance_type,
        num_events=4, stations_per_event=[5, 1, 7, 3], strike=20.0, seed=11,
    )
    obs = prepare_observations(data.y, data.x, data.w, data.event_id, strike=20.0)
    return gmpe, get_covariance_model(covariance_type), obs


@pytest.fixture(params=[("Exp", [0.2, 0.4, 15.0]), ("ExpAni", [0.2, 0.4, 15.0, 3.0]), ("No", [0.2, 0.4])])
def problem(request):
    return make_problem(*request.param)


def test_log_likelihood_matches_dense_density(problem):
    gmpe, model, obs = problem
    theta_trans = gnp.log(gnp.full(model.num_params, 0.3))
    gamma = gnp.array([5.0])
    state = profile_likelihood(gmpe, model, obs.y, obs.x, obs.dist, gamma, theta_trans)

    K = model.covariance(theta_trans, obs.dist)
    B = gmpe.design(obs.x, gamma)
    Kinv_B = np.linalg.solve(K, B)
    beta = np.linalg.solve(B.T @ Kinv_B, Kinv_B.T @ obs.y)
    assert gnp.allclose(state.beta, beta)
    assert gnp.allclose(state.residual, obs.y - B @ beta)
    assert state.logdet == pytest.approx(np.linalg.slogdet(K)[1])
    expected = gnp.multivariate_normal.logpdf(obs.y, mean=B @ beta, cov=K)
    assert state.ll == pytest.approx(expected, rel=1e-10)
    assert gnp.allclose(state.theta, gnp.exp(theta_trans))


def test_gls_maximizes_likelihood_in_beta(problem):
    gmpe, model, obs = problem
    theta_trans = gnp.zeros(model.num_params)
    state = profile_likelihood(gmpe, model, obs.y, obs.x, obs.dist, [5.0], theta_trans)
    chol = BlockCholesky(state.blocks, obs.groups.slices)
    beta, Ibb = gls_coefficients(state.B, obs.y, chol)
    assert gnp.allclose(beta, state.beta)
    K = model.covariance(theta_trans, obs.dist)
    for delta in (1e-2, -1e-2):
        b = beta + delta
        ll = gnp.multivariate_normal.logpdf(obs.y, mean=state.B @ b, cov=K)
        assert ll < state.ll


def test_block_quantities_match_dense_formulas(problem):
    gmpe, model, obs = problem
    theta_trans = gnp.log(gnp.array([0.25, 0.5, 10.0, 2.0][: model.num_params]))
    gamma = gnp.array([4.0])
    state = profile_likelihood(gmpe, model, obs.y, obs.x, obs.dist, gamma, theta_trans)
    mean_gradients = evaluate_gradient(gmpe, obs.x, gamma, state.B.shape)
    q = scoring_quantities(state, mean_gradients, model.gradient_blocks(theta_trans, obs.dist))

    n = obs.num_obs
    Kinv = np.linalg.inv(model.covariance(theta_trans, obs.dist))
    G = model.gradient(theta_trans, obs.dist)
    r = state.residual
    M = np.column_stack([Gm @ state.beta for Gm in mean_gradients])

    St = [-0.5 * np.trace(Kinv @ Gi @ (np.eye(n) - np.outer(Kinv @ r, r))) for Gi in G]
    Itt = [[0.5 * np.trace(Kinv @ Gi @ Kinv @ Gj) for Gj in G] for Gi in G]
    assert gnp.allclose(q.St, St)
    assert gnp.allclose(q.Itt, Itt)
    assert gnp.allclose(q.Itt, q.Itt.T)
    assert gnp.allclose(q.Sg, M.T @ Kinv @ r)
    assert gnp.allclose(q.Igg, M.T @ Kinv @ M)
    assert gnp.allclose(q.Igb, M.T @ Kinv @ state.B)
    assert gnp.allclose(q.Ibb, state.B.T @ Kinv @ state.B)


def test_scores_are_gradients_of_profile_likelihood(problem):
    gmpe, model, obs = problem
    theta_trans = gnp.log(gnp.array([0.25, 0.5, 10.0, 2.0][: model.num_params]))
    gamma = gnp.array([4.0])

    def ll(g, t):
        return profile_likelihood(gmpe, model, obs.y, obs.x, obs.dist, g, t).ll

    state = profile_likelihood(gmpe, model, obs.y, obs.x, obs.dist, gamma, theta_trans)
    mean_gradients = evaluate_gradient(gmpe, obs.x, gamma, state.B.shape)
    q = scoring_quantities(state, mean_gradients, model.gradient_blocks(theta_trans, obs.dist))

    dg = gnp.derivative_finite_diff(lambda g: ll(gnp.array([g]), theta_trans), gamma[0], 1e-4)
    assert q.Sg[0] == pytest.approx(dg, rel=1e-5, abs=1e-6)
    for i in range(model.num_params):

        def f(t):
            tt = gnp.array(theta_trans)
            tt[i] = t
            return ll(gamma, tt)

        dt = gnp.derivative_finite_diff(f, theta_trans[i], 1e-4)
        assert q.St[i] == pytest.approx(dt, rel=1e-5, abs=1e-6)
