"""Tests for the QMDP solver and the solver contract."""

import warnings

import pytest
import numpy as np

from ..errors import ConfigurationError, SolverNonConvergence
from ..CaseStudies.Tiger import (
    LISTEN,
    OPEN_LEFT,
    OPEN_RIGHT,
    TIGER_LEFT,
    TIGER_RIGHT,
    TigerConfig,
    TigerPOMDP,
    build_tiger_tabular,
)
from ..Models import Belief, MDP
from ..Policies import AlphaVectorPolicy
from .base import CallableSolver, SolverConfig, solve
from .qmdp import QMDPSolver, initial_q_values

TIGER_ALPHAS = np.array([[90.0, 200.0], [200.0, 90.0], [189.0, 189.0]])


# ============================================================
# Configuration
# ============================================================

class TestSolverConfig:
    """Tests for SolverConfig validation."""

    def test_defaults(self):
        config = SolverConfig()
        assert config.max_iterations == 100
        assert config.tolerance == 1e-3
        assert config.warm_start == "greedy"

    @pytest.mark.parametrize("bad", [0, -5, 2.5, True])
    def test_rejects_bad_iteration_budget(self, bad):
        with pytest.raises(ConfigurationError):
            SolverConfig(max_iterations=bad)

    @pytest.mark.parametrize("bad", [0.0, -1e-3, float("nan"), float("inf")])
    def test_rejects_bad_tolerance(self, bad):
        with pytest.raises(ConfigurationError):
            SolverConfig(tolerance=bad)

    def test_rejects_unknown_warm_start(self):
        with pytest.raises(ConfigurationError):
            SolverConfig(warm_start="optimistic")


# ============================================================
# QMDP on the tiger problem
# ============================================================

class TestQMDPTiger:
    """QMDP results on the tiger problem."""

    def test_converges_within_fifty_iterations(self):
        config = SolverConfig(max_iterations=50, tolerance=1e-3)
        report = QMDPSolver(config).solve_with_report(TigerPOMDP())
        assert report.converged
        assert report.iterations <= 50
        assert report.residual < 1e-3

    def test_alpha_vectors(self):
        policy = QMDPSolver(SolverConfig(max_iterations=50)).solve(TigerPOMDP())
        assert policy.actions == (OPEN_LEFT, OPEN_RIGHT, LISTEN)
        assert np.allclose(policy.alpha_vectors, TIGER_ALPHAS, atol=1e-6)

    def test_listens_at_uniform_belief(self):
        policy = QMDPSolver().solve(TigerPOMDP())
        assert policy.action(Belief.uniform([TIGER_LEFT, TIGER_RIGHT])) == LISTEN

    def test_opens_door_when_confident(self):
        policy = QMDPSolver().solve(TigerPOMDP())
        left = Belief.from_vector([TIGER_LEFT, TIGER_RIGHT], [0.95, 0.05])
        right = Belief.from_vector([TIGER_LEFT, TIGER_RIGHT], [0.05, 0.95])
        assert policy.action(left) == OPEN_RIGHT
        assert policy.action(right) == OPEN_LEFT

    def test_deterministic(self):
        solver = QMDPSolver(SolverConfig(warm_start="zero", max_iterations=30))
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", SolverNonConvergence)
            p1 = solver.solve(TigerPOMDP())
            p2 = solver.solve(TigerPOMDP())
        assert np.array_equal(p1.alpha_vectors, p2.alpha_vectors)

    def test_tabular_and_structured_models_agree(self):
        p1 = QMDPSolver().solve(TigerPOMDP())
        p2 = QMDPSolver().solve(build_tiger_tabular())
        assert np.allclose(p1.alpha_vectors, p2.alpha_vectors)

    def test_solve_defaults_to_qmdp(self):
        policy = solve(TigerPOMDP())
        assert isinstance(policy, AlphaVectorPolicy)
        assert np.allclose(policy.alpha_vectors, TIGER_ALPHAS, atol=1e-6)


# ============================================================
# Warm starts and convergence
# ============================================================

class TestValueIteration:
    """Residuals, warm starts and iteration budgets."""

    def test_zero_start_residual_is_monotone(self):
        config = SolverConfig(warm_start="zero", max_iterations=60, tolerance=1e-9)
        report = QMDPSolver(config).solve_with_report(TigerPOMDP())
        history = report.residual_history
        assert len(history) == report.iterations
        assert history[0] == pytest.approx(100.0)
        assert history[1] == pytest.approx(9.5)
        assert all(b <= a + 1e-12 for a, b in zip(history, history[1:]))

    @pytest.mark.parametrize("warm_start", ["zero", "reward", "greedy"])
    def test_all_warm_starts_reach_same_fixed_point(self, warm_start):
        config = SolverConfig(warm_start=warm_start, max_iterations=500, tolerance=1e-6)
        report = QMDPSolver(config).solve_with_report(TigerPOMDP())
        assert report.converged
        assert np.allclose(report.policy.alpha_vectors, TIGER_ALPHAS, atol=1e-3)

    def test_non_convergence_warns_and_returns_policy(self):
        config = SolverConfig(warm_start="zero", max_iterations=50, tolerance=1e-3)
        with pytest.warns(SolverNonConvergence) as record:
            policy = QMDPSolver(config).solve(TigerPOMDP())
        assert isinstance(policy, AlphaVectorPolicy)
        warning = record[0].message
        assert warning.iterations == 50
        assert warning.residual > 1e-3
        # Still a sensible policy after 50 sweeps.
        assert policy.action(Belief.uniform([TIGER_LEFT, TIGER_RIGHT])) == LISTEN

    def test_report_not_converged(self):
        config = SolverConfig(warm_start="zero", max_iterations=5)
        report = QMDPSolver(config).solve_with_report(TigerPOMDP())
        assert not report.converged
        assert not report.cancelled
        assert report.iterations == 5
        assert "not converged" in str(report)

    def test_greedy_start_is_fixed_point_for_tiger(self):
        mdp = MDP.from_pomdp(TigerPOMDP())
        Q = initial_q_values(mdp, "greedy")
        assert np.allclose(Q, TIGER_ALPHAS.T)

    def test_greedy_start_falls_back_on_singular_system(self):
        mdp = MDP.from_pomdp(TigerPOMDP(TigerConfig(discount_factor=1.0)))
        Q = initial_q_values(mdp, "greedy")
        assert np.allclose(Q, mdp.R)

    def test_zero_discount_is_immediate_reward(self):
        policy = QMDPSolver().solve(TigerPOMDP(TigerConfig(discount_factor=0.0)))
        assert np.allclose(policy.alpha_vectors, [[-100.0, 10.0], [10.0, -100.0], [-1.0, -1.0]])

    def test_should_stop_cancels_without_warning(self):
        calls = []

        def stop():
            calls.append(1)
            return True

        config = SolverConfig(warm_start="zero", max_iterations=50, should_stop=stop)
        with warnings.catch_warnings():
            warnings.simplefilter("error", SolverNonConvergence)
            report = QMDPSolver(config).solve_with_report(TigerPOMDP())
            QMDPSolver(config).solve(TigerPOMDP())
        assert report.cancelled
        assert not report.converged
        assert report.iterations == 1
        assert len(calls) == 2

    def test_verbose_prints_iterations(self, capsys):
        config = SolverConfig(warm_start="zero", max_iterations=3, verbose=True)
        QMDPSolver(config).solve_with_report(TigerPOMDP())
        out = capsys.readouterr().out
        assert out.count("[QMDP] iteration") == 3
        assert "did not converge" in out


# ============================================================
# External solvers
# ============================================================

class TestCallableSolver:
    """Tests for the external backend adapter."""

    def test_matrix_backend(self):
        backend = lambda pomdp, config: TIGER_ALPHAS
        policy = CallableSolver(backend).solve(TigerPOMDP())
        assert policy.actions == (OPEN_LEFT, OPEN_RIGHT, LISTEN)
        assert policy.action(Belief.uniform([TIGER_LEFT, TIGER_RIGHT])) == LISTEN

    def test_backend_with_action_labels(self):
        # Some backends return fewer vectors than actions.
        backend = lambda pomdp, config: (TIGER_ALPHAS[[2, 0]], [LISTEN, OPEN_LEFT])
        policy = CallableSolver(backend).solve(TigerPOMDP())
        assert policy.actions == (LISTEN, OPEN_LEFT)

    def test_backend_receives_config(self):
        seen = {}

        def backend(pomdp, config):
            seen["config"] = config
            return TIGER_ALPHAS

        config = SolverConfig(max_iterations=7)
        CallableSolver(backend).solve(TigerPOMDP(), config)
        assert seen["config"] is config

    def test_wrong_shape(self):
        backend = lambda pomdp, config: np.zeros((3, 3))
        with pytest.raises(ConfigurationError):
            CallableSolver(backend, name="broken").solve(TigerPOMDP())

    def test_unknown_action(self):
        backend = lambda pomdp, config: (TIGER_ALPHAS[:1], ["jump"])
        with pytest.raises(ConfigurationError):
            CallableSolver(backend).solve(TigerPOMDP())

    def test_policy_over_other_states(self):
        other = AlphaVectorPolicy(["x", "y"], [LISTEN], [[0.0, 0.0]])
        backend = lambda pomdp, config: other
        with pytest.raises(ConfigurationError):
            CallableSolver(backend).solve(TigerPOMDP())

    def test_solve_with_explicit_solver(self):
        backend = lambda pomdp, config: TIGER_ALPHAS
        policy = solve(TigerPOMDP(), solver=CallableSolver(backend))
        assert np.array_equal(policy.alpha_vectors, TIGER_ALPHAS)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
