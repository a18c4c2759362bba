"""Tests for alpha-vector and baseline policies."""

import pytest
import numpy as np

from ..errors import ConfigurationError, DistributionError
from ..Models import Belief, DiscreteDistribution
from .alpha_vector import AlphaVectorPolicy
from .base import FixedActionPolicy, RandomPolicy

STATES = ["left", "right"]
ACTIONS = ["a0", "a1", "a2"]


def make_policy(alphas):
    return AlphaVectorPolicy(STATES, ACTIONS, alphas)


class TestAlphaVectorPolicy:
    """Tests for AlphaVectorPolicy."""

    def test_action_values_and_value(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.6, 0.6]])
        b = Belief.from_vector(STATES, [0.8, 0.2])
        assert np.allclose(policy.action_values(b), [0.8, 0.2, 0.6])
        assert policy.action(b) == "a0"
        assert policy.value(b) == pytest.approx(0.8)

    def test_tie_goes_to_first_action(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.5, 0.5]])
        assert policy.action(Belief.uniform(STATES)) == "a0"

    def test_accepts_plain_vectors(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.6, 0.6]])
        assert policy.action(np.array([0.1, 0.9])) == "a1"
        with pytest.raises(ValueError):
            policy.action([1.0, 0.0, 0.0])

    def test_belief_reordered_by_state_enumeration(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.6, 0.6]])
        d = DiscreteDistribution(["right", "left"], [0.9, 0.1])
        assert policy.action(d) == "a1"

    def test_rejects_belief_over_unknown_states(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.6, 0.6]])
        relabelled = DiscreteDistribution(["L", "R"], [0.5, 0.5])
        with pytest.raises(DistributionError):
            policy.action(relabelled)
        with pytest.raises(DistributionError):
            policy.action_values(DiscreteDistribution(["left", "other"], [0.5, 0.5]))

    def test_accepts_partial_distribution_over_known_states(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.6, 0.6]])
        assert policy.action(DiscreteDistribution(["right"], [1.0])) == "a1"

    def test_alpha_vector_lookup(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.6, 0.6]])
        assert np.allclose(policy.alpha_vector("a2"), [0.6, 0.6])
        with pytest.raises(KeyError):
            policy.alpha_vector("nope")

    def test_alphas_are_read_only(self):
        source = np.zeros((3, 2))
        policy = make_policy(source)
        with pytest.raises(ValueError):
            policy.alpha_vectors[0, 0] = 1.0
        source[0, 0] = 5.0
        assert policy.alpha_vectors[0, 0] == 0.0

    def test_rejects_wrong_shape(self):
        with pytest.raises(ConfigurationError):
            make_policy(np.zeros((2, 3)))
        with pytest.raises(ConfigurationError):
            make_policy(np.zeros(6))

    def test_rejects_non_finite(self):
        with pytest.raises(ConfigurationError):
            make_policy([[np.nan, 0.0], [0.0, 0.0], [0.0, 0.0]])

    def test_to_dict(self):
        policy = make_policy([[1.0, 0.0], [0.0, 1.0], [0.6, 0.6]])
        d = policy.to_dict()
        assert d["actions"] == ["'a0'", "'a1'", "'a2'"]
        assert d["alpha_vectors"][2] == [0.6, 0.6]


class TestBaselines:
    """Tests for the baseline policies."""

    def test_fixed_action(self):
        policy = FixedActionPolicy("a2")
        assert policy.action(Belief.uniform(STATES)) == "a2"

    def test_random_policy_is_seeded(self):
        b = Belief.uniform(STATES)
        p1 = RandomPolicy(ACTIONS, seed=3)
        p2 = RandomPolicy(ACTIONS, seed=3)
        draws = [p1.action(b) for _ in range(30)]
        assert draws == [p2.action(b) for _ in range(30)]
        assert set(draws) <= set(ACTIONS)

    def test_random_policy_draws_from_given_rng(self):
        b = Belief.uniform(STATES)
        p1 = RandomPolicy(ACTIONS, seed=0)
        p2 = RandomPolicy(ACTIONS, seed=99)
        rng1 = np.random.default_rng(5)
        rng2 = np.random.default_rng(5)
        assert [p1.action(b, rng=rng1) for _ in range(30)] == [p2.action(b, rng=rng2) for _ in range(30)]

    def test_random_policy_needs_actions(self):
        with pytest.raises(ConfigurationError):
            RandomPolicy([])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
