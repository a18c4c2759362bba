"""Fail-fast consistency checks for POMDP definitions."""

from typing import Hashable, Sequence
import math

from ..errors import ConfigurationError, DistributionError
from .distribution import PROBABILITY_TOLERANCE, DiscreteDistribution
from .pomdp import POMDP


def _check_enumeration(name: str, values: Sequence[Hashable]) -> None:
    if len(values) == 0:
        raise ConfigurationError(f"Model declares no {name}")
    if len(set(values)) != len(values):
        raise ConfigurationError(f"Model {name} contain duplicates: {list(values)}")


def _check_distribution(
    what: str,
    dist: DiscreteDistribution,
    declared: Sequence[Hashable],
    tolerance: float,
) -> None:
    """Distribution must put all of its (unit) mass on declared outcomes."""
    declared_set = set(declared)
    outside = [o for o, p in dist.items() if p > 0.0 and o not in declared_set]
    if outside:
        raise DistributionError(f"{what} puts mass on undeclared outcomes {outside}")
    total = sum(dist.probability(o) for o in declared)
    if abs(total - 1.0) > tolerance:
        raise DistributionError(f"{what} sums to {total!r} over declared outcomes, expected 1")


def check_model(pomdp: POMDP, tolerance: float = PROBABILITY_TOLERANCE) -> None:
    """
    Check a whole model before solving or simulating it.

    Verifies that:
    - states, actions and observations are non-empty and duplicate-free
    - the discount lies in [0, 1]
    - every transition(s, a) and observation(s, a, s') sums to 1 over the
      declared states / observations
    - every reward(s, a) is finite and equals reward(s, a, s') on average
      over s' ~ transition(s, a)

    Raises ConfigurationError or DistributionError describing the first
    problem found.
    """
    states = list(pomdp.states())
    actions = list(pomdp.actions())
    observations = list(pomdp.observations())

    _check_enumeration("states", states)
    _check_enumeration("actions", actions)
    _check_enumeration("observations", observations)

    discount = pomdp.discount
    if not (0.0 <= discount <= 1.0):
        raise ConfigurationError(f"discount must be in [0, 1], got {discount}")

    _check_distribution("initial_state()", pomdp.initial_state(), states, tolerance)

    for s in states:
        for a in actions:
            trans = pomdp.transition(s, a)
            _check_distribution(f"transition({s!r}, {a!r})", trans, states, tolerance)

            r = pomdp.reward(s, a)
            if not math.isfinite(r):
                raise ConfigurationError(f"reward({s!r}, {a!r}) is not finite: {r}")

            expected = 0.0
            for sp in states:
                p = trans.probability(sp)
                obs = pomdp.observation(s, a, sp)
                _check_distribution(
                    f"observation({s!r}, {a!r}, {sp!r})", obs, observations, tolerance
                )
                if p > 0.0:
                    expected += p * pomdp.reward(s, a, sp)

            if abs(expected - r) > 1e-6 * max(1.0, abs(r)):
                raise ConfigurationError(
                    f"reward({s!r}, {a!r}) = {r} differs from its expectation "
                    f"over next states ({expected})"
                )
