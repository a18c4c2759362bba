"""Exact discrete Bayes filter for finite POMDPs."""

from typing import Dict, Hashable

from ..errors import ImpossibleObservation
from ..Models.distribution import Belief, DiscreteDistribution
from ..Models.pomdp import POMDP
from .belief_base import BeliefUpdater

State = Hashable
Action = Hashable
Observation = Hashable


def transition_update(pomdp: POMDP, b: DiscreteDistribution, a: Action) -> Dict[State, float]:
    """
    Belief prediction under the model dynamics:
      b_pred(s') = sum_s T(s'|s,a) * b(s)
    """
    S = pomdp.states()
    b_pred = {s_next: 0.0 for s_next in S}
    for s in S:
        bs = b.probability(s)
        if bs == 0.0:
            continue
        for s_next, p in pomdp.transition(s, a).items():
            if p:
                b_pred[s_next] += bs * p
    return b_pred


def update_belief(
    pomdp: POMDP,
    belief: DiscreteDistribution,
    action: Action,
    observation: Observation,
) -> Belief:
    """
    Bayes' rule:
      b'(s') proportional to sum_s b(s) * T(s'|s,a) * Z(o|s,a,s')

    Raises ImpossibleObservation if no reachable next state can emit
    `observation`; the prior is never modified.
    """
    S = pomdp.states()
    alpha = {s_next: 0.0 for s_next in S}

    for s in S:
        bs = belief.probability(s)
        if bs == 0.0:
            continue
        for s_next, p_trans in pomdp.transition(s, action).items():
            if p_trans == 0.0:
                continue
            z = pomdp.observation(s, action, s_next).probability(observation)
            alpha[s_next] += bs * p_trans * z

    denom = sum(alpha.values())
    if not denom > 0.0:
        raise ImpossibleObservation(action, observation)

    return Belief(S, [alpha[s] / denom for s in S])


class DiscreteUpdater(BeliefUpdater):
    """Exact belief updater over an enumerated state space."""

    def update(self, belief: Belief, action: Action, observation: Observation) -> Belief:
        return update_belief(self.pomdp, belief, action, observation)

    def predict(self, belief: Belief, action: Action) -> Belief:
        """Belief after `action` before any observation is received."""
        S = self.pomdp.states()
        b_pred = transition_update(self.pomdp, belief, action)
        return Belief(S, [b_pred[s] for s in S])

    def observation_probability(self, belief: Belief, action: Action, observation: Observation) -> float:
        """P(o | b, a) = sum_s sum_s' b(s) T(s'|s,a) Z(o|s,a,s')."""
        total = 0.0
        for s in self.pomdp.states():
            bs = belief.probability(s)
            if bs == 0.0:
                continue
            for s_next, p_trans in self.pomdp.transition(s, action).items():
                if p_trans == 0.0:
                    continue
                total += bs * p_trans * self.pomdp.observation(s, action, s_next).probability(observation)
        return total
