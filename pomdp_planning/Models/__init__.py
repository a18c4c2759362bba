"""Models for discrete POMDPs and related structures."""

from .distribution import DiscreteDistribution, Belief, PROBABILITY_TOLERANCE
from .pomdp import POMDP, TabularPOMDP
from .mdp import MDP
from .validation import check_model

__all__ = [
    'DiscreteDistribution', 'Belief', 'PROBABILITY_TOLERANCE',
    'POMDP', 'TabularPOMDP',
    'MDP',
    'check_model',
]
