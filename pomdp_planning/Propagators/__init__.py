"""Belief propagation for discrete POMDPs."""

from .belief_base import BeliefUpdater
from .discrete_updater import DiscreteUpdater, update_belief, transition_update

__all__ = [
    'BeliefUpdater',
    'DiscreteUpdater',
    'update_belief',
    'transition_update',
]
