"""Belief-based policies."""

from .base import Policy, FixedActionPolicy, RandomPolicy
from .alpha_vector import AlphaVectorPolicy

__all__ = [
    'Policy',
    'FixedActionPolicy',
    'RandomPolicy',
    'AlphaVectorPolicy',
]
