"""Policy interface and simple baseline policies.

A policy maps the agent's belief to an action. Baselines are useful as
reference points when evaluating solver output through simulation.
"""

from abc import ABC, abstractmethod
from typing import Any, Hashable, List, Optional, Sequence
import numpy as np

from ..errors import ConfigurationError

Action = Hashable


# ============================================================
# Policy Base Class
# ============================================================

class Policy(ABC):
    """Base class for belief-based policies."""

    @abstractmethod
    def action(self, belief: Any, rng=None) -> Action:
        """Select an action for the given belief.

        Parameters
        ----------
        belief : Belief
            Current distribution over states
        rng : numpy.random.Generator, optional
            Generator of the current run; stochastic policies draw from it

        Returns
        -------
        action
            Chosen action
        """
        pass


# ============================================================
# Baseline Policies
# ============================================================

class FixedActionPolicy(Policy):
    """Always selects the same action, whatever the belief."""

    def __init__(self, action: Action):
        self.fixed_action = action

    def action(self, belief: Any, rng=None) -> Action:
        return self.fixed_action


class RandomPolicy(Policy):
    """Uniform random selection among all actions.

    Draws from the run's generator when the simulator passes one, so
    results depend only on the run seed. Its own generator is used for
    direct calls without `rng`.
    """

    def __init__(self, actions: Sequence[Action], seed: Optional[int] = None):
        """Initialize with the complete action set.

        Parameters
        ----------
        actions : list
            Actions to choose from
        seed : int, optional
            Seed for the generator used when no `rng` is passed
        """
        self.actions: List[Action] = list(actions)
        if not self.actions:
            raise ConfigurationError("RandomPolicy needs at least one action")
        self.rng = np.random.default_rng(seed)

    def action(self, belief: Any, rng=None) -> Action:
        if rng is None:
            rng = self.rng
        n = len(self.actions)
        return self.actions[min(int(rng.random() * n), n - 1)]
