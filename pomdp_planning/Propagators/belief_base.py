"""Base class for belief updaters."""

from typing import Hashable, Optional

from ..Models.distribution import Belief, DiscreteDistribution

State = Hashable
Action = Hashable
Observation = Hashable


class BeliefUpdater:
    """
    Abstract base class for belief updaters.

    Updaters are stateless with respect to the belief they process:
    update() returns a new Belief and leaves the prior untouched, so one
    updater can serve any number of concurrent simulations.

    Subclasses must implement:
    - update(belief, action, observation): posterior belief
    """

    def __init__(self, pomdp):
        self.pomdp = pomdp

    def initialize(self, dist: Optional[DiscreteDistribution] = None) -> Belief:
        """Belief over all model states; the model's initial distribution by default."""
        if dist is None:
            dist = self.pomdp.initial_state()
        if isinstance(dist, Belief) and dist.states == tuple(self.pomdp.states()):
            return dist
        return Belief.from_distribution(list(self.pomdp.states()), dist)

    def update(self, belief: Belief, action: Action, observation: Observation) -> Belief:
        """Posterior belief after taking `action` and receiving `observation`."""
        raise NotImplementedError
