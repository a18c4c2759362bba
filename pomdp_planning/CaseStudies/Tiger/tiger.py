"""Tiger case study: a tiger hides behind one of two doors.

The agent can listen (noisy, costly) or open a door. Opening the door
with the tiger is heavily penalized, opening the other one is rewarded,
and either way the problem resets with the tiger placed uniformly at
random.
"""

from dataclasses import dataclass
from typing import List, Optional

from ...errors import ConfigurationError
from ...Models import POMDP, DiscreteDistribution, TabularPOMDP

# States: is the tiger behind the left door?
TIGER_LEFT = True
TIGER_RIGHT = False

# Actions
OPEN_LEFT = "open-left"
OPEN_RIGHT = "open-right"
LISTEN = "listen"

# Observations: did the agent hear the tiger on the left?
HEAR_LEFT = True
HEAR_RIGHT = False


def tiger_states() -> List[bool]:
    """Return tiger states (tiger-left first)."""
    return [TIGER_LEFT, TIGER_RIGHT]


def tiger_actions() -> List[str]:
    """Return tiger actions."""
    return [OPEN_LEFT, OPEN_RIGHT, LISTEN]


def tiger_observations() -> List[bool]:
    """Return tiger observations (hear-left first)."""
    return [HEAR_LEFT, HEAR_RIGHT]


@dataclass(frozen=True)
class TigerConfig:
    """
    Parameters of the tiger problem.

    Attributes:
        r_listen: Reward for listening (a cost)
        r_findtiger: Reward for opening the tiger's door
        r_escapetiger: Reward for opening the other door
        p_listen_correctly: Probability that listening reports the right side
        discount_factor: Discount factor in [0, 1]
    """
    r_listen: float = -1.0
    r_findtiger: float = -100.0
    r_escapetiger: float = 10.0
    p_listen_correctly: float = 0.85
    discount_factor: float = 0.95

    def __post_init__(self):
        if not (0.0 <= self.discount_factor <= 1.0):
            raise ConfigurationError(
                f"discount_factor must be in [0, 1], got {self.discount_factor}"
            )
        if not (0.0 <= self.p_listen_correctly <= 1.0):
            raise ConfigurationError(
                f"p_listen_correctly must be in [0, 1], got {self.p_listen_correctly}"
            )


class TigerPOMDP(POMDP):
    """Tiger problem as a POMDP.

    The observation depends only on the action and the resulting state:
    listening reports the tiger's side correctly with probability
    p_listen_correctly, any other action yields an uninformative coin flip.
    """

    def __init__(self, config: Optional[TigerConfig] = None):
        self.config = config if config is not None else TigerConfig()
        self.discount = self.config.discount_factor
        self._states = tiger_states()
        self._actions = tiger_actions()
        self._observations = tiger_observations()

    def states(self) -> List[bool]:
        return self._states

    def actions(self) -> List[str]:
        return self._actions

    def observations(self) -> List[bool]:
        return self._observations

    def transition(self, s: bool, a: str) -> DiscreteDistribution:
        if a == LISTEN:
            return DiscreteDistribution.deterministic(s, support=self._states)
        # Opening a door resets the problem.
        return DiscreteDistribution.uniform(self._states)

    def observation(self, s: bool, a: str, sp: bool) -> DiscreteDistribution:
        if a == LISTEN:
            p = self.config.p_listen_correctly
            p_left = p if sp == TIGER_LEFT else 1.0 - p
            return DiscreteDistribution(self._observations, [p_left, 1.0 - p_left])
        return DiscreteDistribution.uniform(self._observations)

    def reward(self, s: bool, a: str, sp: Optional[bool] = None) -> float:
        c = self.config
        if a == LISTEN:
            return c.r_listen
        if a == OPEN_LEFT:
            return c.r_findtiger if s == TIGER_LEFT else c.r_escapetiger
        if a == OPEN_RIGHT:
            return c.r_findtiger if s == TIGER_RIGHT else c.r_escapetiger
        raise KeyError(f"Unknown tiger action {a!r}")

    def initial_state(self) -> DiscreteDistribution:
        return DiscreteDistribution.uniform(self._states)


def build_tiger_pomdp(**kwargs) -> TigerPOMDP:
    """Build the tiger POMDP; keyword arguments override TigerConfig defaults."""
    return TigerPOMDP(TigerConfig(**kwargs))


def build_tiger_tabular(config: Optional[TigerConfig] = None) -> TabularPOMDP:
    """Same problem as an explicit TabularPOMDP."""
    pomdp = TigerPOMDP(config)
    states, actions, observations = pomdp.states(), pomdp.actions(), pomdp.observations()

    T = {(s, a): pomdp.transition(s, a).as_dict() for s in states for a in actions}
    # Z does not depend on the originating state; any state serves as s.
    Z = {(a, sp): pomdp.observation(states[0], a, sp).as_dict() for a in actions for sp in states}
    R = {(s, a): pomdp.reward(s, a) for s in states for a in actions}

    return TabularPOMDP(
        list(states),
        list(actions),
        list(observations),
        T,
        Z,
        R,
        discount=pomdp.discount,
    )
