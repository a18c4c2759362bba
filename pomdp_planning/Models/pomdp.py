"""Partially Observable Markov Decision Process models."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, FrozenSet, Hashable, List, Optional, Sequence, Tuple
import numpy as np

from ..errors import ConfigurationError
from .distribution import DiscreteDistribution

State = Hashable
Action = Hashable
Observation = Hashable


class POMDP(ABC):
    """
    Finite discrete POMDP.

    Subclasses must implement:
    - states(), actions(), observations(): stable, ordered enumerations
    - transition(s, a): distribution over next states
    - observation(s, a, sp): distribution over observations
    - reward(s, a, sp=None): immediate reward
    and set `discount` in [0, 1].

    Indices derived from the enumeration order are used as array
    positions by solvers and policies, so the order must never change.
    """

    discount: float

    @abstractmethod
    def states(self) -> Sequence[State]:
        ...

    @abstractmethod
    def actions(self) -> Sequence[Action]:
        ...

    @abstractmethod
    def observations(self) -> Sequence[Observation]:
        ...

    @abstractmethod
    def transition(self, s: State, a: Action) -> DiscreteDistribution:
        """Distribution over s' ~ P(. | s, a)."""

    @abstractmethod
    def observation(self, s: State, a: Action, sp: State) -> DiscreteDistribution:
        """Distribution over o ~ Z(. | s, a, s')."""

    @abstractmethod
    def reward(self, s: State, a: Action, sp: Optional[State] = None) -> float:
        """Immediate reward. With sp omitted, the expected reward of (s, a)."""

    def initial_state(self) -> DiscreteDistribution:
        """Distribution over the initial state (uniform unless overridden)."""
        return DiscreteDistribution.uniform(self.states())

    def is_terminal(self, s: State) -> bool:
        return False

    # ------------------------------------------------------------
    # Enumeration helpers
    # ------------------------------------------------------------

    @cached_property
    def _state_indices(self) -> Dict[State, int]:
        return {s: i for i, s in enumerate(self.states())}

    @cached_property
    def _action_indices(self) -> Dict[Action, int]:
        return {a: i for i, a in enumerate(self.actions())}

    @cached_property
    def _observation_indices(self) -> Dict[Observation, int]:
        return {o: i for i, o in enumerate(self.observations())}

    @property
    def n_states(self) -> int:
        return len(self.states())

    @property
    def n_actions(self) -> int:
        return len(self.actions())

    @property
    def n_observations(self) -> int:
        return len(self.observations())

    def state_index(self, s: State) -> int:
        return self._state_indices[s]

    def action_index(self, a: Action) -> int:
        return self._action_indices[a]

    def observation_index(self, o: Observation) -> int:
        return self._observation_indices[o]

    # ------------------------------------------------------------
    # Dense views
    # ------------------------------------------------------------

    def transition_matrix(self, a: Action) -> np.ndarray:
        """
        Returns T_a as an n x n matrix where [i,j] = P(s_j | s_i, a).
        """
        states = self.states()
        n = len(states)
        Tmat = np.zeros((n, n), dtype=float)
        for i, s in enumerate(states):
            Tmat[i, :] = self.transition(s, a).as_vector(states)
        return Tmat

    def reward_matrix(self) -> np.ndarray:
        """R[i, k] = reward(s_i, a_k)."""
        states, actions = self.states(), self.actions()
        R = np.zeros((len(states), len(actions)), dtype=float)
        for i, s in enumerate(states):
            for k, a in enumerate(actions):
                R[i, k] = float(self.reward(s, a))
        return R


@dataclass
class TabularPOMDP(POMDP):
    """
    POMDP given by explicit tables.

    state_list       : list of states
    action_list      : list of actions
    observation_list : list of possible observations
    T                : (s, a) -> {s' -> P(s' | s, a)}
    Z                : (a, s') -> {o -> P(o | a, s')}
    R                : (s, a) -> reward
    discount         : discount factor in [0, 1]
    initial          : s -> P(s_0 = s)  (uniform if omitted)
    terminal         : absorbing states at which a run stops
    """
    state_list: List[State]
    action_list: List[Action]
    observation_list: List[Observation]
    T: Dict[Tuple[State, Action], Dict[State, float]]
    Z: Dict[Tuple[Action, State], Dict[Observation, float]]
    R: Dict[Tuple[State, Action], float]
    discount: float = 0.95
    initial: Optional[Dict[State, float]] = None
    terminal: FrozenSet[State] = field(default_factory=frozenset)

    def __post_init__(self):
        if not (0.0 <= self.discount <= 1.0):
            raise ConfigurationError(f"discount must be in [0, 1], got {self.discount}")
        self.state_list = list(self.state_list)
        self.action_list = list(self.action_list)
        self.observation_list = list(self.observation_list)
        self.terminal = frozenset(self.terminal)

    def states(self) -> List[State]:
        return self.state_list

    def actions(self) -> List[Action]:
        return self.action_list

    def observations(self) -> List[Observation]:
        return self.observation_list

    def transition(self, s: State, a: Action) -> DiscreteDistribution:
        row = self.T[(s, a)]
        return DiscreteDistribution(self.state_list, [row.get(sp, 0.0) for sp in self.state_list])

    def observation(self, s: State, a: Action, sp: State) -> DiscreteDistribution:
        row = self.Z[(a, sp)]
        return DiscreteDistribution(self.observation_list, [row.get(o, 0.0) for o in self.observation_list])

    def reward(self, s: State, a: Action, sp: Optional[State] = None) -> float:
        return float(self.R[(s, a)])

    def initial_state(self) -> DiscreteDistribution:
        if self.initial is None:
            return DiscreteDistribution.uniform(self.state_list)
        return DiscreteDistribution(self.state_list, [self.initial.get(s, 0.0) for s in self.state_list])

    def is_terminal(self, s: State) -> bool:
        return s in self.terminal
