"""Fully observable Markov Decision Process underlying a POMDP."""

from dataclasses import dataclass
from typing import Hashable, List, Sequence
import numpy as np

from .pomdp import POMDP

State = Hashable
Action = Hashable


@dataclass
class MDP:
    """
    Dense Markov Decision Process.

    states   : list of all states (row/column order of T and R)
    actions  : list of actions
    T        : T[a, s, s'] = P(s' | s, a)
    R        : R[s, a] = expected immediate reward
    discount : discount factor
    terminal : terminal[s] is True for absorbing states (value 0)
    """
    states: List[State]
    actions: List[Action]
    T: np.ndarray
    R: np.ndarray
    discount: float
    terminal: np.ndarray

    @classmethod
    def from_pomdp(cls, pomdp: POMDP) -> "MDP":
        """Fully observable relaxation: same states, dynamics and rewards."""
        states = list(pomdp.states())
        actions = list(pomdp.actions())
        T = np.stack([pomdp.transition_matrix(a) for a in actions])
        R = pomdp.reward_matrix()
        terminal = np.array([bool(pomdp.is_terminal(s)) for s in states], dtype=bool)
        return cls(states, actions, T, R, float(pomdp.discount), terminal)

    @property
    def n_states(self) -> int:
        return len(self.states)

    @property
    def n_actions(self) -> int:
        return len(self.actions)

    def bellman_backup(self, V: np.ndarray) -> np.ndarray:
        """
        Q[s, a] = R[s, a] + discount * sum_s' T[a, s, s'] V[s'],
        with Q = 0 on terminal states.
        """
        Q = self.R + self.discount * np.einsum("ast,t->sa", self.T, V)
        Q[self.terminal, :] = 0.0
        return Q

    def greedy_policy(self, Q: np.ndarray) -> np.ndarray:
        """Action index per state; ties go to the lowest index."""
        return np.argmax(Q, axis=1)

    def evaluate_policy(self, policy: Sequence[int]) -> np.ndarray:
        """
        Exact value of a deterministic policy (action index per state):
          V = (I - discount * P_pi)^-1 R_pi

        Raises numpy.linalg.LinAlgError if the system is singular.
        """
        policy = np.asarray(policy, dtype=int)
        idx = np.arange(self.n_states)
        P_pi = self.T[policy, idx, :]
        R_pi = self.R[idx, policy]
        P_pi = np.where(self.terminal[:, None], 0.0, P_pi)
        R_pi = np.where(self.terminal, 0.0, R_pi)
        A = np.eye(self.n_states) - self.discount * P_pi
        cond = np.linalg.cond(A)
        if not np.isfinite(cond) or cond > 1e12:
            raise np.linalg.LinAlgError("Policy evaluation system is singular")
        V = np.linalg.solve(A, R_pi)
        if not np.all(np.isfinite(V)):
            raise np.linalg.LinAlgError("Policy evaluation produced non-finite values")
        return V
