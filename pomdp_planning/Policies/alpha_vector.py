"""Alpha-vector policies: one linear value function per action."""

from typing import Any, Hashable, List, Sequence, Tuple
import numpy as np

from ..errors import ConfigurationError, DistributionError
from ..Models.distribution import PROBABILITY_TOLERANCE, DiscreteDistribution
from .base import Policy

State = Hashable
Action = Hashable


class AlphaVectorPolicy(Policy):
    """
    Policy represented by alpha vectors.

    alphas[k, i] is the value of taking action actions[k] in state
    states[i] (and acting optimally afterwards, under whatever
    approximation produced the vectors). For a belief b:

      value(a_k) = sum_i b(s_i) * alphas[k, i]
      action(b)  = argmax_k value(a_k), ties to the lowest k

    Instances are immutable and safe to share across threads.
    """

    def __init__(
        self,
        states: Sequence[State],
        actions: Sequence[Action],
        alphas: np.ndarray,
    ):
        alphas = np.array(alphas, dtype=float)
        states = tuple(states)
        actions = tuple(actions)

        if alphas.ndim != 2 or alphas.shape != (len(actions), len(states)):
            raise ConfigurationError(
                f"alpha vectors must have shape ({len(actions)}, {len(states)}), got {alphas.shape}"
            )
        if not np.all(np.isfinite(alphas)):
            raise ConfigurationError("alpha vectors contain non-finite values")

        alphas.setflags(write=False)
        self._states = states
        self._actions = actions
        self._alphas = alphas
        self._action_index = {a: k for k, a in enumerate(actions)}

    @classmethod
    def from_pomdp(cls, pomdp, alphas: np.ndarray) -> "AlphaVectorPolicy":
        """Index the alpha matrix by the model's own enumerations."""
        return cls(pomdp.states(), pomdp.actions(), alphas)

    @property
    def states(self) -> Tuple[State, ...]:
        return self._states

    @property
    def actions(self) -> Tuple[Action, ...]:
        return self._actions

    @property
    def alpha_vectors(self) -> np.ndarray:
        """Read-only (n_actions, n_states) array."""
        return self._alphas

    def alpha_vector(self, action: Action) -> np.ndarray:
        return self._alphas[self._action_index[action]]

    def _belief_to_vector(self, belief: Any) -> np.ndarray:
        if isinstance(belief, DiscreteDistribution):
            known = set(self._states)
            unknown = [s for s in belief.support() if s not in known]
            if unknown:
                raise DistributionError(
                    f"Belief puts mass on states unknown to the policy: {unknown}"
                )
            b = belief.as_vector(self._states)
            if abs(float(b.sum()) - 1.0) > PROBABILITY_TOLERANCE:
                raise DistributionError(
                    f"Belief re-indexed by the policy's states sums to {float(b.sum())!r}"
                )
            return b
        b = np.asarray(belief, dtype=float)
        if b.shape != (len(self._states),):
            raise ValueError(f"Belief vector must have shape ({len(self._states)},), got {b.shape}")
        return b

    def action_values(self, belief: Any) -> np.ndarray:
        """Expected value of each action under `belief`, in action order."""
        return self._alphas @ self._belief_to_vector(belief)

    def action(self, belief: Any, rng=None) -> Action:
        values = self.action_values(belief)
        return self._actions[int(np.argmax(values))]

    def value(self, belief: Any) -> float:
        return float(np.max(self.action_values(belief)))

    def to_dict(self) -> dict:
        """JSON-friendly representation."""
        return {
            "states": [repr(s) for s in self._states],
            "actions": [repr(a) for a in self._actions],
            "alpha_vectors": self._alphas.tolist(),
        }

    def __repr__(self) -> str:
        return f"AlphaVectorPolicy(n_actions={len(self._actions)}, n_states={len(self._states)})"
