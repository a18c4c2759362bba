"""Finite discrete probability distributions and beliefs."""

from typing import Dict, Hashable, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple
import numpy as np

from ..errors import DistributionError

Outcome = Hashable

PROBABILITY_TOLERANCE = 1e-9


class DiscreteDistribution:
    """
    Probability distribution over a finite, ordered set of outcomes.

    outcomes      : declared outcomes, in the order used for sampling
    probabilities : P(outcome), same length as outcomes

    The probabilities must lie in [0, 1] and sum to 1 (within
    PROBABILITY_TOLERANCE). Invalid input raises DistributionError; the
    distribution is never renormalized on the caller's behalf.
    Instances are immutable.
    """

    __slots__ = ("_outcomes", "_probs", "_index")

    def __init__(
        self,
        outcomes: Iterable[Outcome],
        probabilities: Iterable[float],
        tolerance: float = PROBABILITY_TOLERANCE,
    ):
        outcomes = tuple(outcomes)
        probs = np.array([float(p) for p in probabilities], dtype=float)

        if not outcomes:
            raise DistributionError("Distribution must have at least one outcome")
        if len(outcomes) != probs.shape[0]:
            raise DistributionError(
                f"Got {len(outcomes)} outcomes but {probs.shape[0]} probabilities"
            )

        index = {}
        for i, o in enumerate(outcomes):
            if o in index:
                raise DistributionError(f"Duplicate outcome {o!r}")
            index[o] = i

        if not np.all(np.isfinite(probs)):
            raise DistributionError(f"Non-finite probability in {probs.tolist()}")
        if np.any(probs < -tolerance) or np.any(probs > 1.0 + tolerance):
            bad = [(o, p) for o, p in zip(outcomes, probs.tolist()) if p < -tolerance or p > 1.0 + tolerance]
            raise DistributionError(f"Probabilities outside [0, 1]: {bad}")

        total = float(probs.sum())
        if abs(total - 1.0) > tolerance:
            raise DistributionError(
                f"Probabilities sum to {total!r}, expected 1 (tolerance {tolerance})"
            )

        # Clip rounding noise at the boundaries.
        probs = np.clip(probs, 0.0, 1.0)
        probs.setflags(write=False)

        self._outcomes = outcomes
        self._probs = probs
        self._index = index

    # ------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------

    @classmethod
    def from_dict(cls, mapping: Mapping[Outcome, float], **kwargs) -> "DiscreteDistribution":
        """Build from {outcome: probability}; insertion order is the sampling order."""
        return cls(list(mapping.keys()), list(mapping.values()), **kwargs)

    @classmethod
    def uniform(cls, outcomes: Iterable[Outcome]) -> "DiscreteDistribution":
        outcomes = list(outcomes)
        if not outcomes:
            raise DistributionError("Cannot build a uniform distribution over no outcomes")
        p = 1.0 / len(outcomes)
        return cls(outcomes, [p] * len(outcomes))

    @classmethod
    def deterministic(
        cls,
        outcome: Outcome,
        support: Optional[Iterable[Outcome]] = None,
    ) -> "DiscreteDistribution":
        """Point mass on `outcome`, optionally declared over a larger outcome set."""
        if support is None:
            return cls([outcome], [1.0])
        support = list(support)
        if outcome not in support:
            raise DistributionError(f"Outcome {outcome!r} not in declared support")
        return cls(support, [1.0 if o == outcome else 0.0 for o in support])

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    @property
    def outcomes(self) -> Tuple[Outcome, ...]:
        return self._outcomes

    @property
    def probabilities(self) -> np.ndarray:
        """Read-only array of probabilities aligned with `outcomes`."""
        return self._probs

    def probability(self, outcome: Outcome) -> float:
        """P(outcome); zero for outcomes that were not declared."""
        i = self._index.get(outcome)
        if i is None:
            return 0.0
        return float(self._probs[i])

    def support(self) -> List[Outcome]:
        """Outcomes with non-zero probability, in declared order."""
        return [o for o, p in zip(self._outcomes, self._probs) if p > 0.0]

    def items(self) -> Iterator[Tuple[Outcome, float]]:
        for o, p in zip(self._outcomes, self._probs):
            yield o, float(p)

    def as_vector(self, enumeration: Sequence[Outcome]) -> np.ndarray:
        """Probabilities re-indexed by `enumeration` (zero for missing outcomes)."""
        return np.array([self.probability(o) for o in enumeration], dtype=float)

    def as_dict(self) -> Dict[Outcome, float]:
        return dict(self.items())

    def sample(self, rng) -> Outcome:
        """
        Draw one outcome by inverse-CDF sampling over the declared order.

        Consumes exactly one uniform variate `rng.random()` in [0, 1).
        """
        u = float(rng.random())
        cumulative = 0.0
        last_positive = None
        for o, p in zip(self._outcomes, self._probs):
            if p <= 0.0:
                continue
            cumulative += p
            last_positive = o
            if u < cumulative:
                return o
        # u landed in the rounding gap above the cumulative sum
        return last_positive

    # ------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self) -> Iterator[Outcome]:
        return iter(self._outcomes)

    def __contains__(self, outcome: Outcome) -> bool:
        return outcome in self._index

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiscreteDistribution):
            return NotImplemented
        return (
            set(self._outcomes) == set(other._outcomes)
            and all(self.probability(o) == other.probability(o) for o in self._outcomes)
        )

    def __hash__(self):
        return hash(frozenset(self.items()))

    def __repr__(self) -> str:
        body = ", ".join(f"{o!r}: {p:.4g}" for o, p in self.items())
        return f"{type(self).__name__}({{{body}}})"


class Belief(DiscreteDistribution):
    """
    Agent-side distribution over *every* state of a model.

    Owned by the control loop that tracks it; updates produce a new
    Belief rather than mutating this one.
    """

    __slots__ = ()

    @classmethod
    def uniform(cls, states: Iterable[Outcome]) -> "Belief":
        states = list(states)
        if not states:
            raise DistributionError("Cannot build a belief over no states")
        p = 1.0 / len(states)
        return cls(states, [p] * len(states))

    @classmethod
    def from_vector(cls, states: Sequence[Outcome], vector: Sequence[float]) -> "Belief":
        """Build from an array aligned with `states`."""
        vector = np.asarray(vector, dtype=float)
        if vector.shape != (len(states),):
            raise DistributionError(
                f"Belief vector has shape {vector.shape}, expected ({len(states)},)"
            )
        return cls(states, vector.tolist())

    @classmethod
    def from_distribution(cls, states: Sequence[Outcome], dist: DiscreteDistribution) -> "Belief":
        """Re-index a distribution over (a subset of) `states` as a full belief."""
        known = set(states)
        extra = [o for o, p in dist.items() if p > 0.0 and o not in known]
        if extra:
            raise DistributionError(f"Distribution puts mass on unknown states {extra}")
        return cls.from_vector(states, dist.as_vector(states))

    @classmethod
    def from_dict(cls, states: Sequence[Outcome], mapping: Mapping[Outcome, float]) -> "Belief":
        """Build from {state: probability}; states missing from `mapping` get 0."""
        return cls.from_distribution(states, DiscreteDistribution.from_dict(mapping))

    @classmethod
    def deterministic(cls, states: Sequence[Outcome], state: Outcome) -> "Belief":
        """Point mass on `state`, declared over every state in `states`."""
        return cls.from_distribution(states, DiscreteDistribution([state], [1.0]))

    @property
    def states(self) -> Tuple[Outcome, ...]:
        return self.outcomes

    @property
    def vector(self) -> np.ndarray:
        """Writable copy of the belief, aligned with `states`."""
        return np.array(self.probabilities, dtype=float)
