"""Data structures for simulation histories and Monte Carlo evaluation."""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional


@dataclass(frozen=True)
class StepRecord:
    """One simulated step.

    Attributes
    ----------
    t : int
        Step index, starting at 0
    state : any
        True state before the action
    action : any
        Action chosen by the policy
    observation : any
        Observation emitted after the action
    reward : float
        Immediate (undiscounted) reward
    belief : Belief
        Belief the action was chosen from
    next_state : any
        True state after the action
    """
    t: int
    state: Any
    action: Any
    observation: Any
    reward: float
    belief: Any
    next_state: Any


@dataclass
class History:
    """Append-only trajectory of one simulation run.

    Attributes
    ----------
    discount : float
        Discount factor used to accumulate rewards
    steps : list of StepRecord
        Recorded steps in order
    final_state : any
        True state when the run stopped
    final_belief : Belief
        Belief when the run stopped
    belief_resets : int
        Number of times the belief was reset after an impossible observation
    terminated : bool
        Whether the final state is terminal (the run stopped there early
        or reached it on its last budgeted step)
    """
    discount: float
    steps: List[StepRecord] = field(default_factory=list)
    final_state: Any = None
    final_belief: Any = None
    belief_resets: int = 0
    terminated: bool = False

    def append(self, record: StepRecord) -> None:
        self.steps.append(record)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[StepRecord]:
        return iter(self.steps)

    def __getitem__(self, i: int) -> StepRecord:
        return self.steps[i]

    def states(self) -> List[Any]:
        return [r.state for r in self.steps]

    def actions(self) -> List[Any]:
        return [r.action for r in self.steps]

    def observations(self) -> List[Any]:
        return [r.observation for r in self.steps]

    def rewards(self) -> List[float]:
        return [r.reward for r in self.steps]

    def beliefs(self) -> List[Any]:
        return [r.belief for r in self.steps]

    def discounted_reward(self) -> float:
        total = 0.0
        weight = 1.0
        for r in self.steps:
            total += weight * r.reward
            weight *= self.discount
        return total

    def undiscounted_reward(self) -> float:
        return sum(r.reward for r in self.steps)

    def __str__(self) -> str:
        lines = [f"History ({len(self.steps)} steps, discount {self.discount})"]
        for r in self.steps:
            lines.append(
                f"  t={r.t:3d}  s={r.state!r}  a={r.action!r}  o={r.observation!r}  r={r.reward:g}"
            )
        return "\n".join(lines)


@dataclass
class SimulationResult:
    """Summary of a single Monte Carlo run.

    Attributes
    ----------
    run_id : int
        Run identifier
    discounted_reward : float
        Sum of discount^t * r_t
    undiscounted_reward : float
        Sum of r_t
    steps : int
        Number of steps executed
    belief_resets : int
        Belief resets after impossible observations
    terminated : bool
        Whether the run ended in a terminal state (see History.terminated)
    history : History, optional
        Full trajectory when histories are stored
    """
    run_id: int
    discounted_reward: float
    undiscounted_reward: float
    steps: int
    belief_resets: int = 0
    terminated: bool = False
    history: Optional[History] = None


@dataclass
class RolloutMetrics:
    """Aggregated metrics over Monte Carlo runs.

    Attributes
    ----------
    num_runs : int
        Number of runs
    mean_discounted_reward : float
        Sample mean of the discounted return
    std_discounted_reward : float
        Sample standard deviation (ddof=1; 0 for a single run)
    ci_low, ci_high : float
        Student-t confidence interval for the mean
    ci_alpha : float
        Significance level of the interval
    mean_undiscounted_reward : float
        Sample mean of the undiscounted return
    mean_steps : float
        Average run length
    total_belief_resets : int
        Belief resets summed over all runs
    """
    num_runs: int
    mean_discounted_reward: float
    std_discounted_reward: float
    ci_low: float
    ci_high: float
    ci_alpha: float = 0.05
    mean_undiscounted_reward: float = 0.0
    mean_steps: float = 0.0
    total_belief_resets: int = 0

    def __str__(self) -> str:
        """Format metrics for display."""
        confidence = 1.0 - self.ci_alpha
        lines = [
            "Rollout Metrics",
            "=" * 40,
            f"Runs: {self.num_runs}",
            f"Mean Discounted Reward: {self.mean_discounted_reward:.3f}",
            f"Std Discounted Reward: {self.std_discounted_reward:.3f}",
            f"{confidence:.0%} CI: [{self.ci_low:.3f}, {self.ci_high:.3f}]",
            f"Mean Undiscounted Reward: {self.mean_undiscounted_reward:.3f}",
            f"Mean Steps: {self.mean_steps:.2f}",
        ]
        if self.total_belief_resets:
            lines.append(f"Belief Resets: {self.total_belief_resets}")
        return "\n".join(lines)
