"""Base configuration classes for experiments."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class TigerExperimentConfig:
    """
    Configuration for solving the tiger problem and evaluating policies.

    Attributes:
        seed: Root seed for every Monte Carlo run
        num_runs: Number of simulations per policy
        max_steps: Step budget per simulation
        max_iterations: QMDP iteration budget
        tolerance: QMDP Bellman residual threshold
        warm_start: QMDP warm start ("zero", "reward" or "greedy")
        baselines: Baseline policies to compare against QMDP:
            - "random": uniform random action
            - "always_listen": listen forever
        ci_alpha: Significance level for confidence intervals
        on_impossible_observation: "raise" or "reset"
        results_path: Path to save results JSON
        tiger_kwargs: Overrides for TigerConfig
    """
    # Monte Carlo parameters
    seed: int = 42
    num_runs: int = 1000
    max_steps: int = 50

    # Solver parameters
    max_iterations: int = 50
    tolerance: float = 1e-3
    warm_start: str = "greedy"

    # Comparison
    baselines: List[str] = field(default_factory=lambda: ["random", "always_listen"])
    ci_alpha: float = 0.05
    on_impossible_observation: str = "raise"

    # Output paths
    results_path: str = "results/tiger_qmdp.json"

    # Tiger-specific settings
    tiger_kwargs: Dict[str, Any] = None

    def __post_init__(self):
        if self.tiger_kwargs is None:
            self.tiger_kwargs = {}
