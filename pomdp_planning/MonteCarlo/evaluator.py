"""High-level Monte Carlo policy evaluation API.

This module provides the PolicyEvaluator class for estimating and
comparing the discounted return of policies by simulation.
"""

from typing import Dict, Optional

from ..Models.distribution import Belief
from ..Models.pomdp import POMDP
from ..Policies.base import Policy
from ..Propagators.belief_base import BeliefUpdater
from ..Propagators.discrete_updater import DiscreteUpdater

from .data_structures import RolloutMetrics
from .simulation import run_monte_carlo_simulations, compute_rollout_metrics


class PolicyEvaluator:
    """High-level interface for Monte Carlo policy evaluation.

    Holds the model and belief updater shared (read-only) by every run;
    each run owns its random generator, belief and history.
    """

    def __init__(
        self,
        pomdp: POMDP,
        updater: Optional[BeliefUpdater] = None,
        initial_belief: Optional[Belief] = None,
    ):
        """Initialize evaluator.

        Parameters
        ----------
        pomdp : POMDP
            The model
        updater : BeliefUpdater, optional
            Defaults to an exact DiscreteUpdater
        initial_belief : Belief, optional
            Defaults to the model's initial-state distribution
        """
        self.pomdp = pomdp
        self.updater = updater if updater is not None else DiscreteUpdater(pomdp)
        self.initial_belief = (
            initial_belief if initial_belief is not None else self.updater.initialize()
        )

    def evaluate(
        self,
        policy: Policy,
        num_runs: int = 100,
        max_steps: int = 50,
        seed: Optional[int] = None,
        ci_alpha: float = 0.05,
        on_impossible_observation: str = "raise",
        max_workers: Optional[int] = None,
        progress: bool = False,
    ) -> RolloutMetrics:
        """Estimate the discounted return of `policy`.

        Parameters
        ----------
        policy : Policy
            Policy to evaluate
        num_runs : int
            Number of simulations
        max_steps : int
            Step budget per simulation
        seed : int, optional
            Random seed for reproducibility
        ci_alpha : float
            Significance level of the confidence interval
        on_impossible_observation : str
            "raise" or "reset"
        max_workers : int, optional
            Thread pool size for parallel runs
        progress : bool
            Show a progress bar

        Returns
        -------
        RolloutMetrics
            Aggregated metrics
        """
        results = run_monte_carlo_simulations(
            pomdp=self.pomdp,
            policy=policy,
            updater=self.updater,
            num_runs=num_runs,
            max_steps=max_steps,
            seed=seed,
            initial_belief=self.initial_belief,
            on_impossible_observation=on_impossible_observation,
            max_workers=max_workers,
            progress=progress,
        )
        return compute_rollout_metrics(results, ci_alpha=ci_alpha)

    def compare(
        self,
        policies: Dict[str, Policy],
        num_runs: int = 100,
        max_steps: int = 50,
        seed: Optional[int] = None,
        ci_alpha: float = 0.05,
        verbose: bool = False,
        **kwargs,
    ) -> Dict[str, RolloutMetrics]:
        """Evaluate several policies under the same seed.

        Returns
        -------
        dict
            Mapping from policy name to RolloutMetrics
        """
        results = {}
        for name, policy in policies.items():
            metrics = self.evaluate(
                policy,
                num_runs=num_runs,
                max_steps=max_steps,
                seed=seed,
                ci_alpha=ci_alpha,
                **kwargs,
            )
            results[name] = metrics
            if verbose:
                print(f"\n{name.upper()}:")
                print(metrics)
        return results
