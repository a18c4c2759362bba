"""Core simulation functions.

This module provides the closed simulation loop (true state, observation,
belief, policy), the history recorder built on it, and the Monte Carlo
helpers that run many independent simulations.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterator, List, Optional, Tuple
import numbers
import numpy as np
from scipy import stats
from tqdm import trange

from ..errors import ConfigurationError, ImpossibleObservation
from ..Models.distribution import Belief
from ..Models.pomdp import POMDP
from ..Policies.base import Policy
from ..Propagators.belief_base import BeliefUpdater

from .data_structures import History, RolloutMetrics, SimulationResult, StepRecord

IMPOSSIBLE_OBSERVATION_POLICIES = ("raise", "reset")


def _check_run_arguments(max_steps: int, on_impossible_observation: str) -> None:
    if isinstance(max_steps, bool) or not isinstance(max_steps, numbers.Integral) or max_steps < 0:
        raise ConfigurationError(f"max_steps must be a non-negative integer, got {max_steps!r}")
    if on_impossible_observation not in IMPOSSIBLE_OBSERVATION_POLICIES:
        raise ConfigurationError(
            f"on_impossible_observation must be one of {IMPOSSIBLE_OBSERVATION_POLICIES}, "
            f"got {on_impossible_observation!r}"
        )


def stepthrough(
    pomdp: POMDP,
    policy: Policy,
    updater: BeliefUpdater,
    initial_belief: Belief,
    rng,
    max_steps: int,
    initial_state: Any = None,
    on_impossible_observation: str = "raise",
    history: Optional[History] = None,
) -> Iterator[StepRecord]:
    """Run one simulation, yielding a StepRecord per step.

    Parameters
    ----------
    pomdp : POMDP
        Model producing true transitions, observations and rewards
    policy : Policy
        Maps the current belief to an action
    updater : BeliefUpdater
        Belief updater applied after every observation
    initial_belief : Belief
        Agent's belief at t = 0
    rng : object with random() -> float in [0, 1)
        Source of uniform variates (e.g. numpy.random.Generator)
    max_steps : int
        Step budget
    initial_state : any, optional
        True initial state; sampled from pomdp.initial_state() when omitted
    on_impossible_observation : str
        "raise" propagates ImpossibleObservation, "reset" replaces the
        belief with a uniform one and continues
    history : History, optional
        If given, final state/belief, reset count and termination flag are
        written to it when the run ends. The flag is True whenever the
        final state is terminal, including when it was reached on the
        last step of the budget

    Yields
    ------
    StepRecord
        (t, s, a, o, r, belief, s') for every executed step
    """
    _check_run_arguments(max_steps, on_impossible_observation)

    s = initial_state if initial_state is not None else pomdp.initial_state().sample(rng)
    belief = initial_belief
    states = list(pomdp.states())
    belief_resets = 0
    terminated = False

    for t in range(max_steps):
        if pomdp.is_terminal(s):
            terminated = True
            break

        a = policy.action(belief, rng=rng)
        sp = pomdp.transition(s, a).sample(rng)
        o = pomdp.observation(s, a, sp).sample(rng)
        # Realized reward of the sampled transition; check_model ties its
        # expectation to reward(s, a), which QMDP plans with.
        r = float(pomdp.reward(s, a, sp))

        try:
            next_belief = updater.update(belief, a, o)
        except ImpossibleObservation:
            if on_impossible_observation == "raise":
                raise
            next_belief = Belief.uniform(states)
            belief_resets += 1

        yield StepRecord(t=t, state=s, action=a, observation=o, reward=r, belief=belief, next_state=sp)

        s = sp
        belief = next_belief
    else:
        terminated = pomdp.is_terminal(s)

    if history is not None:
        history.final_state = s
        history.final_belief = belief
        history.belief_resets = belief_resets
        history.terminated = terminated


def simulate(
    pomdp: POMDP,
    policy: Policy,
    updater: BeliefUpdater,
    initial_belief: Belief,
    rng,
    max_steps: int,
    initial_state: Any = None,
    on_impossible_observation: str = "raise",
) -> Tuple[float, History]:
    """Simulate one run and record its full history.

    Returns
    -------
    tuple
        (total discounted reward, History)
    """
    discount = float(pomdp.discount)
    history = History(discount=discount)
    total = 0.0
    weight = 1.0

    for record in stepthrough(
        pomdp, policy, updater, initial_belief, rng, max_steps,
        initial_state=initial_state,
        on_impossible_observation=on_impossible_observation,
        history=history,
    ):
        history.append(record)
        total += weight * record.reward
        weight *= discount

    return total, history


def rollout(
    pomdp: POMDP,
    policy: Policy,
    updater: BeliefUpdater,
    initial_belief: Belief,
    rng,
    max_steps: int,
    initial_state: Any = None,
    on_impossible_observation: str = "raise",
) -> float:
    """Simulate one run and return only its discounted reward."""
    discount = float(pomdp.discount)
    total = 0.0
    weight = 1.0
    for record in stepthrough(
        pomdp, policy, updater, initial_belief, rng, max_steps,
        initial_state=initial_state,
        on_impossible_observation=on_impossible_observation,
    ):
        total += weight * record.reward
        weight *= discount
    return total


def _run_single(
    run_id: int,
    pomdp: POMDP,
    policy: Policy,
    updater: BeliefUpdater,
    initial_belief: Belief,
    seed_seq: np.random.SeedSequence,
    max_steps: int,
    store_history: bool,
    on_impossible_observation: str,
) -> SimulationResult:
    rng = np.random.default_rng(seed_seq)
    total, history = simulate(
        pomdp, policy, updater, initial_belief, rng, max_steps,
        on_impossible_observation=on_impossible_observation,
    )
    return SimulationResult(
        run_id=run_id,
        discounted_reward=total,
        undiscounted_reward=history.undiscounted_reward(),
        steps=len(history),
        belief_resets=history.belief_resets,
        terminated=history.terminated,
        history=history if store_history else None,
    )


def run_monte_carlo_simulations(
    pomdp: POMDP,
    policy: Policy,
    updater: BeliefUpdater,
    num_runs: int,
    max_steps: int,
    seed: Optional[int] = None,
    initial_belief: Optional[Belief] = None,
    store_histories: bool = False,
    on_impossible_observation: str = "raise",
    max_workers: Optional[int] = None,
    progress: bool = False,
) -> List[SimulationResult]:
    """Run independent simulations of one policy.

    Every run draws from its own numpy Generator, spawned from a single
    SeedSequence(seed), so results depend only on the seed and not on
    max_workers or scheduling order.

    Parameters
    ----------
    pomdp : POMDP
        The model
    policy : Policy
        Policy under evaluation; must be safe to call concurrently when
        max_workers > 1
    updater : BeliefUpdater
        Belief updater
    num_runs : int
        Number of runs
    max_steps : int
        Step budget per run
    seed : int, optional
        Root seed for reproducibility
    initial_belief : Belief, optional
        Defaults to updater.initialize()
    store_histories : bool
        Whether to keep full histories (memory intensive)
    on_impossible_observation : str
        "raise" or "reset", see stepthrough()
    max_workers : int, optional
        Run simulations on a thread pool of this size when > 1
    progress : bool
        Show a tqdm progress bar (sequential runs only)

    Returns
    -------
    list of SimulationResult
        Results ordered by run_id
    """
    if isinstance(num_runs, bool) or not isinstance(num_runs, numbers.Integral) or num_runs < 0:
        raise ConfigurationError(f"num_runs must be a non-negative integer, got {num_runs!r}")
    _check_run_arguments(max_steps, on_impossible_observation)

    if initial_belief is None:
        initial_belief = updater.initialize()

    seed_seqs = np.random.SeedSequence(seed).spawn(num_runs)

    def run(run_id: int) -> SimulationResult:
        return _run_single(
            run_id, pomdp, policy, updater, initial_belief, seed_seqs[run_id],
            max_steps, store_histories, on_impossible_observation,
        )

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(run, range(num_runs)))

    run_ids = trange(num_runs, desc="Simulations") if progress else range(num_runs)
    return [run(run_id) for run_id in run_ids]


def compute_rollout_metrics(
    results: List[SimulationResult],
    ci_alpha: float = 0.05,
) -> RolloutMetrics:
    """Compute aggregated metrics from simulation results.

    Parameters
    ----------
    results : list of SimulationResult
        Results from Monte Carlo runs
    ci_alpha : float
        Significance level of the Student-t interval for the mean

    Returns
    -------
    RolloutMetrics
        Aggregated metrics
    """
    if not results:
        return RolloutMetrics(
            num_runs=0,
            mean_discounted_reward=0.0,
            std_discounted_reward=0.0,
            ci_low=0.0,
            ci_high=0.0,
            ci_alpha=ci_alpha,
        )

    returns = np.array([r.discounted_reward for r in results], dtype=float)
    n = len(results)
    mean = float(returns.mean())

    if n > 1:
        std = float(returns.std(ddof=1))
        sem = std / np.sqrt(n)
        if sem > 0.0:
            lo, hi = stats.t.interval(1.0 - ci_alpha, n - 1, loc=mean, scale=sem)
        else:
            lo, hi = mean, mean
    else:
        std = 0.0
        lo, hi = mean, mean

    return RolloutMetrics(
        num_runs=n,
        mean_discounted_reward=mean,
        std_discounted_reward=std,
        ci_low=float(lo),
        ci_high=float(hi),
        ci_alpha=ci_alpha,
        mean_undiscounted_reward=float(np.mean([r.undiscounted_reward for r in results])),
        mean_steps=float(np.mean([r.steps for r in results])),
        total_belief_resets=int(sum(r.belief_resets for r in results)),
    )
