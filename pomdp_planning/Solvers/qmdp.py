"""QMDP: alpha vectors from value iteration on the fully observable MDP.

QMDP computes Q*(s, a) of the underlying MDP and uses each action's
column as an alpha vector, i.e. it assumes the state becomes fully
observable after one step. The resulting policy therefore systematically
undervalues information-gathering actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import warnings
import numpy as np

from ..errors import SolverNonConvergence
from ..Models.mdp import MDP
from ..Models.pomdp import POMDP
from ..Policies.alpha_vector import AlphaVectorPolicy
from .base import Solver, SolverConfig


@dataclass
class SolveReport:
    """Solver output plus diagnostics.

    Attributes
    ----------
    policy : AlphaVectorPolicy
        Best policy found
    iterations : int
        Number of Bellman sweeps performed
    residual : float
        Bellman residual of the last sweep (inf if no sweep ran)
    converged : bool
        Whether residual < tolerance was reached
    cancelled : bool
        Whether should_stop() ended the run early
    residual_history : list of float
        Residual after each sweep
    """
    policy: AlphaVectorPolicy
    iterations: int
    residual: float
    converged: bool
    cancelled: bool = False
    residual_history: List[float] = field(default_factory=list)

    def __str__(self) -> str:
        status = "converged" if self.converged else ("cancelled" if self.cancelled else "not converged")
        return f"SolveReport({status}, iterations={self.iterations}, residual={self.residual:.3e})"


def initial_q_values(mdp: MDP, warm_start: str) -> np.ndarray:
    """Starting Q matrix (n_states x n_actions) for value iteration."""
    if warm_start == "zero":
        return np.zeros((mdp.n_states, mdp.n_actions), dtype=float)

    Q_reward = np.array(mdp.R, dtype=float)
    Q_reward[mdp.terminal, :] = 0.0
    if warm_start == "reward":
        return Q_reward

    # "greedy": exact value of the policy that maximizes immediate reward
    try:
        V = mdp.evaluate_policy(mdp.greedy_policy(Q_reward))
    except np.linalg.LinAlgError:
        return Q_reward
    return mdp.bellman_backup(V)


class QMDPSolver(Solver):
    """Value iteration on the fully observable relaxation of a POMDP."""

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config if config is not None else SolverConfig()

    def solve(self, pomdp: POMDP, config: Optional[SolverConfig] = None) -> AlphaVectorPolicy:
        """Return the QMDP policy.

        Non-convergence within the iteration budget is reported with a
        SolverNonConvergence warning; the best policy so far is returned.
        """
        config = config if config is not None else self.config
        report = self.solve_with_report(pomdp, config)
        if not report.converged and not report.cancelled:
            warnings.warn(
                SolverNonConvergence(report.iterations, report.residual, config.tolerance),
                stacklevel=2,
            )
        return report.policy

    def solve_with_report(self, pomdp: POMDP, config: Optional[SolverConfig] = None) -> SolveReport:
        config = config if config is not None else self.config
        mdp = MDP.from_pomdp(pomdp)
        Q = initial_q_values(mdp, config.warm_start)

        residual = float("inf")
        residual_history: List[float] = []
        converged = False
        cancelled = False
        iterations = 0

        for iterations in range(1, config.max_iterations + 1):
            V = Q.max(axis=1)
            Q_new = mdp.bellman_backup(V)
            residual = float(np.max(np.abs(Q_new - Q)))
            Q = Q_new
            residual_history.append(residual)

            if config.verbose:
                print(f"[QMDP] iteration {iterations:4d}  residual {residual:.6e}")

            if residual < config.tolerance:
                converged = True
                break
            if config.should_stop is not None and config.should_stop():
                cancelled = True
                break

        if config.verbose:
            status = "converged" if converged else ("cancelled" if cancelled else "did not converge")
            print(f"[QMDP] {status} after {iterations} iterations (residual {residual:.3e})")

        policy = AlphaVectorPolicy(mdp.states, mdp.actions, Q.T)
        return SolveReport(
            policy=policy,
            iterations=iterations,
            residual=residual,
            converged=converged,
            cancelled=cancelled,
            residual_history=residual_history,
        )
