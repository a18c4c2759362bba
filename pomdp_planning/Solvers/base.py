"""Solver contract shared by built-in and external POMDP solvers."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional
import numbers
import numpy as np

from ..errors import ConfigurationError
from ..Models.pomdp import POMDP
from ..Policies.alpha_vector import AlphaVectorPolicy

WARM_STARTS = ("zero", "reward", "greedy")


@dataclass(frozen=True)
class SolverConfig:
    """
    Budget and behaviour of an iterative solver.

    Attributes:
        max_iterations: Upper bound on Bellman sweeps (positive integer)
        tolerance: Stop once the Bellman residual drops below this (positive)
        warm_start: Initial Q values:
            - "zero": Q = 0
            - "reward": Q = R
            - "greedy": one backup of the exact value of the reward-greedy policy
        verbose: Print the residual after every iteration
        should_stop: Optional callable polled between iterations; returning
            True stops the solver after the current iteration
    """
    max_iterations: int = 100
    tolerance: float = 1e-3
    warm_start: str = "greedy"
    verbose: bool = False
    should_stop: Optional[Callable[[], bool]] = None

    def __post_init__(self):
        if (
            isinstance(self.max_iterations, bool)
            or not isinstance(self.max_iterations, numbers.Integral)
            or self.max_iterations <= 0
        ):
            raise ConfigurationError(
                f"max_iterations must be a positive integer, got {self.max_iterations!r}"
            )
        if (
            isinstance(self.tolerance, bool)
            or not isinstance(self.tolerance, numbers.Real)
            or not np.isfinite(self.tolerance)
            or self.tolerance <= 0
        ):
            raise ConfigurationError(f"tolerance must be a positive real, got {self.tolerance!r}")
        if self.warm_start not in WARM_STARTS:
            raise ConfigurationError(
                f"warm_start must be one of {WARM_STARTS}, got {self.warm_start!r}"
            )


class Solver(ABC):
    """
    Anything that turns a POMDP into an alpha-vector policy.

    Implementations may be approximate (QMDP) or wrap an external,
    higher-accuracy backend; callers only rely on the returned policy
    having one alpha vector per action, indexed by the model's state
    enumeration.
    """

    @abstractmethod
    def solve(self, pomdp: POMDP, config: Optional[SolverConfig] = None) -> AlphaVectorPolicy:
        ...


class CallableSolver(Solver):
    """
    Adapter for an opaque external backend.

    backend(pomdp, config) must return either an (n_actions, n_states)
    alpha matrix ordered like pomdp.actions() / pomdp.states(), or a pair
    (alphas, actions) when the backend reports its own action labels for
    each row. The shape is checked before the policy is built.
    """

    def __init__(self, backend: Callable, name: str = "external"):
        self.backend = backend
        self.name = name

    def solve(self, pomdp: POMDP, config: Optional[SolverConfig] = None) -> AlphaVectorPolicy:
        if config is None:
            config = SolverConfig()
        out = self.backend(pomdp, config)

        if isinstance(out, AlphaVectorPolicy):
            policy = out
        elif isinstance(out, tuple) and len(out) == 2:
            alphas, actions = out
            policy = AlphaVectorPolicy(pomdp.states(), actions, alphas)
        else:
            policy = AlphaVectorPolicy.from_pomdp(pomdp, out)

        if tuple(policy.states) != tuple(pomdp.states()):
            raise ConfigurationError(f"Solver '{self.name}' returned a policy over different states")
        known = set(pomdp.actions())
        unknown = [a for a in policy.actions if a not in known]
        if unknown:
            raise ConfigurationError(f"Solver '{self.name}' returned unknown actions {unknown}")
        return policy


def default_solver() -> Solver:
    """Return the default solver (QMDP)."""
    from .qmdp import QMDPSolver
    return QMDPSolver()


def solve(
    pomdp: POMDP,
    config: Optional[SolverConfig] = None,
    solver: Optional[Solver] = None,
) -> AlphaVectorPolicy:
    """Solve `pomdp` with `solver` (QMDP when omitted)."""
    if solver is None:
        solver = default_solver()
    return solver.solve(pomdp, config)
