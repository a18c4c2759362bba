"""Simulation and Monte Carlo evaluation of POMDP policies.

Modules
-------
data_structures
    StepRecord, History, SimulationResult and RolloutMetrics dataclasses
simulation
    Closed-loop simulation (stepthrough, simulate, rollout) and Monte
    Carlo helpers
evaluator
    High-level PolicyEvaluator class
"""

# Data structures
from .data_structures import StepRecord, History, SimulationResult, RolloutMetrics

# Core simulation
from .simulation import (
    stepthrough,
    simulate,
    rollout,
    run_monte_carlo_simulations,
    compute_rollout_metrics,
)

# High-level API
from .evaluator import PolicyEvaluator

__all__ = [
    # Data structures
    "StepRecord",
    "History",
    "SimulationResult",
    "RolloutMetrics",
    # Core simulation
    "stepthrough",
    "simulate",
    "rollout",
    "run_monte_carlo_simulations",
    "compute_rollout_metrics",
    # High-level API
    "PolicyEvaluator",
]
