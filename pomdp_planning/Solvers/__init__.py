"""Offline solvers producing alpha-vector policies."""

from .base import SolverConfig, Solver, CallableSolver, default_solver, solve
from .qmdp import QMDPSolver, SolveReport, initial_q_values

__all__ = [
    'SolverConfig',
    'Solver',
    'CallableSolver',
    'default_solver',
    'solve',
    'QMDPSolver',
    'SolveReport',
    'initial_q_values',
]
