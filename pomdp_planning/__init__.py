"""
POMDP Planning Library

A library for modelling finite partially observable Markov decision
processes, solving them approximately with QMDP, tracking beliefs and
simulating policies.

Modules:
- Models: Core data structures (DiscreteDistribution, Belief, POMDP, MDP)
- Propagators: Belief updaters (DiscreteUpdater)
- Solvers: Offline solvers (QMDP) behind a common Solver contract
- Policies: Alpha-vector and baseline policies
- MonteCarlo: Simulation, history recording and policy evaluation
- CaseStudies: Example applications (Tiger)
"""

__version__ = '0.1.0'

from . import errors
from . import Models
from . import Propagators
from . import Policies
from . import Solvers
from . import MonteCarlo
from . import CaseStudies

__all__ = ['errors', 'Models', 'Propagators', 'Policies', 'Solvers', 'MonteCarlo', 'CaseStudies']
