"""Error taxonomy shared by models, propagators, solvers and simulators."""


class POMDPPlanningError(Exception):
    """Base class for all errors raised by pomdp_planning."""


class ConfigurationError(POMDPPlanningError, ValueError):
    """Invalid parameters (discount outside [0, 1], non-positive budgets, ...)."""


class DistributionError(POMDPPlanningError, ValueError):
    """A probability distribution violates its invariants.

    Raised instead of silently renormalizing, so that mistakes in a model
    definition surface where they are made.
    """


class ImpossibleObservation(POMDPPlanningError, RuntimeError):
    """The observation has zero probability under every reachable state."""

    def __init__(self, action, observation, message=None):
        self.action = action
        self.observation = observation
        if message is None:
            message = (
                f"Observation {observation!r} is impossible after action "
                f"{action!r} from the current belief"
            )
        super().__init__(message)


class SolverNonConvergence(RuntimeWarning):
    """Iteration budget exhausted before the Bellman residual met the tolerance."""

    def __init__(self, iterations: int, residual: float, tolerance: float):
        self.iterations = iterations
        self.residual = residual
        self.tolerance = tolerance
        super().__init__(
            f"Solver did not converge after {iterations} iterations "
            f"(residual {residual:.3e} >= tolerance {tolerance:.3e})"
        )
