"""
Solve the tiger problem with QMDP and compare it against baseline policies.

Usage: python -m pomdp_planning.experiments.run_tiger_experiment [options]
"""

import argparse
import time
from typing import Any, Dict, List, Optional

from ..CaseStudies.Tiger import LISTEN, TigerConfig, TigerPOMDP
from ..Models import check_model
from ..MonteCarlo import PolicyEvaluator
from ..Policies import FixedActionPolicy, Policy, RandomPolicy
from ..Solvers import QMDPSolver, SolverConfig
from .configs.base_config import TigerExperimentConfig
from .experiment_io import build_metadata, save_experiment_results


def build_baselines(pomdp: TigerPOMDP, names: List[str], seed: int) -> Dict[str, Policy]:
    """Baseline policies by name."""
    baselines = {}
    for name in names:
        if name == "random":
            baselines[name] = RandomPolicy(pomdp.actions(), seed=seed)
        elif name == "always_listen":
            baselines[name] = FixedActionPolicy(LISTEN)
        else:
            raise ValueError(f"Unknown baseline: {name}")
    return baselines


def run_experiment(config: TigerExperimentConfig, verbose: bool = False) -> Dict[str, Any]:
    """Run the experiment and save results to config.results_path."""
    print("=" * 70)
    print("TIGER EXPERIMENT: QMDP")
    print(f"Runs: {config.num_runs}, Steps: {config.max_steps}, Seed: {config.seed}")
    print(f"QMDP: max_iterations={config.max_iterations}, tolerance={config.tolerance}, "
          f"warm_start={config.warm_start}")
    print("=" * 70)

    # 1. Build and check the model
    pomdp = TigerPOMDP(TigerConfig(**config.tiger_kwargs))
    check_model(pomdp)
    print(f"\nStates: {pomdp.n_states}, Actions: {pomdp.n_actions}, "
          f"Observations: {pomdp.n_observations}, Discount: {pomdp.discount}")

    # 2. Solve
    solver_config = SolverConfig(
        max_iterations=config.max_iterations,
        tolerance=config.tolerance,
        warm_start=config.warm_start,
        verbose=verbose,
    )
    t0 = time.time()
    report = QMDPSolver(solver_config).solve_with_report(pomdp)
    solve_time = time.time() - t0
    print(f"\n{report}")
    if not report.converged:
        print("WARNING: QMDP did not reach the requested tolerance; using best policy so far")

    policy = report.policy
    for a, alpha in zip(policy.actions, policy.alpha_vectors):
        print(f"  alpha[{a}] = {alpha.tolist()}")

    uniform = pomdp.initial_state()
    print(f"  action at uniform belief: {policy.action(uniform)}")

    # 3. Evaluate
    policies: Dict[str, Policy] = {"qmdp": policy}
    policies.update(build_baselines(pomdp, config.baselines, config.seed))

    evaluator = PolicyEvaluator(pomdp)
    t0 = time.time()
    metrics = evaluator.compare(
        policies,
        num_runs=config.num_runs,
        max_steps=config.max_steps,
        seed=config.seed,
        ci_alpha=config.ci_alpha,
        verbose=True,
        on_impossible_observation=config.on_impossible_observation,
    )
    eval_time = time.time() - t0

    # 4. Save
    results = {
        "solver": {
            "iterations": report.iterations,
            "residual": report.residual,
            "converged": report.converged,
            "residual_history": report.residual_history,
            "policy": policy.to_dict(),
            "action_at_uniform_belief": policy.action(uniform),
        },
        "evaluation": metrics,
    }
    metadata = build_metadata(config, extra={"solve_time_s": solve_time, "eval_time_s": eval_time})
    save_experiment_results(config.results_path, results, metadata)
    print(f"\nResults saved to {config.results_path}")

    print("\n" + "=" * 70)
    print("EXPERIMENT COMPLETE")
    print("=" * 70)
    return results


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = TigerExperimentConfig()
    parser = argparse.ArgumentParser(
        description="Solve the tiger POMDP with QMDP and evaluate it by simulation."
    )
    parser.add_argument("--num-runs", type=int, default=defaults.num_runs)
    parser.add_argument("--max-steps", type=int, default=defaults.max_steps)
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("--max-iterations", type=int, default=defaults.max_iterations)
    parser.add_argument("--tolerance", type=float, default=defaults.tolerance)
    parser.add_argument("--warm-start", choices=["zero", "reward", "greedy"], default=defaults.warm_start)
    parser.add_argument("--results-path", default=defaults.results_path)
    parser.add_argument("--verbose", "-v", action="store_true", help="Print solver iterations")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    config = TigerExperimentConfig(
        seed=args.seed,
        num_runs=args.num_runs,
        max_steps=args.max_steps,
        max_iterations=args.max_iterations,
        tolerance=args.tolerance,
        warm_start=args.warm_start,
        results_path=args.results_path,
    )
    run_experiment(config, verbose=args.verbose)


if __name__ == "__main__":
    main()
