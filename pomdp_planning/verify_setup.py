#!/usr/bin/env python3
"""Verify that the pomdp_planning environment is set up correctly.

Checks the numerical stack, imports every sub-package and solves the
tiger problem once as a smoke test.
"""

import sys
from importlib import import_module
from typing import List, Tuple

# (import name, minimum major version)
DEPENDENCIES = [
    ('numpy', 1),
    ('scipy', 1),
    ('tqdm', 4),
]

SUBPACKAGES = ['Models', 'Propagators', 'Policies', 'Solvers', 'MonteCarlo', 'CaseStudies']


def _major(version: str) -> int:
    head = version.split('.')[0]
    return int(head) if head.isdigit() else -1


def check_dependencies() -> List[str]:
    """Return a list of problems with third-party dependencies."""
    problems = []
    for name, min_major in DEPENDENCIES:
        try:
            mod = import_module(name)
        except ImportError as e:
            problems.append(f"{name}: not importable ({e})")
            print(f"✗ {name:12s} missing")
            continue
        version = getattr(mod, '__version__', 'unknown')
        if version != 'unknown' and _major(version) < min_major:
            problems.append(f"{name}: version {version} older than {min_major}.x")
            print(f"✗ {name:12s} {version} (need >= {min_major}.x)")
        else:
            print(f"✓ {name:12s} {version}")
    return problems


def check_subpackages() -> List[str]:
    """Return a list of pomdp_planning sub-packages that fail to import."""
    problems = []
    for sub in SUBPACKAGES:
        try:
            import_module(f'pomdp_planning.{sub}')
        except ImportError as e:
            problems.append(f"pomdp_planning.{sub}: {e}")
            print(f"✗ pomdp_planning.{sub}")
        else:
            print(f"✓ pomdp_planning.{sub}")
    return problems


def check_tiger() -> Tuple[bool, str]:
    """Solve the tiger problem; listening must be chosen at the uniform belief."""
    from pomdp_planning.CaseStudies.Tiger import LISTEN, TigerPOMDP
    from pomdp_planning.Solvers import QMDPSolver

    pomdp = TigerPOMDP()
    report = QMDPSolver().solve_with_report(pomdp)
    action = report.policy.action(pomdp.initial_state())
    print(f"  {report}")
    print(f"  action at uniform belief: {action}")
    return report.converged and action == LISTEN, action


def main() -> int:
    print("Dependencies")
    print("-" * 50)
    problems = check_dependencies()

    print("\nSub-packages")
    print("-" * 50)
    problems += check_subpackages()

    if not problems:
        print("\nTiger smoke test")
        print("-" * 50)
        ok, action = check_tiger()
        if not ok:
            problems.append(f"tiger: expected listen at uniform belief, got {action!r}")

    print("\n" + "-" * 50)
    if problems:
        print(f"✗ {len(problems)} problem(s):")
        for p in problems:
            print(f"  - {p}")
        return 1
    print("✓ All checks passed! Environment is ready.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
