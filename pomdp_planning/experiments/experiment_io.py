"""Experiment I/O: reproducibility metadata and JSON results files.

A results file holds two top-level keys: "metadata" (when, where and with
which code and library versions the run was made, plus the full config)
and "results" (the experiment output, made JSON-compatible by
serialize_value()).
"""

import json
import os
import platform
import subprocess
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from importlib import import_module
from typing import Any, Dict, Optional

import numpy as np

from .. import __version__

RECORDED_LIBRARIES = ("numpy", "scipy", "tqdm")


def _git(*args: str) -> Optional[str]:
    try:
        result = subprocess.run(["git", *args], capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.SubprocessError):
        return None
    return result.stdout.strip() if result.returncode == 0 else None


def get_code_revision() -> Dict[str, Any]:
    """Package version, and the git commit plus dirty flag when run from a checkout."""
    sha = _git("rev-parse", "HEAD")
    status = _git("status", "--porcelain") if sha is not None else None
    return {
        "package_version": __version__,
        "git_sha": sha,
        "git_dirty": bool(status) if status is not None else None,
    }


def get_environment() -> Dict[str, Any]:
    """Interpreter, platform and versions of the numerical libraries."""
    libraries = {}
    for name in RECORDED_LIBRARIES:
        try:
            libraries[name] = getattr(import_module(name), "__version__", "unknown")
        except ImportError:
            libraries[name] = None
    return {
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "machine": platform.machine(),
        "libraries": libraries,
    }


def build_metadata(config: Any, extra: Optional[Dict] = None) -> Dict[str, Any]:
    """Metadata block stored next to the results.

    Parameters
    ----------
    config : dataclass or object
        Experiment config, stored in full under "config"
    extra : dict, optional
        Additional entries such as timings
    """
    meta = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "code": get_code_revision(),
        "machine": get_environment(),
        "config": serialize_value(config),
    }
    meta.update(extra or {})
    return meta


def serialize_value(val: Any) -> Any:
    """Make a value JSON-serializable."""
    if val is None or isinstance(val, (bool, int, float, str)):
        return val
    if isinstance(val, np.integer):
        return int(val)
    if isinstance(val, np.floating):
        return float(val)
    if isinstance(val, np.ndarray):
        return val.tolist()
    if is_dataclass(val) and not isinstance(val, type):
        return {k: serialize_value(v) for k, v in asdict(val).items()}
    if callable(val):
        return f"{val.__module__}.{val.__qualname__}" if hasattr(val, "__qualname__") else str(val)
    if isinstance(val, dict):
        return {str(k): serialize_value(v) for k, v in val.items()}
    if isinstance(val, (list, tuple)):
        return [serialize_value(v) for v in val]
    return str(val)


def save_experiment_results(
    path: str,
    results: Dict[str, Any],
    metadata: Dict[str, Any],
) -> None:
    """Save experiment results to JSON.

    Parameters
    ----------
    path : str
        Path for the JSON results file.
    results : dict
        The experiment results.
    metadata : dict
        Metadata from build_metadata().
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    output = {
        "metadata": metadata,
        "results": serialize_value(results),
    }
    with open(path, "w") as f:
        json.dump(output, f, indent=2, default=str)


def load_experiment_results(path: str) -> Dict[str, Any]:
    """Load a results file written by save_experiment_results()."""
    with open(path) as f:
        return json.load(f)
