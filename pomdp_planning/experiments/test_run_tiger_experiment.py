"""Tests for the tiger experiment script and experiment I/O."""

import json

import pytest
import numpy as np

from .. import __version__
from ..MonteCarlo import RolloutMetrics
from .configs import TigerExperimentConfig
from .experiment_io import build_metadata, load_experiment_results, serialize_value
from .run_tiger_experiment import build_baselines, main, parse_args, run_experiment
from ..CaseStudies.Tiger import TigerPOMDP


class TestExperimentIO:
    """Tests for metadata and JSON serialization."""

    def test_serialize_value(self):
        metrics = RolloutMetrics(
            num_runs=2, mean_discounted_reward=np.float64(1.5), std_discounted_reward=0.5,
            ci_low=1.0, ci_high=2.0,
        )
        out = serialize_value({"m": metrics, "a": np.arange(3), "n": np.int64(4), 7: (1, 2)})
        assert out["m"]["mean_discounted_reward"] == 1.5
        assert out["a"] == [0, 1, 2]
        assert out["n"] == 4
        assert out["7"] == [1, 2]
        json.dumps(out)

    def test_metadata_contains_config(self):
        meta = build_metadata(TigerExperimentConfig(seed=3), extra={"note": "x"})
        assert meta["config"]["seed"] == 3
        assert meta["config"]["tiger_kwargs"] == {}
        assert meta["note"] == "x"
        assert "timestamp" in meta and "machine" in meta

    def test_metadata_records_code_and_libraries(self):
        meta = build_metadata(TigerExperimentConfig())
        assert meta["code"]["package_version"] == __version__
        assert set(meta["machine"]["libraries"]) == {"numpy", "scipy", "tqdm"}
        assert meta["machine"]["libraries"]["numpy"] == np.__version__
        json.dumps(meta)


class TestRunExperiment:
    """Small end-to-end runs of the experiment script."""

    def test_run_experiment_saves_results(self, tmp_path):
        path = tmp_path / "out" / "tiger.json"
        config = TigerExperimentConfig(num_runs=20, max_steps=10, results_path=str(path))
        results = run_experiment(config)

        assert results["solver"]["converged"]
        assert results["solver"]["action_at_uniform_belief"] == "listen"
        assert set(results["evaluation"]) == {"qmdp", "random", "always_listen"}

        saved = load_experiment_results(str(path))
        assert saved["metadata"]["config"]["num_runs"] == 20
        assert saved["results"]["evaluation"]["qmdp"]["num_runs"] == 20
        assert len(saved["results"]["solver"]["policy"]["alpha_vectors"]) == 3

    def test_cli(self, tmp_path, capsys):
        path = tmp_path / "cli.json"
        main(["--num-runs", "5", "--max-steps", "5", "--results-path", str(path), "--verbose"])
        out = capsys.readouterr().out
        assert "[QMDP] iteration" in out
        assert "EXPERIMENT COMPLETE" in out
        assert path.exists()

    def test_parse_args_defaults(self):
        args = parse_args([])
        assert args.num_runs == 1000
        assert args.warm_start == "greedy"
        assert not args.verbose

    def test_unknown_baseline(self):
        with pytest.raises(ValueError):
            build_baselines(TigerPOMDP(), ["oracle"], seed=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
