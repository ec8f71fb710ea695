import numpy as np
import pandas as pd
import pytest

from hfmort.preprocessing import Recipe
from hfmort.resampling import mc_cv
from hfmort.tuning import (
    BOOSTED_TREE_SPACE,
    CONFIG_COLUMN,
    ParameterRange,
    TuneResults,
    finalize_workflow,
    latin_hypercube_grid,
    tune_grid,
)
from hfmort.workflow import Workflow


class TestLatinHypercubeGrid:
    def test_default_size(self):
        grid = latin_hypercube_grid(BOOSTED_TREE_SPACE)
        assert len(grid) == 20
        assert grid[CONFIG_COLUMN].tolist()[:2] == ["Model01", "Model02"]
        assert grid[CONFIG_COLUMN].is_unique

    def test_values_within_ranges(self):
        grid = latin_hypercube_grid(BOOSTED_TREE_SPACE)
        assert grid["tree_depth"].between(1, 15).all()
        assert grid["min_n"].between(2, 40).all()
        assert grid["loss_reduction"].between(1e-10, 10**1.5).all()
        assert grid["sample_size"].between(0.1, 1.0).all()
        assert grid["mtry"].between(0.1, 1.0).all()
        assert grid["learn_rate"].between(1e-3, 10**-0.5).all()
        assert grid["tree_depth"].dtype.kind == "i"

    def test_one_point_per_stratum(self):
        grid = latin_hypercube_grid(BOOSTED_TREE_SPACE, size=20)
        strata = np.floor((grid["sample_size"] - 0.1) / 0.9 * 20).astype(int)
        assert sorted(strata.clip(upper=19)) == list(range(20))

    def test_seeded(self):
        a = latin_hypercube_grid(BOOSTED_TREE_SPACE, random_state=3)
        b = latin_hypercube_grid(BOOSTED_TREE_SPACE, random_state=3)
        pd.testing.assert_frame_equal(a, b)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            latin_hypercube_grid(BOOSTED_TREE_SPACE, size=0)


class TestParameterRange:
    def test_integer_covers_both_ends(self):
        values = ParameterRange(1, 3, integer=True).scale(np.array([0.0, 0.5, 0.999999]))
        assert values.tolist() == [1, 2, 3]

    def test_log10(self):
        values = ParameterRange(-2, 0, log10=True).scale(np.array([0.0, 1.0]))
        assert np.allclose(values, [0.01, 1.0])


def _tune_results(means: list[float]) -> TuneResults:
    grid = pd.DataFrame(
        {CONFIG_COLUMN: [f"Model0{i + 1}" for i in range(len(means))], "tree_depth": range(1, len(means) + 1)}
    )
    rows = []
    for config, depth, mean in zip(grid[CONFIG_COLUMN], grid["tree_depth"], means):
        for i, offset in enumerate([-0.01, 0.01]):
            rows.append(
                {CONFIG_COLUMN: config, "tree_depth": depth, "id": f"Resample0{i + 1}",
                 "roc_auc": mean + offset, "accuracy": 0.5}
            )
    return TuneResults(grid=grid, metrics=pd.DataFrame(rows))


class TestTuneResults:
    def test_select_best_picks_highest_mean(self):
        results = _tune_results([0.7, 0.9, 0.8])
        assert results.select_best("roc_auc") == {"tree_depth": 2}

    def test_ties_keep_grid_order(self):
        results = _tune_results([0.8, 0.9, 0.9])
        assert results.select_best("roc_auc") == {"tree_depth": 2}

    def test_show_best_order(self):
        results = _tune_results([0.7, 0.9, 0.8])
        best = results.show_best("roc_auc", n=3)
        assert best[CONFIG_COLUMN].tolist() == ["Model02", "Model03", "Model01"]
        assert best["n"].tolist() == [2, 2, 2]

    def test_unknown_metric(self):
        with pytest.raises(ValueError, match="brier"):
            _tune_results([0.7]).select_best("brier")


class TestTuneGrid:
    def test_evaluates_every_candidate_on_every_resample(self, selected):
        workflow = Workflow(Recipe(), "xgboost", {"trees": 10, "n_jobs": 1})
        grid = latin_hypercube_grid(BOOSTED_TREE_SPACE, size=2)
        resamples = mc_cv(selected, times=2)
        results = tune_grid(workflow, selected, resamples, grid, n_jobs=1)
        assert len(results.metrics) == 4
        assert set(results.metrics[CONFIG_COLUMN]) == {"Model01", "Model02"}
        best = results.select_best()
        assert set(best) == set(BOOSTED_TREE_SPACE)
        finalized = finalize_workflow(workflow, best)
        assert finalized.params["trees"] == 10
        assert finalized.params["tree_depth"] == best["tree_depth"]

    def test_empty_grid(self, selected):
        workflow = Workflow(Recipe(), "xgboost")
        empty = latin_hypercube_grid(BOOSTED_TREE_SPACE, size=1).iloc[0:0]
        with pytest.raises(ValueError, match="no candidates"):
            tune_grid(workflow, selected, mc_cv(selected, times=1), empty)

    def test_parallel_matches_serial(self, selected):
        workflow = Workflow(Recipe(), "xgboost", {"trees": 10, "n_jobs": 1})
        grid = latin_hypercube_grid(BOOSTED_TREE_SPACE, size=2)
        resamples = mc_cv(selected, times=2)
        serial = tune_grid(workflow, selected, resamples, grid, n_jobs=1)
        parallel = tune_grid(workflow, selected, resamples, grid, n_jobs=2)
        assert list(parallel.metrics[CONFIG_COLUMN]) == list(serial.metrics[CONFIG_COLUMN])
        assert np.allclose(serial.metrics["roc_auc"], parallel.metrics["roc_auc"], equal_nan=True)
        assert serial.select_best() == parallel.select_best()
