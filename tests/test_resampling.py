import numpy as np
import pytest

from hfmort.constants import OUTCOME
from hfmort.preprocessing import Recipe
from hfmort.resampling import fit_resamples, mc_cv
from hfmort.workflow import Workflow


class TestMcCv:
    def test_number_and_ids(self, selected):
        resamples = mc_cv(selected, times=25)
        assert len(resamples) == 25
        assert resamples[0].id == "Resample01"
        assert resamples[-1].id == "Resample25"

    def test_analysis_proportion(self, selected):
        for resample in mc_cv(selected, prop=0.9, times=5):
            assert len(resample.analysis) == 180
            assert len(resample.assessment) == 20
            assert set(resample.analysis).isdisjoint(resample.assessment)

    def test_stratified_on_outcome(self, selected):
        rate = (selected[OUTCOME].astype(int)).mean()
        for resample in mc_cv(selected, times=5):
            assessed = selected.iloc[resample.assessment][OUTCOME].astype(int)
            assert abs(assessed.mean() - rate) <= 0.05 + 1e-9

    def test_unstratified(self, selected):
        resamples = mc_cv(selected, times=3, strata=None)
        assert len(resamples) == 3

    def test_seeded(self, selected):
        a = mc_cv(selected, times=3, random_state=5)
        b = mc_cv(selected, times=3, random_state=5)
        for ra, rb in zip(a, b):
            assert np.array_equal(ra.analysis, rb.analysis)


class TestFitResamples:
    def test_metrics_per_resample(self, selected):
        resamples = mc_cv(selected, times=4)
        results = fit_resamples(Workflow(Recipe(), "logistic"), selected, resamples, save_pred=True)
        assert list(results.metrics["id"]) == [r.id for r in resamples]
        assert results.metrics["roc_auc"].between(0, 1).all()
        assert len(results.predictions) == sum(len(r.assessment) for r in resamples)

    def test_collect_metrics(self, selected):
        resamples = mc_cv(selected, times=4)
        results = fit_resamples(Workflow(Recipe(), "logistic"), selected, resamples)
        summary = results.collect_metrics().set_index("metric")
        assert summary.loc["roc_auc", "n"] == 4
        assert summary.loc["roc_auc", "mean"] == pytest.approx(results.metrics["roc_auc"].mean())
        assert summary.loc["roc_auc", "mean"] > 0.6

    def test_parallel_matches_serial(self, selected):
        resamples = mc_cv(selected, times=2)
        workflow = Workflow(Recipe(), "logistic")
        serial = fit_resamples(workflow, selected, resamples, n_jobs=1)
        parallel = fit_resamples(workflow, selected, resamples, n_jobs=2)
        assert np.allclose(serial.metrics["roc_auc"], parallel.metrics["roc_auc"])
