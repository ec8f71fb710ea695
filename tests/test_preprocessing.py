import numpy as np
import pandas as pd
import pytest

from hfmort.constants import OUTCOME
from hfmort.datasets import split_dataset
from hfmort.preprocessing import Recipe


@pytest.fixture
def train_test(selected):
    return split_dataset(selected, random_state=42)


class TestDownsample:
    def test_juiced_classes_are_equal(self, train_test):
        train, _ = train_test
        juiced = Recipe().prep(train).juice()
        counts = juiced[OUTCOME].value_counts()
        assert counts[0] == counts[1]
        assert counts[1] == train[OUTCOME].value_counts().min()

    def test_bake_keeps_all_rows(self, train_test):
        train, test = train_test
        recipe = Recipe().prep(train)
        assert len(recipe.bake(test)) == len(test)
        assert len(recipe.bake(train)) == len(train)

    def test_disabled_keeps_all_rows(self, train_test):
        train, _ = train_test
        juiced = Recipe(downsample=False).prep(train).juice()
        assert len(juiced) == len(train)

    def test_seeded(self, train_test):
        train, _ = train_test
        a = Recipe(seed=1).prep(train).juice()
        b = Recipe(seed=1).prep(train).juice()
        pd.testing.assert_frame_equal(a, b)


class TestNormalize:
    def test_juiced_is_standardized(self, train_test):
        train, _ = train_test
        juiced = Recipe().prep(train).juice()
        X = juiced.drop(columns=[OUTCOME])
        assert np.allclose(X.mean(), 0.0, atol=1e-10)
        assert np.allclose(X.std(ddof=0), 1.0, atol=1e-10)

    def test_statistics_come_from_training_data(self, train_test):
        train, test = train_test
        recipe = Recipe(downsample=False).prep(train)
        baked = recipe.bake(test)
        expected = (test["age"] - train["age"].mean()) / train["age"].std(ddof=0)
        assert np.allclose(baked["age"].values, expected.values)

    def test_bake_train_matches_juice_without_downsampling(self, train_test):
        train, _ = train_test
        recipe = Recipe(downsample=False).prep(train)
        pd.testing.assert_frame_equal(recipe.juice(), recipe.bake(train))


class TestDummyAndZeroVariance:
    def test_factors_become_dummies(self, records):
        train, test = split_dataset(records, random_state=42)
        recipe = Recipe().prep(train)
        assert "sex_1" in recipe.feature_names
        assert "sex_0" not in recipe.feature_names
        assert "sex" not in recipe.feature_names
        assert list(recipe.bake(test).columns) == [*recipe.feature_names, OUTCOME]

    def test_constant_column_removed(self, selected):
        train, test = split_dataset(selected.assign(constant=1.0), random_state=42)
        recipe = Recipe().prep(train)
        assert "constant" not in recipe.feature_names
        assert "constant" not in recipe.bake(test).columns
        removed = recipe.summary().set_index("step").loc["zv", "columns"]
        assert removed == ["constant"]

    def test_all_constant_predictors_raise(self, selected):
        constant = selected.assign(
            time=1.0, serum_creatinine=1.0, ejection_fraction=1.0, age=1.0
        )
        train, _ = split_dataset(constant, random_state=42)
        with pytest.raises(ValueError, match="zero variance"):
            Recipe().prep(train)


class TestRecipeErrors:
    def test_juice_before_prep(self):
        with pytest.raises(RuntimeError):
            Recipe().juice()

    def test_bake_before_prep(self, selected):
        with pytest.raises(RuntimeError):
            Recipe().bake(selected)

    def test_single_class_outcome(self, selected):
        one_class = selected[selected[OUTCOME] == 0]
        with pytest.raises(ValueError, match="two classes"):
            Recipe().prep(one_class)

    def test_missing_outcome(self, selected):
        with pytest.raises(ValueError):
            Recipe().prep(selected.drop(columns=[OUTCOME]))

    def test_bake_without_outcome(self, train_test):
        train, test = train_test
        baked = Recipe().prep(train).bake(test.drop(columns=[OUTCOME]))
        assert OUTCOME not in baked.columns

    def test_clone_is_unprepared(self, train_test):
        train, _ = train_test
        recipe = Recipe(seed=3).prep(train)
        clone = recipe.clone()
        assert not clone.is_prepped
        assert clone.get_params() == recipe.get_params()
