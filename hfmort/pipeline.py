"""End-to-end mortality analysis.

Steps:
  1. Load the patient records
  2. Exploratory binomial GLM over every column
  3. Recode factors and select the reduced feature set
  4. Seeded train/test split
  5. Prepare the preprocessing recipe on the training split
  6. Resample (Monte-Carlo CV) logistic regression and the neural network,
     tune boosted trees on a Latin-hypercube grid
  7. Refit each finalised model on the training split and evaluate on test
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from hfmort.config import PipelineConfig
from hfmort.constants import OUTCOME
from hfmort.datasets import load_records, recode_factors, select_features, split_dataset
from hfmort.exploratory import ExploratoryFit, fit_exploratory_glm
from hfmort.models.registry import MODEL_LABELS
from hfmort.plotting import (
    plot_confusion_matrix,
    plot_resample_metrics,
    plot_roc_curve,
    plot_tuning_results,
    plot_variable_importance,
)
from hfmort.preprocessing import Recipe
from hfmort.resampling import Resample, fit_resamples, mc_cv
from hfmort.tracking import log_model_result
from hfmort.tuning import (
    BOOSTED_TREE_SPACE,
    CONFIG_COLUMN,
    TuneResults,
    finalize_workflow,
    latin_hypercube_grid,
    tune_grid,
)
from hfmort.utils import make_run_name
from hfmort.workflow import LastFit, Workflow

logger = logging.getLogger(__name__)

TUNED_MODELS = {"xgboost": BOOSTED_TREE_SPACE}


@dataclass
class ModelResult:
    name: str
    workflow: Workflow
    resample_metrics: pd.DataFrame
    last_fit: LastFit
    tune_results: TuneResults | None = None


@dataclass
class PipelineResult:
    config: PipelineConfig
    exploratory: ExploratoryFit
    train: pd.DataFrame
    test: pd.DataFrame
    prepared: pd.DataFrame
    resamples: list[Resample]
    models: dict[str, ModelResult] = field(default_factory=dict)

    def metrics_table(self) -> pd.DataFrame:
        """Held-out test metrics, one row per model."""
        rows = [{"model": name, **result.last_fit.metrics} for name, result in self.models.items()]
        return pd.DataFrame(rows)

    def resample_summary(self) -> pd.DataFrame:
        """Mean resampled metrics of every finalised model."""
        rows = []
        for name, result in self.models.items():
            means = result.resample_metrics.drop(columns=["id"]).mean(numeric_only=True)
            rows.append({"model": name, **means.to_dict()})
        return pd.DataFrame(rows)


def default_params(model_name: str, config: PipelineConfig) -> dict:
    if model_name == "logistic":
        return {}
    if model_name == "mlp":
        return {
            "hidden_units": config.hidden_units,
            "dropout": config.dropout,
            "epochs": config.epochs,
            "random_state": config.seed,
        }
    if model_name == "xgboost":
        return {"trees": config.trees, "random_state": config.seed, "n_jobs": 1}
    raise ValueError(f"Unknown model {model_name=}")


def prepare_data(config: PipelineConfig):
    raw = load_records(config.data_path)
    exploratory = fit_exploratory_glm(raw)
    logger.info("Exploratory GLM coefficients:\n" + exploratory.coefficients.to_string(index=False))

    df = recode_factors(raw)
    if config.features is not None:
        df = select_features(df, config.features)
    train, test = split_dataset(df, train_size=config.train_size, random_state=config.seed)
    logger.info(f"Split {len(df)} records into train={len(train)} test={len(test)}")
    return exploratory, train, test


def fit_model(
    model_name: str,
    recipe: Recipe,
    train: pd.DataFrame,
    test: pd.DataFrame,
    resamples: list[Resample],
    config: PipelineConfig,
) -> ModelResult:
    workflow = Workflow(recipe, model_name, default_params(model_name, config))
    tune_results = None
    if model_name in TUNED_MODELS:
        grid = latin_hypercube_grid(
            TUNED_MODELS[model_name], size=config.grid_size, random_state=config.seed
        )
        tune_results = tune_grid(workflow, train, resamples, grid, n_jobs=config.n_jobs)
        logger.info(
            f"Top candidates for {model_name}:\n"
            + tune_results.show_best("roc_auc", n=5).to_string(index=False)
        )
        best_config = tune_results.show_best("roc_auc", n=1)[CONFIG_COLUMN].iloc[0]
        workflow = finalize_workflow(workflow, tune_results.select_best("roc_auc"))
        resample_metrics = (
            tune_results.metrics[tune_results.metrics[CONFIG_COLUMN] == best_config]
            .drop(columns=[CONFIG_COLUMN, *tune_results.param_names])
            .reset_index(drop=True)
        )
    else:
        resample_metrics = fit_resamples(
            workflow, train, resamples, n_jobs=config.n_jobs
        ).metrics
    logger.info(
        f"{model_name} resampled roc_auc={resample_metrics['roc_auc'].mean():.4f} "
        f"accuracy={resample_metrics['accuracy'].mean():.4f}"
    )
    last = workflow.last_fit(train, test, random_state=config.seed)
    logger.info(f"{model_name} confusion matrix:\n{last.confusion.to_string()}")
    return ModelResult(
        name=model_name,
        workflow=workflow,
        resample_metrics=resample_metrics,
        last_fit=last,
        tune_results=tune_results,
    )


def save_outputs(result: PipelineResult, output_dir: str) -> None:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    result.metrics_table().to_csv(out / "test_metrics.csv", index=False)
    result.resample_summary().to_csv(out / "resample_metrics.csv", index=False)
    result.exploratory.coefficients.to_csv(out / "exploratory_glm.csv", index=False)

    for name, model in result.models.items():
        label = MODEL_LABELS.get(name, name)
        plot_roc_curve(model.last_fit.roc, title=f"ROC curve: {label}", filename=out / f"roc_{name}.png")
        plot_variable_importance(
            model.last_fit.importance,
            title=f"Variable importance: {label}",
            filename=out / f"importance_{name}.png",
        )
        plot_confusion_matrix(
            model.last_fit.confusion,
            title=f"Confusion matrix: {label}",
            filename=out / f"confusion_{name}.png",
        )
        if model.tune_results is not None:
            plot_tuning_results(
                model.tune_results.collect_metrics(),
                model.tune_results.param_names,
                filename=out / f"tuning_{name}.png",
            )
        plt.close("all")

    plot_roc_curve(
        {MODEL_LABELS.get(n, n): m.last_fit.roc for n, m in result.models.items()},
        title="ROC curves on the test split",
        filename=out / "roc_all.png",
    )
    plot_resample_metrics(
        {MODEL_LABELS.get(n, n): m.resample_metrics for n, m in result.models.items()},
        filename=out / "resample_roc_auc.png",
    )
    plt.close("all")


def run_pipeline(config: PipelineConfig | None = None, tag: str = "") -> PipelineResult:
    if config is None:
        config = PipelineConfig()
    exploratory, train, test = prepare_data(config)

    recipe = Recipe(outcome=OUTCOME, seed=config.seed)
    prepared = recipe.clone().prep(train).juice()
    logger.info(
        f"Prepared training table: {prepared.shape}, class counts "
        f"{prepared[OUTCOME].value_counts().sort_index().to_dict()}"
    )

    resamples = mc_cv(
        train,
        prop=config.resample_prop,
        times=config.resample_times,
        strata=OUTCOME,
        random_state=config.seed,
    )

    result = PipelineResult(
        config=config,
        exploratory=exploratory,
        train=train,
        test=test,
        prepared=prepared,
        resamples=resamples,
    )
    for model_name in config.models:
        model_result = fit_model(model_name, recipe, train, test, resamples, config)
        result.models[model_name] = model_result
        log_model_result(
            make_run_name(model_name, tag),
            model_result.workflow.params,
            model_result.last_fit.metrics,
            experiment_name=config.experiment_name,
            tables={"importance": model_result.last_fit.importance},
            tags={"seed": str(config.seed)},
        )

    logger.info("Test metrics:\n" + result.metrics_table().to_string(index=False))
    if config.output_dir is not None:
        save_outputs(result, config.output_dir)
    return result
