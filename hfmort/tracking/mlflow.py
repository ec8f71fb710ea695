import logging
import os
import tempfile

import pandas as pd

logger = logging.getLogger(__name__)


def tracking_enabled() -> bool:
    return bool(os.environ.get("MLFLOW_TRACKING_URI", ""))


def log_model_result(
    model_name: str,
    params: dict,
    metrics: dict[str, float],
    experiment_name: str,
    tables: dict[str, pd.DataFrame] | None = None,
    tags: dict[str, str] | None = None,
) -> str | None:
    """Record one finalised model in MLflow.

    Does nothing unless MLFLOW_TRACKING_URI is set. Failures are logged and
    swallowed so tracking never stops an analysis run.

    Returns:
        The MLflow run id, or None when nothing was logged.
    """
    tracking_uri = os.environ.get("MLFLOW_TRACKING_URI", "")
    if not tracking_uri:
        return None
    try:
        import mlflow

        mlflow.set_tracking_uri(tracking_uri)
        mlflow.set_experiment(experiment_name)
        with mlflow.start_run(run_name=model_name) as run:
            mlflow.log_params(
                {
                    "model": model_name,
                    **{
                        k: v
                        for k, v in params.items()
                        if isinstance(v, (int, float, str, bool))
                    },
                }
            )
            mlflow.log_metrics(
                {k: float(v) for k, v in metrics.items() if pd.notna(v)}
            )
            if tags:
                mlflow.set_tags(tags)
            if tables:
                with tempfile.TemporaryDirectory() as tmp:
                    for name, table in tables.items():
                        table.to_csv(os.path.join(tmp, f"{name}.csv"), index=False)
                    mlflow.log_artifacts(tmp, artifact_path="tables")
            run_id = run.info.run_id
        logger.info(f"MLflow: logged {model_name} to experiment '{experiment_name}'")
        return run_id
    except Exception as e:
        logger.warning(f"MLflow logging failed for {model_name}: {e}")
        return None
