#!/usr/bin/env python3
"""Run the heart-failure mortality analysis end to end.

Usage:
    python scripts/run_analysis.py --data data/heart_failure_clinical_records_dataset.csv
    python scripts/run_analysis.py --output-dir results --n-jobs 4
    python scripts/run_analysis.py --fast             # few resamples, small grid
    python scripts/run_analysis.py --models logistic xgboost --all-features

Set MLFLOW_TRACKING_URI to record the finalised models in MLflow.
"""

import argparse
import logging

from hfmort.config import PipelineConfig
from hfmort.models import MODEL_REGISTRY
from hfmort.pipeline import run_pipeline

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    defaults = PipelineConfig()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--data", type=str, default=defaults.data_path)
    parser.add_argument("--output-dir", type=str, default=None)
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("--grid-size", type=int, default=defaults.grid_size)
    parser.add_argument("--resamples", type=int, default=defaults.resample_times)
    parser.add_argument("--trees", type=int, default=defaults.trees)
    parser.add_argument("--epochs", type=int, default=defaults.epochs)
    parser.add_argument("--n-jobs", type=int, default=defaults.n_jobs)
    parser.add_argument(
        "--models",
        nargs="+",
        choices=list(MODEL_REGISTRY),
        default=list(defaults.models),
        help="Only fit these models (e.g. --models logistic xgboost)",
    )
    parser.add_argument(
        "--all-features",
        action="store_true",
        help="Use every column instead of the reduced feature set",
    )
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Quick run: 5 resamples, 5 candidates, 200 trees",
    )
    parser.add_argument(
        "--tag", type=str, default="", help="Suffix for MLflow run names (e.g. 'v2')"
    )
    args = parser.parse_args()

    config = PipelineConfig(
        data_path=args.data,
        features=None if args.all_features else defaults.features,
        seed=args.seed,
        resample_times=args.resamples,
        models=tuple(args.models),
        epochs=args.epochs,
        trees=args.trees,
        grid_size=args.grid_size,
        n_jobs=args.n_jobs,
        output_dir=args.output_dir,
    )
    if args.fast:
        config.resample_times = 5
        config.grid_size = 5
        config.trees = 200
        logger.info("FAST MODE: 5 resamples, 5 candidates, 200 trees")

    result = run_pipeline(config, tag=args.tag)
    print(result.metrics_table().to_string(index=False))


if __name__ == "__main__":
    main()
