from dataclasses import dataclass, field

from hfmort.constants import DATASET_FILENAME, PATH_DATA, SEED, SELECTED_FEATURES


@dataclass
class PipelineConfig:
    # Data
    data_path: str = str(PATH_DATA / DATASET_FILENAME)
    features: list[str] | None = field(default_factory=lambda: list(SELECTED_FEATURES))
    seed: int = SEED

    # Split and resampling
    train_size: float = 0.75
    resample_prop: float = 0.9
    resample_times: int = 25

    # Models
    models: tuple[str, ...] = ("logistic", "mlp", "xgboost")
    epochs: int = 100
    hidden_units: int = 5
    dropout: float = 0.1
    trees: int = 1000
    grid_size: int = 20

    # Execution
    n_jobs: int = -1
    output_dir: str | None = None
    experiment_name: str = "heart-failure-mortality"
