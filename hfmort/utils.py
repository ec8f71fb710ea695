def make_run_name(model_name: str, tag: str = "") -> str:
    """MLflow run name for a finalised model, optionally tagged."""
    return f"{model_name}_{tag}" if tag else model_name
