from .mlflow import log_model_result, tracking_enabled

__all__ = ["log_model_result", "tracking_enabled"]
