from .mlp import MLPClassifier, MLPModule

__all__ = ["MLPClassifier", "MLPModule"]
