from .neural import MLPClassifier
from .wrappers import BoostedTreesModel, LogisticModel

MODEL_REGISTRY = {
    "logistic": LogisticModel,
    "mlp": MLPClassifier,
    "xgboost": BoostedTreesModel,
}

MODEL_LABELS = {
    "logistic": "Logistic regression",
    "mlp": "Neural network",
    "xgboost": "Boosted trees",
}


def make_model(name: str, **params):
    if name not in MODEL_REGISTRY:
        raise ValueError(f"Unknown model {name=}, choose one of {list(MODEL_REGISTRY)}")
    return MODEL_REGISTRY[name](**params)
