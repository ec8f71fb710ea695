from .registry import MODEL_REGISTRY, make_model

__all__ = ["MODEL_REGISTRY", "make_model"]
