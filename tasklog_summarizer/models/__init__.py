"""Model loading and model-backed services."""

from .loader import LazyModel, ModelServiceError, ModelState
from .services import (
    EmbeddingService,
    ModelRegistry,
    SentenceValidityService,
    TitleClassificationService,
    get_model_registry,
)

__all__ = [
    'EmbeddingService',
    'LazyModel',
    'ModelRegistry',
    'ModelServiceError',
    'ModelState',
    'SentenceValidityService',
    'TitleClassificationService',
    'get_model_registry',
]
