"""
Async model services consumed by the summarization pipeline.

Each service owns a LazyModel, wraps every load or inference failure in
ModelServiceError, and works in bounded chunks that yield to the event loop.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from tasklog_summarizer.config.settings import ClassifierConfig, EmbeddingConfig, Settings
from tasklog_summarizer.models.loader import LazyModel, ModelServiceError
from tasklog_summarizer.progress.batching import process_batch_in_chunks
from tasklog_summarizer.schema import TITLE_CATEGORIES


logger = logging.getLogger(__name__)


class EmbeddingService:
    """Text -> vector service over a lazily loaded SentenceEmbedder."""

    def __init__(self, config: EmbeddingConfig, model: Optional[LazyModel] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.model = model or LazyModel(
            f"embedding model {config.model_name}",
            lambda: _build_embedder(config)
        )

    async def load(self):
        await self.model.get()

    async def embed(self, texts: Sequence[str]) -> np.ndarray:
        """One vector per text, in input order."""
        embedder = await self.model.get()
        if not texts:
            return np.zeros((0, 0), dtype=np.float32)

        async def encode_chunk(chunk):
            try:
                return list(await asyncio.to_thread(embedder.encode, list(chunk)))
            except Exception as e:
                raise ModelServiceError(f"Embedding inference failed: {e}") from e

        vectors = await process_batch_in_chunks(
            list(texts), encode_chunk, chunk_size=self.config.batch_size
        )
        self.logger.debug(f"Embedded {len(vectors)} text(s)")
        return np.vstack(vectors)


class TitleClassificationService:
    """Maps titles to indices into TITLE_CATEGORIES."""

    def __init__(self, embedding_service: EmbeddingService, config: ClassifierConfig, model: Optional[LazyModel] = None):
        self.embedding_service = embedding_service
        self.logger = logging.getLogger(__name__)
        self.model = model or LazyModel(
            'title classifier',
            lambda: _load_head(config.title_classifier_path, expected_labels=len(TITLE_CATEGORIES))
        )

    async def load(self):
        await self.model.get()

    async def classify(self, titles: Sequence[str]) -> List[int]:
        if not titles:
            return []

        head = await self.model.get()
        embeddings = await self.embedding_service.embed(titles)

        try:
            return head.predict_classes(embeddings)
        except Exception as e:
            raise ModelServiceError(f"Title classification failed: {e}") from e


class SentenceValidityService:
    """Flags each text segment 1 (standalone work item) or 0 (fragment)."""

    def __init__(self, embedding_service: EmbeddingService, config: ClassifierConfig, model: Optional[LazyModel] = None):
        self.embedding_service = embedding_service
        self.logger = logging.getLogger(__name__)
        self.model = model or LazyModel(
            'sentence validator',
            lambda: _load_head(config.sentence_validator_path, expected_labels=1)
        )

    async def load(self):
        await self.model.get()

    async def validate(self, segments: Sequence[str]) -> List[int]:
        if not segments:
            return []

        head = await self.model.get()
        embeddings = await self.embedding_service.embed(segments)

        try:
            return head.predict_flags(embeddings)
        except Exception as e:
            raise ModelServiceError(f"Sentence validation failed: {e}") from e


def _build_embedder(config: EmbeddingConfig):
    from tasklog_summarizer.models.embedding_model import SentenceEmbedder
    return SentenceEmbedder(config)


def _load_head(path: str, expected_labels: int):
    from tasklog_summarizer.models.classifier_heads import EmbeddingClassifierHead

    if not Path(path).exists():
        logger.warning(
            f"No classifier checkpoint at {path}; run scripts/train_classifiers.py to create it, "
            f"or turn off summarization.validate_segments / the classifier grouping_strategy"
        )

    head = EmbeddingClassifierHead.load(path)
    if head.num_labels != expected_labels:
        raise ValueError(
            f"Checkpoint {path} has {head.num_labels} label(s), expected {expected_labels}"
        )
    return head


class ModelRegistry:
    """The three model services, sharing one embedding model."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.embedding = EmbeddingService(settings.embedding)
        self.title_classifier = TitleClassificationService(self.embedding, settings.classifier)
        self.sentence_validator = SentenceValidityService(self.embedding, settings.classifier)


# Global registry instance, first caller wins
_registry_instance: Optional[ModelRegistry] = None


def get_model_registry(settings: Settings) -> ModelRegistry:
    """Get the process-wide model registry, creating it on first use."""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = ModelRegistry(settings)
    elif settings is not _registry_instance.settings:
        logger.warning("Model registry already exists; ignoring the model settings passed in")
    return _registry_instance
