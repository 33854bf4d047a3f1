"""Shared fakes standing in for the model services."""

from typing import Dict, Iterable, Optional

import numpy as np
import pytest

from tasklog_summarizer.config.settings import Settings
from tasklog_summarizer.models.loader import ModelServiceError
from tasklog_summarizer.schema import TITLE_CATEGORIES, TrackedTask


class FakeEmbedder:
    """
    One-hot vectors keyed by text.

    Distinct texts are orthogonal (similarity 0.0); texts listed in
    ``same_as`` share the vector of the text they point to (similarity 1.0).
    """

    dimension = 256

    def __init__(self, same_as: Optional[Dict[str, str]] = None, fail: bool = False):
        self.same_as = same_as or {}
        self.fail = fail
        self.load_calls = 0
        self.embed_calls = []
        self._slots: Dict[str, int] = {}

    async def load(self):
        self.load_calls += 1
        if self.fail:
            raise ModelServiceError("embedding model unavailable")

    def vector(self, text: str) -> np.ndarray:
        key = self.same_as.get(text, text)
        slot = self._slots.setdefault(key, len(self._slots))
        vector = np.zeros(self.dimension, dtype=np.float32)
        vector[slot % self.dimension] = 1.0
        return vector

    async def embed(self, texts):
        if self.fail:
            raise ModelServiceError("embedding model unavailable")
        self.embed_calls.append(list(texts))
        if not texts:
            return np.zeros((0, 0), dtype=np.float32)
        return np.vstack([self.vector(text) for text in texts])


class FakeTitleClassifier:
    """Returns the configured category per title, 'valid_title' otherwise."""

    def __init__(self, categories: Optional[Dict[str, str]] = None):
        self.categories = categories or {}
        self.load_calls = 0

    async def load(self):
        self.load_calls += 1

    async def classify(self, titles):
        return [TITLE_CATEGORIES.index(self.categories.get(title, 'valid_title')) for title in titles]


class FakeSentenceValidator:
    """Flags every segment valid except the listed fragments."""

    def __init__(self, invalid: Iterable[str] = ()):
        self.invalid = set(invalid)
        self.load_calls = 0
        self.calls = []

    async def load(self):
        self.load_calls += 1

    async def validate(self, segments):
        self.calls.append(list(segments))
        return [0 if segment in self.invalid else 1 for segment in segments]


def make_task(task_id, title, description='', **kwargs) -> TrackedTask:
    return TrackedTask(id=task_id, title=title, description=description, **kwargs)


@pytest.fixture
def settings():
    settings = Settings()
    settings.summarization.grouping_strategy = 'similarity'
    settings.summarization.similarity_threshold = 0.7
    settings.summarization.title_similarity_threshold = 0.9
    settings.progress.debounce_ms = 0
    return settings
