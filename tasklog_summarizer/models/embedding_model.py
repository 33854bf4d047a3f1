"""
Sentence-embedding model built on a Hugging Face encoder.

Texts are encoded with the encoder's last hidden state, mean-pooled over the
attention mask, and optionally L2-normalized so that dot products are cosine
similarities.
"""

import logging
from typing import Sequence

import numpy as np
import torch
from transformers import AutoModel, AutoTokenizer

from tasklog_summarizer.config.settings import EmbeddingConfig


def resolve_device(device: str) -> torch.device:
    if device == 'auto':
        return torch.device('cuda' if torch.cuda.is_available() else 'cpu')
    return torch.device(device)


def mean_pooling(token_embeddings: torch.Tensor, attention_mask: torch.Tensor) -> torch.Tensor:
    """Average token vectors, ignoring padding."""
    mask = attention_mask.unsqueeze(-1).expand(token_embeddings.size()).float()
    summed = torch.sum(token_embeddings * mask, dim=1)
    counts = torch.clamp(mask.sum(dim=1), min=1e-9)
    return summed / counts


class SentenceEmbedder:
    """
    Blocking sentence encoder.

    Loading happens in the constructor, so build it through a LazyModel to
    keep the event loop free.
    """

    def __init__(self, config: EmbeddingConfig):
        """
        Initialize the embedder.

        Args:
            config: Embedding model settings
        """
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.device = resolve_device(config.device)

        self.logger.info(f"Loading tokenizer for {config.model_name}")
        self.tokenizer = AutoTokenizer.from_pretrained(
            config.model_name,
            cache_dir=config.cache_dir
        )

        self.logger.info(f"Loading encoder {config.model_name} on {self.device}")
        self.model = AutoModel.from_pretrained(
            config.model_name,
            cache_dir=config.cache_dir
        )
        self.model.to(self.device)
        self.model.eval()

    @property
    def dimension(self) -> int:
        return int(self.model.config.hidden_size)

    def encode(self, texts: Sequence[str]) -> np.ndarray:
        """Encode texts into a (len(texts), dimension) float32 array."""
        if not texts:
            return np.zeros((0, self.dimension), dtype=np.float32)

        encoded = self.tokenizer(
            list(texts),
            padding=True,
            truncation=True,
            max_length=self.config.max_length,
            return_tensors='pt'
        ).to(self.device)

        with torch.no_grad():
            output = self.model(**encoded)

        embeddings = mean_pooling(output.last_hidden_state, encoded['attention_mask'])
        if self.config.normalize_embeddings:
            embeddings = torch.nn.functional.normalize(embeddings, p=2, dim=1)

        return embeddings.cpu().numpy().astype(np.float32)
