"""
Small feed-forward heads that classify sentence embeddings.

Two heads are used: a six-way title classifier (see TITLE_CATEGORIES) and a
single-logit sentence-validity classifier that decides whether a comma-split
fragment reads as a standalone work item.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import torch
from torch import nn

from tasklog_summarizer.config.settings import ClassifierConfig


logger = logging.getLogger(__name__)


class EmbeddingClassifierHead(nn.Module):
    """Linear -> ReLU -> Dropout -> Linear over a fixed-size embedding."""

    def __init__(self, input_dim: int, num_labels: int, hidden_dim: int = 64, labels: Optional[List[str]] = None):
        super().__init__()
        self.input_dim = input_dim
        self.num_labels = num_labels
        self.hidden_dim = hidden_dim
        self.labels = list(labels) if labels else None

        self.network = nn.Sequential(
            nn.Linear(input_dim, hidden_dim),
            nn.ReLU(),
            nn.Dropout(0.1),
            nn.Linear(hidden_dim, num_labels),
        )

    def forward(self, embeddings: torch.Tensor) -> torch.Tensor:
        return self.network(embeddings)

    def predict_logits(self, embeddings: np.ndarray) -> np.ndarray:
        self.eval()
        with torch.no_grad():
            inputs = torch.as_tensor(np.asarray(embeddings), dtype=torch.float32)
            return self(inputs).cpu().numpy()

    def predict_classes(self, embeddings: np.ndarray) -> List[int]:
        """Argmax class index per row (multi-class heads)."""
        if len(embeddings) == 0:
            return []
        return [int(i) for i in np.argmax(self.predict_logits(embeddings), axis=1)]

    def predict_flags(self, embeddings: np.ndarray) -> List[int]:
        """Rounded sigmoid of the single logit per row (binary heads)."""
        if len(embeddings) == 0:
            return []
        probabilities = 1.0 / (1.0 + np.exp(-self.predict_logits(embeddings)[:, 0]))
        return [int(round(float(p))) for p in probabilities]

    def save(self, path: str):
        output_file = Path(path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        torch.save({
            'input_dim': self.input_dim,
            'num_labels': self.num_labels,
            'hidden_dim': self.hidden_dim,
            'labels': self.labels,
            'state_dict': self.state_dict(),
        }, output_file)
        logger.info(f"Classifier head saved to {path}")

    @classmethod
    def load(cls, path: str) -> 'EmbeddingClassifierHead':
        checkpoint_file = Path(path)
        if not checkpoint_file.exists():
            raise FileNotFoundError(f"Classifier checkpoint not found: {path}")

        checkpoint = torch.load(checkpoint_file, map_location='cpu')
        head = cls(
            input_dim=checkpoint['input_dim'],
            num_labels=checkpoint['num_labels'],
            hidden_dim=checkpoint['hidden_dim'],
            labels=checkpoint.get('labels'),
        )
        head.load_state_dict(checkpoint['state_dict'])
        head.eval()
        logger.info(f"Classifier head loaded from {path} ({head.num_labels} label(s))")
        return head


def train_head(
    head: EmbeddingClassifierHead,
    embeddings: np.ndarray,
    targets: Sequence[int],
    config: ClassifierConfig,
    seed: int = 42
) -> List[float]:
    """
    Fit a head on precomputed embeddings.

    Multi-class heads use cross-entropy on class indices; single-logit heads
    use binary cross-entropy on 0/1 targets.

    Returns:
        Mean training loss per epoch
    """
    if len(embeddings) != len(targets):
        raise ValueError("embeddings and targets must have the same length")
    if len(targets) == 0:
        raise ValueError("No training examples")

    torch.manual_seed(seed)
    inputs = torch.as_tensor(np.asarray(embeddings), dtype=torch.float32)
    binary = head.num_labels == 1

    if binary:
        labels = torch.as_tensor(targets, dtype=torch.float32)
        loss_fn = nn.BCEWithLogitsLoss()
    else:
        labels = torch.as_tensor(targets, dtype=torch.long)
        loss_fn = nn.CrossEntropyLoss()

    optimizer = torch.optim.Adam(head.parameters(), lr=config.learning_rate)
    epoch_losses = []

    for epoch in range(config.num_epochs):
        head.train()
        permutation = torch.randperm(len(inputs))
        total_loss = 0.0

        for start in range(0, len(inputs), config.batch_size):
            batch_idx = permutation[start:start + config.batch_size]
            logits = head(inputs[batch_idx])
            if binary:
                loss = loss_fn(logits[:, 0], labels[batch_idx])
            else:
                loss = loss_fn(logits, labels[batch_idx])

            optimizer.zero_grad()
            loss.backward()
            optimizer.step()
            total_loss += loss.item() * len(batch_idx)

        epoch_losses.append(total_loss / len(inputs))
        logger.debug(f"Epoch {epoch + 1}/{config.num_epochs}: loss {epoch_losses[-1]:.4f}")

    head.eval()
    return epoch_losses
