"""
Training script for the title classifier and sentence validator heads.

Both heads are small feed-forward networks trained on frozen sentence
embeddings, so training runs in seconds on CPU.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from tasklog_summarizer.config.settings import Settings
from tasklog_summarizer.models.classifier_heads import EmbeddingClassifierHead, train_head
from tasklog_summarizer.models.embedding_model import SentenceEmbedder
from tasklog_summarizer.schema import TITLE_CATEGORIES


def setup_logging(log_level: str = "INFO"):
    """Setup logging for training."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler('training.log'),
            logging.StreamHandler()
        ]
    )


def load_training_data(data_path: str) -> List[Dict]:
    """
    Load training data from JSON file.

    Expected format: List of {"text": "...", "label": ...}
    """
    try:
        with open(data_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        logging.info(f"Loaded {len(data)} training examples from {data_path}")
        return data

    except Exception as e:
        logging.error(f"Failed to load training data from {data_path}: {e}")
        raise


def create_sample_title_data() -> List[Dict]:
    return [
        {"text": "Sprint 10", "label": "valid_title"},
        {"text": "Checkout redesign", "label": "valid_title"},
        {"text": "Payment gateway integration", "label": "valid_title"},
        {"text": "Background job", "label": "background_task"},
        {"text": "Running migrations", "label": "background_task"},
        {"text": "Daily standup", "label": "meetings"},
        {"text": "Client call", "label": "meetings"},
        {"text": "Misc", "label": "general_tasks"},
        {"text": "Tasks", "label": "general_tasks"},
        {"text": "Emails and admin", "label": "general_activities"},
        {"text": "Slack catch-up", "label": "general_activities"},
        {"text": "Project work", "label": "project_tasks"},
        {"text": "Projects", "label": "project_tasks"},
    ]


def create_sample_sentence_data() -> List[Dict]:
    return [
        {"text": "fix login bug", "label": 1},
        {"text": "review pull request for payments", "label": 1},
        {"text": "deploy staging build", "label": 1},
        {"text": "write unit tests for the parser", "label": 1},
        {"text": "signup and reset flows", "label": 0},
        {"text": "and docs", "label": 0},
        {"text": "etc", "label": 0},
        {"text": "plus the rest", "label": 0},
    ]


def encode_title_labels(data: Sequence[Dict]) -> Tuple[List[str], List[int]]:
    texts, targets = [], []
    for example in data:
        label = example['label']
        if label not in TITLE_CATEGORIES:
            raise ValueError(f"Unknown title category '{label}' for '{example['text']}'")
        texts.append(example['text'])
        targets.append(TITLE_CATEGORIES.index(label))
    return texts, targets


def encode_sentence_labels(data: Sequence[Dict]) -> Tuple[List[str], List[int]]:
    texts = [example['text'] for example in data]
    targets = [1 if example['label'] else 0 for example in data]
    return texts, targets


def train_classifier(
    embedder: SentenceEmbedder,
    texts: List[str],
    targets: List[int],
    num_labels: int,
    settings: Settings,
    output_path: str,
    labels: List[str] = None
) -> EmbeddingClassifierHead:
    """Embed texts, fit one head and save it."""
    embeddings = embedder.encode(texts)
    head = EmbeddingClassifierHead(
        input_dim=embeddings.shape[1],
        num_labels=num_labels,
        hidden_dim=settings.classifier.hidden_dim,
        labels=labels
    )

    losses = train_head(head, embeddings, targets, settings.classifier)
    logging.info(f"Final training loss: {losses[-1]:.4f}")

    head.save(output_path)
    return head


def main():
    """Main training script."""
    parser = argparse.ArgumentParser(description="Train the classifier heads")

    parser.add_argument(
        "--title-data",
        default="sample",
        help="Path to title training data JSON file (use 'sample' for demo data)"
    )

    parser.add_argument(
        "--sentence-data",
        default="sample",
        help="Path to sentence training data JSON file (use 'sample' for demo data)"
    )

    parser.add_argument(
        "--config",
        default="config/default.yaml",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level"
    )

    args = parser.parse_args()

    setup_logging(args.log_level)
    settings = Settings.from_yaml(args.config)

    try:
        title_data = create_sample_title_data() if args.title_data == "sample" else load_training_data(args.title_data)
        sentence_data = (
            create_sample_sentence_data() if args.sentence_data == "sample"
            else load_training_data(args.sentence_data)
        )

        embedder = SentenceEmbedder(settings.embedding)

        logging.info("Training title classifier...")
        texts, targets = encode_title_labels(title_data)
        train_classifier(
            embedder, texts, targets, len(TITLE_CATEGORIES), settings,
            settings.classifier.title_classifier_path, labels=TITLE_CATEGORIES
        )

        logging.info("Training sentence validator...")
        texts, targets = encode_sentence_labels(sentence_data)
        train_classifier(
            embedder, texts, targets, 1, settings,
            settings.classifier.sentence_validator_path
        )

        print("\n" + "=" * 50)
        print("TRAINING COMPLETED SUCCESSFULLY!")
        print("=" * 50)
        print(f"Title classifier: {settings.classifier.title_classifier_path}")
        print(f"Sentence validator: {settings.classifier.sentence_validator_path}")
        return 0

    except Exception as e:
        logging.error(f"Training failed: {str(e)}")
        return 1


if __name__ == "__main__":
    exit(main())
