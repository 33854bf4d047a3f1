"""
Configuration management for the task log summarizer.

This module provides a centralized configuration system that loads settings
from YAML files and environment variables.
"""

import os
import yaml
import logging
from typing import Dict, Any, Optional
from pathlib import Path
from dataclasses import dataclass, field, asdict


GROUPING_STRATEGIES = ('classifier', 'similarity')

DEFAULT_NON_WORK_KEYWORDS = [
    # Break and meals
    'break', 'lunch', 'dinner', 'breakfast', 'eat', 'meal', 'snack', 'coffee',
    # Education and learning (personal)
    'english', 'class', 'course', 'lesson', 'study', 'learning',
    # Training and workshops
    'training', 'workshop', 'seminar', 'conference',
    # Personal activities
    'personal', 'doctor', 'appointment', 'dentist', 'medical',
    # Time off
    'vacation', 'holiday', 'off', 'sick', 'leave',
    # Exercise and health
    'gym', 'exercise', 'workout', 'fitness', 'yoga',
    # Social activities
    'party', 'social', 'hangout', 'fun',
    # Commute and travel
    'commute', 'travel', 'driving',
    # Household and errands
    'shopping', 'groceries', 'cleaning', 'laundry', 'errands',
    # Family and relationships
    'family', 'kids', 'children', 'spouse', 'date',
]

DEFAULT_WORK_KEYWORDS = [
    # Development work
    'code', 'coding', 'programming', 'development', 'dev',
    'bug', 'fix', 'issue', 'feature', 'implement',
    'review', 'test', 'testing', 'debug', 'deploy',
    # Project work
    'sprint', 'project', 'task', 'ticket', 'work',
    'meeting', 'standup', 'sync', 'call', 'client',
    # Research and planning
    'research', 'analysis', 'design', 'plan', 'architecture',
]

DEFAULT_ABBREVIATIONS = {
    'pr': 'pull request',
    'prs': 'pull requests',
    'self-explore': 'self explore',
}


@dataclass
class EmbeddingConfig:
    """Configuration for the sentence-embedding model."""
    model_name: str = 'sentence-transformers/all-MiniLM-L6-v2'
    cache_dir: str = './models/cache'
    device: str = 'auto'  # 'cpu', 'cuda' or 'auto'
    batch_size: int = 16  # texts per chunk before yielding
    max_length: int = 128
    normalize_embeddings: bool = True


@dataclass
class ClassifierConfig:
    """Configuration for the classifier heads trained over embeddings."""
    title_classifier_path: str = './models/heads/title_classifier.pt'
    sentence_validator_path: str = './models/heads/sentence_validator.pt'
    hidden_dim: int = 64

    # Training parameters
    learning_rate: float = 1e-3
    num_epochs: int = 30
    batch_size: int = 32


@dataclass
class SummarizationConfig:
    """Configuration for grouping and deduplication."""
    similarity_threshold: float = 0.7
    title_similarity_threshold: float = 0.9
    grouping_strategy: str = 'similarity'
    validate_segments: bool = True
    expand_abbreviations: bool = True
    fallback_title: str = 'General Tasks'


@dataclass
class WorkFilterConfig:
    """Keyword lists used to drop non-work entries."""
    work_keywords: list = field(default_factory=lambda: list(DEFAULT_WORK_KEYWORDS))
    non_work_keywords: list = field(default_factory=lambda: list(DEFAULT_NON_WORK_KEYWORDS))


@dataclass
class NormalizerConfig:
    abbreviations: dict = field(default_factory=lambda: dict(DEFAULT_ABBREVIATIONS))


@dataclass
class ProgressConfig:
    debounce_ms: int = 100


class Settings:
    """
    Main settings class that manages all configuration.
    """

    def __init__(self):
        """Initialize settings with default values."""
        self.embedding = EmbeddingConfig()
        self.classifier = ClassifierConfig()
        self.summarization = SummarizationConfig()
        self.work_filter = WorkFilterConfig()
        self.normalizer = NormalizerConfig()
        self.progress = ProgressConfig()

        # General settings
        self.log_level = "INFO"
        self.log_file = "tasklog_summarizer.log"
        self.data_dir = "./data"
        self.output_dir = "./output"

        # Environment-specific settings
        self.environment = os.getenv('ENVIRONMENT', 'development')
        self.debug = self.environment == 'development'

        # Load environment variables
        self._load_from_env()

    @classmethod
    def from_yaml(cls, config_path: str) -> 'Settings':
        """
        Load settings from a YAML configuration file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Settings instance with loaded configuration
        """
        settings = cls()

        try:
            config_file = Path(config_path)
            if config_file.exists():
                with open(config_file, 'r') as f:
                    config_data = yaml.safe_load(f) or {}

                settings._update_from_dict(config_data)
                logging.info(f"Configuration loaded from {config_path}")
            else:
                logging.warning(f"Configuration file {config_path} not found, using defaults")

        except Exception as e:
            logging.error(f"Failed to load configuration from {config_path}: {e}")
            logging.info("Using default configuration")

        return settings

    def _load_from_env(self):
        """Load settings from environment variables."""
        # General settings
        self.log_level = os.getenv('LOG_LEVEL', self.log_level)
        self.data_dir = os.getenv('DATA_DIR', self.data_dir)
        self.output_dir = os.getenv('OUTPUT_DIR', self.output_dir)

        # Model settings
        self.embedding.model_name = os.getenv('EMBEDDING_MODEL', self.embedding.model_name)
        self.embedding.cache_dir = os.getenv('MODEL_CACHE_DIR', self.embedding.cache_dir)
        self.embedding.device = os.getenv('EMBEDDING_DEVICE', self.embedding.device)
        self.classifier.title_classifier_path = os.getenv(
            'TITLE_CLASSIFIER_PATH', self.classifier.title_classifier_path
        )
        self.classifier.sentence_validator_path = os.getenv(
            'SENTENCE_VALIDATOR_PATH', self.classifier.sentence_validator_path
        )

        # Summarization
        if os.getenv('SIMILARITY_THRESHOLD'):
            self.summarization.similarity_threshold = float(os.getenv('SIMILARITY_THRESHOLD'))

        self.summarization.grouping_strategy = os.getenv(
            'GROUPING_STRATEGY', self.summarization.grouping_strategy
        )

    def _update_from_dict(self, config_dict: Dict[str, Any]):
        """Update settings from a dictionary."""
        sections = {
            'embedding': self.embedding,
            'classifier': self.classifier,
            'summarization': self.summarization,
            'work_filter': self.work_filter,
            'normalizer': self.normalizer,
            'progress': self.progress,
        }

        for section_name, section in sections.items():
            if section_name in config_dict:
                for key, value in (config_dict[section_name] or {}).items():
                    if hasattr(section, key):
                        setattr(section, key, value)
                    else:
                        logging.warning(f"Unknown setting '{section_name}.{key}' ignored")

        # Update general settings
        general = config_dict.get('general', config_dict)
        for key in ['log_level', 'log_file', 'data_dir', 'output_dir', 'environment', 'debug']:
            if key in general:
                setattr(self, key, general[key])

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary format."""
        return {
            'embedding': asdict(self.embedding),
            'classifier': asdict(self.classifier),
            'summarization': asdict(self.summarization),
            'work_filter': asdict(self.work_filter),
            'normalizer': asdict(self.normalizer),
            'progress': asdict(self.progress),
            'general': {
                'log_level': self.log_level,
                'log_file': self.log_file,
                'data_dir': self.data_dir,
                'output_dir': self.output_dir,
                'environment': self.environment,
                'debug': self.debug,
            }
        }

    def save_to_yaml(self, output_path: str):
        """
        Save current settings to a YAML file.

        Args:
            output_path: Path where to save the configuration
        """
        try:
            config_dict = self.to_dict()

            output_file = Path(output_path)
            output_file.parent.mkdir(parents=True, exist_ok=True)

            with open(output_file, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)

            logging.info(f"Configuration saved to {output_path}")

        except Exception as e:
            logging.error(f"Failed to save configuration to {output_path}: {e}")
            raise

    def validate(self) -> bool:
        """
        Validate the current configuration.

        Returns:
            True if configuration is valid, False otherwise
        """
        errors = []

        # Validate thresholds
        for threshold_name in ['similarity_threshold', 'title_similarity_threshold']:
            threshold_value = getattr(self.summarization, threshold_name)
            if not (0 <= threshold_value <= 1):
                errors.append(f"{threshold_name} must be between 0 and 1")

        if self.summarization.grouping_strategy not in GROUPING_STRATEGIES:
            errors.append(f"grouping_strategy must be one of {', '.join(GROUPING_STRATEGIES)}")

        # Validate model settings
        if self.embedding.batch_size <= 0:
            errors.append("Embedding batch size must be positive")

        if self.embedding.max_length <= 0:
            errors.append("Embedding max length must be positive")

        if self.classifier.hidden_dim <= 0:
            errors.append("Classifier hidden dimension must be positive")

        if self.progress.debounce_ms < 0:
            errors.append("Progress debounce must not be negative")

        # Log errors if any
        if errors:
            for error in errors:
                logging.error(f"Configuration validation error: {error}")
            return False

        logging.info("Configuration validation passed")
        return True

    def create_directories(self):
        """Create necessary directories based on configuration."""
        directories = [
            self.data_dir,
            self.output_dir,
            self.embedding.cache_dir,
            os.path.dirname(self.classifier.title_classifier_path) or '.',
            os.path.dirname(self.log_file) if os.path.dirname(self.log_file) else '.'
        ]

        for directory in directories:
            try:
                Path(directory).mkdir(parents=True, exist_ok=True)
                logging.debug(f"Created directory: {directory}")
            except Exception as e:
                logging.error(f"Failed to create directory {directory}: {e}")


# Global settings instance
_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def initialize_settings(config_path: Optional[str] = None) -> Settings:
    """
    Initialize global settings from configuration file.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Initialized settings instance
    """
    global _settings_instance

    if config_path:
        _settings_instance = Settings.from_yaml(config_path)
    else:
        _settings_instance = Settings()

    # Validate and create directories
    _settings_instance.validate()
    _settings_instance.create_directories()

    return _settings_instance
