import yaml

from tasklog_summarizer.config.settings import Settings


def test_defaults_are_valid():
    settings = Settings()
    assert settings.summarization.similarity_threshold == 0.7
    assert settings.summarization.fallback_title == 'General Tasks'
    assert 'break' in settings.work_filter.non_work_keywords
    assert settings.normalizer.abbreviations['pr'] == 'pull request'
    assert settings.validate()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('SIMILARITY_THRESHOLD', '0.85')
    monkeypatch.setenv('GROUPING_STRATEGY', 'classifier')
    monkeypatch.setenv('EMBEDDING_DEVICE', 'cpu')

    settings = Settings()
    assert settings.summarization.similarity_threshold == 0.85
    assert settings.summarization.grouping_strategy == 'classifier'
    assert settings.embedding.device == 'cpu'


def test_yaml_overrides_sections_and_general_settings(tmp_path):
    config_path = tmp_path / 'config.yaml'
    config_path.write_text(yaml.safe_dump({
        'summarization': {'similarity_threshold': 0.5, 'validate_segments': False},
        'progress': {'debounce_ms': 0},
        'general': {'log_level': 'DEBUG'},
    }))

    settings = Settings.from_yaml(str(config_path))
    assert settings.summarization.similarity_threshold == 0.5
    assert settings.summarization.validate_segments is False
    assert settings.progress.debounce_ms == 0
    assert settings.log_level == 'DEBUG'


def test_missing_yaml_falls_back_to_defaults(tmp_path):
    settings = Settings.from_yaml(str(tmp_path / 'missing.yaml'))
    assert settings.summarization.title_similarity_threshold == 0.9


def test_save_and_reload_round_trip(tmp_path):
    settings = Settings()
    settings.summarization.similarity_threshold = 0.42
    settings.work_filter.non_work_keywords = ['siesta']

    output_path = tmp_path / 'out' / 'settings.yaml'
    settings.save_to_yaml(str(output_path))

    reloaded = Settings.from_yaml(str(output_path))
    assert reloaded.summarization.similarity_threshold == 0.42
    assert reloaded.work_filter.non_work_keywords == ['siesta']


def test_validate_rejects_bad_values():
    settings = Settings()
    settings.summarization.similarity_threshold = 1.5
    assert not settings.validate()

    settings = Settings()
    settings.summarization.grouping_strategy = 'alphabetical'
    assert not settings.validate()

    settings = Settings()
    settings.progress.debounce_ms = -1
    assert not settings.validate()
