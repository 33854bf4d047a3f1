from tasklog_summarizer.config.settings import DEFAULT_ABBREVIATIONS
from tasklog_summarizer.processors.normalizer import TaskNormalizer, normalize_tasks
from tasklog_summarizer.schema import ParsedTask

from conftest import make_task


def test_title_falls_back_to_general_tasks():
    parsed = TaskNormalizer().normalize_task(make_task('1', '   ', 'write docs'))
    assert parsed == ParsedTask(title='General Tasks', description='write docs')


def test_description_falls_back_to_title():
    parsed = TaskNormalizer().normalize_task(make_task('1', ' Planning ', ''))
    assert parsed == ParsedTask(title='Planning', description='Planning')


def test_empty_task_gets_fallback_title_for_both_fields():
    parsed = TaskNormalizer(fallback_title='Misc').normalize_task(make_task('1', '', ''))
    assert parsed == ParsedTask(title='Misc', description='Misc')


def test_abbreviations_expand_as_whole_tokens_only():
    normalizer = TaskNormalizer(DEFAULT_ABBREVIATIONS)
    assert normalizer.expand_abbreviations('review PR and 2 prs') == 'review pull request and 2 pull requests'
    assert normalizer.expand_abbreviations('spread the print') == 'spread the print'
    assert normalizer.expand_abbreviations('self-explore new api') == 'self explore new api'


def test_abbreviations_are_not_expanded_in_titles():
    parsed = TaskNormalizer(DEFAULT_ABBREVIATIONS).normalize_task(make_task('1', 'PR review', 'merge pr'))
    assert parsed.title == 'PR review'
    assert parsed.description == 'merge pull request'


def test_expansion_can_be_disabled():
    parsed = TaskNormalizer(DEFAULT_ABBREVIATIONS).normalize_task(make_task('1', 'x', 'merge pr'), expand=False)
    assert parsed.description == 'merge pr'


def test_normalize_tasks_preserves_order():
    tasks = [make_task(str(i), f'Task {i}', f'do {i}') for i in range(5)]
    parsed = normalize_tasks(tasks)
    assert [p.title for p in parsed] == [f'Task {i}' for i in range(5)]
