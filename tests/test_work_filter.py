from tasklog_summarizer.processors.work_filter import WorkTaskFilter, filter_work_tasks
from tasklog_summarizer.schema import ParsedTask


def sample_tasks():
    return [
        ParsedTask('Sprint 10', 'fix login bug'),
        ParsedTask('Break', 'coffee'),
        ParsedTask('English class', 'grammar lesson'),
        ParsedTask('Lunch with client', 'discuss roadmap'),
        ParsedTask('Onboarding', 'read handbook'),
    ]


def test_non_work_entries_are_dropped():
    kept = filter_work_tasks(sample_tasks())
    assert [task.title for task in kept] == ['Sprint 10', 'Lunch with client', 'Onboarding']


def test_work_keywords_win_over_non_work_keywords():
    assert WorkTaskFilter().is_work_task(ParsedTask('Lunch with client', 'discuss roadmap'))


def test_ambiguous_entries_are_kept():
    assert WorkTaskFilter().is_work_task(ParsedTask('Onboarding', 'read handbook'))


def test_blank_entries_are_dropped():
    assert not WorkTaskFilter().is_work_task(ParsedTask('  ', ''))


def test_result_is_an_order_preserving_subsequence():
    tasks = sample_tasks()
    kept = filter_work_tasks(tasks)
    positions = [tasks.index(task) for task in kept]
    assert positions == sorted(positions)


def test_custom_keyword_lists():
    work_filter = WorkTaskFilter(work_keywords=['deploy'], non_work_keywords=['standup'])
    assert not work_filter.is_work_task(ParsedTask('Standup', 'daily'))
    assert work_filter.is_work_task(ParsedTask('Standup', 'deploy notes'))
