import json
from datetime import datetime, timezone

import pytest

from tasklog_summarizer.schema import TaskStatus, TrackedTask
from tasklog_summarizer.storage.task_store import JsonTaskStore, created_between


def sample_records():
    return [
        {
            'id': '1', 'title': 'Sprint 10', 'description': 'fix login bug', 'status': 'done',
            'createdAt': '2025-01-06T08:55:00Z', 'start': '2025-01-06T09:00:00Z', 'end': '2025-01-06T10:00:00Z',
        },
        {
            'id': '2', 'title': 'Sprint 11', 'description': 'deploy build', 'status': 'in-progress',
            'createdAt': '2025-01-13T08:00:00Z', 'start': '2025-01-13T09:00:00Z', 'end': None,
        },
        {'id': '3', 'title': 'Inbox', 'description': '', 'status': 'pending'},
    ]


def write_store(tmp_path, payload):
    path = tmp_path / 'tasks.json'
    path.write_text(json.dumps(payload))
    return JsonTaskStore(str(path))


def test_get_tasks_reads_list_and_wrapped_formats(tmp_path):
    assert [t.id for t in write_store(tmp_path, sample_records()).get_tasks()] == ['1', '2', '3']
    assert [t.id for t in write_store(tmp_path, {'tasks': sample_records()}).get_tasks()] == ['1', '2', '3']


def test_records_are_parsed(tmp_path):
    task = write_store(tmp_path, sample_records()).get_tasks()[1]
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.start == datetime(2025, 1, 13, 9, tzinfo=timezone.utc)
    assert task.end is None


def test_missing_file_is_an_empty_store(tmp_path):
    assert JsonTaskStore(str(tmp_path / 'none.json')).get_tasks() == []


def test_malformed_records_raise(tmp_path):
    with pytest.raises(ValueError):
        write_store(tmp_path, [{'title': 'no id'}]).get_tasks()
    with pytest.raises(ValueError):
        write_store(tmp_path, [{'id': '1', 'title': 'x', 'status': 'archived'}]).get_tasks()
    with pytest.raises(ValueError):
        write_store(tmp_path, [{'id': '1', 'title': 'x', 'start': '2025-01-02', 'end': '2025-01-01'}]).get_tasks()
    with pytest.raises(ValueError):
        write_store(tmp_path, [{'id': '1', 'title': 'x', 'start': '2025-01-01T09:00:00Z', 'end': '2025-01-01T10:00:00'}]).get_tasks()


def test_created_between_filters_a_week(tmp_path):
    store = write_store(tmp_path, sample_records())
    week = created_between(datetime(2025, 1, 6), datetime(2025, 1, 13))
    assert [t.id for t in store.get_tasks(week)] == ['1']


def test_write_operations_notify_watchers(tmp_path):
    store = write_store(tmp_path, sample_records())
    seen = []
    unsubscribe = store.watch(lambda tasks: seen.append([t.id for t in tasks]))

    store.add_task(TrackedTask(id='4', title='Planning'))
    store.update_task(TrackedTask(id='1', title='Sprint 10', status=TaskStatus.PENDING))
    store.delete_task('2')
    unsubscribe()
    store.delete_task('3')

    assert seen == [['1', '2', '3', '4'], ['1', '2', '3', '4'], ['1', '3', '4']]
    assert [t.id for t in store.get_tasks()] == ['1', '4']
    assert store.get_tasks()[0].status is TaskStatus.PENDING


def test_span_mixing_naive_and_aware_times_is_rejected():
    with pytest.raises(ValueError):
        TrackedTask(
            id='1', title='x',
            start=datetime(2025, 1, 1, 9, tzinfo=timezone.utc),
            end=datetime(2025, 1, 1, 10),
        )
