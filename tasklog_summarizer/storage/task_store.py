"""
JSON-file task store.

The summarizer only reads a snapshot of tasks. Writes and change
notification exist for the CLI and for callers that keep tasks on disk.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from tasklog_summarizer.schema import TrackedTask


TaskFilter = Callable[[TrackedTask], bool]
TaskWatcher = Callable[[List[TrackedTask]], None]


def _align(bound: datetime, moment: datetime) -> datetime:
    # Naive bounds are read in the task's own timezone
    if bound.tzinfo is None and moment.tzinfo is not None:
        return bound.replace(tzinfo=moment.tzinfo)
    if bound.tzinfo is not None and moment.tzinfo is None:
        return bound.replace(tzinfo=None)
    return bound


def created_between(since: Optional[datetime] = None, until: Optional[datetime] = None) -> TaskFilter:
    """Filter for tasks whose start (or creation) time falls in [since, until)."""
    def matches(task: TrackedTask) -> bool:
        moment = task.start or task.created_at
        if moment is None:
            return since is None and until is None
        if since is not None and moment < _align(since, moment):
            return False
        if until is not None and moment >= _align(until, moment):
            return False
        return True

    return matches


class JsonTaskStore:
    """Tasks kept as a JSON list in a single file."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)
        self._watchers: List[TaskWatcher] = []

    def get_tasks(self, task_filter: Optional[TaskFilter] = None) -> List[TrackedTask]:
        """
        Read all tasks, optionally filtered.

        Raises:
            ValueError: If the file holds a malformed task record
        """
        if not self.path.exists():
            return []

        with open(self.path, 'r', encoding='utf-8') as f:
            records = json.load(f)

        if isinstance(records, dict):
            records = records.get('tasks', [])

        tasks = [TrackedTask.from_dict(record) for record in records]
        if task_filter is not None:
            tasks = [task for task in tasks if task_filter(task)]

        self.logger.debug(f"Loaded {len(tasks)} task(s) from {self.path}")
        return tasks

    def save_tasks(self, tasks: List[TrackedTask]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump([task.to_dict() for task in tasks], f, indent=2, ensure_ascii=False)

        self.logger.debug(f"Saved {len(tasks)} task(s) to {self.path}")
        for watcher in list(self._watchers):
            watcher(list(tasks))

    def add_task(self, task: TrackedTask):
        tasks = self.get_tasks()
        tasks.append(task)
        self.save_tasks(tasks)

    def update_task(self, updated_task: TrackedTask):
        tasks = [updated_task if task.id == updated_task.id else task for task in self.get_tasks()]
        self.save_tasks(tasks)

    def delete_task(self, task_id: str):
        self.save_tasks([task for task in self.get_tasks() if task.id != task_id])

    def watch(self, callback: TaskWatcher) -> Callable[[], None]:
        """Call ``callback`` with the full task list after every save."""
        self._watchers.append(callback)

        def unsubscribe():
            if callback in self._watchers:
                self._watchers.remove(callback)

        return unsubscribe
