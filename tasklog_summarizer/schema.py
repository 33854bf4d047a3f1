"""
Data model shared by the summarization pipeline.

TrackedTask is the stored record, ParsedTask the normalized pair the pipeline
works on, and SummaryGroup the unit handed back to callers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# Title classifier output indices, in model output order
TITLE_CATEGORIES = [
    'valid_title',
    'background_task',
    'meetings',
    'general_tasks',
    'general_activities',
    'project_tasks',
]

CATEGORY_LABELS = {
    'valid_title': 'Valid Title',
    'background_task': 'Background Task',
    'meetings': 'Meetings',
    'general_tasks': 'General Tasks',
    'general_activities': 'General Activities',
    'project_tasks': 'Project Tasks',
}


class TaskStatus(str, Enum):
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    DONE = 'done'


def _parse_timestamp(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    try:
        # fromisoformat does not accept a trailing 'Z' before 3.11
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp for '{field_name}': {value!r}") from e


@dataclass
class TrackedTask:
    """A time-tracked task as kept by the task store."""
    id: str
    title: str
    description: str = ''
    status: TaskStatus = TaskStatus.PENDING
    created_at: Optional[datetime] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self):
        if self.start and self.end:
            try:
                reversed_span = self.start > self.end
            except TypeError as e:
                raise ValueError(f"Task {self.id}: start and end mix naive and timezone-aware times") from e
            if reversed_span:
                raise ValueError(f"Task {self.id}: start must not be after end")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrackedTask':
        """
        Build a task from a JSON record.

        Accepts both snake_case and the camelCase ``createdAt`` key.

        Raises:
            ValueError: If the record is missing an id or title, or has an unknown status
        """
        for required in ('id', 'title'):
            if required not in data:
                raise ValueError(f"Task record has no {required}: {data!r}")

        raw_status = data.get('status') or TaskStatus.PENDING.value
        try:
            status = TaskStatus(raw_status)
        except ValueError as e:
            raise ValueError(f"Task {data['id']}: unknown status {raw_status!r}") from e

        created_at = data.get('created_at', data.get('createdAt'))
        return cls(
            id=str(data['id']),
            title=data.get('title') or '',
            description=data.get('description') or '',
            status=status,
            created_at=_parse_timestamp(created_at, 'createdAt'),
            start=_parse_timestamp(data.get('start'), 'start'),
            end=_parse_timestamp(data.get('end'), 'end'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'status': self.status.value,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'start': self.start.isoformat() if self.start else None,
            'end': self.end.isoformat() if self.end else None,
        }


@dataclass(frozen=True)
class ParsedTask:
    title: str
    description: str


@dataclass
class SummaryGroup:
    """One titled block of work items in a summary."""
    title: str
    tasks: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'tasks': list(self.tasks)}
