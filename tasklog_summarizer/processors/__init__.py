"""Pre-grouping task processors."""

from .normalizer import TaskNormalizer, normalize_tasks
from .work_filter import WorkTaskFilter, filter_work_tasks

__all__ = ['TaskNormalizer', 'normalize_tasks', 'WorkTaskFilter', 'filter_work_tasks']
