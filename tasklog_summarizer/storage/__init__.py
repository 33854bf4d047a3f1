"""Task persistence."""

from .task_store import JsonTaskStore, created_between

__all__ = ['JsonTaskStore', 'created_between']
