"""Summarization agents."""

from .summary_agent import TaskSummaryAgent, summarize_tasks

__all__ = ['TaskSummaryAgent', 'summarize_tasks']
