"""
Task Log Summarizer

Turns a day, week or month of time-tracked tasks into a few grouped,
deduplicated summaries suitable for standups and time logs.
"""

__version__ = "1.0.0"
__description__ = "Grouped work summaries from time-tracked tasks"
