"""Summary formatting."""

from .summary_formatter import TITLE_PRECEDENCE, format_summary_groups, sort_summary_groups

__all__ = ['TITLE_PRECEDENCE', 'format_summary_groups', 'sort_summary_groups']
