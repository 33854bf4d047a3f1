"""
Final assembly and ordering of summary groups.

Groups named after an original task title come first, alphabetically.
Category groups follow in a fixed precedence order.
"""

from typing import Dict, List, Sequence, Tuple

from tasklog_summarizer.schema import SummaryGroup


DEFAULT_TITLE = 'General Tasks'

TITLE_PRECEDENCE = [
    'Background Task',
    'Project Tasks',
    'Meetings',
    'General Tasks',
    'General Activities',
]


def summary_sort_key(title: str, precedence: Sequence[str] = TITLE_PRECEDENCE) -> Tuple:
    if title in precedence:
        return (1, precedence.index(title), '', title)
    return (0, 0, title.casefold(), title)


def sort_summary_groups(
    groups: Sequence[SummaryGroup],
    precedence: Sequence[str] = TITLE_PRECEDENCE
) -> List[SummaryGroup]:
    return sorted(groups, key=lambda group: summary_sort_key(group.title, precedence))


def format_summary_groups(
    groups: Dict[str, List[str]],
    precedence: Sequence[str] = TITLE_PRECEDENCE
) -> List[SummaryGroup]:
    """Turn label -> work items into ordered SummaryGroups."""
    summary = [
        SummaryGroup(title=label or DEFAULT_TITLE, tasks=list(items))
        for label, items in groups.items()
    ]
    return sort_summary_groups(summary, precedence)
