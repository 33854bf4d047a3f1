"""
Keyword heuristic that drops non-work entries (breaks, personal time).

Keywords match as substrings, so "class" in "classifier" or "off" in
"offline" trips the non-work list when no work keyword is present.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from tasklog_summarizer.config.settings import DEFAULT_NON_WORK_KEYWORDS, DEFAULT_WORK_KEYWORDS
from tasklog_summarizer.schema import ParsedTask


class WorkTaskFilter:
    """Keeps work entries, evaluated on the lowercased "title description" text."""

    def __init__(
        self,
        work_keywords: Optional[Sequence[str]] = None,
        non_work_keywords: Optional[Sequence[str]] = None
    ):
        self.logger = logging.getLogger(__name__)
        self.work_keywords = [k.lower() for k in (work_keywords if work_keywords is not None else DEFAULT_WORK_KEYWORDS)]
        self.non_work_keywords = [
            k.lower() for k in (non_work_keywords if non_work_keywords is not None else DEFAULT_NON_WORK_KEYWORDS)
        ]

    def is_work_task(self, task: ParsedTask) -> bool:
        if not task.title.strip() and not task.description.strip():
            return False

        combined_text = f"{task.title} {task.description}".lower()

        # Work indicators win over non-work keywords
        if any(keyword in combined_text for keyword in self.work_keywords):
            return True

        if any(keyword in combined_text for keyword in self.non_work_keywords):
            return False

        # Ambiguous entries are assumed to be work
        return True

    def filter(self, tasks: Iterable[ParsedTask]) -> List[ParsedTask]:
        tasks = list(tasks)
        kept = [task for task in tasks if self.is_work_task(task)]
        dropped = len(tasks) - len(kept)
        if dropped:
            self.logger.info(f"Filtered out {dropped} non-work task(s)")
        return kept


def filter_work_tasks(tasks: Iterable[ParsedTask]) -> List[ParsedTask]:
    """Filter with the default keyword lists."""
    return WorkTaskFilter().filter(tasks)
