"""
Normalization of tracked tasks into the (title, description) pairs the
summarization pipeline works on.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from tasklog_summarizer.schema import ParsedTask, TrackedTask


DEFAULT_FALLBACK_TITLE = 'General Tasks'


class TaskNormalizer:
    """
    Cleans raw task records into a canonical ParsedTask.

    Titles fall back to a fixed label, descriptions fall back to the resolved
    title, and known abbreviations in descriptions are expanded as whole tokens.
    """

    def __init__(
        self,
        abbreviations: Optional[Dict[str, str]] = None,
        fallback_title: str = DEFAULT_FALLBACK_TITLE
    ):
        self.logger = logging.getLogger(__name__)
        self.fallback_title = fallback_title.strip() or DEFAULT_FALLBACK_TITLE
        self.abbreviations = {k.lower(): v for k, v in (abbreviations or {}).items()}
        self._abbreviation_pattern = self._compile_abbreviations(self.abbreviations)

    @staticmethod
    def _compile_abbreviations(abbreviations: Dict[str, str]) -> Optional[re.Pattern]:
        if not abbreviations:
            return None

        # Longest first so "prs" wins over "pr"
        alternatives = sorted(abbreviations, key=len, reverse=True)
        joined = '|'.join(re.escape(a) for a in alternatives)
        return re.compile(rf'(?<![\w-])(?:{joined})(?![\w-])', re.IGNORECASE)

    def expand_abbreviations(self, text: str) -> str:
        """Replace known abbreviations, matched case-insensitively as whole tokens."""
        if not self._abbreviation_pattern or not text:
            return text
        return self._abbreviation_pattern.sub(
            lambda m: self.abbreviations[m.group(0).lower()], text
        )

    def normalize_task(self, task: TrackedTask, expand: bool = True) -> ParsedTask:
        title = (task.title or '').strip() or self.fallback_title
        description = (task.description or '').strip() or title

        if expand:
            description = self.expand_abbreviations(description)

        return ParsedTask(title=title, description=description)

    def normalize(self, tasks: Iterable[TrackedTask], expand: bool = True) -> List[ParsedTask]:
        parsed = [self.normalize_task(task, expand) for task in tasks]
        self.logger.debug(f"Normalized {len(parsed)} tasks")
        return parsed


def normalize_tasks(
    tasks: Iterable[TrackedTask],
    abbreviations: Optional[Dict[str, str]] = None
) -> List[ParsedTask]:
    """Normalize tasks with an optional abbreviation table."""
    return TaskNormalizer(abbreviations).normalize(tasks, expand=bool(abbreviations))
