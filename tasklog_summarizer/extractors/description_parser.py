"""
Work item extraction from free-text task descriptions.

A description is a chunk of text that may hold several work items separated
by new lines, list markers or commas. Comma splitting over-splits sentences
such as "review login, signup and reset flows", so a sentence-validity
service is asked which fragments stand on their own and the rest are merged
back into their neighbours. The merge runs on each line and then once more
over all items of the description.
"""

import logging
import re
from typing import List, Optional, Sequence


STATUS_WORDS = r'(?:done|in progress|completed|pending|todo|finished)'

# "Done -> task", "Done - task"
STATUS_PREFIX = re.compile(rf'^{STATUS_WORDS}\s*(?:->|-)\s*', re.IGNORECASE)
# "task - done", "task -> done", "task (done)"
STATUS_SUFFIX = re.compile(rf'\s*(?:->|-|\()\s*{STATUS_WORDS}\s*\)?$', re.IGNORECASE)
LEADING_NOISE = re.compile(r'^[^a-zA-Z0-9]*')


def clean_line(line: str) -> str:
    """Strip bullets, numbering punctuation and status markers from one line."""
    cleaned = LEADING_NOISE.sub('', line.strip())
    cleaned = STATUS_SUFFIX.sub('', cleaned)
    cleaned = STATUS_PREFIX.sub('', cleaned)
    return cleaned.strip()


def split_segments(line: str) -> List[str]:
    return [segment.strip() for segment in line.split(',') if segment.strip()]


def merge_by_validity(segments: Sequence[str], flags: Sequence[int]) -> List[str]:
    """
    Merge comma-split fragments using per-segment validity flags.

    Leading invalid segments are promoted to valid; trailing invalid segments
    are joined onto the last valid one. If no segment is valid, all of them
    collapse into one item.

    >>> merge_by_validity(['a', 'b', 'c', 'd'], [0, 0, 1, 0])
    ['a', 'b', 'c, d']
    """
    if len(segments) != len(flags):
        raise ValueError("Expected one validity flag per segment")

    segments = list(segments)
    if len(segments) <= 1:
        return segments

    if not any(flags):
        return [', '.join(segments)]

    last_valid = max(index for index, flag in enumerate(flags) if flag)
    if last_valid == len(segments) - 1:
        return segments

    return segments[:last_valid] + [', '.join(segments[last_valid:])]


class DescriptionParser:
    """
    Splits descriptions into work items.

    Args:
        validator: Optional service with ``async validate(segments) -> List[int]``.
            Without one, comma-split segments are kept as they are.
    """

    def __init__(self, validator=None):
        self.validator = validator
        self.logger = logging.getLogger(__name__)

    async def merge_segments(self, segments: Sequence[str]) -> List[str]:
        segments = list(segments)
        if len(segments) <= 1 or self.validator is None:
            return segments

        flags = await self.validator.validate(segments)
        return merge_by_validity(segments, flags)

    async def parse(self, text: Optional[str]) -> List[str]:
        """Extract the work items of one description, in reading order."""
        if not text or not text.strip():
            return []

        items: List[str] = []
        for line in text.split('\n'):
            if not line.strip():
                continue

            cleaned = clean_line(line)
            if not cleaned or cleaned.lower().startswith('http'):
                continue

            items.extend(await self.merge_segments(split_segments(cleaned)))

        if not items:
            # Nothing structured survived; keep the description as one item
            items = [text.strip()]

        # Fragments left on their own line join the item before them
        return await self.merge_segments(items)

    async def parse_many(self, texts: Sequence[str]) -> List[str]:
        """Concatenated work items of several descriptions."""
        items: List[str] = []
        for text in texts:
            items.extend(await self.parse(text))
        return items


async def parse_description(text: Optional[str], validator=None) -> List[str]:
    return await DescriptionParser(validator).parse(text)
