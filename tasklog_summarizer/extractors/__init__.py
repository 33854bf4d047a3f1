"""Work item extraction."""

from .description_parser import DescriptionParser, merge_by_validity, parse_description

__all__ = ['DescriptionParser', 'merge_by_validity', 'parse_description']
