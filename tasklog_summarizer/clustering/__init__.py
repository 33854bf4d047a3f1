"""Title clustering and work item deduplication."""

from .deduplicator import Deduplicator, dedupe_exact
from .similarity import (
    cluster_texts,
    cosine_similarity,
    greedy_cluster,
    is_numeric_variant,
    split_numeric_variants,
)
from .title_grouper import TitleGrouper, cluster_by_exact_title, group_by_exact_title

__all__ = [
    'Deduplicator',
    'TitleGrouper',
    'cluster_by_exact_title',
    'cluster_texts',
    'cosine_similarity',
    'dedupe_exact',
    'greedy_cluster',
    'group_by_exact_title',
    'is_numeric_variant',
    'split_numeric_variants',
]
