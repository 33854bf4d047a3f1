"""
Removal of duplicate work items across summary groups.

Exact duplicates are removed per group first. Semantic duplicates are then
found across the flattened items of all groups at once, so near-identical
work logged under several titles is reported under the first of them only.
"""

import logging
from typing import Dict, List, Sequence

from tasklog_summarizer.clustering.similarity import greedy_cluster
from tasklog_summarizer.progress.batching import yield_control

TaskGroups = Dict[str, List[str]]


def unique_in_order(items: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(items))


def dedupe_exact(groups: TaskGroups) -> TaskGroups:
    """Per-group, order-preserving exact-string dedupe; empty groups are dropped."""
    result = {}
    for label, items in groups.items():
        unique_items = unique_in_order(items)
        if unique_items:
            result[label] = unique_items
    return result


class Deduplicator:
    """
    Semantic dedupe over an embedding service.

    Args:
        embedder: Service with ``async embed(texts)``
    """

    def __init__(self, embedder):
        self.embedder = embedder
        self.logger = logging.getLogger(__name__)

    async def remove_similar(self, items: Sequence[str], threshold: float) -> List[str]:
        """Keep the first item of each similarity cluster, in input order."""
        unique_items = unique_in_order(items)
        if len(unique_items) <= 1:
            return unique_items

        vectors = await self.embedder.embed(unique_items)
        await yield_control()

        clusters = greedy_cluster(vectors, threshold)
        survivors = sorted(cluster[0] for cluster in clusters)
        return [unique_items[i] for i in survivors]

    async def dedupe(self, groups: TaskGroups, threshold: float = 0.7) -> TaskGroups:
        exact = dedupe_exact(groups)
        if not exact:
            return {}

        await yield_control()

        flattened = [item for items in exact.values() for item in items]
        surviving = set(await self.remove_similar(flattened, threshold))

        result = {}
        for label, items in exact.items():
            kept = [item for item in items if item in surviving]
            if kept:
                result[label] = kept

        removed = len(flattened) - sum(len(items) for items in result.values())
        self.logger.info(f"Removed {removed} similar work item(s) at threshold {threshold}")
        return result
