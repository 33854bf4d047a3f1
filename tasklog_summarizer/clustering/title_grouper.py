"""
Grouping of tasks by title.

Two strategies build the title clusters:

- ``classifier``: a title classifier assigns each distinct title one of
  TITLE_CATEGORIES. ``valid_title`` titles keep their own group; every other
  category collapses into one group named after the category.
- ``similarity``: titles that differ only in a number ("Sprint 10" and
  "Sprint 11") stay as singleton groups; the rest are embedded and clustered
  with greedy_cluster, using the seed title as the group label.

An exact-title grouping is also provided for the no-model fallback path.
"""

import logging
from typing import Dict, List, Sequence

from tasklog_summarizer.clustering.similarity import cluster_texts, split_numeric_variants
from tasklog_summarizer.config.settings import GROUPING_STRATEGIES
from tasklog_summarizer.progress.batching import process_in_chunks, yield_control
from tasklog_summarizer.schema import CATEGORY_LABELS, TITLE_CATEGORIES, ParsedTask

TitleClusters = Dict[str, List[str]]


def distinct_titles(tasks: Sequence[ParsedTask]) -> List[str]:
    return list(dict.fromkeys(task.title for task in tasks))


def cluster_by_exact_title(titles: Sequence[str]) -> TitleClusters:
    """One group per distinct title."""
    return {title: [title] for title in dict.fromkeys(titles)}


class TitleGrouper:
    """
    Builds label -> member-title clusters and collects their work items.

    Args:
        strategy: 'classifier' or 'similarity'
        embedder: Service with ``async embed(texts)``; needed for 'similarity'
        classifier: Service with ``async classify(titles)``; needed for 'classifier'
        threshold: Cosine threshold for the 'similarity' strategy
    """

    def __init__(self, strategy: str = 'similarity', embedder=None, classifier=None, threshold: float = 0.9):
        if strategy not in GROUPING_STRATEGIES:
            raise ValueError(f"Unknown grouping strategy: {strategy}")

        self.strategy = strategy
        self.embedder = embedder
        self.classifier = classifier
        self.threshold = threshold
        self.logger = logging.getLogger(__name__)

    async def cluster_titles(self, titles: Sequence[str]) -> TitleClusters:
        titles = list(dict.fromkeys(titles))
        if not titles:
            return {}

        await yield_control()

        if self.strategy == 'classifier':
            clusters = await self._cluster_by_classifier(titles)
        else:
            clusters = await self._cluster_by_similarity(titles)

        self.logger.info(f"Grouped {len(titles)} distinct title(s) into {len(clusters)} cluster(s)")
        return clusters

    async def _cluster_by_classifier(self, titles: List[str]) -> TitleClusters:
        if self.classifier is None:
            raise ValueError("The classifier strategy needs a title classifier")

        predictions = await self.classifier.classify(titles)
        if len(predictions) != len(titles):
            raise ValueError("Title classifier returned the wrong number of predictions")

        clusters: TitleClusters = {}
        for title, category_index in zip(titles, predictions):
            category = TITLE_CATEGORIES[category_index]
            if category == 'valid_title':
                label = title
            else:
                label = CATEGORY_LABELS[category]
            clusters.setdefault(label, []).append(title)

        return clusters

    async def _cluster_by_similarity(self, titles: List[str]) -> TitleClusters:
        if self.embedder is None:
            raise ValueError("The similarity strategy needs an embedding service")

        variants, others = split_numeric_variants(titles)
        clusters: TitleClusters = {title: [title] for title in variants}

        if others:
            vectors = await self.embedder.embed(others)
            await yield_control()
            for cluster in cluster_texts(others, vectors, self.threshold):
                clusters[cluster[0]] = cluster

        return clusters

    async def collect_work_items(
        self,
        tasks: Sequence[ParsedTask],
        clusters: TitleClusters,
        parser
    ) -> Dict[str, List[str]]:
        """
        Concatenate the parsed descriptions of each cluster's tasks, in task order.

        Clusters whose tasks yield no work items are left out.
        """
        label_by_title = {}
        for label, member_titles in clusters.items():
            for title in member_titles:
                label_by_title[title] = label

        parsed_items = await process_in_chunks(
            list(tasks), lambda task, _: parser.parse(task.description)
        )

        groups: Dict[str, List[str]] = {label: [] for label in clusters}
        for task, items in zip(tasks, parsed_items):
            label = label_by_title.get(task.title)
            if label is None:
                self.logger.warning(f"Task title '{task.title}' is not in any cluster")
                continue
            groups[label].extend(items)

        return {label: items for label, items in groups.items() if items}

    async def group_by_title(self, tasks: Sequence[ParsedTask], parser) -> Dict[str, List[str]]:
        clusters = await self.cluster_titles(distinct_titles(tasks))
        return await self.collect_work_items(tasks, clusters, parser)


async def group_by_exact_title(tasks: Sequence[ParsedTask], parser) -> Dict[str, List[str]]:
    """Fallback grouping that needs no model."""
    grouper = TitleGrouper()
    clusters = cluster_by_exact_title(distinct_titles(tasks))
    return await grouper.collect_work_items(tasks, clusters, parser)
