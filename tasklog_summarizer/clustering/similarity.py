"""
Similarity primitives shared by title clustering and deduplication.

greedy_cluster is the single clustering routine used everywhere: items are
visited in order, each unclaimed item seeds a cluster, and the seed absorbs
every later unclaimed item whose similarity to the seed is strictly above the
threshold. Candidates are only compared to the seed, never to each other.
"""

import re
from typing import Callable, List, Sequence, Tuple

import numpy as np


DIGIT_RUN = re.compile(r'\d+')

SimilarityFn = Callable[[np.ndarray, np.ndarray], float]


def cosine_similarity(vector_a: np.ndarray, vector_b: np.ndarray) -> float:
    """Cosine of the angle between two vectors; 0.0 if either is all zeros."""
    a = np.asarray(vector_a, dtype=np.float64)
    b = np.asarray(vector_b, dtype=np.float64)
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def greedy_cluster(
    vectors: Sequence[np.ndarray],
    threshold: float,
    similarity: SimilarityFn = cosine_similarity
) -> List[List[int]]:
    """
    Cluster vectors by seed-to-candidate similarity.

    Returns:
        Index lists in seed order; the first index of each list is the seed
    """
    used = [False] * len(vectors)
    clusters: List[List[int]] = []

    for i in range(len(vectors)):
        if used[i]:
            continue
        used[i] = True
        cluster = [i]

        for j in range(i + 1, len(vectors)):
            if used[j]:
                continue
            if similarity(vectors[i], vectors[j]) > threshold:
                cluster.append(j)
                used[j] = True

        clusters.append(cluster)

    return clusters


def cluster_texts(
    texts: Sequence[str],
    vectors: Sequence[np.ndarray],
    threshold: float,
    similarity: SimilarityFn = cosine_similarity
) -> List[List[str]]:
    """greedy_cluster over texts, returning the texts themselves."""
    if len(texts) != len(vectors):
        raise ValueError("Expected one vector per text")
    return [[texts[i] for i in cluster] for cluster in greedy_cluster(vectors, threshold, similarity)]


def is_numeric_variant(a: str, b: str) -> bool:
    """
    True when removing every digit run leaves identical text but the runs differ.

    >>> is_numeric_variant('Sprint 10', 'Sprint 11')
    True
    >>> is_numeric_variant('Sprint 10', 'Release 10')
    False
    """
    if DIGIT_RUN.sub('', a) != DIGIT_RUN.sub('', b):
        return False
    return DIGIT_RUN.findall(a) != DIGIT_RUN.findall(b)


def split_numeric_variants(titles: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Separate titles that have a numeric variant elsewhere in the list.

    Returns:
        (variant titles, remaining titles), both in input order
    """
    variants = set()
    for i in range(len(titles)):
        for j in range(i + 1, len(titles)):
            if is_numeric_variant(titles[i], titles[j]):
                variants.add(titles[i])
                variants.add(titles[j])

    return (
        [t for t in titles if t in variants],
        [t for t in titles if t not in variants],
    )
