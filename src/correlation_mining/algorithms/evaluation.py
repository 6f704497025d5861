"""
Agreement measures for comparing a clustering against reference labels.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .cluster_map import ClusterMap


def adjusted_rand_index(labels_a: np.ndarray, labels_b: np.ndarray) -> float:
    """
    Compute Adjusted Rand Index between two clusterings.

    ARI measures agreement between two clusterings, adjusted for chance.
    Returns 1.0 for identical clusterings, ~0.0 for random agreement.

    Args:
        labels_a: First clustering labels
        labels_b: Second clustering labels

    Returns:
        ARI score in [-1, 1], typically in [0, 1]

    Raises:
        ValueError: If the label arrays differ in length
    """
    labels_a = np.asarray(labels_a)
    labels_b = np.asarray(labels_b)
    if labels_a.shape != labels_b.shape:
        raise ValueError(f"Label arrays differ in shape: {labels_a.shape} vs {labels_b.shape}")
    n = len(labels_a)
    if n == 0:
        return 1.0
    _, a = np.unique(labels_a, return_inverse=True)
    _, b = np.unique(labels_b, return_inverse=True)

    contingency = np.zeros((a.max() + 1, b.max() + 1), dtype=np.int64)
    np.add.at(contingency, (a, b), 1)

    def pairs(counts):
        return (counts * (counts - 1) / 2.0).sum()

    sum_comb = pairs(contingency)
    sum_comb_a = pairs(contingency.sum(axis=1))
    sum_comb_b = pairs(contingency.sum(axis=0))
    comb_n = n * (n - 1) / 2.0

    if comb_n == 0:
        return 1.0

    expected_index = (sum_comb_a * sum_comb_b) / comb_n
    max_index = 0.5 * (sum_comb_a + sum_comb_b)
    denom = max_index - expected_index
    if denom == 0:
        return 1.0
    return float((sum_comb - expected_index) / denom)


def cluster_map_labels(cluster_map: ClusterMap, ids: Iterable[int]) -> np.ndarray:
    """Label vector for *ids* (noise = -1), usable with ``adjusted_rand_index``."""
    return cluster_map.to_labels(ids)
