"""
kNN-based outlier detection.

Scores every point by the accumulated distance to its k nearest neighbours
(Angiulli & Pizzuti, "Fast Outlier Detection in High Dimensional Spaces",
PKDD 2002), or by the variance of local volumes across its kNN set (VOV).
Higher scores indicate stronger outliers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .distances import DistanceFunction, EuclideanDistance
from ..utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class OutlierResult:
    """Outlier scores with the score range metadata."""

    scores: np.ndarray
    max_score: float
    min_score_bound: float = 0.0
    max_score_bound: float = math.inf
    label: str = "knn-weight"


def knn_weight_outlier(
    X: np.ndarray, k: int, distance: Optional[DistanceFunction] = None
) -> OutlierResult:
    """
    kNN-weight outlier score of every point.

    The query point counts as its own first neighbour (distance 0), so the
    score sums the distances to the k-1 closest other points.

    Args:
        X: Input data of shape (n_samples, n_features)
        k: Number of nearest neighbours, 1 <= k <= n_samples
        distance: Distance function (default: Euclidean)

    Returns:
        OutlierResult with one score per row of X

    Raises:
        ValueError: If X is not 2-D or k is out of range
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"X must be a 2-D array; got shape {X.shape}")
    n = X.shape[0]
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")
    if k > n:
        raise ValueError(f"k ({k}) cannot exceed number of samples ({n})")

    distance = distance if distance is not None else EuclideanDistance()
    dist = distance.pairwise(X)
    np.fill_diagonal(dist, 0.0)

    nearest = np.sort(dist, axis=1, kind="stable")[:, :k]
    scores = nearest.sum(axis=1)
    max_score = float(scores.max()) if n else 0.0

    logger.debug("Scored %d points with k=%d, max weight %.6f", n, k, max_score)
    return OutlierResult(scores=scores, max_score=max_score)


def top_outliers(result: OutlierResult, n: int) -> np.ndarray:
    """Indices of the *n* highest-scoring points, strongest first (ties by index)."""
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    order = np.argsort(-result.scores, kind="stable")
    return order[:n]


def variance_of_volume_outlier(
    X: np.ndarray, k: int, distance: Optional[DistanceFunction] = None
) -> OutlierResult:
    """
    Variance-of-Volume (VOV) outlier score of every point.

    The kNN set of a point contains the point itself and its k-1 closest
    other points. Each point gets the volume of the d-ball whose radius is
    its mean distance to those k-1 neighbours; its score is the sample
    variance of the volumes across its kNN set (Hoang et al., "Variance of
    Volume for Outlier Detection", 2022).

    Args:
        X: Input data of shape (n_samples, n_features)
        k: Size of the kNN set including the point, 2 <= k <= n_samples
        distance: Distance function (default: Euclidean)

    Returns:
        OutlierResult with one score per row of X

    Raises:
        ValueError: If X is not 2-D or k is out of range
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"X must be a 2-D array; got shape {X.shape}")
    n, d = X.shape
    if k < 2:
        raise ValueError(f"k must be >= 2, got {k}")
    if k > n:
        raise ValueError(f"k ({k}) cannot exceed number of samples ({n})")

    distance = distance if distance is not None else EuclideanDistance()
    dist = distance.pairwise(X)
    # the query point always ranks first in its own kNN set
    np.fill_diagonal(dist, -np.inf)
    knn = np.argsort(dist, axis=1, kind="stable")[:, :k]
    radii = np.take_along_axis(dist, knn[:, 1:], axis=1).mean(axis=1)

    unit_ball = math.pi ** (d / 2.0) / math.gamma(d / 2.0 + 1.0)
    with np.errstate(over="ignore"):
        volumes = unit_ball * np.power(radii, d)
    if not np.all(np.isfinite(volumes)):
        logger.warning("Volumes exceed double precision in %d dimensions; VOV scores are unreliable", d)

    with np.errstate(invalid="ignore", over="ignore"):
        scores = volumes[knn].var(axis=1, ddof=1)
    scores = np.where(np.isnan(scores), np.inf, scores)
    max_score = float(scores.max())

    logger.debug("Scored %d points with VOV k=%d, max variance %.6g", n, k, max_score)
    return OutlierResult(scores=scores, max_score=max_score, label="variance-of-volume")
