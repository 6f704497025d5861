"""
Distance and kernel similarity functions.

All functions share the ``DistanceFunction`` interface so algorithms can be
parameterized with any of them: plain Euclidean distance (with spatial
box-to-box variants), a weighted quadratic-form distance, and the distance
induced by a polynomial kernel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .parameterization import HyperBoundingBox


def _as_vectors(a, b):
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(
            f"Different dimensionality of feature vectors: {a.shape} vs {b.shape}"
        )
    return a, b


def _as_matrices(X, Y):
    X = np.atleast_2d(np.asarray(X, dtype=np.float64))
    Y = X if Y is None else np.atleast_2d(np.asarray(Y, dtype=np.float64))
    if X.shape[1] != Y.shape[1]:
        raise ValueError(
            f"Different dimensionality of feature vectors: {X.shape[1]} vs {Y.shape[1]}"
        )
    return X, Y


class DistanceFunction(ABC):
    """Distance between two vectors of equal dimensionality."""

    @abstractmethod
    def distance(self, a, b) -> float:
        """Distance between vectors *a* and *b*."""

    def pairwise(self, X, Y: Optional[np.ndarray] = None) -> np.ndarray:
        """(n_x, n_y) matrix of distances; Y defaults to X."""
        X, Y = _as_matrices(X, Y)
        out = np.empty((X.shape[0], Y.shape[0]), dtype=np.float64)
        for i, x in enumerate(X):
            for j, y in enumerate(Y):
                out[i, j] = self.distance(x, y)
        return out


class EuclideanDistance(DistanceFunction):
    """Euclidean (L2) distance, including distances between bounding boxes."""

    def distance(self, a, b) -> float:
        a, b = _as_vectors(a, b)
        return float(np.sqrt(np.sum((a - b) ** 2)))

    def pairwise(self, X, Y: Optional[np.ndarray] = None) -> np.ndarray:
        X, Y = _as_matrices(X, Y)
        # ||x - y||^2 = ||x||^2 + ||y||^2 - 2 x.y
        X_sq = np.sum(X ** 2, axis=1, keepdims=True)
        Y_sq = np.sum(Y ** 2, axis=1, keepdims=True).T
        sq = X_sq + Y_sq - 2.0 * (X @ Y.T)
        return np.sqrt(np.clip(sq, 0.0, None))

    def min_dist(self, box1: HyperBoundingBox, box2: HyperBoundingBox) -> float:
        """Smallest distance between any two points of the boxes (0 if they overlap)."""
        if box1.dimensionality != box2.dimensionality:
            raise ValueError(
                f"Different dimensionality of boxes: {box1.dimensionality} vs {box2.dimensionality}"
            )
        gap = np.maximum(0.0, np.maximum(box2.lower - box1.upper, box1.lower - box2.upper))
        return float(np.sqrt(np.sum(gap ** 2)))

    def center_distance(self, box1: HyperBoundingBox, box2: HyperBoundingBox) -> float:
        """Distance between the centroids of the boxes."""
        return self.distance(box1.centroid(), box2.centroid())


class WeightedDistance(DistanceFunction):
    """Quadratic-form distance sqrt((a-b)^T W (a-b)) for a square weight matrix W."""

    def __init__(self, weights):
        W = np.asarray(weights, dtype=np.float64)
        if W.ndim != 2 or W.shape[0] != W.shape[1]:
            raise ValueError(f"Weight matrix must be square; got shape {W.shape}")
        self.weights = W

    def distance(self, a, b) -> float:
        a, b = _as_vectors(a, b)
        if a.shape[0] != self.weights.shape[0]:
            raise ValueError(
                f"Vector dimensionality {a.shape[0]} does not match weight matrix {self.weights.shape}"
            )
        diff = a - b
        return float(np.sqrt(max(0.0, diff @ self.weights @ diff)))

    def pairwise(self, X, Y: Optional[np.ndarray] = None) -> np.ndarray:
        X, Y = _as_matrices(X, Y)
        if X.shape[1] != self.weights.shape[0]:
            raise ValueError(
                f"Vector dimensionality {X.shape[1]} does not match weight matrix {self.weights.shape}"
            )
        diff = X[:, None, :] - Y[None, :, :]
        sq = np.einsum("nmd,de,nme->nm", diff, self.weights, diff)
        return np.sqrt(np.clip(sq, 0.0, None))


class PolynomialKernel(DistanceFunction):
    """
    Polynomial kernel k(a, b) = (a.b)^degree and its induced distance.

    The distance is the feature-space distance
    sqrt(k(a, a) + k(b, b) - 2 k(a, b)).
    """

    DEFAULT_DEGREE = 2.0

    def __init__(self, degree: float = DEFAULT_DEGREE):
        self.degree = float(degree)

    def similarity(self, a, b) -> float:
        a, b = _as_vectors(a, b)
        return float(np.power(a @ b, self.degree))

    def distance(self, a, b) -> float:
        sq = self.similarity(a, a) + self.similarity(b, b) - 2.0 * self.similarity(a, b)
        return float(np.sqrt(max(0.0, sq)))

    def gram(self, X, Y: Optional[np.ndarray] = None) -> np.ndarray:
        """Kernel matrix between the rows of X and Y."""
        X, Y = _as_matrices(X, Y)
        return np.power(X @ Y.T, self.degree)

    def pairwise(self, X, Y: Optional[np.ndarray] = None) -> np.ndarray:
        X, Y = _as_matrices(X, Y)
        kxx = np.power(np.sum(X * X, axis=1), self.degree)[:, None]
        kyy = np.power(np.sum(Y * Y, axis=1), self.degree)[None, :]
        sq = kxx + kyy - 2.0 * self.gram(X, Y)
        return np.sqrt(np.clip(sq, 0.0, None))
