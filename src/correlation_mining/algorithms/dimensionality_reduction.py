"""
Dimensionality reduction and correlation models.

Provides PCA/SVD projection, a global whitening PCA transform, and the
dependency derivator that fits a correlation model (strong/weak
eigenvectors) to a point set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple
import numpy as np

from ..utils.logging_config import get_logger

logger = get_logger(__name__)

Array2D = np.ndarray


@dataclass
class CorrelationModel:
    """Correlation model of a point set derived by PCA."""

    centroid: np.ndarray
    eigenvalues: np.ndarray
    eigenvectors: Array2D
    n_strong: int
    similarity_matrix: Array2D

    @property
    def strong_eigenvectors(self) -> Array2D:
        """Columns spanning the correlation subspace."""
        return self.eigenvectors[:, : self.n_strong]

    @property
    def weak_eigenvectors(self) -> Array2D:
        """Columns orthogonal to the correlation subspace."""
        return self.eigenvectors[:, self.n_strong :]


def _as_matrix(X: Array2D) -> Array2D:
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"Expected a 2-D array; got shape {X.shape}")
    if not np.all(np.isfinite(X)):
        raise ValueError("Input contains non-finite values")
    return X


def pca_svd_project(X: Array2D, k: int) -> Tuple[Array2D, Dict[str, Any]]:
    """
    Project data to k dimensions using PCA via SVD.

    Centers the data, computes SVD, and projects to the top k principal components.

    Args:
        X: Input data of shape (n_samples, n_features)
        k: Number of principal components to keep

    Returns:
        Tuple of:
        - Z: Projected data of shape (n_samples, k_used) where k_used = min(k, n_features)
        - meta: Dictionary with PCA metadata:
            - pca_dim_used: Actual number of components used
            - singular_values: All singular values
            - mean: Mean vector used for centering
            - components: (k_used, n_features) principal axes
    """
    X = _as_matrix(X)
    mu = X.mean(axis=0, keepdims=True)
    Xc = X - mu
    U, S, Vt = np.linalg.svd(Xc, full_matrices=False)
    kk = int(min(k, U.shape[1]))
    Z = U[:, :kk] * S[:kk]
    meta = {
        "pca_dim_used": kk,
        "singular_values": S.tolist(),
        "mean": mu.squeeze(0).tolist(),
        "components": Vt[:kk],
    }
    return Z, meta


def _sorted_eigenpairs(Xc: Array2D) -> Tuple[np.ndarray, Array2D]:
    """
    Eigenpairs of the population covariance of centered data, largest first.

    Taken from the SVD of the data: the right singular vectors are the
    eigenvectors and S**2 / n the eigenvalues. All d eigenvectors are
    returned even when there are fewer points than dimensions.
    """
    n, d = Xc.shape
    # full V is only needed when the thin SVD would drop directions
    _, S, Vt = np.linalg.svd(Xc, full_matrices=n < d)
    eigenvalues = np.zeros(d)
    eigenvalues[: S.shape[0]] = S ** 2 / n
    return eigenvalues, Vt.T


def derive_dependencies(points: Array2D, n_strong: int) -> CorrelationModel:
    """
    Fit a correlation model to *points*.

    The first ``n_strong`` eigenvectors of the covariance matrix (largest
    eigenvalues) span the correlation subspace. The similarity matrix
    ``V * E_hat * V^T`` weights only the weak directions, so the induced
    weighted distance measures how far a point lies off that subspace.

    Args:
        points: (n_points, d) point set
        n_strong: Number of strong eigenvectors, 1 <= n_strong <= d

    Returns:
        CorrelationModel for the point set

    Raises:
        ValueError: If there are fewer than 2 points or n_strong is out of range
    """
    X = _as_matrix(points)
    n, d = X.shape
    if n < 2:
        raise ValueError(f"Dependency derivation needs at least 2 points, got {n}")
    if not 1 <= n_strong <= d:
        raise ValueError(f"n_strong must be in [1, {d}], got {n_strong}")

    centroid = X.mean(axis=0)
    eigenvalues, eigenvectors = _sorted_eigenpairs(X - centroid)

    e_hat = np.zeros(d)
    e_hat[n_strong:] = 1.0
    similarity = (eigenvectors * e_hat) @ eigenvectors.T

    logger.debug(
        "Derived correlation model from %d points: eigenvalues=%s, n_strong=%d",
        n,
        np.round(eigenvalues, 6).tolist(),
        n_strong,
    )
    return CorrelationModel(
        centroid=centroid,
        eigenvalues=eigenvalues,
        eigenvectors=eigenvectors,
        n_strong=n_strong,
        similarity_matrix=similarity,
    )


def global_pca_transform(X: Array2D, eps: float = 1e-12) -> Tuple[Array2D, Dict[str, Any]]:
    """
    Rotate data onto its principal axes and scale each axis to unit variance.

    After the transform each column has mean 0 and variance 1 and the
    columns are uncorrelated. Directions with variance below *eps* carry no
    information and are dropped.

    Args:
        X: Input data of shape (n_samples, n_features)
        eps: Minimum eigenvalue for a direction to be kept

    Returns:
        Tuple of:
        - Y: Transformed data of shape (n_samples, n_kept)
        - meta: mean, eigenvalues (kept), components (n_kept, n_features)

    Raises:
        ValueError: If fewer than 2 samples are given
    """
    X = _as_matrix(X)
    if X.shape[0] < 2:
        raise ValueError(f"Global PCA transform needs at least 2 samples, got {X.shape[0]}")
    n, d = X.shape
    Z, pca_meta = pca_svd_project(X, d)
    singular_values = np.asarray(pca_meta["singular_values"])[: pca_meta["pca_dim_used"]]
    eigenvalues = singular_values ** 2 / n
    keep = eigenvalues > eps
    eigenvalues = eigenvalues[keep]
    components = pca_meta["components"][keep]
    Y = Z[:, keep] / np.sqrt(eigenvalues)
    meta = {
        "mean": pca_meta["mean"],
        "eigenvalues": eigenvalues.tolist(),
        "components": components,
    }
    return Y, meta
