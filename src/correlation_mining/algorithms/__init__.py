"""
Algorithm Core Library - correlation clustering and outlier detection.

This module provides core algorithm implementations with minimal dependencies,
separate from scripts. Designed for reuse and testing.
"""

from .parameterization import (
    ExtremumType,
    HyperBoundingBox,
    ParameterizationFunction,
    full_angle_box,
    normal_vector,
)
from .intervals import CASHInterval, IntervalHeap, IntervalSplit
from .cluster_map import ClusterMap
from .cash import (
    CASHConfig,
    CASHResult,
    run_cash,
    determine_next_interval_at_max_level,
    determine_basis,
)
from .dimensionality_reduction import (
    CorrelationModel,
    derive_dependencies,
    global_pca_transform,
    pca_svd_project,
)
from .distances import (
    DistanceFunction,
    EuclideanDistance,
    WeightedDistance,
    PolynomialKernel,
)
from .outlier import (
    OutlierResult,
    knn_weight_outlier,
    top_outliers,
    variance_of_volume_outlier,
)
from .evaluation import adjusted_rand_index, cluster_map_labels

__all__ = [
    # Parameter space
    "ExtremumType",
    "HyperBoundingBox",
    "ParameterizationFunction",
    "full_angle_box",
    "normal_vector",
    # Interval search
    "CASHInterval",
    "IntervalHeap",
    "IntervalSplit",
    # CASH
    "ClusterMap",
    "CASHConfig",
    "CASHResult",
    "run_cash",
    "determine_next_interval_at_max_level",
    "determine_basis",
    # Dimensionality reduction
    "CorrelationModel",
    "derive_dependencies",
    "global_pca_transform",
    "pca_svd_project",
    # Distances
    "DistanceFunction",
    "EuclideanDistance",
    "WeightedDistance",
    "PolynomialKernel",
    # Outliers
    "OutlierResult",
    "knn_weight_outlier",
    "top_outliers",
    "variance_of_volume_outlier",
    # Evaluation
    "adjusted_rand_index",
    "cluster_map_labels",
]
