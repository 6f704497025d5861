"""
Correlation Mining - Core Package

Subspace correlation clustering and outlier detection on in-memory
vector data.

This package provides:
- CASH subspace clustering (hough-transform based interval search)
- Correlation models and PCA transforms
- Distance / kernel functions and kNN-weight outlier detection
"""

__version__ = "0.1.0"

from .algorithms import CASHConfig, CASHResult, ClusterMap, run_cash

# Explicitly import subpackages to ensure they're discoverable
from . import algorithms
from . import utils

__all__ = [
    "CASHConfig",
    "CASHResult",
    "ClusterMap",
    "run_cash",
    "algorithms",
    "utils",
]
