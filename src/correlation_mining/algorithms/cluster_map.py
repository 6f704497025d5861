"""
Cluster map: subspace dimensionality -> clusters of point IDs, plus noise.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Set, Tuple

import numpy as np


class ClusterMap:
    """
    Accumulates subspace clusters found by a correlation clustering run.

    Clusters are stored per subspace dimensionality in the order they were
    added. Noise IDs are kept separately.
    """

    def __init__(self, dimensionality: int):
        self.dimensionality = dimensionality
        self._clusters: Dict[int, List[Set[int]]] = {}
        self.noise: Set[int] = set()

    def add(self, subspace_dim: int, ids: Iterable[int]) -> None:
        self._clusters.setdefault(subspace_dim, []).append(set(ids))

    def add_to_noise(self, ids: Iterable[int]) -> None:
        self.noise.update(ids)

    def merge(self, other: "ClusterMap") -> None:
        """Append all clusters (and noise) of *other* to this map."""
        for subspace_dim, clusters in other.items():
            for cluster in clusters:
                self.add(subspace_dim, cluster)
        self.add_to_noise(other.noise)

    def subspace_dimensionalities(self) -> List[int]:
        return sorted(self._clusters)

    def get_clusters(self, subspace_dim: int) -> List[Set[int]]:
        return [set(c) for c in self._clusters.get(subspace_dim, [])]

    def items(self) -> Iterator[Tuple[int, List[Set[int]]]]:
        for subspace_dim in self.subspace_dimensionalities():
            yield subspace_dim, self.get_clusters(subspace_dim)

    @property
    def n_clusters(self) -> int:
        return sum(len(c) for c in self._clusters.values())

    def clustered_ids(self) -> Set[int]:
        result: Set[int] = set()
        for clusters in self._clusters.values():
            for cluster in clusters:
                result |= cluster
        return result

    def all_ids(self) -> Set[int]:
        return self.clustered_ids() | self.noise

    def to_labels(self, ids: Iterable[int]) -> np.ndarray:
        """
        Cluster index for each of *ids*; -1 for noise or unknown IDs.

        Clusters are numbered by ascending subspace dimensionality, then by
        insertion order.
        """
        index: Dict[int, int] = {}
        label = 0
        for _, clusters in self.items():
            for cluster in clusters:
                for id_ in cluster:
                    index[id_] = label
                label += 1
        return np.array([index.get(id_, -1) for id_ in ids], dtype=int)

    def summary(self) -> Dict[int, List[int]]:
        """Cluster sizes per subspace dimensionality."""
        return {d: [len(c) for c in clusters] for d, clusters in self.items()}

    def as_dict(self) -> Dict[str, object]:
        """JSON-friendly view with sorted ID lists."""
        return {
            "dimensionality": self.dimensionality,
            "clusters": {
                str(d): [sorted(c) for c in clusters] for d, clusters in self.items()
            },
            "noise": sorted(self.noise),
        }

    def __repr__(self) -> str:
        return (
            f"ClusterMap(dimensionality={self.dimensionality}, "
            f"clusters={self.summary()}, noise={len(self.noise)})"
        )
