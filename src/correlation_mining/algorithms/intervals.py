"""
Interval search tree and priority heap for the CASH subspace search.

An interval is an angular box in parameter space together with a distance
range; it keeps the IDs of all parameterization functions whose curve passes
through that region. Intervals are split lazily, one angular dimension at a
time, and the densest ones are explored first via ``IntervalHeap``.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

import numpy as np

from .parameterization import HyperBoundingBox, ParameterizationFunction

# Creation order of intervals; used as the last tie-break in compare_to.
_interval_ids = itertools.count()


class IntervalSplit:
    """
    Decides which functions intersect an (angle box, distance range) region.

    Function extrema per box are cached, since sibling intervals in
    different distance buckets share the same angular boxes. A box is
    evicted once an interval over it has been split into both halves.
    """

    def __init__(self, functions: Mapping[int, ParameterizationFunction], min_pts: int):
        self.functions = functions
        self.min_pts = min_pts
        self._extrema: Dict[Tuple[float, ...], Dict[int, Tuple[float, float]]] = {}

    def determine_ids(
        self,
        candidate_ids: Iterable[int],
        box: HyperBoundingBox,
        d_min: float,
        d_max: float,
    ) -> Optional[Set[int]]:
        """
        Return the candidate IDs whose function range over *box* meets [d_min, d_max].

        Returns ``None`` if fewer than ``min_pts`` IDs qualify.
        """
        cache = self._extrema.setdefault(box.key(), {})
        child_ids: Set[int] = set()
        for id_ in candidate_ids:
            bounds = cache.get(id_)
            if bounds is None:
                bounds = self.functions[id_].min_max_value(box)
                cache[id_] = bounds
            f_min, f_max = bounds
            if f_max < d_min or f_min > d_max:
                continue
            child_ids.add(id_)

        if len(child_ids) < self.min_pts:
            return None
        return child_ids

    def evict(self, box: HyperBoundingBox) -> None:
        """Forget the cached extrema for *box*."""
        self._extrema.pop(box.key(), None)

    def cached_boxes(self) -> int:
        return len(self._extrema)


class CASHInterval:
    """
    Node of the interval search tree.

    ``max_split_dimension`` is the angular dimension split last (-1 for a
    root). A full cycle over all angular dimensions increments ``level``.
    """

    def __init__(
        self,
        box: HyperBoundingBox,
        split: IntervalSplit,
        ids: Set[int],
        level: int,
        max_split_dimension: int,
        d_min: float,
        d_max: float,
    ):
        self.box = box
        self.split_strategy = split
        self.ids: Set[int] = set(ids)
        self.level = level
        self.max_split_dimension = max_split_dimension
        self.d_min = d_min
        self.d_max = d_max
        self.interval_id = next(_interval_ids)
        self.left_child: Optional[CASHInterval] = None
        self.right_child: Optional[CASHInterval] = None

    @property
    def dimensionality(self) -> int:
        """Number of angular dimensions."""
        return self.box.dimensionality

    def centroid(self) -> np.ndarray:
        return self.box.centroid()

    def priority(self) -> int:
        """Heap key; denser intervals have smaller keys."""
        return -len(self.ids)

    def is_at_max_level(self, max_level: int) -> bool:
        return self.level >= max_level and self.max_split_dimension == self.dimensionality - 1

    def has_children(self) -> bool:
        return self.left_child is not None or self.right_child is not None

    def remove_ids(self, ids: Iterable[int]) -> None:
        self.ids.difference_update(ids)

    def split(self) -> None:
        """
        Bisect the box along the next angular dimension.

        The lower half becomes the left child, the upper half the right
        child; a child is only created if at least ``min_pts`` IDs survive.
        """
        if self.has_children():
            return

        wraps = self.max_split_dimension >= self.dimensionality - 1
        child_level = self.level + 1 if wraps else self.level
        split_dim = 0 if wraps else self.max_split_dimension + 1

        lower = self.box.lower
        upper = self.box.upper
        split_point = lower[split_dim] + (upper[split_dim] - lower[split_dim]) * 0.5

        left_upper = upper.copy()
        left_upper[split_dim] = split_point
        right_lower = lower.copy()
        right_lower[split_dim] = split_point

        for child_box, side in (
            (HyperBoundingBox(lower, left_upper), "left"),
            (HyperBoundingBox(right_lower, upper), "right"),
        ):
            child_ids = self.split_strategy.determine_ids(self.ids, child_box, self.d_min, self.d_max)
            if child_ids is None:
                continue
            child = CASHInterval(
                child_box,
                self.split_strategy,
                child_ids,
                level=child_level,
                max_split_dimension=split_dim,
                d_min=self.d_min,
                d_max=self.d_max,
            )
            if side == "left":
                self.left_child = child
            else:
                self.right_child = child

        if self.left_child is not None and self.right_child is not None:
            self.split_strategy.evict(self.box)

    def compare_to(self, other: "CASHInterval") -> int:
        """
        Total order used to pick the better of two intervals.

        More IDs is better; then a coarser level, then a lower split
        dimension, then the interval created first.
        """
        if self is other:
            return 0
        if len(self.ids) != len(other.ids):
            return -1 if len(self.ids) < len(other.ids) else 1
        if self.level != other.level:
            return -1 if self.level > other.level else 1
        if self.max_split_dimension != other.max_split_dimension:
            return -1 if self.max_split_dimension > other.max_split_dimension else 1
        return -1 if self.interval_id > other.interval_id else 1

    def __repr__(self) -> str:
        return (
            f"CASHInterval(id={self.interval_id}, level={self.level}, "
            f"split_dim={self.max_split_dimension}, n_ids={len(self.ids)}, "
            f"d=[{self.d_min:.4f}, {self.d_max:.4f}], centroid={np.round(self.centroid(), 4).tolist()})"
        )


class IntervalHeap:
    """
    Min-heap of intervals keyed by ``priority()``.

    Entries with equal keys pop in insertion order. ``overflowed`` is set
    when the search cleared the heap because it grew past its size limit.
    """

    def __init__(self):
        self._heap: List[Tuple[int, int, CASHInterval]] = []
        self._counter = itertools.count()
        self.overflowed = False

    def push(self, interval: CASHInterval) -> None:
        heapq.heappush(self._heap, (interval.priority(), next(self._counter), interval))

    def pop(self) -> CASHInterval:
        return heapq.heappop(self._heap)[2]

    def peek(self) -> CASHInterval:
        """The interval the next pop would return, left on the heap."""
        return self._heap[0][2]

    def clear(self, overflow: bool = False) -> None:
        self._heap.clear()
        if overflow:
            self.overflowed = True

    def intervals(self) -> List[CASHInterval]:
        """Intervals in pop order."""
        return [entry[2] for entry in sorted(self._heap, key=lambda e: (e[0], e[1]))]

    def prune(self, ids: Set[int], min_pts: int) -> None:
        """Remove *ids* from every interval and drop those left with fewer than min_pts."""
        remaining = self.intervals()
        self._heap = []
        for interval in remaining:
            interval.remove_ids(ids)
            if len(interval.ids) >= min_pts:
                self.push(interval)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
