"""
CASH: subspace clustering based on the hough transform.

Points are mapped to parameterization functions; dense regions of the
(angle, distance) parameter space correspond to hyperplanes that many
points lie on. The densest region is located by greedy best-first descent
through lazily split intervals, its points are projected onto the found
hyperplane, and the search recurses one dimension lower.

Reference:
    E. Achtert, C. Boehm, J. David, P. Kroeger, A. Zimek:
    Robust clustering in arbitrarily oriented subspaces.
    In Proc. 8th SIAM Int. Conf. on Data Mining (SDM'08), Atlanta, GA, 2008
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Set, Tuple
import numpy as np

from .cluster_map import ClusterMap
from .dimensionality_reduction import derive_dependencies
from .distances import WeightedDistance
from .intervals import CASHInterval, IntervalHeap, IntervalSplit
from .parameterization import ParameterizationFunction, full_angle_box, normal_vector
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

Array2D = np.ndarray
FunctionDB = Dict[int, ParameterizationFunction]

DEFAULT_MAX_HEAP_SIZE = 40000
HEAP_LOG_INTERVAL = 10000


@dataclass
class CASHConfig:
    """Configuration for a CASH run."""

    min_pts: int
    max_level: int
    jitter: float
    min_dim: int = 1
    adjust: bool = False  # refine each found subspace with the dependency derivator
    max_heap_size: int = DEFAULT_MAX_HEAP_SIZE
    derivator_eps: float = 0.25

    def __post_init__(self):
        """Validate parameter ranges."""
        for name in ("min_pts", "max_level", "min_dim", "max_heap_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        for name in ("jitter", "derivator_eps"):
            value = getattr(self, name)
            if not isinstance(value, (int, float, np.floating)) or isinstance(value, bool):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        if self.adjust and self.min_pts < 2:
            raise ValueError("adjust mode needs min_pts >= 2 to fit a correlation model")


@dataclass
class CASHResult:
    """Result of a CASH run."""

    cluster_map: ClusterMap
    noise_dim: int
    n_points: int
    metadata: Dict[str, Any] = field(default_factory=dict)


def run_cash(
    data: Array2D,
    cfg: CASHConfig,
    *,
    ids: Optional[Sequence[int]] = None,
) -> CASHResult:
    """
    Run CASH on a point set.

    Args:
        data: (n_points, d) array, d >= 2
        cfg: CASHConfig with the search parameters
        ids: Optional point IDs aligned with the rows of *data*
            (default: 0..n_points-1)

    Returns:
        CASHResult whose cluster map partitions the IDs into subspace
        clusters and noise

    Raises:
        ValueError: If the data is malformed, IDs are not unique, or
            min_dim is not smaller than the data dimensionality
    """
    X = np.asarray(data, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"data must be a 2-D array; got shape {X.shape}")
    n, d = X.shape
    if d < 2:
        raise ValueError(f"data must have at least 2 columns, got {d}")
    if cfg.min_dim >= d:
        raise ValueError(f"min_dim ({cfg.min_dim}) must be < data dimensionality ({d})")

    if ids is None:
        ids = list(range(n))
    else:
        ids = [int(i) for i in ids]
        if len(ids) != n:
            raise ValueError(f"Got {len(ids)} ids for {n} points")
        if len(set(ids)) != n:
            raise ValueError("Point ids must be unique")

    functions: FunctionDB = {
        id_: ParameterizationFunction(X[row], id=id_) for row, id_ in enumerate(ids)
    }
    logger.info("Running CASH: db size %d, dim %d, min dim %d", n, d, cfg.min_dim)

    if functions:
        cluster_map, heap_aborts = _run_level(functions, d, d, cfg)
    else:
        cluster_map, heap_aborts = ClusterMap(d), 0

    logger.info(
        "CASH finished: clusters per subspace dim %s, noise %d, heap aborts %d",
        cluster_map.summary(),
        len(cluster_map.noise),
        heap_aborts,
    )
    return CASHResult(
        cluster_map=cluster_map,
        noise_dim=d,
        n_points=n,
        metadata={
            "min_pts": cfg.min_pts,
            "max_level": cfg.max_level,
            "min_dim": cfg.min_dim,
            "jitter": cfg.jitter,
            "adjust": cfg.adjust,
            "heap_aborts": heap_aborts,
        },
    )


def _run_level(
    functions: FunctionDB, dim: int, noise_dim: int, cfg: CASHConfig
) -> Tuple[ClusterMap, int]:
    """
    Search one dimensionality level and recurse on each dense interval found.

    Returns the clusters found at this level and below, and the number of
    heap-size aborts that occurred.
    """
    cluster_map = ClusterMap(dim)
    noise_ids: Set[int] = set(functions)
    split = IntervalSplit(functions, cfg.min_pts)
    heap = init_heap(functions, dim, cfg, split)
    heap_aborts = 0

    logger.debug("Level dim %d: db size %d, %d root interval(s)", dim, len(functions), len(heap))

    while heap:
        interval = determine_next_interval_at_max_level(heap, cfg.max_level, cfg.max_heap_size)
        if interval is None:
            break
        logger.debug("Next interval in dim %d: %s", dim, interval)

        cluster_ids: Set[int] = set()
        if dim > cfg.min_dim + 1:
            if cfg.adjust:
                ids, basis = run_derivator(functions, dim, interval, noise_ids, cfg.derivator_eps)
            else:
                ids = set(interval.ids)
                basis = determine_basis(interval.centroid())

            sub_functions = build_projected_db(basis, ids, functions)
            if sub_functions:
                sub_map, sub_aborts = _run_level(sub_functions, dim - 1, noise_dim, cfg)
                heap_aborts += sub_aborts
                cluster_map.merge(sub_map)
                found = sub_map.all_ids()
                noise_ids -= found
                cluster_ids |= found
        else:
            cluster_map.add(dim - 1, interval.ids)
            noise_ids -= interval.ids
            cluster_ids |= interval.ids

        heap.prune(cluster_ids, cfg.min_pts)

    if heap.overflowed:
        heap_aborts += 1

    if noise_ids:
        if dim == noise_dim:
            cluster_map.add_to_noise(noise_ids)
        elif len(noise_ids) >= cfg.min_pts:
            cluster_map.add(dim, noise_ids)

    logger.debug(
        "Level dim %d done: noise %d, clusters %s", dim, len(noise_ids), cluster_map.summary()
    )
    return cluster_map, heap_aborts


def init_heap(
    functions: FunctionDB, dim: int, cfg: CASHConfig, split: IntervalSplit
) -> IntervalHeap:
    """
    Build the root intervals: the full angle domain, bucketed by distance.

    The distance range of all functions is cut into ceil(range / jitter)
    equally sized buckets; buckets with at least min_pts IDs are pushed.
    """
    box = full_angle_box(dim - 1)
    d_min, d_max = determine_min_max_distance(functions, dim)
    length = d_max - d_min
    n_buckets = max(1, int(math.ceil(length / cfg.jitter)))
    bucket_size = length / n_buckets

    logger.debug(
        "d_min %.6f, d_max %.6f, %d distance bucket(s) of size %.6f",
        d_min,
        d_max,
        n_buckets,
        bucket_size,
    )

    heap = IntervalHeap()
    ids = sorted(functions)
    lower = d_min
    for i in range(n_buckets):
        upper = d_max if i == n_buckets - 1 else lower + bucket_size
        interval_ids = split.determine_ids(ids, box, lower, upper)
        if interval_ids is not None:
            heap.push(
                CASHInterval(
                    box,
                    split,
                    interval_ids,
                    level=0,
                    max_split_dimension=-1,
                    d_min=lower,
                    d_max=upper,
                )
            )
        lower = upper
    return heap


def determine_min_max_distance(functions: FunctionDB, dim: int) -> Tuple[float, float]:
    """Smallest and largest function value of all functions over the full angle domain."""
    box = full_angle_box(dim - 1)
    d_min = math.inf
    d_max = -math.inf
    for f in functions.values():
        f_min, f_max = f.min_max_value(box)
        d_min = min(d_min, f_min)
        d_max = max(d_max, f_max)
    return d_min, d_max


def determine_next_interval_at_max_level(
    heap: IntervalHeap, max_level: int, max_heap_size: int = DEFAULT_MAX_HEAP_SIZE
) -> Optional[CASHInterval]:
    """
    Return the next densest interval at maximum split level.

    Descends best-first: after each split the denser child is kept unless a
    heap entry holds more IDs, in which case the child goes back on the heap
    and the descent continues from that entry. A descent that runs into
    noise is retried from the heap. Returns ``None`` once the heap is
    exhausted or has been cleared because it grew past *max_heap_size*.
    """
    while heap:
        interval = _descend_to_max_level(heap, max_level, max_heap_size)
        if interval is not None:
            return interval
    return None


def _descend_to_max_level(
    heap: IntervalHeap, max_level: int, max_heap_size: int
) -> Optional[CASHInterval]:
    interval = heap.pop()
    while True:
        if interval.is_at_max_level(max_level):
            return interval

        if len(heap) and len(heap) % HEAP_LOG_INTERVAL == 0:
            logger.debug("Heap size %d", len(heap))

        if len(heap) >= max_heap_size:
            logger.warning(
                "Heap size %d reached limit %d; remaining intervals treated as noise",
                len(heap),
                max_heap_size,
            )
            heap.clear(overflow=True)
            return None

        interval.split()
        if not interval.has_children():
            return None

        left, right = interval.left_child, interval.right_child
        if left is not None and right is not None:
            if left.compare_to(right) < 0:
                best = right
                heap.push(left)
            else:
                best = left
                heap.push(right)
        else:
            best = left if left is not None else right

        # the parent is not kept once its children are placed
        interval.left_child = interval.right_child = None

        # continue with whichever interval is densest overall
        if heap and len(best.ids) < len(heap.peek().ids):
            heap.push(best)
            best = heap.pop()
        interval = best


def determine_basis(alpha: Sequence[float]) -> Array2D:
    """
    Orthonormal basis (dim x dim-1) of the hyperplane whose normal is n(alpha).
    """
    return complete_to_orthonormal_basis(normal_vector(alpha))


def complete_to_orthonormal_basis(v: np.ndarray) -> Array2D:
    """Columns completing the unit vector of *v* to an orthonormal basis."""
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(v)
    if norm == 0:
        raise ValueError("Cannot complete a zero vector to a basis")
    _, _, Vt = np.linalg.svd((v / norm).reshape(1, -1))
    return Vt[1:].T


def project(basis: Array2D, f: ParameterizationFunction) -> ParameterizationFunction:
    """Express a function's point in the coordinates of *basis*."""
    return ParameterizationFunction(f.coordinates @ basis, id=f.id)


def build_projected_db(basis: Array2D, ids: Set[int], functions: FunctionDB) -> FunctionDB:
    """Project the functions with the given IDs into the subspace spanned by *basis*."""
    return {id_: project(basis, functions[id_]) for id_ in sorted(ids)}


def run_derivator(
    functions: FunctionDB,
    dim: int,
    interval: CASHInterval,
    candidate_ids: Set[int],
    eps: float,
) -> Tuple[Set[int], Array2D]:
    """
    Fit a correlation model to an interval's points and absorb close neighbours.

    Every candidate whose weighted distance to the model centroid is below
    *eps* joins the interval's IDs.

    Returns:
        Tuple of (IDs to project, basis of the strong eigenvectors)
    """
    interval_ids = sorted(interval.ids)
    points = np.vstack([functions[i].coordinates for i in interval_ids])
    model = derive_dependencies(points, n_strong=dim - 1)

    candidates = sorted(candidate_ids)
    ids = set(interval_ids)
    if candidates:
        distance = WeightedDistance(model.similarity_matrix)
        coords = np.vstack([functions[i].coordinates for i in candidates])
        dists = distance.pairwise(coords, model.centroid[None, :])[:, 0]
        ids.update(id_ for id_, dist in zip(candidates, dists) if dist < eps)

    logger.debug(
        "Derivator on %d points absorbed %d additional point(s)",
        len(interval_ids),
        len(ids) - len(interval_ids),
    )
    return ids, model.strong_eigenvectors
