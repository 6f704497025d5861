"""
Parameterization functions for the hough-space subspace search.

A d-dimensional point p is mapped to a function over d-1 angles

    f_p(alpha) = sum_i p_i * prod_{j<i} sin(alpha_j) * cos(alpha_i),   alpha_{d-1} := 0

which is the distance from the origin of the hyperplane through p whose unit
normal vector is n(alpha). Points lying on a common hyperplane produce curves
that intersect in one (alpha, distance) location.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

# Tolerance used when deciding whether a restricted function is flat.
DELTA = 1e-10


class ExtremumType(Enum):
    """Kind of extremum a (restricted) parameterization function has."""

    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    CONSTANT = "constant"


@dataclass(frozen=True, eq=False)
class HyperBoundingBox:
    """Axis-aligned box given by its lower and upper corner."""

    lower: np.ndarray
    upper: np.ndarray

    def __post_init__(self):
        lower = np.array(self.lower, dtype=np.float64)
        upper = np.array(self.upper, dtype=np.float64)
        if lower.ndim != 1 or lower.shape != upper.shape:
            raise ValueError(
                f"Box corners must be 1-D arrays of equal length; got {lower.shape} and {upper.shape}"
            )
        if np.any(lower > upper):
            raise ValueError("Box lower corner exceeds upper corner")
        lower.setflags(write=False)
        upper.setflags(write=False)
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @property
    def dimensionality(self) -> int:
        return int(self.lower.shape[0])

    def centroid(self) -> np.ndarray:
        return (self.lower + self.upper) / 2.0

    def contains(self, point: Sequence[float]) -> bool:
        p = np.asarray(point, dtype=np.float64)
        return bool(np.all(p >= self.lower) and np.all(p <= self.upper))

    def key(self) -> Tuple[float, ...]:
        """Hashable identity of the box (used for caching)."""
        return tuple(self.lower.tolist()) + tuple(self.upper.tolist())

    def __repr__(self) -> str:
        lo = ", ".join(f"{v:.4f}" for v in self.lower)
        hi = ", ".join(f"{v:.4f}" for v in self.upper)
        return f"HyperBoundingBox([{lo}], [{hi}])"


def full_angle_box(n_angles: int) -> HyperBoundingBox:
    """The complete parameter domain [0, pi]^n_angles."""
    return HyperBoundingBox(np.zeros(n_angles), np.full(n_angles, math.pi))


def normal_vector(alpha: Sequence[float]) -> np.ndarray:
    """
    Unit normal vector n(alpha) described by d-1 angles.

    n_i = prod_{j<i} sin(alpha_j) * cos(alpha_i), with cos(alpha_{d-1}) := 1.
    """
    alpha = np.asarray(alpha, dtype=np.float64)
    sines = np.concatenate(([1.0], np.cumprod(np.sin(alpha))))
    cosines = np.append(np.cos(alpha), 1.0)
    return sines * cosines


def _sinus_product(alpha: Sequence[float], start: int, end: int) -> float:
    """Product of sin(alpha_j) for start <= j < end."""
    result = 1.0
    for j in range(start, end):
        result *= math.sin(alpha[j])
    return result


class ParameterizationFunction:
    """
    A point re-expressed as a trigonometric function of d-1 angles.

    The coordinates are copied and frozen at construction; the global
    extremum over [0, pi]^(d-1) is determined once and reused for every
    min/max query over sub-boxes.

    Args:
        coordinates: The point, at least two-dimensional.
        id: Identifier of the point in the caller's database.

    Raises:
        ValueError: If the point is not 1-D, has fewer than 2 coordinates,
            or contains non-finite values.
    """

    def __init__(self, coordinates: Sequence[float], id: Optional[int] = None):
        vec = np.array(coordinates, dtype=np.float64)
        if vec.ndim != 1 or vec.shape[0] < 2:
            raise ValueError(
                f"A parameterization function needs a 1-D point with at least 2 coordinates; got shape {vec.shape}"
            )
        if not np.all(np.isfinite(vec)):
            raise ValueError("Point coordinates must be finite")
        vec.setflags(write=False)
        self._vec = vec
        self._id = id
        self.alpha_extremum, self.extremum_type = self._determine_global_extremum()

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def coordinates(self) -> np.ndarray:
        return self._vec

    @property
    def dimensionality(self) -> int:
        return int(self._vec.shape[0])

    def function(self, alpha: Sequence[float]) -> float:
        """Distance value f(alpha) of this point for the normal n(alpha)."""
        return float(self._vec @ normal_vector(alpha))

    def determine_alpha_min_max(self, box: HyperBoundingBox) -> Tuple[np.ndarray, np.ndarray]:
        """
        Angles at which the function takes its minimum and maximum inside *box*.

        Coordinates are resolved from the last angle to the first; each one is
        the extremum of the one-dimensional restriction, clamped to the box.

        Returns:
            Tuple ``(alpha_min, alpha_max)``

        Raises:
            ValueError: If the box does not have d-1 dimensions
        """
        n_angles = self.dimensionality - 1
        if box.dimensionality != n_angles:
            raise ValueError(
                f"Box dimensionality {box.dimensionality} does not match the {n_angles} angles of this function"
            )

        alpha_min = np.zeros(n_angles)
        alpha_max = np.zeros(n_angles)

        if box.contains(self.alpha_extremum):
            if self.extremum_type is ExtremumType.MINIMUM:
                alpha_min = self.alpha_extremum.copy()
                for n in range(n_angles - 1, -1, -1):
                    alpha_max[n] = self._determine_alpha_max(n, alpha_max, box)
            else:
                alpha_max = self.alpha_extremum.copy()
                for n in range(n_angles - 1, -1, -1):
                    alpha_min[n] = self._determine_alpha_min(n, alpha_min, box)
        else:
            for n in range(n_angles - 1, -1, -1):
                alpha_min[n] = self._determine_alpha_min(n, alpha_min, box)
                alpha_max[n] = self._determine_alpha_max(n, alpha_max, box)

        return alpha_min, alpha_max

    def min_max_value(self, box: HyperBoundingBox) -> Tuple[float, float]:
        """Minimum and maximum function value inside *box*."""
        alpha_min, alpha_max = self.determine_alpha_min_max(box)
        f_min = self.function(alpha_min)
        f_max = self.function(alpha_max)
        if f_min > f_max:
            f_min, f_max = f_max, f_min
        return f_min, f_max

    # ------------------------------------------------------------------
    # Extremum helpers
    # ------------------------------------------------------------------

    def _tail(self, n: int, alpha: Sequence[float]) -> float:
        """T_n = sum_{j>n} p_j * prod_{n<k<j} sin(alpha_k) * cos(alpha_j)."""
        d = self.dimensionality
        total = 0.0
        for j in range(n + 1, d):
            alpha_j = 0.0 if j == d - 1 else alpha[j]
            total += self._vec[j] * _sinus_product(alpha, n + 1, j) * math.cos(alpha_j)
        return total

    def _extremum_alpha_n(self, n: int, alpha: Sequence[float]) -> float:
        """Angle alpha_n in [0, pi) where the restriction to alpha_n is extremal."""
        if self._vec[n] == 0:
            return math.pi / 2
        alpha_n = math.atan(self._tail(n, alpha) / self._vec[n])
        if alpha_n < 0:
            alpha_n += math.pi
        return alpha_n

    def _determine_global_extremum(self) -> Tuple[np.ndarray, ExtremumType]:
        n_angles = self.dimensionality - 1
        alpha = np.zeros(n_angles)
        for n in range(n_angles - 1, -1, -1):
            alpha[n] = self._extremum_alpha_n(n, alpha)
        alpha.setflags(write=False)

        # f at the extremum is +|p| (maximum) or -|p| (minimum)
        value = self.function(alpha)
        if abs(value) < DELTA:
            return alpha, ExtremumType.CONSTANT
        if value > 0:
            return alpha, ExtremumType.MAXIMUM
        return alpha, ExtremumType.MINIMUM

    def _extremum_type(self, n: int, alpha_extreme: np.ndarray, box: HyperBoundingBox) -> ExtremumType:
        """
        Type of the extremum of the restriction to alpha_n at alpha_extreme[n].

        The restriction is C + S * (p_n cos(a) + T_n sin(a)) with S >= 0 on
        [0, pi]; its second derivative at the extremum is -S * g.
        """
        centroid = box.centroid()
        s = _sinus_product(centroid, 0, n)
        alpha_n = alpha_extreme[n]
        g = self._vec[n] * math.cos(alpha_n) + self._tail(n, alpha_extreme) * math.sin(alpha_n)
        curvature = s * g
        if curvature > DELTA:
            return ExtremumType.MAXIMUM
        if curvature < -DELTA:
            return ExtremumType.MINIMUM
        return ExtremumType.CONSTANT

    def _extreme_candidate(self, n: int, partial: np.ndarray, box: HyperBoundingBox) -> Tuple[float, np.ndarray]:
        alpha_n = self._extremum_alpha_n(n, partial)
        alpha_extreme = partial.copy()
        alpha_extreme[:n] = box.centroid()[:n]
        alpha_extreme[n] = alpha_n
        return alpha_n, alpha_extreme

    def _function_at_bounds(self, n: int, alpha_extreme: np.ndarray, box: HyperBoundingBox) -> Tuple[float, float]:
        corner = alpha_extreme.copy()
        corner[n] = box.lower[n]
        f_lower = self.function(corner)
        corner[n] = box.upper[n]
        f_upper = self.function(corner)
        return f_lower, f_upper

    def _determine_alpha_min(self, n: int, alpha_min: np.ndarray, box: HyperBoundingBox) -> float:
        alpha_n, alpha_extreme = self._extreme_candidate(n, alpha_min, box)
        lower = box.lower[n]
        upper = box.upper[n]
        extremum = self._extremum_type(n, alpha_extreme, box)

        if extremum is not ExtremumType.MAXIMUM:
            if lower <= alpha_n <= upper:
                return alpha_n
            return lower if alpha_n < lower else upper

        # a maximum inside the range puts the minimum on one of the bounds
        if lower <= alpha_n <= upper:
            f_lower, f_upper = self._function_at_bounds(n, alpha_extreme, box)
            return lower if f_lower < f_upper else upper
        return upper if alpha_n < lower else lower

    def _determine_alpha_max(self, n: int, alpha_max: np.ndarray, box: HyperBoundingBox) -> float:
        alpha_n, alpha_extreme = self._extreme_candidate(n, alpha_max, box)
        lower = box.lower[n]
        upper = box.upper[n]
        extremum = self._extremum_type(n, alpha_extreme, box)

        if extremum is not ExtremumType.MINIMUM:
            if lower <= alpha_n <= upper:
                return alpha_n
            return lower if alpha_n < lower else upper

        if lower <= alpha_n <= upper:
            f_lower, f_upper = self._function_at_bounds(n, alpha_extreme, box)
            return lower if f_lower > f_upper else upper
        return upper if alpha_n < lower else lower

    def __repr__(self) -> str:
        coords = ", ".join(f"{v:.4f}" for v in self._vec)
        return f"ParameterizationFunction(id={self._id}, [{coords}])"
