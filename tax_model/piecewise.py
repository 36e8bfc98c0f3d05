"""
Piecewise-Linear Curves

Builds continuous piecewise-linear functions through ordered control points.
Used for credits that phase in, hold at a plateau, then phase out (the
Earned Income Credit), but any number of points >= 2 is accepted.

Evaluation rules:
- The segment with the greatest lower bound <= x is used
- Below the first point the first segment is extrapolated
- Beyond the last point the last segment is extrapolated

Extrapolation is not clamped. Credit curves reach and hold zero only because
their data ends on a y=0 anchor; clamping to a non-negative floor is the
caller's job.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .errors import MalformedTableError

Point = tuple[float, float]


@dataclass(frozen=True)
class Segment:
    """
    One linear piece covering [lower_bound, upper_bound).

    slope and intercept are fixed at construction. intercept describes the
    line as slope * x + intercept for inspection only; evaluation uses the
    point-slope form from lower_value, which stays exact near large x. The
    endpoint values are kept so evaluation at a control point returns the
    published y exactly.
    """
    lower_bound: float
    upper_bound: float
    lower_value: float
    upper_value: float
    slope: float
    intercept: float

    @classmethod
    def through(cls, p1: Point, p2: Point) -> Segment:
        (x1, y1), (x2, y2) = p1, p2
        slope = (y2 - y1) / (x2 - x1)
        return cls(
            lower_bound=x1,
            upper_bound=x2,
            lower_value=y1,
            upper_value=y2,
            slope=slope,
            intercept=y1 - x1 * slope,
        )

    def __call__(self, x: float) -> float:
        if x == self.lower_bound:
            return self.lower_value
        if x == self.upper_bound:
            return self.upper_value
        # Same line as slope * x + intercept
        return self.lower_value + self.slope * (x - self.lower_bound)


@dataclass(frozen=True)
class PiecewiseFunction:
    """Ordered, immutable sequence of contiguous segments."""
    segments: tuple[Segment, ...]

    def __post_init__(self):
        if not self.segments:
            raise MalformedTableError("a piecewise function needs at least one segment")

    @property
    def points(self) -> tuple[Point, ...]:
        """Control points the function was built from."""
        first = self.segments[0]
        return ((first.lower_bound, first.lower_value),) + tuple(
            (s.upper_bound, s.upper_value) for s in self.segments
        )

    @property
    def domain(self) -> tuple[float, float]:
        return self.segments[0].lower_bound, self.segments[-1].upper_bound

    def segment_for(self, x: float) -> Segment:
        """Last segment whose lower bound is <= x (first segment below the domain)."""
        chosen = self.segments[0]
        for segment in self.segments:
            if segment.lower_bound <= x:
                chosen = segment
            else:
                break
        return chosen

    def __call__(self, x: float) -> float:
        x = float(x)
        if math.isnan(x):
            raise ValueError("x must be a number, got NaN")
        return self.segment_for(x)(x)

    def evaluate_array(self, xs) -> np.ndarray:
        """Vectorized evaluation, same rules as calling the function per element."""
        xs = np.asarray(xs, dtype=float)
        if np.isnan(xs).any():
            raise ValueError("xs must not contain NaN")

        lowers = np.array([s.lower_bound for s in self.segments])
        uppers = np.array([s.upper_bound for s in self.segments])
        lower_values = np.array([s.lower_value for s in self.segments])
        upper_values = np.array([s.upper_value for s in self.segments])
        slopes = np.array([s.slope for s in self.segments])

        idx = np.clip(np.searchsorted(lowers, xs, side="right") - 1, 0, len(self.segments) - 1)
        values = lower_values[idx] + slopes[idx] * (xs - lowers[idx])
        values = np.where(xs == lowers[idx], lower_values[idx], values)
        return np.where(xs == uppers[idx], upper_values[idx], values)


def build_curve(points: Iterable[Sequence[float]]) -> PiecewiseFunction:
    """
    Build a piecewise-linear function through the given control points.

    Args:
        points: (x, y) pairs with strictly increasing x, at least two

    Raises:
        MalformedTableError: Fewer than two points, non-finite coordinates
            or x values that do not strictly increase
    """
    pts: list[Point] = []
    for p in points:
        x, y = p
        pts.append((float(x), float(y)))

    if len(pts) < 2:
        raise MalformedTableError(f"a curve needs at least 2 control points, got {len(pts)}")
    for x, y in pts:
        if not (math.isfinite(x) and math.isfinite(y)):
            raise MalformedTableError(f"non-finite control point {(x, y)}")
    for (x1, _), (x2, _) in zip(pts, pts[1:]):
        if x2 <= x1:
            raise MalformedTableError(
                f"control point x values must be strictly increasing, got {x2} after {x1}"
            )

    return PiecewiseFunction(tuple(Segment.through(p1, p2) for p1, p2 in zip(pts, pts[1:])))


def evaluate(curve: PiecewiseFunction, x: float) -> float:
    """Value of curve at x, extrapolating the end segments outside its domain."""
    return curve(x)
