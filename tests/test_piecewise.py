"""
Tests for piecewise-linear curve construction and evaluation.
"""

import numpy as np
import pytest

from tax_model import MalformedTableError, build_curve, evaluate
from tax_model.datasets import y2024


def test_two_point_curve_midpoint():
    curve = build_curve([(0, 0), (10, 100)])
    assert evaluate(curve, 5) == 50


def test_plateau_and_anchored_zero(eic_no_children_curve):
    assert evaluate(eic_no_children_curve, 8510) == 600
    assert evaluate(eic_no_children_curve, 10640) == 600
    assert evaluate(eic_no_children_curve, 19130) == 0


def test_phase_in_and_phase_out_interior(eic_no_children_curve):
    assert evaluate(eic_no_children_curve, 4255) == pytest.approx(300.0)
    assert evaluate(eic_no_children_curve, 9000) == pytest.approx(600.0)
    assert evaluate(eic_no_children_curve, 14885) == pytest.approx(300.0)


def test_control_points_round_trip_exactly():
    for points in y2024.EIC_UNMARRIED_POINTS + y2024.EIC_MARRIED_POINTS:
        curve = build_curve(points)
        for x, y in points:
            assert evaluate(curve, x) == y


def test_round_trip_irregular_points():
    points = [(0.1, 0.3), (0.7, 1.9), (3.3, -2.2), (1e6 / 3, 7.1)]
    curve = build_curve(points)
    for x, y in points:
        assert evaluate(curve, x) == y
    assert curve.points == tuple(points)


def test_segments_built_once():
    curve = build_curve([(0, 0), (10, 100), (20, 50)])
    first, second = curve.segments
    assert (first.lower_bound, first.upper_bound) == (0, 10)
    assert first.slope == 10
    assert first.intercept == 0
    assert second.slope == -5
    assert second.intercept == 150


def test_interior_values_lie_on_slope_intercept_line():
    curve = build_curve([(0, 0), (10, 100), (20, 50)])
    for x in (2.5, 7, 13, 19.5, 25):
        segment = curve.segment_for(x)
        assert evaluate(curve, x) == pytest.approx(segment.slope * x + segment.intercept)


def test_last_segment_with_lower_bound_at_or_below_x_wins():
    curve = build_curve([(0, 0), (10, 100), (20, 50)])
    assert curve.segment_for(10) is curve.segments[1]
    assert curve.segment_for(9.999) is curve.segments[0]


def test_extrapolates_below_domain():
    curve = build_curve([(10, 10), (20, 30)])
    assert evaluate(curve, 0) == pytest.approx(-10.0)


def test_extrapolates_beyond_domain_without_clamping(eic_no_children_curve):
    # Callers clamp credits; the curve itself goes negative past the anchor
    assert evaluate(eic_no_children_curve, 20_000) < 0


def test_no_limit_on_point_count():
    xs = np.arange(0, 50)
    points = list(zip(xs, xs ** 2))
    curve = build_curve(points)
    assert len(curve.segments) == 49
    assert evaluate(curve, 2.5) == pytest.approx(6.5)


def test_evaluate_array_matches_scalar(eic_no_children_curve):
    xs = np.array([-100, 0, 4000, 8510, 9000, 10640, 15000, 19130, 25000])
    expected = np.array([evaluate(eic_no_children_curve, x) for x in xs])
    np.testing.assert_array_equal(eic_no_children_curve.evaluate_array(xs), expected)


def test_nan_rejected(eic_no_children_curve):
    with pytest.raises(ValueError):
        evaluate(eic_no_children_curve, float("nan"))


@pytest.mark.parametrize(
    "points",
    [
        [],
        [(0, 0)],
        [(0, 0), (0, 10)],
        [(0, 0), (10, 5), (5, 0)],
        [(0, 0), (float("inf"), 1)],
    ],
)
def test_malformed_curves_rejected_at_construction(points):
    with pytest.raises(MalformedTableError):
        build_curve(points)
