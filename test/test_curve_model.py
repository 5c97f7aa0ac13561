"""Test the CurveModel control point operations.

Test cases:
    - test_reset_default_layout()
    - test_reset_is_deterministic()
    - test_hit_test_lower_index_wins()
    - test_hit_test_radius_is_inclusive()
    - test_hit_test_miss()
    - test_move_point_clamps_to_bounds()
    - test_move_point_invalid_index_is_noop()
    - test_scaled_by_is_pure()
    - test_evaluate_endpoints_and_midpoint()
    - test_evaluate_constant_coordinate_is_exact()

Run:
    pytest test/test_curve_model.py -v
"""

import numpy as np
import pytest

from stripelib.curve_model import HIT_RADIUS, CurveModel


def test_reset_default_layout():
    curve = CurveModel()
    curve.reset(200, 100)

    expected = [(30, 25), (150, 15), (50, 85), (170, 75)]
    for point, (ex, ey) in zip(curve.get_points(), expected):
        assert point[0] == pytest.approx(ex)
        assert point[1] == pytest.approx(ey)


def test_reset_is_deterministic():
    a = CurveModel()
    b = CurveModel()
    a.reset(640, 480)
    b.reset(640, 480)
    assert a == b


def test_wrong_point_count():
    with pytest.raises(ValueError):
        CurveModel([(0, 0), (1, 1), (2, 2)])


def test_hit_test_lower_index_wins():
    curve = CurveModel([(10, 10), (15, 10), (500, 500), (600, 600)])
    # Both of the first two points are within reach
    assert curve.hit_test(13, 10) == 0
    assert curve.hit_test(16, 10) == 0


def test_hit_test_radius_is_inclusive():
    curve = CurveModel([(500, 500), (0, 0), (900, 900), (700, 700)])
    assert curve.hit_test(HIT_RADIUS, 0) == 1
    assert curve.hit_test(HIT_RADIUS + 0.5, 0) is None


def test_hit_test_miss():
    curve = CurveModel()
    curve.reset(1000, 1000)
    assert curve.hit_test(500, 500) is None


def test_custom_hit_radius():
    curve = CurveModel([(0, 0), (100, 100), (200, 200), (300, 300)], hit_radius=5)
    assert curve.hit_test(6, 0) is None
    assert curve.hit_test(4, 0) == 0


def test_move_point_clamps_to_bounds():
    curve = CurveModel()
    curve.reset(100, 50)

    assert curve.move_point(2, -5, 80, (100, 50))
    assert curve.get_points()[2] == (0.0, 50.0)

    assert curve.move_point(3, 140, -1, (100, 50))
    assert curve.get_points()[3] == (100.0, 0.0)

    assert curve.move_point(1, 42.5, 17.25, (100, 50))
    assert curve.get_points()[1] == (42.5, 17.25)


def test_move_point_invalid_index_is_noop():
    curve = CurveModel()
    curve.reset(100, 50)
    before = curve.get_points()

    assert not curve.move_point(4, 10, 10, (100, 50))
    assert not curve.move_point(-1, 10, 10, (100, 50))
    assert not curve.move_point(None, 10, 10, (100, 50))
    assert curve.get_points() == before


def test_scaled_by_is_pure():
    curve = CurveModel([(1, 2), (3, 4), (5, 6), (7, 8)])
    scaled = curve.scaled_by(2.0, 0.5)

    assert scaled.get_points() == [(2, 1), (6, 2), (10, 3), (14, 4)]
    assert curve.get_points() == [(1, 2), (3, 4), (5, 6), (7, 8)]
    assert scaled is not curve


def test_get_points_returns_copy():
    curve = CurveModel([(1, 2), (3, 4), (5, 6), (7, 8)])
    points = curve.get_points()
    points[0] = (99, 99)
    assert curve.get_points()[0] == (1, 2)


def test_evaluate_endpoints_and_midpoint():
    curve = CurveModel([(0, 0), (10, 30), (40, 20), (80, 60)])

    assert curve.evaluate(0.0) == (0.0, 0.0)

    x1, y1 = curve.evaluate(1.0)
    assert x1 == pytest.approx(80)
    assert y1 == pytest.approx(60)

    # Midpoint of a cubic Bezier: (P0 + 3 P1 + 3 P2 + P3) / 8
    xm, ym = curve.evaluate(0.5)
    assert xm == pytest.approx((0 + 30 + 120 + 80) / 8)
    assert ym == pytest.approx((0 + 90 + 60 + 60) / 8)


def test_evaluate_vectorized_matches_scalar():
    curve = CurveModel([(3, 7), (50, -20), (10, 90), (70, 40)])
    t = np.linspace(0, 1, 11)
    xs, ys = curve.evaluate(t)

    for i, ti in enumerate(t):
        x, y = curve.evaluate(ti)
        assert xs[i] == pytest.approx(x)
        assert ys[i] == pytest.approx(y)


def test_evaluate_constant_coordinate_is_exact():
    curve = CurveModel([(50, 0), (50, 0), (50, 100), (50, 100)])
    xs, _ = curve.evaluate(np.arange(1001) / 1000)
    assert np.all(xs == 50.0)


def test_curve_points_shape():
    curve = CurveModel()
    curve.reset(100, 100)
    polyline = curve.curve_points(50)
    assert polyline.shape == (51, 2)
    np.testing.assert_allclose(polyline[0], curve.get_points()[0])
