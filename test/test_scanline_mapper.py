"""Test the curve-to-scanline mapping.

Test cases:
    - test_map_has_one_entry_per_row()
    - test_build_is_deterministic()
    - test_more_samples_never_lose_rows()
    - test_mapping_converges_with_samples()
    - test_fill_gaps_single_row()
    - test_fill_gaps_two_row_gap_stays_open()
    - test_build_bridges_one_row_holes()
    - test_vertical_curve_maps_every_row()
    - test_closest_sample_wins_within_row()
    - test_equal_distance_keeps_first_sample()
    - test_scaled_curve_matches_preview()

Run:
    pytest test/test_scanline_mapper.py -v
"""

import numpy as np
import pytest

from stripelib.curve_model import CurveModel
from stripelib.scanline_mapper import ScanlineMap, build


def default_curve(width, height):
    curve = CurveModel()
    curve.reset(width, height)
    return curve


@pytest.mark.parametrize("height", [2, 3, 17, 150])
def test_map_has_one_entry_per_row(height):
    scanline_map = build(default_curve(120, height), height, 500)
    assert len(scanline_map) == height
    assert len(list(scanline_map)) == height


def test_zero_height_gives_empty_map():
    assert len(build(default_curve(10, 10), 0, 100)) == 0


def test_invalid_arguments():
    curve = default_curve(10, 10)
    with pytest.raises(ValueError):
        build(curve, -1, 100)
    with pytest.raises(ValueError):
        build(curve, 10, 0)


def test_build_is_deterministic():
    curve = default_curve(300, 200)
    a = build(curve, 200, 3500)
    b = build(curve, 200, 3500)

    assert a == b
    np.testing.assert_array_equal(a.valid, b.valid)
    np.testing.assert_array_equal(a.xs, b.xs)


def test_more_samples_never_lose_rows():
    curve = default_curve(400, 300)
    counts = [build(curve, 300, n).valid_count() for n in (25, 50, 100, 200, 400, 800)]
    assert counts == sorted(counts)
    assert counts[-1] > counts[0]


def test_mapping_converges_with_samples():
    curve = CurveModel([(20, 0), (30, 30), (50, 50), (60, 80)])
    a = build(curve, 80, 20000)
    b = build(curve, 80, 40000)

    np.testing.assert_array_equal(a.valid, b.valid)
    assert np.max(np.abs(a.xs[a.valid] - b.xs[b.valid])) <= 1


def test_curve_outside_raster_maps_nothing():
    curve = CurveModel([(0, -50), (10, -40), (20, -30), (30, -20)])
    scanline_map = build(curve, 40, 1000)
    assert len(scanline_map) == 40
    assert scanline_map.valid_count() == 0


def test_fill_gaps_single_row():
    scanline_map = ScanlineMap.empty(10)
    scanline_map.set(4, 10)
    scanline_map.set(6, 20)

    scanline_map.fill_gaps()

    assert scanline_map[5] == 15
    assert scanline_map[4] == 10
    assert scanline_map[6] == 20
    assert scanline_map.valid_count() == 3


def test_fill_gaps_floors_the_mean():
    scanline_map = ScanlineMap.empty(5)
    scanline_map.set(1, 3)
    scanline_map.set(3, 6)
    scanline_map.fill_gaps()
    assert scanline_map[2] == 4

    negative = ScanlineMap.empty(5)
    negative.set(1, -3)
    negative.set(3, 0)
    negative.fill_gaps()
    assert negative[2] == -2


def test_fill_gaps_two_row_gap_stays_open():
    scanline_map = ScanlineMap.empty(10)
    scanline_map.set(4, 10)
    scanline_map.set(7, 40)

    scanline_map.fill_gaps()

    assert scanline_map[5] is None and scanline_map[6] is None


def test_fill_gaps_is_single_pass():
    scanline_map = ScanlineMap.empty(7)
    for y, x in ((1, 0), (3, 10), (5, 30)):
        scanline_map.set(y, x)

    scanline_map.fill_gaps()

    assert scanline_map[2] == 5
    assert scanline_map[4] == 20
    assert scanline_map[0] is None
    assert scanline_map[6] is None


def test_fill_gaps_ignores_edges():
    scanline_map = ScanlineMap.empty(3)
    scanline_map.set(1, 5)
    scanline_map.fill_gaps()
    assert scanline_map[0] is None
    assert scanline_map[2] is None


def test_build_bridges_one_row_holes():
    # Straight line sampled every two rows, half a row below each row line
    curve = CurveModel([(0, 0.5), (10 / 3, 20.5), (20 / 3, 40.5), (10, 60.5)])
    scanline_map = build(curve, 60, 30)

    for y in range(1, 58, 2):
        assert scanline_map[y] is not None
        assert scanline_map[y] == (scanline_map[y - 1] + scanline_map[y + 1]) // 2

    # Last row has no sampled row below it
    assert scanline_map[59] is None
    assert scanline_map.valid_count() == 59


def test_vertical_curve_maps_every_row():
    curve = CurveModel([(50, 0), (50, 0), (50, 100), (50, 100)])
    scanline_map = build(curve, 100, 3500)

    assert scanline_map.valid_count() == 100
    assert all(x == 50 for x in scanline_map)


def test_closest_sample_wins_within_row():
    # Straight line drifting down through row 5; the last sample is nearest the row line
    curve = CurveModel([(0.5, 5.9), (0.5 + 100 / 3, 5.9 - 0.8 / 3),
                        (0.5 + 200 / 3, 5.9 - 1.6 / 3), (100.5, 5.1)])
    scanline_map = build(curve, 10, 3500)

    assert scanline_map.valid_count() == 1
    assert scanline_map[5] == 100


def test_equal_distance_keeps_first_sample():
    curve = CurveModel([(2.5, 5.5), (30, 5.5), (60, 5.5), (90.5, 5.5)])
    scanline_map = build(curve, 10, 1000)

    assert scanline_map.valid_count() == 1
    assert scanline_map[5] == 2


def test_non_monotonic_curve_picks_one_sample_per_row():
    # Curve goes down and comes back up, crossing rows twice
    curve = CurveModel([(10, 5), (40, 60), (70, 60), (100, 5)])
    scanline_map = build(curve, 60, 5000)

    assert len(scanline_map) == 60
    for y in scanline_map.valid_rows():
        assert 10 <= scanline_map[y] <= 100


def test_scaled_curve_matches_preview():
    preview_curve = CurveModel([(20, 0), (30, 30), (50, 50), (60, 80)])
    sx = sy = 3

    preview_map = build(preview_curve, 80, 3500)
    export_map = build(preview_curve.scaled_by(sx, sy), 80 * sy, 6000)

    for y in range(80):
        x_preview = preview_map[y]
        x_export = export_map[y * sy]
        assert x_preview is not None
        assert x_export is not None
        # Flooring at preview resolution drops up to one preview pixel (sx export
        # pixels); flooring at export resolution drops up to one more
        assert -1 <= x_export - x_preview * sx <= sx


def test_getitem_and_repr():
    scanline_map = ScanlineMap.empty(4)
    scanline_map.set(2, 7)
    assert scanline_map[2] == 7
    assert scanline_map[1] is None
    assert list(scanline_map) == [None, None, 7, None]
    assert "valid=1" in repr(scanline_map)


def test_mismatched_arrays_rejected():
    with pytest.raises(ValueError):
        ScanlineMap([1, 2, 3], [True, False])
