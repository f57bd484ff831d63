# tests/calibration/test_solver.py
import numpy as np
import pytest

from raider_route.domain.calibration.calibration_solver import (
    LeastSquaresCalibrator,
    fit_rms,
    project,
    solve,
)
from raider_route.domain.entities.calibration import CalibrationAnchor, ImagePoint, Transform


def anchor(lat, lng, x, y, node_id="n"):
    return CalibrationAnchor(node_id=node_id, lat=lat, lng=lng, x=x, y=y)


def _true_xy(lat, lng):
    # some skewed affine map with offsets, in the range of a real map image
    return 812.0 * lat - 37.5 * lng + 120.0, 14.0 * lat + 640.0 * lng + 75.0


@pytest.fixture
def unit_anchors():
    return [anchor(0, 0, 0, 0), anchor(1, 0, 100, 0), anchor(0, 1, 0, 100)]


# ---------- exact and least-squares fits


def test_three_axis_anchors_recover_scale(unit_anchors):
    t = solve(unit_anchors)
    assert t.as_list() == pytest.approx([100.0, 0.0, 0.0, 100.0, 0.0, 0.0], abs=1e-6)


def test_three_non_collinear_anchors_are_reproduced_exactly():
    pts = [(0.2, 0.1), (0.9, 0.4), (0.3, 0.8)]
    anchors = [anchor(lat, lng, *_true_xy(lat, lng)) for lat, lng in pts]
    t = solve(anchors)
    for a in anchors:
        p = project(a.lat, a.lng, t)
        assert p.x == pytest.approx(a.x, abs=1e-6)
        assert p.y == pytest.approx(a.y, abs=1e-6)
    assert fit_rms(anchors, t) == pytest.approx(0.0, abs=1e-6)


def test_many_anchors_match_numpy_least_squares():
    rng = np.random.default_rng(7)
    lat, lng = rng.uniform(0, 1, 12), rng.uniform(0, 1, 12)
    x, y = _true_xy(lat, lng)
    x, y = x + rng.normal(0, 2.0, 12), y + rng.normal(0, 2.0, 12)
    anchors = [anchor(*row) for row in zip(lat, lng, x, y)]

    t = solve(anchors)

    M = np.column_stack([lat, lng, np.ones_like(lat)])
    (a, b, tx), *_ = np.linalg.lstsq(M, x, rcond=None)
    (c, d, ty), *_ = np.linalg.lstsq(M, y, rcond=None)
    assert t.as_list() == pytest.approx([a, b, c, d, tx, ty], rel=1e-6, abs=1e-6)


def test_adding_a_perfectly_fit_anchor_keeps_coefficients():
    pts = [(0.1, 0.2), (0.7, 0.3), (0.4, 0.9), (0.8, 0.8)]
    anchors = [anchor(lat, lng, *_true_xy(lat, lng)) for lat, lng in pts]
    before = solve(anchors)
    after = solve([*anchors, anchor(0.5, 0.5, *_true_xy(0.5, 0.5))])
    assert after.as_list() == pytest.approx(before.as_list(), abs=1e-6)


# ---------- insufficient / degenerate input


def test_fewer_than_three_anchors_is_insufficient(unit_anchors):
    assert solve([]) is None
    assert solve(unit_anchors[:2]) is None


def test_configurable_minimum(unit_anchors):
    assert solve(unit_anchors, min_anchors=4) is None
    assert LeastSquaresCalibrator(min_anchors=4).solve(unit_anchors) is None
    assert LeastSquaresCalibrator().solve(unit_anchors) is not None


def test_collinear_anchors_fall_back_to_identity_like_axes():
    anchors = [anchor(0, 0, 0, 0), anchor(1, 1, 10, 20), anchor(2, 2, 20, 40)]
    t = solve(anchors)
    assert t == Transform(a=1.0, b=0.0, c=1.0, d=0.0, tx=0.0, ty=0.0)
    assert all(np.isfinite(t.as_list()))


def test_collinear_anchors_at_game_scale_still_fall_back():
    # lng = 2*lat + const, far from the origin
    anchors = [anchor(1234.5 + k, 3000.25 + 2 * k, 50.0 * k, 7.0 * k) for k in range(4)]
    t = solve(anchors)
    assert t == Transform(a=1.0, b=0.0, c=1.0, d=0.0, tx=0.0, ty=0.0)


def test_game_scale_anchors_recover_offset_transform():
    pts = [(1234.5, 3000.25), (1290.0, 3010.0), (1250.0, 3075.5), (1301.25, 3060.0)]
    anchors = [anchor(lat, lng, *_true_xy(lat, lng)) for lat, lng in pts]
    t = solve(anchors)
    assert t.as_list() == pytest.approx([812.0, -37.5, 14.0, 640.0, 120.0, 75.0], rel=1e-6)
    assert fit_rms(anchors, t) == pytest.approx(0.0, abs=1e-4)


# ---------- projection


def test_project_evaluates_both_equations():
    t = Transform(a=2.0, b=3.0, c=-1.0, d=0.5, tx=10.0, ty=-4.0)
    assert project(1.0, 2.0, t) == ImagePoint(2 + 6 + 10, -1 + 1 - 4)
    # persisted list form works too
    assert project(1.0, 2.0, t.as_list()) == project(1.0, 2.0, t)


@pytest.mark.parametrize("bad", [[1.0, 2.0, 3.0], [], [0.0] * 7, None, ["a"] * 6])
def test_project_with_malformed_transform_returns_origin(bad):
    assert project(12.0, 34.0, bad) == ImagePoint(0.0, 0.0)


def test_transform_from_sequence_round_trip():
    coeffs = [1.5, 0.0, -2.0, 3.0, 4.0, 5.0]
    assert Transform.from_sequence(coeffs).as_list() == coeffs
    assert Transform.from_sequence(coeffs[:5]) is None
