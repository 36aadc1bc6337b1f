import numpy as np
import pytest

from rappids.pyramid import Pyramid
from rappids.sections import deepest_collision_time, monotonic_sections
from rappids.trajectory import MonotonicTrajectory, PolynomialTrajectory


def _coeffs(x=(0, 0, 0, 0, 0, 0), y=(0, 0, 0, 0, 0, 0), z=(0, 0, 0, 0, 0, 0)):
    return np.array([x, y, z], dtype=float).T


def _pyramid():
    corners = [(1, -1, 2), (-1, -1, 2), (-1, 1, 2), (1, 1, 2)]
    return Pyramid.from_corners(2.0, (60, 10, 40, 30), corners)


def test_straight_line_is_one_section():
    traj = PolynomialTrajectory(_coeffs(z=(0, 0, 0, 0, 1, 0)), 0.0, 2.0)
    sections = monotonic_sections(traj)
    assert len(sections) == 1
    assert sections[0].start_time == 0.0
    assert sections[0].end_time == 2.0
    assert sections[0].increasing_depth


def test_turning_trajectory_splits_at_turn():
    # z = t^2 - 2t turns around at t = 1
    traj = PolynomialTrajectory(_coeffs(z=(0, 0, 0, 1, -2, 0)), 0.0, 3.0)
    sections = monotonic_sections(traj)
    spans = sorted((s.start_time, s.end_time) for s in sections)
    assert spans[0][0] == pytest.approx(0.0)
    assert spans[0][1] == pytest.approx(1.0)
    assert spans[1][1] == pytest.approx(3.0)


def test_sections_are_sorted_by_deepest_depth():
    traj = PolynomialTrajectory(_coeffs(z=(0, 0, 0, 1, -2, 0)), 0.0, 3.0)
    sections = monotonic_sections(traj)
    depths = [s.deepest_depth() for s in sections]
    assert depths == sorted(depths)


def test_sections_cover_interval_and_are_monotonic():
    traj = PolynomialTrajectory(_coeffs(z=(0, 0, 1, 0, -3, 0)), 0.0, 2.5)
    sections = sorted(monotonic_sections(traj), key=lambda s: s.start_time)
    assert sections[0].start_time == pytest.approx(0.0)
    assert sections[-1].end_time == pytest.approx(2.5)
    for a, b in zip(sections, sections[1:]):
        assert a.end_time == pytest.approx(b.start_time)
    for s in sections:
        ts = np.linspace(s.start_time, s.end_time, 20)
        zs = np.array([s.axis_value(2, t) for t in ts])
        diffs = np.diff(zs)
        assert np.all(diffs >= -1e-9) or np.all(diffs <= 1e-9)


def test_turn_outside_interval_gives_single_section():
    traj = PolynomialTrajectory(_coeffs(z=(0, 0, 0, 1, -2, 0)), 2.0, 3.0)
    sections = monotonic_sections(traj)
    assert len(sections) == 1
    assert sections[0].start_time == 2.0


def test_collision_time_lies_on_right_face_increasing():
    # x = t^2, z = t leaves the pyramid through the plane x = z / 2
    section = MonotonicTrajectory(
        _coeffs(x=(0, 0, 0, 1, 0, 0), z=(0, 0, 0, 0, 1, 0)), 0.0, 2.0
    )
    t = deepest_collision_time(section, _pyramid())
    assert t is not None
    assert 0.0 < t < 2.0
    p = section.value(t)
    assert p[0] == pytest.approx(p[2] / 2)


def test_collision_time_lies_on_right_face_decreasing():
    section = MonotonicTrajectory(
        _coeffs(x=(0, 0, 0, 1, 0, 0), z=(0, 0, 0, 0, -1, 0)), -2.0, 0.0
    )
    assert not section.increasing_depth
    t = deepest_collision_time(section, _pyramid())
    assert t is not None
    assert -2.0 < t < 0.0
    p = section.value(t)
    assert p[0] == pytest.approx(p[2] / 2)


def test_trajectory_inside_pyramid_has_no_collision():
    section = MonotonicTrajectory(
        _coeffs(x=(0, 0, 0, 0.1, 0, 0), z=(0, 0, 0, 0, 1, 0)), 0.0, 2.0
    )
    assert deepest_collision_time(section, _pyramid()) is None


def test_straight_ray_never_crosses_faces():
    section = MonotonicTrajectory(
        _coeffs(x=(0, 0, 0, 0, 3, 0), z=(0, 0, 0, 0, 1, 0)), 0.0, 2.0
    )
    assert deepest_collision_time(section, _pyramid()) is None