import numpy as np
import pytest

from rappids.camera import DepthCamera
from rappids.groundtruth import is_collision_free_ground_truth
from rappids.trajectory import PolynomialTrajectory


def _camera(pixel_value):
    image = np.full((40, 40), pixel_value, dtype=np.uint16)
    return DepthCamera(
        depth_image=image,
        depth_scale=0.001,
        focal_length=20.0,
        principal_point_x=20.0,
        principal_point_y=20.0,
        physical_vehicle_radius=0.1,
        vehicle_radius_for_planning=0.15,
        minimum_collision_distance=0.5,
    )


def _linear(velocity, duration):
    coeffs = [[0, 0, 0]] * 4 + [list(velocity), [0, 0, 0]]
    return PolynomialTrajectory(coeffs, 0.0, duration)


def test_short_trajectory_before_wall_is_free():
    camera = _camera(5000)
    assert is_collision_free_ground_truth(camera, _linear((0, 0, 1), 2.0)) is True


def test_trajectory_through_wall_collides():
    camera = _camera(5000)
    assert is_collision_free_ground_truth(camera, _linear((0, 0, 3), 2.0)) is False


def test_sideways_trajectory_violates_field_of_view():
    camera = _camera(0)
    coeffs = [[0, 0, 0]] * 4 + [[1, 0, 0], [0, 0, 1]]
    traj = PolynomialTrajectory(coeffs, 0.0, 2.0)
    assert is_collision_free_ground_truth(camera, traj) is False


def test_points_closer_than_minimum_distance_are_skipped():
    camera = _camera(300)
    coeffs = [[0, 0, 0]] * 4 + [[1, 0, 0], [0, 0, 0.1]]
    traj = PolynomialTrajectory(coeffs, 0.0, 2.0)
    assert is_collision_free_ground_truth(camera, traj) is True


def test_ignored_pixels_do_not_collide():
    camera = _camera(50)
    assert is_collision_free_ground_truth(camera, _linear((0, 0, 3), 2.0)) is True


def test_nonpositive_timestep_raises():
    camera = _camera(5000)
    with pytest.raises(ValueError):
        is_collision_free_ground_truth(camera, _linear((0, 0, 1), 2.0), 0.0)


def test_coarse_timestep_only_checks_start():
    camera = _camera(5000)
    assert is_collision_free_ground_truth(camera, _linear((0, 0, 3), 2.0), 5.0) is True