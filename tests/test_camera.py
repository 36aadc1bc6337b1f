import numpy as np
import pytest

from rappids.camera import DepthCamera


def make_camera(width=160, height=120, value=3000):
    image = np.full((height, width), value, dtype=np.uint16)
    return DepthCamera(
        depth_image=image,
        depth_scale=0.001,
        focal_length=100.0,
        principal_point_x=width / 2,
        principal_point_y=height / 2,
        physical_vehicle_radius=0.26,
        vehicle_radius_for_planning=0.46,
        minimum_collision_distance=1.0,
    )


def test_dimensions_follow_image_shape():
    camera = make_camera(width=64, height=48)
    assert camera.width == 64
    assert camera.height == 48


def test_image_must_be_two_dimensional():
    with pytest.raises(ValueError):
        DepthCamera(
            depth_image=np.zeros((4, 4, 3), dtype=np.uint16),
            depth_scale=0.001,
            focal_length=100.0,
            principal_point_x=2.0,
            principal_point_y=2.0,
            physical_vehicle_radius=0.26,
            vehicle_radius_for_planning=0.46,
            minimum_collision_distance=1.0,
        )


def test_image_stored_as_uint16():
    camera = make_camera()
    assert camera.depth_image.dtype == np.uint16


def test_image_edge_offset_truncates():
    camera = make_camera()
    assert camera.image_edge_offset == int(100.0 * 0.26 / 1.0)


def test_ignore_distance_in_pixel_units():
    camera = make_camera()
    assert camera.ignore_distance == int(0.26 / 0.001)


def test_principal_point_deprojects_onto_axis():
    camera = make_camera()
    point = camera.deproject_pixel(camera.principal_point_x, camera.principal_point_y, 2.5)
    np.testing.assert_allclose(point, [0.0, 0.0, 2.5])


def test_point_on_axis_projects_to_principal_point():
    camera = make_camera()
    assert camera.project_point([0.0, 0.0, 4.0]) == pytest.approx(
        (camera.principal_point_x, camera.principal_point_y)
    )


@pytest.mark.parametrize("x,y,depth", [(10.0, 20.0, 1.5), (150.5, 3.25, 3.0), (80.0, 119.0, 0.7)])
def test_deproject_then_project_round_trip(x, y, depth):
    camera = make_camera()
    point = camera.deproject_pixel(x, y, depth)
    assert point[2] == pytest.approx(depth)
    assert camera.project_point(point) == pytest.approx((x, y))


def test_projection_invariant_along_ray():
    camera = make_camera()
    near = camera.project_point([0.3, -0.2, 1.0])
    far = camera.project_point([0.9, -0.6, 3.0])
    assert near == pytest.approx(far)


def test_projecting_point_in_focal_plane_fails():
    camera = make_camera()
    with pytest.raises(ZeroDivisionError):
        camera.project_point([1.0, 1.0, 0.0])