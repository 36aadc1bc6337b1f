"""Ray-tracing collision check used as ground truth for the pyramid planner."""

from __future__ import annotations

from typing import Iterator

import numpy as np

from .camera import DepthCamera
from .trajectory import PolynomialTrajectory


def _sample_times(trajectory: PolynomialTrajectory, timestep: float) -> Iterator[float]:
    t = trajectory.start_time
    while t < trajectory.end_time:
        yield t
        t += timestep


def is_collision_free_ground_truth(
    camera: DepthCamera, trajectory: PolynomialTrajectory, timestep: float = 0.1
) -> bool:
    """Check a trajectory against every pixel of the depth image.

    The trajectory is sampled every ``timestep`` seconds. A sample violates
    the field of view if it projects too close to the image edge; it
    collides if any pixel lies inside or in front of the vehicle sphere.
    Samples closer than the minimum collision distance are skipped.
    Returns True if the trajectory is collision free.
    """
    if timestep <= 0:
        raise ValueError("timestep must be positive")

    offset = camera.image_edge_offset
    min_dist = camera.minimum_collision_distance

    samples = [
        pos
        for pos in (trajectory.value(t) for t in _sample_times(trajectory, timestep))
        if pos[2] >= min_dist
    ]

    for pos in samples:
        px, py = camera.project_point(pos)
        if (
            px <= offset
            or px > camera.width - offset
            or py <= offset
            or py > camera.height - offset
        ):
            return False

    if not samples:
        return True

    depths = camera.depth_image.astype(float)
    valid = camera.depth_image > camera.ignore_distance
    ys, xs = np.mgrid[0 : camera.height, 0 : camera.width]
    rays = np.stack(
        [
            (xs - camera.principal_point_x) / camera.focal_length,
            (ys - camera.principal_point_y) / camera.focal_length,
            np.ones_like(xs, dtype=float),
        ],
        axis=-1,
    )
    ray_norms = np.linalg.norm(rays, axis=-1)
    unit_rays = rays[valid] / ray_norms[valid][:, None]
    pixel_dists = depths[valid] * camera.depth_scale * ray_norms[valid]
    radius_sq = camera.vehicle_radius_for_planning**2

    for pos in samples:
        along = unit_rays @ pos
        under_sqrt = along**2 - float(pos @ pos) + radius_sq
        hit = under_sqrt >= 0
        if not hit.any():
            continue
        second = along[hit] + np.sqrt(under_sqrt[hit])
        if np.any(pixel_dists[hit] < second):
            return False
    return True