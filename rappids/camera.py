"""Pinhole depth camera model used by the planner."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class DepthCamera:
    """A 16-bit depth image together with the intrinsics of the camera that took it.

    ``depth_scale`` converts a stored pixel value to metres
    (``depth = depth_scale * pixel_value``).  Depth values closer than
    ``physical_vehicle_radius`` are ignored; planning uses
    ``vehicle_radius_for_planning``; trajectory parts closer than
    ``minimum_collision_distance`` are not collision checked.
    """

    depth_image: np.ndarray
    depth_scale: float
    focal_length: float
    principal_point_x: float
    principal_point_y: float
    physical_vehicle_radius: float
    vehicle_radius_for_planning: float
    minimum_collision_distance: float
    _pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        image = np.asarray(self.depth_image)
        if image.ndim != 2:
            raise ValueError(
                f"depth image must be two-dimensional, got {image.ndim} dimensions"
            )
        self.depth_image = image.astype(np.uint16, copy=False)
        self._pixels = self.depth_image

    @property
    def width(self) -> int:
        """Image width in pixels."""
        return int(self.depth_image.shape[1])

    @property
    def height(self) -> int:
        """Image height in pixels."""
        return int(self.depth_image.shape[0])

    @property
    def image_edge_offset(self) -> int:
        """Pixels near the image border treated as violating the field of view."""
        return int(
            self.focal_length
            * self.physical_vehicle_radius
            / self.minimum_collision_distance
        )

    @property
    def ignore_distance(self) -> int:
        """Pixel value at or below which depth readings are ignored."""
        return int(self.physical_vehicle_radius / self.depth_scale)

    def deproject_pixel(self, x: float, y: float, depth: float) -> np.ndarray:
        """Return the 3D point at ``depth`` seen through pixel ``(x, y)``.

        X points towards the right edge of the image, Y towards the bottom
        edge and Z into the image.
        """
        return depth * np.array(
            [
                (x - self.principal_point_x) / self.focal_length,
                (y - self.principal_point_y) / self.focal_length,
                1.0,
            ]
        )

    def project_point(self, point) -> tuple[float, float]:
        """Return the pixel coordinates at which ``point`` appears in the image."""
        px, py, pz = (float(v) for v in point)
        return (
            px * self.focal_length / pz + self.principal_point_x,
            py * self.focal_length / pz + self.principal_point_y,
        )