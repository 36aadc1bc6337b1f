"""Collision checking of trajectories against pyramids built from a depth image."""

from __future__ import annotations

import bisect
import math
import time
from typing import Callable, Optional

from .camera import DepthCamera
from .inflation import inflate_pyramid
from .pyramid import Pyramid
from .sections import deepest_collision_time, monotonic_sections
from .trajectory import MonotonicTrajectory, PolynomialTrajectory


def _depth_key(pyramid: Pyramid) -> float:
    return pyramid.depth


class CollisionChecker:
    """Checks trajectories for collisions, inflating pyramids as needed.

    Pyramids generated while checking are kept, ordered by depth, and
    reused for later trajectories. Trajectories are assumed to be written
    in the camera-fixed frame and to start at the focal point.
    """

    def __init__(
        self,
        camera: DepthCamera,
        *,
        max_pyramids: Optional[int] = None,
        max_pyramid_gen_time: float = 1000.0,
        pixel_buffer: int = 2,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.camera = camera
        self.max_pyramids = math.inf if max_pyramids is None else max_pyramids
        self.max_pyramid_gen_time = max_pyramid_gen_time
        self.pixel_buffer = pixel_buffer
        self._clock = clock
        self._pyramids: list[Pyramid] = []
        self._inflate_time = 0.0

    @property
    def pyramids(self) -> list[Pyramid]:
        """All pyramids generated so far, ordered by depth."""
        return list(self._pyramids)

    @property
    def inflate_time(self) -> float:
        """Seconds spent generating pyramids."""
        return self._inflate_time

    def find_containing_pyramid(
        self, pixel_x: float, pixel_y: float, depth: float
    ) -> Optional[Pyramid]:
        """A pyramid deeper than ``depth`` whose rectangle contains the pixel."""
        first = bisect.bisect_left(self._pyramids, depth, key=_depth_key)
        for pyramid in self._pyramids[first:]:
            if pyramid.contains_pixel(pixel_x, pixel_y, self.pixel_buffer):
                return pyramid
        return None

    def _add_pyramid_for(self, pixel_x: float, pixel_y: float, depth: float) -> Optional[Pyramid]:
        if (
            len(self._pyramids) >= self.max_pyramids
            or self._inflate_time > self.max_pyramid_gen_time
        ):
            return None
        started = self._clock()
        pyramid = inflate_pyramid(
            self.camera, pixel_x, pixel_y, depth, self.pixel_buffer
        )
        self._inflate_time += self._clock() - started
        if pyramid is not None:
            bisect.insort_left(self._pyramids, pyramid, key=_depth_key)
        return pyramid

    def is_collision_free(
        self, trajectory: PolynomialTrajectory, deadline: Optional[float] = None
    ) -> bool:
        """True if the trajectory is found to be collision free.

        ``deadline`` is a time on this checker's clock after which the check
        gives up and reports a collision; None means no limit.
        """
        min_dist = self.camera.minimum_collision_distance
        pending = monotonic_sections(trajectory)
        while pending:
            if deadline is not None and self._clock() > deadline:
                return False

            section = pending.pop()
            if section.increasing_depth:
                near_t, far_t = section.start_time, section.end_time
            else:
                near_t, far_t = section.end_time, section.start_time
            start_point = section.value(near_t)
            end_point = section.value(far_t)

            if start_point[2] < min_dist and end_point[2] < min_dist:
                continue

            pixel_x, pixel_y = self.camera.project_point(end_point)
            depth = float(end_point[2])
            pyramid = self.find_containing_pyramid(pixel_x, pixel_y, depth)
            if pyramid is None:
                pyramid = self._add_pyramid_for(pixel_x, pixel_y, depth)
                if pyramid is None:
                    return False

            collision_time = deepest_collision_time(section, pyramid)
            if collision_time is not None:
                if section.increasing_depth:
                    remainder = MonotonicTrajectory(
                        section.coeffs, section.start_time, collision_time
                    )
                else:
                    remainder = MonotonicTrajectory(
                        section.coeffs, collision_time, section.end_time
                    )
                pending.append(remainder)
        return True