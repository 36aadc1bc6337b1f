"""Splitting trajectories into monotonic-depth sections and intersecting them with pyramids."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .pyramid import Pyramid
from .trajectory import MonotonicTrajectory, PolynomialTrajectory, real_roots

_DUPLICATE_TOL = 1e-6


def monotonic_sections(trajectory: PolynomialTrajectory) -> list[MonotonicTrajectory]:
    """Split a trajectory where its depth changes direction.

    The returned sections are sorted by the depth of their deepest point,
    shallowest first.
    """
    start, end = trajectory.start_time, trajectory.end_time
    z_velocity = trajectory.derivative_coeffs()[:, 2]
    times = sorted([start, end, *real_roots(z_velocity)])

    sections: list[MonotonicTrajectory] = []
    for t0, t1 in zip(times, times[1:]):
        if t0 < start:
            continue
        if abs(t0 - t1) < _DUPLICATE_TOL:
            continue
        if t0 >= end:
            break
        if t1 > end:
            break
        sections.append(MonotonicTrajectory(trajectory.coeffs, t0, t1))
    sections.sort()
    return sections


def deepest_collision_time(
    section: MonotonicTrajectory, pyramid: Pyramid
) -> Optional[float]:
    """Time of the deepest crossing of a lateral face of ``pyramid``, or None.

    The trajectory is assumed to start at the camera focal point, so the
    constant term of its polynomial is zero and every lateral face passes
    through the origin.
    """
    start, end = section.start_time, section.end_time
    collision_time = start if section.increasing_depth else end
    collides = False

    for normal in pyramid.plane_normals:
        # Distance to the face is t * (c0 t^4 + ... + c4); the factor t is dropped.
        poly = section.coeffs[:5] @ np.asarray(normal, dtype=float)
        roots = real_roots(poly)
        if section.increasing_depth:
            for r in reversed(roots):
                if r > end:
                    continue
                if r <= start:
                    break
                if r > collision_time:
                    collision_time = r
                    collides = True
                    break
        else:
            for r in roots:
                if r < start:
                    continue
                if r >= end:
                    break
                if r < collision_time:
                    collision_time = r
                    collides = True
                    break
    return collision_time if collides else None