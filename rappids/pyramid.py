"""Rectangular pyramids that partition free space seen by a depth camera."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Sequence

import numpy as np


def _unit(v: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(v))
    if norm == 0.0:
        raise ValueError("pyramid corners are degenerate")
    return v / norm


@dataclass(eq=False)
class Pyramid:
    """A pyramid with its apex at the camera focal point.

    Projected into the image it appears as the rectangle bounded by the
    pixel columns ``left`` < ``right`` and rows ``top`` < ``bottom``.
    ``depth`` is the depth of the base plane [m]; ``plane_normals`` are the
    outward unit normals of the four lateral faces (top, left, bottom,
    right).  Pyramids order by ``depth`` and compare with plain numbers,
    so a sorted list can be searched with :mod:`bisect`.
    """

    depth: float
    right: int
    top: int
    left: int
    bottom: int
    plane_normals: tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]

    @classmethod
    def from_corners(
        cls,
        depth: float,
        edges: Sequence[int],
        corners: Sequence[Sequence[float]],
    ) -> "Pyramid":
        """Build a pyramid from its edges and base corners.

        ``edges`` holds the right, top, left and bottom pixel bounds.
        ``corners`` holds the top right, top left, bottom left and bottom
        right corners of the base, in the camera-fixed frame.
        """
        if len(edges) != 4:
            raise ValueError(f"expected 4 edges, got {len(edges)}")
        if len(corners) != 4:
            raise ValueError(f"expected 4 corners, got {len(corners)}")
        pts = [np.asarray(c, dtype=float) for c in corners]
        normals = tuple(
            _unit(np.cross(pts[i], pts[(i + 1) % 4])) for i in range(4)
        )
        right, top, left, bottom = (int(e) for e in edges)
        return cls(float(depth), right, top, left, bottom, normals)

    @property
    def edges(self) -> tuple[int, int, int, int]:
        """The right, top, left and bottom pixel bounds."""
        return (self.right, self.top, self.left, self.bottom)

    def contains_pixel(self, pixel_x: float, pixel_y: float, buffer: int = 2) -> bool:
        """True if the pixel lies more than ``buffer`` pixels inside the rectangle."""
        return (
            self.left + buffer < pixel_x < self.right - buffer
            and self.top + buffer < pixel_y < self.bottom - buffer
        )

    @staticmethod
    def _key(other) -> float:
        if isinstance(other, Pyramid):
            return other.depth
        if isinstance(other, Real):
            return float(other)
        raise TypeError(f"cannot compare Pyramid with {type(other).__name__}")

    def __lt__(self, other) -> bool:
        try:
            return self.depth < self._key(other)
        except TypeError:
            return NotImplemented

    def __gt__(self, other) -> bool:
        try:
            return self.depth > self._key(other)
        except TypeError:
            return NotImplemented