"""Quintic polynomial trajectories and sections with monotonically changing depth."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

_LEADING_COEFF_TOL = 1e-6
_IMAG_TOL = 1e-6


def real_roots(coeffs: Iterable[float]) -> list[float]:
    """Return the sorted real roots of a polynomial.

    ``coeffs`` are ordered from the highest power down to the constant term.
    A leading coefficient no larger than 1e-6 in magnitude is treated as
    zero, which lowers the degree of the polynomial.
    """
    c = [float(v) for v in coeffs]
    while c and abs(c[0]) <= _LEADING_COEFF_TOL:
        c.pop(0)
    if len(c) <= 1:
        return []
    roots = np.roots(c)
    found = [
        float(r.real)
        for r in roots
        if abs(r.imag) <= _IMAG_TOL * max(1.0, abs(r.real))
    ]
    return sorted(found)


class PolynomialTrajectory:
    """A fifth order polynomial trajectory in 3D, valid between two times.

    ``coeffs`` holds six 3-vectors, ordered from the ``t**5`` term down to
    the constant term.
    """

    def __init__(
        self,
        coeffs: Sequence[Sequence[float]],
        start_time: float,
        end_time: float,
    ) -> None:
        arr = np.array(coeffs, dtype=float)
        if arr.shape != (6, 3):
            raise ValueError(
                f"expected six 3-vector coefficients, got shape {arr.shape}"
            )
        self.coeffs = arr
        self.start_time = float(start_time)
        self.end_time = float(end_time)

    @property
    def duration(self) -> float:
        """Length of the valid time interval [s]."""
        return self.end_time - self.start_time

    def value(self, t: float) -> np.ndarray:
        """Position at time ``t``."""
        return np.polyval(self.coeffs, t)

    def axis_value(self, axis: int, t: float) -> float:
        """Position along one axis (0 = x, 1 = y, 2 = z) at time ``t``."""
        return float(np.polyval(self.coeffs[:, axis], t))

    def derivative_coeffs(self) -> np.ndarray:
        """Coefficients of the velocity polynomial, from ``t**4`` down to the constant."""
        powers = np.arange(5, 0, -1, dtype=float)[:, None]
        return self.coeffs[:-1] * powers

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(coeffs={self.coeffs.tolist()!r}, "
            f"start_time={self.start_time!r}, end_time={self.end_time!r})"
        )


class MonotonicTrajectory(PolynomialTrajectory):
    """A trajectory section whose depth (z) changes monotonically.

    Monotonicity is assumed, not checked. Sections order by the depth of
    their deepest point, so the deepest can be checked for collisions first.
    """

    def __init__(
        self,
        coeffs: Sequence[Sequence[float]],
        start_time: float,
        end_time: float,
    ) -> None:
        super().__init__(coeffs, start_time, end_time)
        self.increasing_depth = self.axis_value(2, self.start_time) < self.axis_value(
            2, self.end_time
        )

    def deepest_depth(self) -> float:
        """Depth of the deepest point of the section."""
        t = self.end_time if self.increasing_depth else self.start_time
        return self.axis_value(2, t)

    def __lt__(self, other: "MonotonicTrajectory") -> bool:
        if not isinstance(other, MonotonicTrajectory):
            return NotImplemented
        return self.deepest_depth() < other.deepest_depth()