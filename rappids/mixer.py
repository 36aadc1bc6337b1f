"""Mixing of a total thrust and body torques into per-propeller forces."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


class QuadcopterMixer:
    """Computes the propeller forces that produce a total thrust and torque.

    Propellers are numbered as seen from above, with x forward and y left::

              x
              ^
         f[3] |  f[0]
              |
        y <---+----
              |
         f[2] |  f[1]

    The motors sit off the axes, at ``arm_length / sqrt(2)`` in each
    component from the centre of mass.
    """

    def __init__(self) -> None:
        self._d = 0.0
        self._kt = 0.0
        self._kf = 0.0
        self.min_thrust_per_propeller = 0.0
        self.max_thrust_per_propeller = 1000000.0
        self.max_cmd_total_thrust = 4 * self.max_thrust_per_propeller
        self._corr_fac = np.ones(4)

    def set_parameters(
        self,
        arm_length: float,
        propeller_thrust_from_speed_sqr: float,
        propeller_torque_from_thrust: float,
        prop0_spin_dir: int,
        max_thrust_per_propeller: float,
        min_thrust_per_propeller: float,
        max_cmd_total_thrust: float = -1.0,
    ) -> None:
        """Set the vehicle geometry and propeller limits.

        ``prop0_spin_dir`` is +1 if propeller 0 spins upwards. A negative
        ``max_cmd_total_thrust`` leaves 20% of the maximum thrust for
        attitude control.
        """
        self._d = arm_length / math.sqrt(2.0)
        self._kt = prop0_spin_dir * propeller_torque_from_thrust
        self._kf = propeller_thrust_from_speed_sqr
        self.max_thrust_per_propeller = max_thrust_per_propeller
        self.min_thrust_per_propeller = min_thrust_per_propeller
        if max_cmd_total_thrust < 0:
            self.max_cmd_total_thrust = 4 * max_thrust_per_propeller * 0.8
        else:
            self.max_cmd_total_thrust = max_cmd_total_thrust

    def set_correction_factors(self, factors: Sequence[float]) -> None:
        """Set the per-propeller thrust correction factors."""
        values = np.asarray(factors, dtype=float)
        if values.shape != (4,):
            raise ValueError(f"expected 4 correction factors, got shape {values.shape}")
        self._corr_fac = values.copy()

    def correction_factor(self, index: int) -> float:
        """Correction factor of one propeller."""
        if not 0 <= index < 4:
            raise IndexError(f"propeller index {index} out of range")
        return float(self._corr_fac[index])

    def motor_forces(self, total_force: float, torque) -> np.ndarray:
        """Per-propeller forces [N] giving ``total_force`` and ``torque``.

        The total force is saturated at the commanded maximum and each
        force is clipped to the per-propeller limits.
        """
        if self._d == 0 or self._kt == 0:
            raise ValueError("mixer parameters must be set before mixing")
        tx, ty, tz = (float(v) for v in torque)
        des_f = min(float(total_force), self.max_cmd_total_thrust)
        a, b, c = tx / self._d, ty / self._d, tz / self._kt
        forces = np.array(
            [
                -a - b - c + des_f,
                -a + b + c + des_f,
                +a + b - c + des_f,
                +a - b + c + des_f,
            ]
        ) / 4.0
        return np.clip(forces, self.min_thrust_per_propeller, self.max_thrust_per_propeller)

    def propeller_speeds_from_thrust(self, thrusts: Sequence[float]) -> np.ndarray:
        """Propeller speeds [rad/s] giving the requested thrusts; zero for non-positive thrust."""
        values = np.asarray(thrusts, dtype=float)
        if values.shape != (4,):
            raise ValueError(f"expected 4 thrusts, got shape {values.shape}")
        if self._kf == 0:
            raise ValueError("mixer parameters must be set before computing speeds")
        speeds = np.zeros(4)
        positive = values > 0
        speeds[positive] = np.sqrt(
            values[positive] / (self._corr_fac[positive] * self._kf)
        )
        return speeds

    def uncorrected_force(self, speed: float) -> float:
        """Thrust of a propeller at ``speed`` ignoring correction factors."""
        return self._kf * speed * speed