"""Kalman filter tracking a rigid body from IMU data and UWB range measurements."""

from __future__ import annotations

import math
import time
from typing import Callable

import numpy as np
from scipy.spatial.transform import Rotation

GRAVITY = 9.81
_TIME_CONST_ATT_CORR = 4.0  # [s]
_E3 = np.array([0.0, 0.0, 1.0])
_POS = slice(0, 3)
_VEL = slice(3, 6)
_ATT = slice(6, 9)
_NUM_STATES = 9


def _skew(v: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [0.0, -v[2], v[1]],
            [v[2], 0.0, -v[0]],
            [-v[1], v[0], 0.0],
        ]
    )


def _gravity_alignment(attitude: Rotation, acc: np.ndarray) -> tuple[np.ndarray, float]:
    """Axis and angle rotating the expected gravity direction onto the measured one."""
    expected = attitude.inv().apply(_E3)
    acc_unit = acc / np.linalg.norm(acc)
    axis = np.cross(acc_unit, expected)
    norm = np.linalg.norm(axis)
    axis = axis / norm if norm > 1e-6 else np.array([1.0, 0.0, 0.0])
    cos_error = float(np.dot(expected, acc_unit))
    angle = math.acos(min(1.0, max(-1.0, cos_error)))
    return axis, angle


class KalmanFilter6DOF:
    """Estimates position, velocity and attitude of a vehicle.

    The accelerometer and rate gyroscope drive the prediction step, UWB
    ranges to anchors at known positions drive the measurement update.
    The rate gyro is used directly as the angular velocity estimate.
    ``attitude`` maps body-frame vectors to the world frame.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        *,
        init_std_dev_pos: float = 3.0,
        init_std_dev_vel: float = 3.0,
        init_std_dev_att_perp_to_gravity: float = math.radians(10.0),
        init_std_dev_att_about_gravity: float = math.radians(30.0),
        meas_noise_std_dev_accelerometer: float = 5.0,
        meas_noise_std_dev_rate_gyro: float = 0.1,
        meas_noise_std_dev_range: float = 0.14,
        outlier_statistical_distance: float = 3.0,
        max_sequential_rejections: int = 5,
    ) -> None:
        self._clock = clock
        self.init_std_dev_pos = init_std_dev_pos
        self.init_std_dev_vel = init_std_dev_vel
        self.init_std_dev_att_perp_to_gravity = init_std_dev_att_perp_to_gravity
        self.init_std_dev_att_about_gravity = init_std_dev_att_about_gravity
        self.meas_noise_std_dev_accelerometer = meas_noise_std_dev_accelerometer
        self.meas_noise_std_dev_rate_gyro = meas_noise_std_dev_rate_gyro
        self.meas_noise_std_dev_range = meas_noise_std_dev_range
        self.outlier_statistical_distance = outlier_statistical_distance
        self.max_sequential_rejections = max_sequential_rejections

        self.imu_initialized = False
        self.uwb_initialized = False
        self.rejection_count = 0
        self._sequential_rejections = 0
        self.reset_count = 0
        self._last_checked_reset_count = 0

        self.position = np.zeros(3)
        self.velocity = np.zeros(3)
        self.attitude = Rotation.identity()
        self.angular_velocity = np.zeros(3)
        self.covariance = np.zeros((_NUM_STATES, _NUM_STATES))
        self._last_att_correction = np.zeros(3)
        self._estimate_time = clock()
        self._last_good_update_time = self._estimate_time

    def reset(self) -> None:
        """Hard reset of all internal states."""
        self.reset_count += 1
        self.imu_initialized = False
        self.uwb_initialized = False
        self.position = np.zeros(3)
        self.velocity = np.zeros(3)
        self.attitude = Rotation.identity()
        self.angular_velocity = np.zeros(3)

        diagonal = np.concatenate(
            [
                np.full(3, self.init_std_dev_pos**2),
                np.full(3, self.init_std_dev_vel**2),
                [
                    self.init_std_dev_att_perp_to_gravity**2,
                    self.init_std_dev_att_perp_to_gravity**2,
                    self.init_std_dev_att_about_gravity**2,
                ],
            ]
        )
        self.covariance = np.diag(diagonal)

        now = self._clock()
        self._estimate_time = now
        self._last_good_update_time = now
        self._last_att_correction = np.zeros(3)

    def predict(self, gyro, acc) -> None:
        """Prediction step using rate gyro [rad/s] and accelerometer [m/s^2] readings."""
        gyro = np.asarray(gyro, dtype=float)
        acc = np.asarray(acc, dtype=float)

        if not self.imu_initialized:
            self.reset()
            self.imu_initialized = True
            self._estimate_time = self._clock()
            # Assume the accelerometer measures gravity; align the attitude with it.
            axis, angle = _gravity_alignment(self.attitude, acc)
            self.attitude = self.attitude * Rotation.from_rotvec(axis * angle)
            return

        now = self._clock()
        dt = now - self._estimate_time
        self._estimate_time = now

        if not self.uwb_initialized:
            # Complementary attitude estimate from gyro and accelerometer.
            self.angular_velocity = gyro
            self.attitude = self.attitude * Rotation.from_rotvec(gyro * dt)
            axis, angle = _gravity_alignment(self.attitude, acc)
            correction = (dt / _TIME_CONST_ATT_CORR) * angle
            self.attitude = self.attitude * Rotation.from_rotvec(axis * correction)
            return

        old_attitude = self.attitude
        world_acc = old_attitude.apply(acc) - GRAVITY * _E3
        self.position = self.position + self.velocity * dt
        self.velocity = self.velocity + world_acc * dt
        self.attitude = old_attitude * Rotation.from_rotvec(gyro * dt)
        self.angular_velocity = gyro

        f = np.zeros((_NUM_STATES, _NUM_STATES))
        f[_POS, _POS] = np.eye(3)
        f[_POS, _VEL] = dt * np.eye(3)
        f[_VEL, _VEL] = np.eye(3)
        f[_VEL, _ATT] = -dt * old_attitude.as_matrix() @ _skew(acc)
        f[_ATT, _ATT] = np.eye(3) - _skew(dt * gyro + self._last_att_correction / 2.0)
        self._last_att_correction = np.zeros(3)

        self.covariance = f @ self.covariance @ f.T
        indices = np.arange(3)
        self.covariance[3 + indices, 3 + indices] += (
            self.meas_noise_std_dev_accelerometer**2 * dt * dt
        )
        self.covariance[6 + indices, 6 + indices] += (
            self.meas_noise_std_dev_rate_gyro**2 * dt * dt
        )

    def update_with_range_measurement(self, target_position, measured_range: float) -> bool:
        """Measurement update with a range to an anchor at ``target_position``.

        Returns True if the measurement was applied, False if it was ignored
        or rejected as an outlier.
        """
        if not self.imu_initialized:
            return False
        if math.isnan(measured_range):
            return False

        self.uwb_initialized = True

        offset = self.position - np.asarray(target_position, dtype=float)
        expected_range = float(np.linalg.norm(offset))
        h = np.zeros((1, _NUM_STATES))
        h[0, _POS] = offset / expected_range

        innovation_cov = float((h @ self.covariance @ h.T)[0, 0]) + (
            self.meas_noise_std_dev_range**2
        )
        gain = self.covariance @ h.T / innovation_cov

        innovation = measured_range - expected_range
        if innovation * innovation / innovation_cov > self.outlier_statistical_distance**2:
            self.rejection_count += 1
            self._sequential_rejections += 1
            if self._sequential_rejections >= self.max_sequential_rejections:
                self.reset()
            return False
        self._sequential_rejections = 0

        dx = (gain * innovation).ravel()
        self.position = self.position + dx[_POS]
        self.velocity = self.velocity + dx[_VEL]
        self._last_att_correction = dx[_ATT].copy()
        self.attitude = self.attitude * Rotation.from_rotvec(self._last_att_correction)

        self.covariance = (np.eye(_NUM_STATES) - gain @ h) @ self.covariance
        lower = np.tril(self.covariance)
        self.covariance = lower + np.tril(self.covariance, -1).T

        self._last_good_update_time = self._clock()
        return True

    def was_reset_since_last_check(self) -> bool:
        """True if the filter was reset since this method was last called."""
        changed = self._last_checked_reset_count != self.reset_count
        self._last_checked_reset_count = self.reset_count
        return changed

    def time_since_last_good_measurement(self) -> float:
        """Seconds since the last accepted measurement (or reset)."""
        return self._clock() - self._last_good_update_time