"""Cascaded quadcopter controllers: position, attitude and angular velocity."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

_E3 = np.array([0.0, 0.0, 1.0])


@dataclass
class PositionController:
    """Tracks position and velocity, producing a desired acceleration."""

    natural_frequency: float = 0.0  # closed-loop natural frequency [rad/s]
    damping_ratio: float = 0.0

    def desired_acceleration(
        self, est_pos, est_vel, des_pos, des_vel=None, des_acc=None
    ) -> np.ndarray:
        """Full position feedback with optional velocity and acceleration feed-forward."""
        des_vel = np.zeros(3) if des_vel is None else np.asarray(des_vel, dtype=float)
        des_acc = np.zeros(3) if des_acc is None else np.asarray(des_acc, dtype=float)
        w = self.natural_frequency
        return (
            (np.asarray(des_pos, dtype=float) - np.asarray(est_pos, dtype=float)) * w * w
            + (des_vel - np.asarray(est_vel, dtype=float)) * 2 * w * self.damping_ratio
            + des_acc
        )


@dataclass
class AttitudeController:
    """Tracks attitude, producing a desired angular velocity."""

    time_const_xy: float = 0.0  # roll and pitch time constant [s]
    time_const_z: float = 0.0  # yaw time constant [s]

    def __post_init__(self) -> None:
        self.set_parameters(self.time_const_xy, self.time_const_z)

    def set_parameters(self, time_const_xy: float, time_const_z: float) -> None:
        """Set the time constants; yaw may not be tighter than tilt."""
        if time_const_z < time_const_xy:
            raise ValueError(
                "yaw time constant must not be smaller than the tilt time constant"
            )
        self.time_const_xy = float(time_const_xy)
        self.time_const_z = float(time_const_z)

    def desired_angular_velocity(
        self, desired_attitude: Rotation, estimated_attitude: Rotation
    ) -> np.ndarray:
        """Angular velocity that drives ``estimated_attitude`` towards ``desired_attitude``."""
        if self.time_const_xy <= 0 or self.time_const_z <= 0:
            raise ValueError("time constants must be set to positive values")
        err = desired_attitude.inv() * estimated_attitude
        rot_vec = err.as_rotvec()

        thrust_dir = err.inv().apply(_E3)
        axis = np.cross(thrust_dir, _E3)
        cos_angle = float(np.dot(thrust_dir, _E3))
        angle = math.acos(min(1.0, max(-1.0, cos_angle)))

        n = float(np.linalg.norm(axis))
        axis = np.zeros(3) if n < 1e-12 else axis / n

        k3 = 1.0 / self.time_const_z
        k12 = 1.0 / self.time_const_xy
        return -k3 * rot_vec - (k12 - k3) * angle * axis


@dataclass
class AngularVelocityController:
    """Tracks angular velocity, producing desired torques."""

    time_const_xy: float = 0.0  # roll and pitch rate time constant [s]
    time_const_z: float = 0.0  # yaw rate time constant [s]
    inertia_matrix: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))

    def desired_torques(self, desired_ang_vel, estimated_ang_vel) -> np.ndarray:
        """Torques that drive the angular velocity to ``desired_ang_vel``."""
        if self.time_const_xy <= 0 or self.time_const_z <= 0:
            raise ValueError("time constants must be set to positive values")
        inertia = np.asarray(self.inertia_matrix, dtype=float)
        est = np.asarray(estimated_ang_vel, dtype=float)
        error = np.asarray(desired_ang_vel, dtype=float) - est
        des_ang_acc = error / np.array(
            [self.time_const_xy, self.time_const_xy, self.time_const_z]
        )
        correction = np.cross(est, inertia @ est)
        return inertia @ des_ang_acc + correction