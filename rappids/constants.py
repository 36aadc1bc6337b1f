"""Physical and control constants for the supported quadcopter types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence

import numpy as np

_MAX_PWM = 255  # full duty cycle of the brushed motor driver
_MAX_BATT = 4.1  # battery voltage at maximum charge [V]
_ESC_PERIOD_MAX = 2000  # full speed command of the ESC firmware
_PER_CELL_LOW_VOLTAGE = 3.0  # [V]


class QuadcopterType(IntEnum):
    """Known vehicle types."""

    INVALID = 0
    CF_STANDARD = 1
    CF_BIGMOTORSPROPS = 2
    CF_FEEDTHROUGH = 3
    CF_LARGEQUAD = 4
    CF_MINIQUAD = 5


class MotorType(IntEnum):
    """Which motor driver the vehicle uses."""

    CF_BRUSHED_MOTORS = 0
    ESC_MOTORS = 1


_NAMES = {
    QuadcopterType.CF_STANDARD: "QC_TYPE_CF_STANDARD",
    QuadcopterType.CF_BIGMOTORSPROPS: "QC_TYPE_CF_BIGMOTORSPROPS",
    QuadcopterType.CF_LARGEQUAD: "QC_TYPE_CF_LARGEQUAD",
    QuadcopterType.CF_MINIQUAD: "QC_TYPE_CF_MINIQUAD",
    QuadcopterType.CF_FEEDTHROUGH: "QC_TYPE_CF_FEEDTHROUGH",
}

_TYPE_BY_ID = {
    **dict.fromkeys((3, 4, 10), QuadcopterType.CF_STANDARD),
    **dict.fromkeys((2, 5, 6, 7, 9, 12, 15, 17), QuadcopterType.CF_BIGMOTORSPROPS),
    **dict.fromkeys((13, 14, 18, 19), QuadcopterType.CF_LARGEQUAD),
    **dict.fromkeys((1, 16, 20, 21, 22, 24, 26), QuadcopterType.CF_MINIQUAD),
}


def vehicle_type_from_id(vehicle_id: int) -> QuadcopterType:
    """Map a vehicle ID to its quadcopter type; unknown IDs are INVALID."""
    return _TYPE_BY_ID.get(int(vehicle_id), QuadcopterType.INVALID)


def type_name(quad_type: int) -> str:
    """Name string of a quadcopter type."""
    try:
        return _NAMES.get(QuadcopterType(quad_type), "INVALID_TYPE!")
    except ValueError:
        return "INVALID_TYPE!"


def name_from_id(vehicle_id: int) -> str:
    """Name string of the type of the vehicle with the given ID."""
    return type_name(vehicle_type_from_id(vehicle_id))


def max_cf_speed_from_pwm_consts(consts: Sequence[Sequence[float]]) -> float:
    """Theoretical maximum propeller speed of a brushed-motor vehicle [rad/s].

    ``consts`` is the 3x2 table mapping desired speed and battery voltage to
    PWM; the battery is assumed fully charged and the PWM at its maximum.
    """
    table = np.asarray(consts, dtype=float)
    if table.shape != (3, 2):
        raise ValueError(f"expected a 3x2 table of constants, got shape {table.shape}")
    k1, k2, k3 = (row[0] + row[1] * _MAX_BATT for row in table)
    if k3 == 0:
        raise ValueError("quadratic speed coefficient must be non-zero")
    discriminant = k2 * k2 - 4 * k3 * (k1 - _MAX_PWM)
    if discriminant < 0:
        raise ValueError("constants give no real maximum speed")
    return (-k2 + math.sqrt(discriminant)) / (2 * k3)


def max_esc_speed_from_pwm_consts(consts: Sequence[float]) -> float:
    """Theoretical maximum propeller speed of an ESC-driven vehicle [rad/s]."""
    offset, slope = (float(c) for c in consts)
    if slope == 0:
        raise ValueError("speed-to-PWM slope must be non-zero")
    return (_ESC_PERIOD_MAX - offset) / slope


def _zero_cf_consts() -> np.ndarray:
    return np.zeros((3, 2))


@dataclass
class QuadcopterConstants:
    """Physical, motor and controller constants of one vehicle type."""

    quad_type: QuadcopterType = QuadcopterType.INVALID
    valid: bool = False
    mass: float = 1.0
    inertia_xx: float = 1.0
    inertia_zz: float = 1.0
    arm_length: float = 1.0
    propeller_thrust_from_speed_sqr: float = 0.0
    propeller_torque_from_thrust: float = 0.0
    max_thrust_per_propeller: float = 0.0
    min_thrust_per_propeller: float = 0.0
    max_cmd_total_thrust: float = -1.0  # negative: computed by the mixer
    prop0_spin_dir: int = 0
    lin_drag_coeff_bx: float = 0.0
    lin_drag_coeff_by: float = 0.0
    lin_drag_coeff_bz: float = 0.0
    motor_time_const: float = 0.0
    motor_inertia: float = 0.0
    motor_min_speed: float = 0.0
    motor_max_speed: float = 10000.0
    motor_type: MotorType = MotorType.CF_BRUSHED_MOTORS
    cf_speed_to_pwm_consts: np.ndarray = field(default_factory=_zero_cf_consts)
    esc_speed_to_pwm_consts: np.ndarray = field(default_factory=lambda: np.zeros(2))
    pos_control_nat_freq: float = 2.0
    pos_control_damping: float = 0.7
    ang_vel_control_time_const_xy: float = 0.03
    att_control_time_const_xy: float = 0.20
    ang_vel_control_time_const_z: float = 0.5
    att_control_time_const_z: float = 1.0
    imu_yaw: float = 0.0
    imu_pitch: float = 0.0
    imu_roll: float = 0.0
    low_battery_threshold: float = 0.0

    @property
    def inertia_matrix(self) -> np.ndarray:
        """Diagonal inertia matrix [kg*m^2]."""
        return np.diag([self.inertia_xx, self.inertia_xx, self.inertia_zz])

    @classmethod
    def for_type(cls, quad_type: int) -> "QuadcopterConstants":
        """Constants for the given vehicle type."""
        try:
            qt = QuadcopterType(quad_type)
        except ValueError:
            qt = QuadcopterType.INVALID

        if qt is QuadcopterType.CF_STANDARD:
            c = cls(
                quad_type=qt, valid=True, mass=38e-3, inertia_xx=16e-6,
                inertia_zz=29e-6, arm_length=46e-3,
                propeller_thrust_from_speed_sqr=3.58e-8,
                propeller_torque_from_thrust=0.0006, prop0_spin_dir=1,
                cf_speed_to_pwm_consts=np.array(
                    [
                        [-86.19993685, 22.87189816],
                        [0.30208677, -0.07345602],
                        [-1.59346434e-05, 1.53209239e-05],
                    ]
                ),
                ang_vel_control_time_const_xy=0.04,
                att_control_time_const_xy=0.40,
                low_battery_threshold=1 * _PER_CELL_LOW_VOLTAGE,
            )
            c._set_cf_limits(0.9)
            return c
        if qt is QuadcopterType.CF_BIGMOTORSPROPS:
            c = cls(
                quad_type=qt, valid=True, mass=39e-3, inertia_xx=30e-6,
                inertia_zz=60e-6, arm_length=48e-3,
                propeller_thrust_from_speed_sqr=4.14e-8,
                propeller_torque_from_thrust=0.001, prop0_spin_dir=1,
                cf_speed_to_pwm_consts=np.array(
                    [
                        [-379.31113434, 84.84738207],
                        [0.65309704, -0.13852527],
                        [-1.34462353e-04, 3.57662798e-05],
                    ]
                ),
                low_battery_threshold=1 * _PER_CELL_LOW_VOLTAGE,
                lin_drag_coeff_bx=0.0206185, lin_drag_coeff_by=0.0216621,
            )
            c._set_cf_limits(0.8)
            return c
        if qt is QuadcopterType.CF_FEEDTHROUGH:
            # Placeholder values: this type is never allowed to fly.
            return cls(
                quad_type=qt, valid=False,
                cf_speed_to_pwm_consts=np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 0.0]]),
                low_battery_threshold=1 * _PER_CELL_LOW_VOLTAGE,
            )
        if qt is QuadcopterType.CF_LARGEQUAD:
            c = cls(
                quad_type=qt, valid=True, mass=0.760, inertia_xx=0.004406,
                inertia_zz=0.008611, arm_length=0.166,
                propeller_thrust_from_speed_sqr=7.64e-6,
                propeller_torque_from_thrust=0.0140, prop0_spin_dir=1,
                motor_type=MotorType.ESC_MOTORS,
                esc_speed_to_pwm_consts=np.array([972.0, 0.742]),
                low_battery_threshold=3 * _PER_CELL_LOW_VOLTAGE,
                ang_vel_control_time_const_xy=0.0457,
                att_control_time_const_xy=0.0914,
                ang_vel_control_time_const_z=0.2545,
                att_control_time_const_z=0.5089,
                lin_drag_coeff_bx=0.1286181, lin_drag_coeff_by=0.1286181,
                lin_drag_coeff_bz=0.1286181,
            )
            c._set_esc_limits()
            return c
        if qt is QuadcopterType.CF_MINIQUAD:
            ang_vel_xy = 0.04
            c = cls(
                quad_type=qt, valid=True, mass=0.142, inertia_xx=92.7e-6,
                inertia_zz=158.57e-6, arm_length=58e-3,
                propeller_thrust_from_speed_sqr=4.32e-8,
                propeller_torque_from_thrust=0.00808, prop0_spin_dir=1,
                motor_type=MotorType.ESC_MOTORS,
                esc_speed_to_pwm_consts=np.array([999.0, 0.14]),
                min_thrust_per_propeller=0.03,
                low_battery_threshold=2 * _PER_CELL_LOW_VOLTAGE,
                pos_control_nat_freq=2.0, pos_control_damping=0.7,
                ang_vel_control_time_const_xy=ang_vel_xy,
                att_control_time_const_xy=ang_vel_xy * 2,
                ang_vel_control_time_const_z=ang_vel_xy * 5,
                att_control_time_const_z=ang_vel_xy * 5 * 2,
            )
            c._set_esc_limits()
            c.max_cmd_total_thrust = 0.7 * (c.max_thrust_per_propeller * 4)
            return c
        return cls(quad_type=QuadcopterType.INVALID, valid=False, motor_max_speed=0.0)

    def _set_cf_limits(self, total_thrust_fraction: float) -> None:
        self.motor_max_speed = max_cf_speed_from_pwm_consts(self.cf_speed_to_pwm_consts)
        self.max_thrust_per_propeller = (
            self.propeller_thrust_from_speed_sqr * self.motor_max_speed**2
        )
        self.max_cmd_total_thrust = (
            total_thrust_fraction * self.max_thrust_per_propeller * 4
        )

    def _set_esc_limits(self) -> None:
        self.motor_max_speed = max_esc_speed_from_pwm_consts(self.esc_speed_to_pwm_consts)
        self.max_thrust_per_propeller = (
            self.propeller_thrust_from_speed_sqr * self.motor_max_speed**2
        )