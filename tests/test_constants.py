import math

import numpy as np
import pytest

from rappids.constants import (
    MotorType,
    QuadcopterConstants,
    QuadcopterType,
    max_cf_speed_from_pwm_consts,
    max_esc_speed_from_pwm_consts,
    name_from_id,
    type_name,
    vehicle_type_from_id,
)

VALID_TYPES = [
    QuadcopterType.CF_STANDARD,
    QuadcopterType.CF_BIGMOTORSPROPS,
    QuadcopterType.CF_LARGEQUAD,
    QuadcopterType.CF_MINIQUAD,
]


@pytest.mark.parametrize(
    "vehicle_id, expected",
    [
        (3, QuadcopterType.CF_STANDARD),
        (10, QuadcopterType.CF_STANDARD),
        (2, QuadcopterType.CF_BIGMOTORSPROPS),
        (17, QuadcopterType.CF_BIGMOTORSPROPS),
        (13, QuadcopterType.CF_LARGEQUAD),
        (1, QuadcopterType.CF_MINIQUAD),
        (26, QuadcopterType.CF_MINIQUAD),
        (8, QuadcopterType.INVALID),
        (200, QuadcopterType.INVALID),
    ],
)
def test_vehicle_type_from_id(vehicle_id, expected):
    assert vehicle_type_from_id(vehicle_id) is expected


def test_type_names():
    assert type_name(QuadcopterType.CF_STANDARD) == "QC_TYPE_CF_STANDARD"
    assert type_name(QuadcopterType.CF_FEEDTHROUGH) == "QC_TYPE_CF_FEEDTHROUGH"
    assert type_name(QuadcopterType.INVALID) == "INVALID_TYPE!"
    assert type_name(42) == "INVALID_TYPE!"


def test_name_from_id():
    assert name_from_id(14) == "QC_TYPE_CF_LARGEQUAD"
    assert name_from_id(11) == "INVALID_TYPE!"


def test_standard_constants():
    c = QuadcopterConstants.for_type(QuadcopterType.CF_STANDARD)
    assert c.valid
    assert c.mass == pytest.approx(38e-3)
    assert c.motor_type is MotorType.CF_BRUSHED_MOTORS
    assert c.max_cmd_total_thrust == pytest.approx(0.9 * c.max_thrust_per_propeller * 4)


def test_large_quad_uses_esc_and_mixer_default_thrust():
    c = QuadcopterConstants.for_type(QuadcopterType.CF_LARGEQUAD)
    assert c.motor_type is MotorType.ESC_MOTORS
    assert c.max_cmd_total_thrust == -1.0
    assert c.motor_max_speed * c.esc_speed_to_pwm_consts[1] + c.esc_speed_to_pwm_consts[
        0
    ] == pytest.approx(2000)


def test_miniquad_time_constants_derived():
    c = QuadcopterConstants.for_type(QuadcopterType.CF_MINIQUAD)
    assert c.att_control_time_const_xy == pytest.approx(2 * c.ang_vel_control_time_const_xy)
    assert c.ang_vel_control_time_const_z == pytest.approx(5 * c.ang_vel_control_time_const_xy)
    assert c.att_control_time_const_z == pytest.approx(2 * c.ang_vel_control_time_const_z)
    assert c.max_cmd_total_thrust == pytest.approx(0.7 * 4 * c.max_thrust_per_propeller)


@pytest.mark.parametrize("quad_type", VALID_TYPES)
def test_max_thrust_matches_max_speed(quad_type):
    c = QuadcopterConstants.for_type(quad_type)
    assert c.max_thrust_per_propeller == pytest.approx(
        c.propeller_thrust_from_speed_sqr * c.motor_max_speed**2
    )
    assert c.motor_max_speed > 0


@pytest.mark.parametrize("quad_type", VALID_TYPES)
def test_yaw_not_tighter_than_tilt(quad_type):
    c = QuadcopterConstants.for_type(quad_type)
    assert c.att_control_time_const_z >= c.att_control_time_const_xy


@pytest.mark.parametrize("quad_type", list(QuadcopterType))
def test_inertia_matrix_is_diagonal(quad_type):
    c = QuadcopterConstants.for_type(quad_type)
    expected = np.diag([c.inertia_xx, c.inertia_xx, c.inertia_zz])
    np.testing.assert_allclose(c.inertia_matrix, expected)


def test_invalid_types_not_valid():
    assert not QuadcopterConstants.for_type(QuadcopterType.CF_FEEDTHROUGH).valid
    invalid = QuadcopterConstants.for_type(QuadcopterType.INVALID)
    assert not invalid.valid
    assert invalid.motor_max_speed == 0.0
    assert QuadcopterConstants.for_type(99).quad_type is QuadcopterType.INVALID


def test_cf_speed_solves_pwm_equation():
    consts = [
        [-86.19993685, 22.87189816],
        [0.30208677, -0.07345602],
        [-1.59346434e-05, 1.53209239e-05],
    ]
    speed = max_cf_speed_from_pwm_consts(consts)
    k1, k2, k3 = (row[0] + row[1] * 4.1 for row in consts)
    assert k1 + (k2 + k3 * speed) * speed == pytest.approx(255)


def test_cf_speed_errors():
    with pytest.raises(ValueError):
        max_cf_speed_from_pwm_consts([[0, 0], [1, 0], [0, 0]])
    with pytest.raises(ValueError):
        max_cf_speed_from_pwm_consts([[0, 0], [1, 0]])


def test_esc_speed():
    speed = max_esc_speed_from_pwm_consts([999.0, 0.14])
    assert math.isclose(999.0 + 0.14 * speed, 2000)
    with pytest.raises(ValueError):
        max_esc_speed_from_pwm_consts([999.0, 0.0])