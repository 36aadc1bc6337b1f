# rappids

Collision checking for a camera-mounted aerial vehicle, working directly
on a single depth image, together with onboard building blocks:
controllers, a motor mixer, a six-degree-of-freedom Kalman filter and
per-vehicle constants.

The free space seen in the depth image is partitioned into rectangular
pyramids that share the camera's focal point as their apex. A trajectory
(a fifth-order polynomial written in the camera frame, starting at the
focal point) is split into sections of monotonic depth and checked against
those pyramids; new pyramids are inflated from the image only when needed
and are kept for later checks.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `rappids.camera` – `DepthCamera`: a 16-bit depth image plus pinhole
  intrinsics. `deproject_pixel(x, y, depth)` returns a camera-frame point,
  `project_point(point)` returns pixel coordinates; `width`, `height`,
  `image_edge_offset` and `ignore_distance` are derived properties.
- `rappids.trajectory` – `PolynomialTrajectory` (six 3-vector coefficients
  from `t**5` down to the constant, with `value`, `axis_value`,
  `derivative_coeffs`), `MonotonicTrajectory` (ordered by `deepest_depth`)
  and `real_roots`.
- `rappids.pyramid` – `Pyramid`, built with `Pyramid.from_corners`; tests
  pixels with `contains_pixel` and compares by depth with other pyramids
  and with plain numbers.
- `rappids.inflation` – `inflate_pyramid(camera, x0, y0, minimum_depth,
  buffer)`, which grows a pyramid around a sample pixel and returns `None`
  when none can be formed.
- `rappids.sections` – `monotonic_sections(trajectory)` and
  `deepest_collision_time(section, pyramid)`.
- `rappids.collision` – `CollisionChecker`, which keeps the pyramids built
  so far (`pyramids`, `inflate_time`, `find_containing_pyramid`) and answers
  `is_collision_free(trajectory, deadline)`. Optional limits:
  `max_pyramids`, `max_pyramid_gen_time`, `pixel_buffer`.
- `rappids.groundtruth` – `is_collision_free_ground_truth(camera,
  trajectory, timestep)`, a slow ray-tracing reference check.
- `rappids.controllers` – `PositionController`, `AttitudeController`
  (attitudes as `scipy.spatial.transform.Rotation`),
  `AngularVelocityController`.
- `rappids.mixer` – `QuadcopterMixer`.
- `rappids.kalman` – `KalmanFilter6DOF` fusing rate gyro and accelerometer
  readings with UWB ranges to known anchors.
- `rappids.constants` – `QuadcopterType`, `MotorType`,
  `QuadcopterConstants.for_type`, `vehicle_type_from_id`, `type_name`,
  `name_from_id` and the maximum-speed helpers.
- `rappids.panic` – `PanicReason` and `panic_reason_string`.

## Collision checking with a depth image

```python
import numpy as np
from rappids.camera import DepthCamera
from rappids.collision import CollisionChecker
from rappids.trajectory import PolynomialTrajectory

depth = np.full((240, 320), 5000, dtype=np.uint16)   # 5 m everywhere
camera = DepthCamera(
    depth_image=depth,
    depth_scale=0.001,
    focal_length=190.0,
    principal_point_x=160.0,
    principal_point_y=120.0,
    physical_vehicle_radius=0.26,
    vehicle_radius_for_planning=0.46,
    minimum_collision_distance=0.5,
)

# Straight ahead along the optical axis at 1 m/s for 2 s.
coeffs = [[0, 0, 0]] * 4 + [[0, 0, 1], [0, 0, 0]]
trajectory = PolynomialTrajectory(coeffs, 0.0, 2.0)

checker = CollisionChecker(camera)
free = checker.is_collision_free(trajectory)
print(free, len(checker.pyramids), checker.inflate_time)
```

`deadline` is a time on the checker's clock (`time.perf_counter` by
default); once it has passed, the check gives up and reports a collision.

## Vehicle components

```python
from rappids.constants import QuadcopterConstants, vehicle_type_from_id
from rappids.mixer import QuadcopterMixer

consts = QuadcopterConstants.for_type(vehicle_type_from_id(13))
mixer = QuadcopterMixer()
mixer.set_parameters(consts.arm_length, consts.propeller_thrust_from_speed_sqr,
                     consts.propeller_torque_from_thrust, consts.prop0_spin_dir,
                     consts.max_thrust_per_propeller,
                     consts.min_thrust_per_propeller,
                     consts.max_cmd_total_thrust)
forces = mixer.motor_forces(consts.mass * 9.81, [0.0, 0.0, 0.0])
speeds = mixer.propeller_speeds_from_thrust(forces)
```

## What this package does not do

- It does not generate candidate trajectories: callers supply
  `PolynomialTrajectory` objects themselves.
- It has no planning loop that samples candidates, ranks them by cost,
  checks thrust, angular-velocity or speed limits and picks the best one;
  only the collision check is provided.
- It has no flight logic tying the pieces together (no flight state
  machine, radio handling, telemetry or safety monitoring), and no
  command-line program.