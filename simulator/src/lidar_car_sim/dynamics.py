"""Vehicle kinematics functions."""

import math
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from shapely.geometry import Polygon


def bicycle_model_derivative(
    state: np.ndarray,
    steering: float,
    acceleration: float,
    lf: float,
    lr: float,
) -> np.ndarray:
    """Time derivative of the kinematic bicycle model.

    The model is referenced to the rear axle: no tire slip, no lateral forces.
    Heading is integrated as is and never wrapped.

    Args:
        state: State vector [x, y, heading, speed]
        steering: Steering angle [rad]
        acceleration: Acceleration [m/s^2]
        lf: Center of mass to front axle [m]
        lr: Center of mass to rear axle [m]

    Returns:
        Derivative [dx, dy, dheading, dspeed]

    Raises:
        ValueError: If the wheelbase lf + lr is zero
    """
    wheelbase = lf + lr
    if wheelbase == 0:
        raise ValueError("Wheelbase (lf + lr) must be non-zero")

    # x_dot = v * (cos(yaw) - lr/L * sin(yaw) * tan(delta))
    # y_dot = v * (sin(yaw) + lr/L * cos(yaw) * tan(delta))
    # yaw_dot = v / L * tan(delta)
    # v_dot = a
    heading = state[2]
    speed = state[3]
    sin_h = math.sin(heading)
    cos_h = math.cos(heading)
    tan_steering = math.tan(steering)
    rear_ratio = lr / wheelbase

    return np.array(
        [
            speed * (-rear_ratio * sin_h * tan_steering + cos_h),
            speed * (rear_ratio * cos_h * tan_steering + sin_h),
            tan_steering * speed / wheelbase,
            acceleration,
        ],
        dtype=np.float64,
    )


def create_vehicle_polygon(
    x: float,
    y: float,
    heading: float,
    length: float,
    width: float,
) -> "Polygon":
    """Create the vehicle body rectangle centered on (x, y).

    Args:
        x: Reference point X
        y: Reference point Y
        heading: Heading angle [rad]
        length: Body length [m]
        width: Body width [m]

    Returns:
        Shapely Polygon
    """
    from shapely.geometry import Polygon

    half_length = length / 2.0
    half_width = width / 2.0

    # Vehicle frame coordinates (x forward, y left)
    corners = [
        (half_length, half_width),
        (half_length, -half_width),
        (-half_length, -half_width),
        (-half_length, half_width),
    ]

    cos_h = math.cos(heading)
    sin_h = math.sin(heading)

    points = []
    for px, py in corners:
        # Rotate
        rx = px * cos_h - py * sin_h
        ry = px * sin_h + py * cos_h
        # Translate
        points.append((rx + x, ry + y))

    return Polygon(points)
