"""Control inputs, shape validation and clamping."""

import math
import numbers
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

import numpy as np

if TYPE_CHECKING:
    from lidar_car_sim.config import VehicleConfig
    from lidar_car_sim.vehicle import VehicleSnapshot


class ControlShapeError(TypeError):
    """Raised when a control policy returns a value that does not fit the control mode."""


@dataclass(frozen=True)
class SteeringCommand:
    """Steering-only command for constant-speed mode."""

    steering: float  # [rad]


@dataclass(frozen=True)
class SteeringAccelerationCommand:
    """Steering and acceleration command for free-acceleration mode."""

    steering: float  # [rad]
    acceleration: float  # [m/s^2]


ControlInput = Union[SteeringCommand, SteeringAccelerationCommand]
ControlPolicy = Callable[["VehicleSnapshot"], Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _check_value(name: str, value: Any) -> float:
    if not _is_number(value) or math.isnan(value):
        raise ControlShapeError(f"{name} must be a number, got {value!r}")
    return float(value)


def parse_control_input(raw: Any, constant_speed: bool) -> ControlInput:
    """Validate a control policy's return value against the control mode.

    Constant-speed mode accepts a bare number or a SteeringCommand.
    Free-acceleration mode accepts a SteeringAccelerationCommand, a mapping with
    ``steering`` and ``acceleration`` keys, or an object with those attributes.

    Args:
        raw: Value returned by the control policy
        constant_speed: True for constant-speed mode

    Returns:
        Parsed (not yet clamped) control input

    Raises:
        ControlShapeError: If the value does not match the mode
    """
    if constant_speed:
        if isinstance(raw, SteeringCommand):
            return SteeringCommand(steering=_check_value("steering", raw.steering))
        if not _is_number(raw):
            raise ControlShapeError(
                f"The control policy must return a number in constant-speed mode, "
                f"got {type(raw).__name__}"
            )
        return SteeringCommand(steering=_check_value("steering", raw))

    if isinstance(raw, Mapping):
        steering = raw.get("steering")
        acceleration = raw.get("acceleration")
    else:
        steering = getattr(raw, "steering", None)
        acceleration = getattr(raw, "acceleration", None)

    if not (_is_number(steering) and _is_number(acceleration)):
        raise ControlShapeError(
            "The control policy must return {steering: number, acceleration: number} "
            f"in free-acceleration mode, got {raw!r}"
        )
    return SteeringAccelerationCommand(
        steering=_check_value("steering", steering),
        acceleration=_check_value("acceleration", acceleration),
    )


def apply_limits(command: ControlInput, config: "VehicleConfig") -> tuple[float, float]:
    """Clamp a control input to the configured limits.

    Args:
        command: Parsed control input
        config: Vehicle configuration

    Returns:
        Effective (steering, acceleration); acceleration is 0 for a SteeringCommand
    """
    steering = float(np.clip(command.steering, -config.steering_limit, config.steering_limit))
    if isinstance(command, SteeringAccelerationCommand):
        acceleration = float(
            np.clip(command.acceleration, -config.acceleration_limit, config.acceleration_limit)
        )
    else:
        acceleration = 0.0
    return steering, acceleration
