"""Tests for control input parsing and clamping."""

from types import SimpleNamespace

import numpy as np
import pytest

from lidar_car_sim.config import VehicleConfig
from lidar_car_sim.control import (
    ControlShapeError,
    SteeringAccelerationCommand,
    SteeringCommand,
    apply_limits,
    parse_control_input,
)


class TestParseControlInput:
    """Tests for parse_control_input."""

    @pytest.mark.parametrize("raw", [0, 0.25, -3, np.float64(0.1), np.float32(0.5)])
    def test_constant_speed_numbers(self, raw: float) -> None:
        """Test that numbers are accepted in constant-speed mode."""
        command = parse_control_input(raw, constant_speed=True)

        assert command == SteeringCommand(steering=pytest.approx(float(raw)))

    def test_constant_speed_command(self) -> None:
        """Test that SteeringCommand is accepted in constant-speed mode."""
        assert parse_control_input(SteeringCommand(0.2), constant_speed=True) == SteeringCommand(
            0.2
        )

    @pytest.mark.parametrize(
        "raw",
        [
            {"steering": 0.1, "acceleration": 0.0},
            SteeringAccelerationCommand(0.1, 0.0),
            "0.1",
            None,
            True,
            [0.1],
        ],
    )
    def test_constant_speed_rejects_structured(self, raw: object) -> None:
        """Test that non-numeric values are rejected in constant-speed mode."""
        with pytest.raises(ControlShapeError, match="must return a number"):
            parse_control_input(raw, constant_speed=True)

    def test_nan_rejected(self) -> None:
        """Test that NaN is not a valid steering value."""
        with pytest.raises(ControlShapeError):
            parse_control_input(float("nan"), constant_speed=True)
        with pytest.raises(ControlShapeError):
            parse_control_input({"steering": 0.0, "acceleration": float("nan")}, False)

    @pytest.mark.parametrize(
        "raw",
        [
            {"steering": 0.1, "acceleration": 2.0},
            SteeringAccelerationCommand(steering=0.1, acceleration=2.0),
            SimpleNamespace(steering=0.1, acceleration=2),
        ],
    )
    def test_free_acceleration_shapes(self, raw: object) -> None:
        """Test mapping, command and attribute objects in free-acceleration mode."""
        command = parse_control_input(raw, constant_speed=False)

        assert command == SteeringAccelerationCommand(steering=0.1, acceleration=2.0)

    @pytest.mark.parametrize(
        "raw",
        [
            0.1,
            {"steering": 0.1},
            {"steering": "0.1", "acceleration": 1.0},
            SimpleNamespace(acceleration=1.0),
            SteeringCommand(0.1),
        ],
    )
    def test_free_acceleration_rejects(self, raw: object) -> None:
        """Test that incomplete or non-numeric values are rejected."""
        with pytest.raises(ControlShapeError, match="steering: number, acceleration: number"):
            parse_control_input(raw, constant_speed=False)

    def test_is_type_error(self) -> None:
        """ControlShapeError is distinguishable and still a TypeError."""
        assert issubclass(ControlShapeError, TypeError)


class TestApplyLimits:
    """Tests for apply_limits."""

    @pytest.fixture
    def config(self) -> VehicleConfig:
        return VehicleConfig(steering_limit=0.5, acceleration_limit=5.0)

    @pytest.mark.parametrize(
        ("steering", "expected"), [(2.0, 0.5), (-2.0, -0.5), (0.3, 0.3), (float("inf"), 0.5)]
    )
    def test_steering_clamped(
        self, config: VehicleConfig, steering: float, expected: float
    ) -> None:
        """Out-of-range steering is clamped with its sign preserved."""
        assert apply_limits(SteeringCommand(steering), config) == (expected, 0.0)

    def test_acceleration_clamped(self, config: VehicleConfig) -> None:
        """Test acceleration limits in both directions."""
        assert apply_limits(SteeringAccelerationCommand(0.0, 12.0), config) == (0.0, 5.0)
        assert apply_limits(SteeringAccelerationCommand(0.0, -12.0), config) == (0.0, -5.0)
        assert apply_limits(SteeringAccelerationCommand(-0.7, 1.5), config) == (-0.5, 1.5)

    def test_steering_only_forces_zero_acceleration(self, config: VehicleConfig) -> None:
        """A steering-only command never accelerates."""
        _, acceleration = apply_limits(SteeringCommand(0.1), config)

        assert acceleration == 0.0
