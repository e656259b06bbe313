"""Tests for vehicle configuration."""

from pathlib import Path

import numpy as np
import pytest
from pydantic import ValidationError

from lidar_car_sim.config import (
    DEFAULT_LIDAR_DIRECTIONS,
    VehicleConfig,
    is_dark_pixel,
    load_vehicle_params,
    merge_params,
)
from lidar_car_sim.track import RasterObstacleField


class TestVehicleConfig:
    """Tests for VehicleConfig."""

    def test_defaults(self) -> None:
        """Test documented default values."""
        config = VehicleConfig()

        assert config.length == 4.4
        assert config.width == 2.2
        assert config.lf == 1.2
        assert config.lr == 1.4
        assert config.wheelbase == pytest.approx(2.6)
        assert config.pixel_size == 0.1
        assert config.steering_limit == 0.5
        assert config.acceleration_limit == 5.0
        assert config.constant_speed is True
        assert config.lidar_directions == DEFAULT_LIDAR_DIRECTIONS
        assert config.is_obstacle is is_dark_pixel
        assert config.track is None

    def test_overrides(self) -> None:
        """Test that supplied fields replace defaults and the rest stay."""
        config = VehicleConfig(steering_limit=0.3, lidar_directions=[0.0, 0.25])

        assert config.steering_limit == 0.3
        assert config.lidar_directions == (0.0, 0.25)
        assert config.acceleration_limit == 5.0

    def test_frozen(self) -> None:
        """Test that configuration cannot be modified."""
        config = VehicleConfig()

        with pytest.raises(ValidationError):
            config.steering_limit = 1.0

    def test_degenerate_wheelbase(self) -> None:
        """Test that lf + lr == 0 is rejected at construction."""
        with pytest.raises(ValidationError, match="Degenerate wheelbase"):
            VehicleConfig(lf=0.0, lr=0.0)

    @pytest.mark.parametrize(
        "params",
        [
            {"lf": float("nan")},
            {"lr": float("inf")},
            {"length": float("nan")},
            {"pixel_size": float("inf")},
        ],
    )
    def test_non_finite_geometry(self, params: dict) -> None:
        """Test that NaN or infinite geometry is rejected at construction."""
        with pytest.raises(ValidationError):
            VehicleConfig(**params)

    def test_unknown_field(self) -> None:
        """Test that misspelled fields are rejected."""
        with pytest.raises(ValidationError):
            VehicleConfig(steeringLimit=0.3)

    @pytest.mark.parametrize(
        "params", [{"pixel_size": 0.0}, {"steering_limit": -0.1}, {"acceleration_limit": -1.0}]
    )
    def test_invalid_ranges(self, params: dict) -> None:
        """Test Field constraints."""
        with pytest.raises(ValidationError):
            VehicleConfig(**params)

    def test_track_must_be_field(self) -> None:
        """Test that the track must look like an obstacle field."""
        with pytest.raises(ValidationError, match="track must provide"):
            VehicleConfig(track="track.png")

        field = RasterObstacleField(np.zeros((2, 2)))
        assert VehicleConfig(track=field).track is field


class TestIsDarkPixel:
    """Tests for the default obstacle predicate."""

    def test_rgba(self) -> None:
        """Only the first channel is considered."""
        assert is_dark_pixel(np.array([99, 255, 255, 255])) is True
        assert is_dark_pixel(np.array([100, 0, 0, 255])) is False

    def test_grayscale(self) -> None:
        """Test scalar samples."""
        assert is_dark_pixel(np.uint8(0)) is True
        assert is_dark_pixel(200) is False


class TestLoadVehicleParams:
    """Tests for YAML parameter loading."""

    def test_load(self, tmp_path: Path) -> None:
        """Test loading a parameter file."""
        path = tmp_path / "vehicle.yaml"
        path.write_text(
            "x: 3.0\nspeed: 10\nsteering_limit: 0.4\nconstant_speed: false\n"
            "lidar_directions: [0.5, 0.0, -0.5]\n"
        )

        params = load_vehicle_params(path)

        assert params == {
            "x": 3.0,
            "speed": 10,
            "steering_limit": 0.4,
            "constant_speed": False,
            "lidar_directions": [0.5, 0.0, -0.5],
        }

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test loading nonexistent file."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_vehicle_params(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file yields no overrides."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_vehicle_params(path) == {}

    def test_non_mapping(self, tmp_path: Path) -> None:
        """Test that a top-level list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError, match="mapping"):
            load_vehicle_params(path)


class TestMergeParams:
    """Tests for merge_params."""

    def test_recursive(self) -> None:
        """Nested dictionaries are merged, other values overwritten."""
        base = {"a": 1, "nested": {"b": 2, "c": 3}, "lidar_directions": [1.0, 0.0]}
        override = {"nested": {"c": 4}, "lidar_directions": [0.0]}

        merged = merge_params(base, override)

        assert merged == {"a": 1, "nested": {"b": 2, "c": 4}, "lidar_directions": [0.0]}
        assert base["nested"]["c"] == 3
