"""Vehicle configuration and parameter file loading."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lidar_car_sim.state import KinematicState
from lidar_car_sim.track import ObstacleField

logger = logging.getLogger(__name__)

DEFAULT_LIDAR_DIRECTIONS: tuple[float, ...] = (1.0, 0.5, 0.0, -0.5, -1.0)


def is_dark_pixel(sample: Any) -> bool:
    """Default obstacle predicate: first channel below 100.

    Grayscale rasters yield scalar samples, which are treated as a single channel.
    """
    return bool(np.atleast_1d(sample)[0] < 100)


class VehicleConfig(BaseModel):
    """Vehicle configuration shared by every snapshot of a run."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    # 形状
    length: float = Field(4.4, gt=0, allow_inf_nan=False, description="Body length [m]")
    width: float = Field(2.2, gt=0, allow_inf_nan=False, description="Body width [m]")

    # 重心位置
    lf: float = Field(1.2, allow_inf_nan=False, description="Center of mass to front axle [m]")
    lr: float = Field(1.4, allow_inf_nan=False, description="Center of mass to rear axle [m]")

    pixel_size: float = Field(
        0.1, gt=0, allow_inf_nan=False, description="World units per raster pixel"
    )

    # 入力制限
    steering_limit: float = Field(0.5, ge=0, description="Steering limit [rad]")
    acceleration_limit: float = Field(5.0, ge=0, description="Acceleration limit [m/s^2]")
    constant_speed: bool = Field(True, description="Constant-speed (steering only) control mode")

    lidar_directions: tuple[float, ...] = Field(
        DEFAULT_LIDAR_DIRECTIONS, description="LIDAR ray angles relative to heading [rad]"
    )
    is_obstacle: Callable[[Any], bool] = Field(
        is_dark_pixel, description="Obstacle predicate over a pixel sample"
    )
    track: Any = Field(None, description="Obstacle field of the track raster")

    @property
    def wheelbase(self) -> float:
        """ホイールベース [m]."""
        return self.lf + self.lr

    @field_validator("track")
    @classmethod
    def _check_track(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, ObstacleField):
            raise ValueError(
                f"track must provide width, height and sample(), got {type(value).__name__}"
            )
        return value

    @model_validator(mode="after")
    def _check_wheelbase(self) -> "VehicleConfig":
        if self.lf + self.lr == 0:
            raise ValueError(
                f"Degenerate wheelbase: lf + lr must be non-zero (lf={self.lf}, lr={self.lr})"
            )
        return self


class InitialConditions(BaseModel):
    """初期状態と初期時刻."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    x: float = KinematicState.x
    y: float = KinematicState.y
    heading: float = KinematicState.heading
    speed: float = KinematicState.speed
    t: float = 0.0

    def to_state(self) -> KinematicState:
        return KinematicState(x=self.x, y=self.y, heading=self.heading, speed=self.speed)


def load_vehicle_params(file_path: str | Path) -> dict[str, Any]:
    """Load vehicle parameters from a YAML file.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parameter dictionary (empty if the file is empty)

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file cannot be parsed
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    with open(file_path, encoding="utf-8") as f:
        params = yaml.safe_load(f)

    if params is None:
        return {}
    if not isinstance(params, dict):
        raise ValueError(f"Expected a mapping at the top level of {file_path}")

    logger.debug(f"Loaded vehicle parameters from {file_path}: {sorted(params)}")
    return params


def merge_params(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """パラメータを再帰的にマージ.

    Args:
        base: ベースパラメータ
        override: 上書きパラメータ

    Returns:
        マージされたパラメータ
    """
    merged = base.copy()

    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_params(merged[key], value)
        else:
            merged[key] = value

    return merged
