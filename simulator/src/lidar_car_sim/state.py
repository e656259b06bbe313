"""Vehicle state and sensor reading value types."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class KinematicState:
    """自転車モデルの運動学的状態.

    headingは正規化しない(積分値をそのまま保持する)。
    speedは符号付きで、負の値は後退を表す。
    """

    x: float = 16.0  # X座標 [m]
    y: float = 15.0  # Y座標 [m]
    heading: float = 0.0  # 方位角 [rad]
    speed: float = 20.0  # 前進速度 [m/s]

    def to_array(self) -> np.ndarray:
        """numpy配列 [x, y, heading, speed] に変換."""
        return np.array([self.x, self.y, self.heading, self.speed], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "KinematicState":
        """numpy配列から生成."""
        return cls(x=float(arr[0]), y=float(arr[1]), heading=float(arr[2]), speed=float(arr[3]))


@dataclass(frozen=True)
class LidarPoint:
    """A single LIDAR ranging measurement."""

    x: float  # boundary point X [m]
    y: float  # boundary point Y [m]
    distance: float  # distance along the ray [m]
    direction: float  # ray angle relative to heading [rad]
