"""LIDAR sensor simulation by raycasting against the track raster."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lidar_car_sim.state import KinematicState, LidarPoint
from lidar_car_sim.track import ObstacleField, is_obstacle_cell

if TYPE_CHECKING:
    from lidar_car_sim.config import VehicleConfig

logger = logging.getLogger(__name__)

INITIAL_STEP = 5.0  # [px]
MIN_STEP = 1.0  # [px]
MAX_ITERATIONS = 10000


class LidarConvergenceError(RuntimeError):
    """Raised when the boundary search does not converge within MAX_ITERATIONS."""


@dataclass(frozen=True)
class BoundaryHit:
    """Result of a boundary search in world units."""

    x: float
    y: float
    distance: float


def line_search(
    origin_x: float,
    origin_y: float,
    direction: float,
    track: ObstacleField | None,
    pixel_size: float,
    is_obstacle: Callable[[Any], bool],
) -> BoundaryHit:
    """Find the free/obstacle boundary along a ray.

    The step starts at INITIAL_STEP pixels and is reversed and halved every
    time the classification flips between consecutive probes, so the boundary
    is localized once the step drops below MIN_STEP.

    Args:
        origin_x: Ray origin X [m]
        origin_y: Ray origin Y [m]
        direction: Absolute ray angle [rad]
        track: Obstacle field, or None if no track is loaded
        pixel_size: World units per pixel
        is_obstacle: Predicate over a pixel sample

    Returns:
        Boundary point and distance along the ray in world units. Without a
        track, or when the search falls back behind the origin, the origin
        with distance 0.

    Raises:
        LidarConvergenceError: If the search exceeds MAX_ITERATIONS
    """
    if track is None:
        return BoundaryHit(x=origin_x, y=origin_y, distance=0.0)

    x = origin_x / pixel_size
    y = origin_y / pixel_size
    cos_d = math.cos(direction)
    sin_d = math.sin(direction)

    current_is_obstacle = is_obstacle_cell(track, x, y, is_obstacle)
    if current_is_obstacle:
        return BoundaryHit(x=origin_x, y=origin_y, distance=0.0)

    step = INITIAL_STEP
    distance = 0.0
    for _ in range(MAX_ITERATIONS):
        x2 = x + cos_d * distance
        y2 = y + sin_d * distance

        next_is_obstacle = is_obstacle_cell(track, x2, y2, is_obstacle)
        if current_is_obstacle != next_is_obstacle:
            step *= -0.5

        if abs(step) < MIN_STEP:
            return BoundaryHit(
                x=x2 * pixel_size, y=y2 * pixel_size, distance=distance * pixel_size
            )
        if distance < 0:
            return BoundaryHit(x=origin_x, y=origin_y, distance=0.0)

        current_is_obstacle = next_is_obstacle
        distance += step

    logger.error(
        f"Boundary search did not converge: origin=({origin_x:.3f}, {origin_y:.3f}) "
        f"direction={direction:.3f} after {MAX_ITERATIONS} iterations"
    )
    raise LidarConvergenceError(
        f"Boundary search did not converge within {MAX_ITERATIONS} iterations "
        f"(origin=({origin_x}, {origin_y}), direction={direction})"
    )


class LidarSensor:
    """Fan of range sensors mounted at the vehicle reference point."""

    def __init__(self, config: "VehicleConfig") -> None:
        """Initialize LIDAR sensor.

        Args:
            config: Vehicle configuration (ray directions, track, pixel size, predicate)
        """
        self.config = config

    def scan(self, state: KinematicState) -> tuple[LidarPoint, ...]:
        """Measure every configured ray from the given state.

        Args:
            state: Current kinematic state

        Returns:
            One LidarPoint per configured direction, in configuration order
        """
        points = []
        for direction in self.config.lidar_directions:
            hit = line_search(
                state.x,
                state.y,
                state.heading + direction,
                self.config.track,
                self.config.pixel_size,
                self.config.is_obstacle,
            )
            points.append(
                LidarPoint(x=hit.x, y=hit.y, distance=hit.distance, direction=direction)
            )
        return tuple(points)
