import numpy as np
import pytest

from lidar_car_sim.track import RasterObstacleField

FREE = 255
WALL = 0


@pytest.fixture
def open_field() -> RasterObstacleField:
    """200x200 px RGB raster with no obstacles (20 m x 20 m at 0.1 m/px)."""
    return RasterObstacleField(np.full((200, 200, 3), FREE, dtype=np.uint8))


@pytest.fixture
def walled_field() -> RasterObstacleField:
    """100x100 px grayscale raster with a wall at columns >= 73."""
    pixels = np.full((100, 100), FREE, dtype=np.uint8)
    pixels[:, 73:] = WALL
    return RasterObstacleField(pixels)
