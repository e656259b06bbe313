"""Rasterized track obstacle field."""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class ObstacleField(Protocol):
    """Read-only 2-D grid of per-pixel samples."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def sample(self, px: int, py: int) -> Any: ...


class RasterObstacleField:
    """Obstacle field backed by a decoded raster image.

    Pixel ``(px, py)`` is ``pixels[py, px]``, i.e. ``py`` indexes rows.
    """

    def __init__(self, pixels: np.ndarray) -> None:
        """Initialize RasterObstacleField.

        Args:
            pixels: Array of shape (height, width) or (height, width, channels).
                Copied, so later changes by the caller are not seen.
        """
        pixels = np.array(pixels, copy=True)
        if pixels.ndim not in (2, 3):
            raise ValueError(f"Raster must be 2-D or 3-D, got shape {pixels.shape}")
        pixels.setflags(write=False)
        # A view of a read-only base cannot be made writable again
        self.pixels = pixels.view()

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def sample(self, px: int, py: int) -> Any:
        return self.pixels[py, px]


def is_obstacle_cell(
    field: ObstacleField, px: float, py: float, is_obstacle: Callable[[Any], bool]
) -> bool:
    """Classify the cell containing continuous pixel coordinate (px, py).

    Cells outside the raster are obstacles and are never sampled.

    Args:
        field: Obstacle field
        px: X in pixels
        py: Y in pixels
        is_obstacle: Predicate over a pixel sample

    Returns:
        True if the cell is an obstacle
    """
    ix = int(np.floor(px))
    iy = int(np.floor(py))
    if ix < 0 or iy < 0 or ix >= field.width or iy >= field.height:
        return True
    return bool(is_obstacle(field.sample(ix, iy)))
