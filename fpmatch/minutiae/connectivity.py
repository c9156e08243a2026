"""
Bounded connected-region tracing on skeleton images.

The region of ridge pixels connected to a minutia is the local sample
used to estimate the minutia's orientation.
"""

import numpy as np
from scipy import ndimage

from fpmatch.minutiae.neighborhood import as_grid, check_bounds


# 8-connectivity
CONNECTIVITY = np.ones((3, 3), dtype=bool)


def window_mask(shape, row: int, col: int, distance: int) -> np.ndarray:
    """
    Square window of half-size `distance` around (row, col).

    Args:
        shape: (H, W) of the grid
        row, col: Window center
        distance: Maximum row and column offset from the center

    Returns:
        Boolean array of the given shape
    """
    height, width = shape
    mask = np.zeros(shape, dtype=bool)

    r0, r1 = max(0, row - distance), min(height, row + distance + 1)
    c0, c1 = max(0, col - distance), min(width, col + distance + 1)
    mask[r0:r1, c0:c1] = True

    return mask


def connected_pixels(image, row: int, col: int, distance: int) -> np.ndarray:
    """
    Compute the ridge pixels connected to (row, col) within a window.

    A pixel belongs to the region if it is black, lies within `distance`
    rows and `distance` columns of the seed, and can be reached from the
    seed through 8-connected black pixels that also lie in the window.

    The region is grown by fixed-point propagation: the marked set is
    repeatedly dilated into black window pixels until a pass adds nothing.

    Args:
        image: Boolean pixel grid
        row, col: Seed coordinates
        distance: Half-size of the square search window

    Returns:
        Boolean grid of the same shape, True for region pixels. All False
        when the seed itself is white.

    Raises:
        OutOfBoundsError: If the seed is outside the grid
        ValueError: If distance is negative
    """
    grid = as_grid(image)
    check_bounds(grid, row, col)

    if distance < 0:
        raise ValueError(f"distance must be non-negative, got {distance}")

    region = np.zeros(grid.shape, dtype=bool)
    if not grid[row, col]:
        return region

    allowed = grid & window_mask(grid.shape, row, col, distance)
    region[row, col] = True

    return ndimage.binary_propagation(
        region, structure=CONNECTIVITY, mask=allowed
    )
