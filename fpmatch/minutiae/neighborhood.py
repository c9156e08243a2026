"""
Pixel neighborhood model for binary fingerprint images.

Every pixel-level rule used by thinning, minutiae detection and region
tracing is expressed in terms of the 8 neighbors of a pixel, read in a
fixed clockwise order.
"""

import numpy as np
from typing import Sequence, Tuple


# =============================================================================
# NEIGHBOR LAYOUT
# =============================================================================
#
# The neighbors of pixel P are indexed clockwise, starting directly above:
#
#     7 0 1
#     6 P 2
#     5 4 3
#
# Neighbors falling outside the image are white (False).
#
# Transitions A(P) = number of white -> black steps in the sequence
# 0, 1, ..., 7, 0. For an 8-entry vector A(P) is in [0, 4].
# =============================================================================

NUM_NEIGHBORS = 8

# (row offset, col offset) for each neighbor position
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 0),   # 0: above
    (-1, 1),   # 1: above-right
    (0, 1),    # 2: right
    (1, 1),    # 3: below-right
    (1, 0),    # 4: below
    (1, -1),   # 5: below-left
    (0, -1),   # 6: left
    (-1, -1),  # 7: above-left
)


class OutOfBoundsError(IndexError):
    """Pixel coordinates fall outside the image."""

    def __init__(self, row: int, col: int, height: int, width: int):
        self.row = row
        self.col = col
        self.height = height
        self.width = width
        super().__init__(
            f"Invalid pixel coordinates (row={row}, col={col}): valid "
            f"coordinates are 0 <= row < {height} and 0 <= col < {width}"
        )


class MalformedNeighborVectorError(ValueError):
    """A neighbor vector does not hold exactly 8 entries."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"Neighbor vector must have exactly {NUM_NEIGHBORS} entries, "
            f"got {length}"
        )


def as_grid(image) -> np.ndarray:
    """
    Coerce an image-like input to a boolean pixel grid.

    Non-zero values are ridge (black) pixels.

    Args:
        image: 2D array-like (numpy array or nested lists)

    Returns:
        2D boolean array

    Raises:
        ValueError: If the input is not a rectangular 2D array
    """
    if isinstance(image, np.ndarray):
        grid = image
    else:
        try:
            grid = np.asarray(image)
        except ValueError as e:
            raise ValueError(f"Pixel grid must be rectangular: {e}") from e

    if grid.ndim != 2 or grid.dtype == object:
        raise ValueError(
            f"Pixel grid must be a rectangular 2D array, got shape {grid.shape}"
        )

    if grid.dtype == bool:
        return grid
    return grid > 0


def check_bounds(grid: np.ndarray, row: int, col: int) -> None:
    """Raise OutOfBoundsError if (row, col) is not inside the grid."""
    height, width = grid.shape
    if not (0 <= row < height and 0 <= col < width):
        raise OutOfBoundsError(row, col, height, width)


def is_black(grid: np.ndarray, row: int, col: int) -> bool:
    """Return True if the pixel at (row, col) is a ridge pixel."""
    grid = as_grid(grid)
    check_bounds(grid, row, col)
    return bool(grid[row, col])


def is_white(grid: np.ndarray, row: int, col: int) -> bool:
    """Return True if the pixel at (row, col) is a background pixel."""
    return not is_black(grid, row, col)


def neighbors(grid: np.ndarray, row: int, col: int) -> Tuple[bool, ...]:
    """
    Get the 8 neighbors of a pixel in clockwise order.

    Neighbor arrangement:
        7 0 1
        6 P 2
        5 4 3

    Args:
        grid: Boolean pixel grid
        row, col: Pixel coordinates

    Returns:
        Tuple of 8 booleans, off-image neighbors are False

    Raises:
        OutOfBoundsError: If (row, col) is outside the grid
    """
    grid = as_grid(grid)
    check_bounds(grid, row, col)
    height, width = grid.shape

    values = []
    for dr, dc in NEIGHBOR_OFFSETS:
        r, c = row + dr, col + dc
        if 0 <= r < height and 0 <= c < width:
            values.append(bool(grid[r, c]))
        else:
            values.append(False)

    return tuple(values)


def black_count(vector: Sequence[bool]) -> int:
    """
    Count black neighbors.

    This is the B(P) function of the thinning rules.
    """
    return sum(1 for value in vector if value)


def transitions(vector: Sequence[bool]) -> int:
    """
    Count white-to-black transitions around a pixel.

    The walk goes through positions 0..7 and wraps from 7 back to 0.
    This is the A(P) function of the thinning rules, and the crossing
    number used for minutiae detection.

    Args:
        vector: Neighbor vector of exactly 8 entries

    Returns:
        Number of white -> black transitions, in [0, 4]

    Raises:
        MalformedNeighborVectorError: If the vector length is not 8
    """
    if len(vector) != NUM_NEIGHBORS:
        raise MalformedNeighborVectorError(len(vector))

    count = 0
    for i in range(NUM_NEIGHBORS):
        if not vector[i] and vector[(i + 1) % NUM_NEIGHBORS]:
            count += 1

    return count


def identical(grid_a: np.ndarray, grid_b: np.ndarray) -> bool:
    """
    Check whether two grids are pixel-identical.

    Grids of different shapes are simply not identical.
    """
    if grid_a.shape != grid_b.shape:
        return False
    return bool(np.array_equal(grid_a, grid_b))


def neighbor_planes(grid: np.ndarray) -> np.ndarray:
    """
    Compute the neighbor vectors of every pixel at once.

    Plane k of the result holds, for each pixel, the value of its
    neighbor at position k. This is the whole-grid form of
    `neighbors()`, used by the parallel thinning passes.

    Args:
        grid: Boolean pixel grid of shape (H, W)

    Returns:
        Boolean array of shape (8, H, W)
    """
    height, width = grid.shape
    padded = np.pad(grid, 1, mode='constant', constant_values=False)

    planes = np.empty((NUM_NEIGHBORS, height, width), dtype=bool)
    for k, (dr, dc) in enumerate(NEIGHBOR_OFFSETS):
        planes[k] = padded[1 + dr:1 + dr + height, 1 + dc:1 + dc + width]

    return planes


def transition_map(planes: np.ndarray) -> np.ndarray:
    """
    Transition count A(P) for every pixel.

    Args:
        planes: Output of `neighbor_planes()`

    Returns:
        Integer array of shape (H, W)
    """
    following = np.roll(planes, -1, axis=0)
    return np.sum(~planes & following, axis=0)
