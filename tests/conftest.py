"""Shared synthetic fingerprint grids."""

import numpy as np
import pytest

from fpmatch.minutiae import Minutia, apply_transformation


@pytest.fixture
def blank_grid():
    """3x3 all-white grid."""
    return np.zeros((3, 3), dtype=bool)


@pytest.fixture
def block_grid():
    """5x5 grid holding a 3x3 black block."""
    grid = np.zeros((5, 5), dtype=bool)
    grid[1:4, 1:4] = True
    return grid


@pytest.fixture
def segments_grid():
    """
    60x60 grid of one-pixel-wide horizontal ridges.

    22 segments on rows 5, 10, ..., 55, spanning columns 5..25 and 35..55,
    each contributing two ridge endings.
    """
    grid = np.zeros((60, 60), dtype=bool)
    for row in range(5, 60, 5):
        grid[row, 5:26] = True
        grid[row, 35:56] = True
    return grid


@pytest.fixture
def t_junction_grid():
    """A T-shaped ridge: three endings and one bifurcation at (6, 7)."""
    grid = np.zeros((16, 16), dtype=bool)
    grid[6, 2:13] = True
    grid[6:13, 7] = True
    return grid


@pytest.fixture
def lattice_signature():
    """25 minutiae on a 5x5 lattice with spacing 20 and varied angles."""
    rng = np.random.default_rng(7)
    angles = rng.integers(0, 360, size=25)
    return [
        Minutia(row=50 + 20 * i, col=50 + 20 * j, angle=int(angles[5 * i + j]))
        for i in range(5)
        for j in range(5)
    ]


@pytest.fixture
def moved_signature(lattice_signature):
    """The lattice rotated by 10 degrees about (100, 100) and shifted by (5, 5)."""
    return apply_transformation(lattice_signature, 100, 100, -5, -5, 10)
