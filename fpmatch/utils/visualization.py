"""
Overlay drawing for skeletons and minutiae.

Overlays are BGR uint8 images; they are debug artifacts only and play no
part in matching.
"""

import math
from typing import Sequence, Tuple

import cv2
import numpy as np

from fpmatch.minutiae.minutiae_extraction import Minutia

Color = Tuple[int, int, int]

RED: Color = (0, 0, 255)
GREEN: Color = (0, 255, 0)
BLUE: Color = (255, 0, 0)


def to_overlay(grid: np.ndarray) -> np.ndarray:
    """
    Convert a boolean grid to a BGR image, ridges black on white.

    Args:
        grid: Boolean pixel grid

    Returns:
        BGR uint8 image of shape (H, W, 3)
    """
    gray = np.where(np.asarray(grid) > 0, 0, 255).astype(np.uint8)
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


def draw_marker(
    overlay: np.ndarray,
    row: int,
    col: int,
    radius: int = 5,
    color: Color = RED,
    thickness: int = 1
) -> np.ndarray:
    """Draw a circle centered on (row, col), in place."""
    cv2.circle(overlay, (int(col), int(row)), int(radius), color, thickness)
    return overlay


def draw_ray(
    overlay: np.ndarray,
    row: int,
    col: int,
    angle: float,
    length: int = 10,
    color: Color = RED,
    thickness: int = 1
) -> np.ndarray:
    """
    Draw a segment from (row, col) in the direction `angle`, in place.

    Args:
        overlay: BGR image
        row, col: Start point
        angle: Direction in degrees, counter-clockwise from the column axis
        length: Segment length in pixels
        color: BGR colour
        thickness: Line thickness

    Returns:
        The overlay
    """
    theta = math.radians(angle)
    end_col = int(round(col + length * math.cos(theta)))
    end_row = int(round(row - length * math.sin(theta)))
    cv2.line(overlay, (int(col), int(row)), (end_col, end_row), color, thickness)
    return overlay


def draw_minutiae(
    grid: np.ndarray,
    minutiae: Sequence[Minutia],
    radius: int = 5,
    length: int = 10,
    color: Color = RED
) -> np.ndarray:
    """
    Annotate every minutia with a circle and an orientation ray.

    Args:
        grid: Boolean pixel grid (usually the skeleton)
        minutiae: Minutiae to draw
        radius: Circle radius
        length: Ray length
        color: BGR colour

    Returns:
        New BGR overlay image
    """
    overlay = to_overlay(grid)
    for m in minutiae:
        draw_marker(overlay, m.row, m.col, radius, color)
        draw_ray(overlay, m.row, m.col, m.angle, length, color)
    return overlay
