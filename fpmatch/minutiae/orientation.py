"""
Minutia orientation estimation.

The orientation of a minutia is the direction of the ridge it belongs
to, estimated from the ridge pixels connected to it.
"""

import math

import numpy as np

from fpmatch.minutiae.connectivity import connected_pixels


# =============================================================================
# MATHEMATICAL BACKGROUND
# =============================================================================
#
# Coordinates are taken relative to the minutia at (row, col), with the
# y axis pointing up as on paper:
#
#     x = j - col
#     y = row - i
#
# Slope (least squares through the minutia):
#
#     Sxx = Σ x²,  Syy = Σ y²,  Sxy = Σ x·y
#
#     a = Sxy / Sxx   if Sxx >= Syy
#     a = Syy / Sxy   otherwise
#
# Both forms fit a line through the origin; the second one regresses x on
# y, which stays well conditioned for steep ridges. When every pixel has
# x = 0 the line is vertical (a = +inf).
#
# Angle:
# A slope only gives a direction modulo π. The ridge leaves the minutia on
# the side holding most of its pixels, so the pixels are split by the line
# through the minutia perpendicular to the fit, y = -x / a:
#
#     above: y >= -x / a        below: otherwise
#
# θ = atan(a), shifted by π when θ > 0 and most pixels are below, or when
# θ < 0 and most pixels are above.
# =============================================================================

# Slopes steeper than this are treated as vertical
VERTICAL_SLOPE_LIMIT = 100.0


def compute_slope(region: np.ndarray, row: int, col: int) -> float:
    """
    Compute the slope of a minutia using linear regression.

    Args:
        region: Connected region around the minutia (see connected_pixels)
        row: Row of the minutia
        col: Column of the minutia

    Returns:
        The slope, math.inf for a vertical ridge
    """
    rows, cols = np.nonzero(region)
    x = cols.astype(np.float64) - col
    y = row - rows.astype(np.float64)

    if not np.any(x != 0):
        return math.inf

    sxx = float(np.sum(x * x))
    syy = float(np.sum(y * y))
    sxy = float(np.sum(x * y))

    if sxx >= syy:
        slope = sxy / sxx
    elif sxy == 0:
        return math.inf
    else:
        slope = syy / sxy

    if abs(slope) > VERTICAL_SLOPE_LIMIT:
        return math.inf

    return slope


def compute_angle(region: np.ndarray, row: int, col: int, slope: float) -> float:
    """
    Compute the orientation of a minutia in radians.

    Args:
        region: Connected region around the minutia
        row: Row of the minutia
        col: Column of the minutia
        slope: Slope as returned by compute_slope()

    Returns:
        Orientation in radians, in (-π/2, 3π/2)
    """
    rows, cols = np.nonzero(region)
    x = cols.astype(np.float64) - col
    y = row - rows.astype(np.float64)

    if math.isinf(slope):
        above = int(np.sum(y > 0))
        below = int(np.sum(y < 0))
        return math.pi / 2 if above > below else -math.pi / 2

    if slope == 0:
        # The perpendicular is vertical: compare right and left
        right = int(np.sum(x > 0))
        left = int(np.sum(x < 0))
        return 0.0 if right > left else math.pi

    above_mask = y >= -x / slope
    above = int(np.sum(above_mask))
    below = int(above_mask.size - above)

    angle = math.atan(slope)
    if (angle > 0 and below > above) or (angle < 0 and above > below):
        angle += math.pi

    return angle


def to_degrees(angle: float) -> int:
    """Convert radians to an integer number of degrees in [0, 360)."""
    degrees = int(round(math.degrees(angle)))
    if degrees < 0:
        degrees += 360
    return degrees % 360


def compute_orientation(image, row: int, col: int, distance: int) -> int:
    """
    Compute the orientation of the minutia at (row, col).

    Args:
        image: Boolean pixel grid (skeleton)
        row, col: Minutia coordinates
        distance: Half-size of the window used for the regression

    Returns:
        Orientation in integer degrees, in [0, 360)
    """
    region = connected_pixels(image, row, col, distance)
    slope = compute_slope(region, row, col)
    angle = compute_angle(region, row, col, slope)
    return to_degrees(angle)
