"""
Minutiae extraction from fingerprint skeleton images.

This module implements minutiae detection using the crossing number
method on skeletonized fingerprint images.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from fpmatch.minutiae.neighborhood import (
    as_grid,
    is_black,
    neighbor_planes,
    neighbors,
    transition_map,
    transitions,
)
from fpmatch.minutiae.orientation import compute_orientation
from fpmatch.utils.config import ExtractionConfig, ORIENTATION_DISTANCE

logger = logging.getLogger(__name__)


# =============================================================================
# MATHEMATICAL BACKGROUND
# =============================================================================
#
# Minutiae:
# ---------
# Minutiae are local discontinuities in the ridge pattern:
# - Ridge ending: A ridge that terminates abruptly
# - Ridge bifurcation: A single ridge that splits into two ridges
#
# Crossing Number Method:
# ----------------------
# On a one-pixel-wide skeleton, the number of white -> black transitions
# around a ridge pixel counts the ridge branches leaving it:
#
# - CN = 1: Ridge ending
# - CN = 2: Ridge continuing point
# - CN = 3: Ridge bifurcation
#
# Each minutia has:
# - Position (row, col)
# - Orientation θ in integer degrees (direction of the associated ridge)
#
# Reference:
# Maltoni, D., Maio, D., Jain, A. K., & Prabhakar, S. (2009).
# "Handbook of Fingerprint Recognition." Springer.
# =============================================================================


class MinutiaeType(Enum):
    """Enumeration of minutiae types, valued by their crossing number."""
    ENDING = 1
    BIFURCATION = 3


@dataclass(frozen=True)
class Minutia:
    """
    Represents a single minutia point.

    Attributes:
        row: Row of the minutia
        col: Column of the minutia
        angle: Orientation in integer degrees, in [0, 360)
    """
    row: int
    col: int
    angle: int

    def __post_init__(self):
        object.__setattr__(self, 'row', int(self.row))
        object.__setattr__(self, 'col', int(self.col))
        object.__setattr__(self, 'angle', int(self.angle) % 360)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {'row': self.row, 'col': self.col, 'angle': self.angle}

    @classmethod
    def from_dict(cls, d: dict) -> 'Minutia':
        """Create from dictionary."""
        return cls(row=d['row'], col=d['col'], angle=d['angle'])


def classify(vector: Sequence[bool]) -> Optional[MinutiaeType]:
    """
    Classify a ridge pixel from its neighbor vector.

    Args:
        vector: Neighbor vector of the pixel

    Returns:
        The minutia type, or None for a non-minutia pixel
    """
    cn = transitions(vector)
    if cn == MinutiaeType.ENDING.value:
        return MinutiaeType.ENDING
    if cn == MinutiaeType.BIFURCATION.value:
        return MinutiaeType.BIFURCATION
    return None


def minutiae_type_at(skeleton: np.ndarray, row: int, col: int) -> Optional[MinutiaeType]:
    """Return the minutia type of the pixel at (row, col), or None."""
    skeleton = as_grid(skeleton)
    if not is_black(skeleton, row, col):
        return None
    return classify(neighbors(skeleton, row, col))


def candidate_mask(skeleton: np.ndarray) -> np.ndarray:
    """
    Mark interior ridge pixels whose crossing number is 1 or 3.

    Args:
        skeleton: Boolean skeleton grid

    Returns:
        Boolean array of the same shape
    """
    cn = transition_map(neighbor_planes(skeleton))
    mask = skeleton & ((cn == 1) | (cn == 3))

    # Only interior pixels have a full neighborhood
    interior = np.zeros(skeleton.shape, dtype=bool)
    interior[1:-1, 1:-1] = True

    return mask & interior


def extract_minutiae(
    skeleton,
    orientation_distance: int = ORIENTATION_DISTANCE
) -> List[Minutia]:
    """
    Extract minutiae from a skeleton image using the crossing number.

    Algorithm Steps:
    ----------------
    1. For each interior ridge pixel of the skeleton
    2. Compute the crossing number
    3. If CN = 1 (ending) or CN = 3 (bifurcation), it is a minutia
    4. Estimate its orientation from the connected ridge pixels

    Adjacent qualifying pixels each produce a minutia.

    Args:
        skeleton: Binary skeleton image
        orientation_distance: Half-size of the window used for orientation

    Returns:
        List of Minutia objects, in row-major order
    """
    skeleton = as_grid(skeleton)
    h, w = skeleton.shape

    if h < 3 or w < 3:
        return []

    minutiae = []
    for row, col in np.argwhere(candidate_mask(skeleton)):
        angle = compute_orientation(skeleton, int(row), int(col), orientation_distance)
        minutiae.append(Minutia(row=row, col=col, angle=angle))

    logger.debug("Extracted %d minutiae from %dx%d skeleton", len(minutiae), h, w)
    return minutiae


class MinutiaeExtractor:
    """
    Configurable minutiae extraction pipeline.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize extractor.

        Args:
            config: Extraction configuration (defaults if None)
        """
        self.config = config or ExtractionConfig()

    def extract(self, skeleton: np.ndarray) -> List[Minutia]:
        """
        Extract minutiae from skeleton image.

        Args:
            skeleton: Binary skeleton image

        Returns:
            List of extracted minutiae
        """
        return extract_minutiae(skeleton, self.config.orientation_distance)
