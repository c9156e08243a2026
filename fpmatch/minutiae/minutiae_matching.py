"""
Minutiae-based fingerprint matching.

This module decides whether two minutiae sets come from the same finger
by searching the rotations and translations that align them.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from fpmatch.minutiae.minutiae_extraction import Minutia, MinutiaeExtractor
from fpmatch.minutiae.thinning import Thinner
from fpmatch.utils.config import MatchingConfig

logger = logging.getLogger(__name__)


# =============================================================================
# MATHEMATICAL BACKGROUND
# =============================================================================
#
# Minutiae Matching Problem:
# -------------------------
# Given two minutiae sets A and B, find a rigid transformation of B
# (rotation about a point, then translation) that makes many minutiae of
# B land on minutiae of A.
#
# Alignment:
# Each pair (a, b) of minutiae proposes an alignment where b lands on a:
# - rotate B about b's position by θ = angle(a) - angle(b)
# - translate B by (row(b) - row(a), col(b) - col(a))
# Sensor noise makes θ approximate, so θ - δ ... θ + δ are all tried.
#
# Rotation of a point (row, col) about (r0, c0), y axis pointing up:
#     x = col - c0,           y = r0 - row
#     x' = x cos θ - y sin θ, y' = x sin θ + y cos θ
#     row' = r0 - y',         col' = c0 + x'
#
# Matching Criteria:
# Two minutiae m = (r, c, θ) and m' = (r', c', θ') match if:
# - Spatial distance: ||(r, c) - (r', c')|| <= d_threshold
# - Angular difference: |θ - θ'| (circular) <= θ_threshold
#
# Two fingerprints match when some alignment pairs at least
# `found_threshold` minutiae.
# =============================================================================


@dataclass
class MatchBudget:
    """
    Iteration budget for the alignment search.

    Attributes:
        max_trials: Maximum number of alignments to try (None = unlimited)
        trials: Number of alignments tried so far
    """
    max_trials: Optional[int] = None
    trials: int = 0

    @property
    def exhausted(self) -> bool:
        return self.max_trials is not None and self.trials >= self.max_trials

    def consume(self) -> bool:
        """Account for one alignment; False if the budget was already spent."""
        if self.exhausted:
            return False
        self.trials += 1
        return True


@dataclass
class AlignmentResult:
    """
    Outcome of an alignment search.

    Attributes:
        count: Number of overlapping minutiae under the alignment
        rotation: Rotation applied to the second set (degrees)
        center_row, center_col: Center of the rotation
        row_translation, col_translation: Translation applied after rotation
        trials: Number of alignments evaluated
    """
    count: int = 0
    rotation: int = 0
    center_row: int = 0
    center_col: int = 0
    row_translation: int = 0
    col_translation: int = 0
    trials: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for serialization."""
        return {
            'count': self.count,
            'rotation': self.rotation,
            'center_row': self.center_row,
            'center_col': self.center_col,
            'row_translation': self.row_translation,
            'col_translation': self.col_translation,
            'trials': self.trials,
        }


@dataclass
class MatchResult:
    """
    Result of a fingerprint matching operation.

    Attributes:
        matched: Whether the fingerprints are declared identical
        score: Overlap count divided by the size of the smaller set
        details: Dictionary containing detailed matching information
    """
    matched: bool
    score: float
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'matched': self.matched,
            'score': self.score,
            'details': self.details,
        }


def apply_rotation(
    minutia: Minutia,
    center_row: int,
    center_col: int,
    rotation: int
) -> Minutia:
    """
    Rotate a minutia about a center.

    Args:
        minutia: The original minutia
        center_row: Row of the center of rotation
        center_col: Column of the center of rotation
        rotation: Rotation in degrees (counter-clockwise on screen)

    Returns:
        The rotated minutia
    """
    theta = math.radians(rotation)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    x = minutia.col - center_col
    y = center_row - minutia.row

    x_rot = x * cos_t - y * sin_t
    y_rot = x * sin_t + y * cos_t

    return Minutia(
        row=int(round(center_row - y_rot)),
        col=int(round(x_rot + center_col)),
        angle=(minutia.angle + rotation) % 360
    )


def apply_translation(
    minutia: Minutia,
    row_translation: int,
    col_translation: int
) -> Minutia:
    """
    Translate a minutia.

    Args:
        minutia: The original minutia
        row_translation: Translation along the rows (subtracted)
        col_translation: Translation along the columns (subtracted)

    Returns:
        The translated minutia
    """
    return Minutia(
        row=minutia.row - row_translation,
        col=minutia.col - col_translation,
        angle=minutia.angle
    )


def apply_transformation(
    minutiae: Union[Minutia, Sequence[Minutia]],
    center_row: int,
    center_col: int,
    row_translation: int,
    col_translation: int,
    rotation: int
) -> Union[Minutia, List[Minutia]]:
    """
    Apply a rotation followed by a translation.

    Args:
        minutiae: A single minutia or a list of minutiae
        center_row, center_col: Center of the rotation
        row_translation, col_translation: Translation applied after rotating
        rotation: Rotation in degrees

    Returns:
        The transformed minutia, or list of transformed minutiae
    """
    if isinstance(minutiae, Minutia):
        rotated = apply_rotation(minutiae, center_row, center_col, rotation)
        return apply_translation(rotated, row_translation, col_translation)

    return [
        apply_translation(
            apply_rotation(m, center_row, center_col, rotation),
            row_translation, col_translation
        )
        for m in minutiae
    ]


def angle_difference(angle1: int, angle2: int) -> int:
    """Circular absolute difference between two angles, in [0, 180]."""
    diff = abs(angle1 - angle2) % 360
    return min(diff, 360 - diff)


def matching_minutiae_count(
    minutiae1: Sequence[Minutia],
    minutiae2: Sequence[Minutia],
    max_distance: float,
    max_orientation: int,
    threshold: Optional[int] = None
) -> int:
    """
    Count the overlapping minutiae of two aligned sets.

    A minutia of the first set overlaps if some not-yet-used minutia of
    the second set is within max_distance and max_orientation of it.
    Greedy: each minutia of the second set is paired at most once.

    Args:
        minutiae1: First set of minutiae
        minutiae2: Second set of minutiae (already aligned)
        max_distance: Maximum Euclidean distance between overlapping minutiae
        max_orientation: Maximum orientation difference (degrees)
        threshold: Optional target count; scanning stops as soon as it can
            no longer be reached

    Returns:
        Number of overlapping minutiae (a partial count if the scan was
        cut short by the threshold)
    """
    count = 0
    used = set()
    total = len(minutiae1)

    for i, m1 in enumerate(minutiae1):
        if threshold is not None and count + (total - i) < threshold:
            break

        for j, m2 in enumerate(minutiae2):
            if j in used:
                continue

            distance = math.hypot(m1.row - m2.row, m1.col - m2.col)
            if distance > max_distance:
                continue

            if angle_difference(m1.angle, m2.angle) > max_orientation:
                continue

            used.add(j)
            count += 1
            break

    return count


def _alignments(minutiae1, minutiae2, offset):
    """Yield every candidate alignment (center, translation, rotation)."""
    for m1 in minutiae1:
        for m2 in minutiae2:
            rotation = m1.angle - m2.angle
            row_translation = m2.row - m1.row
            col_translation = m2.col - m1.col
            for angle in range(rotation - offset, rotation + offset + 1):
                yield m2.row, m2.col, row_translation, col_translation, angle


def match(
    minutiae1: Sequence[Minutia],
    minutiae2: Sequence[Minutia],
    config: Optional[MatchingConfig] = None,
    budget: Optional[MatchBudget] = None
) -> bool:
    """
    Compare the minutiae of two fingerprints.

    Every pair of minutiae (one from each set) anchors an alignment; for
    each, rotations within match_angle_offset of the implied rotation are
    tried, and the overlap is counted. The search stops at the first
    alignment reaching found_threshold.

    Args:
        minutiae1: Minutiae of the first fingerprint
        minutiae2: Minutiae of the second fingerprint
        config: Matching configuration (defaults if None)
        budget: Optional iteration budget; a fresh one is built from
            config.max_trials if None

    Returns:
        True if the fingerprints match, False otherwise
    """
    config = config or MatchingConfig()
    if budget is None:
        budget = MatchBudget(config.max_trials)

    if len(minutiae1) == 0 or len(minutiae2) == 0:
        return False

    # Overlap can never exceed the size of the smaller set
    if min(len(minutiae1), len(minutiae2)) < config.found_threshold:
        return False

    for center_row, center_col, dr, dc, angle in _alignments(
        minutiae1, minutiae2, config.match_angle_offset
    ):
        if not budget.consume():
            logger.warning(
                "Match search stopped after %d trials (budget exhausted)",
                budget.trials
            )
            return False

        transformed = apply_transformation(
            minutiae2, center_row, center_col, dr, dc, angle
        )
        count = matching_minutiae_count(
            minutiae1, transformed,
            config.distance_threshold,
            config.orientation_threshold,
            config.found_threshold
        )

        if count >= config.found_threshold:
            logger.debug(
                "Match found after %d trials: %d minutiae at rotation %d",
                budget.trials, count, angle
            )
            return True

    return False


def find_best_alignment(
    minutiae1: Sequence[Minutia],
    minutiae2: Sequence[Minutia],
    config: Optional[MatchingConfig] = None
) -> AlignmentResult:
    """
    Exhaustively search the alignment with the largest overlap.

    Unlike match(), this never stops early, which makes it suitable for
    reporting scores.

    Args:
        minutiae1: Minutiae of the first fingerprint
        minutiae2: Minutiae of the second fingerprint
        config: Matching configuration (defaults if None)

    Returns:
        The best AlignmentResult found
    """
    config = config or MatchingConfig()
    budget = MatchBudget(config.max_trials)
    best = AlignmentResult()

    for center_row, center_col, dr, dc, angle in _alignments(
        minutiae1, minutiae2, config.match_angle_offset
    ):
        if not budget.consume():
            logger.warning(
                "Alignment search stopped after %d trials (budget exhausted)",
                budget.trials
            )
            break

        transformed = apply_transformation(
            minutiae2, center_row, center_col, dr, dc, angle
        )
        count = matching_minutiae_count(
            minutiae1, transformed,
            config.distance_threshold,
            config.orientation_threshold
        )

        if count > best.count:
            best = AlignmentResult(
                count=count,
                rotation=angle,
                center_row=center_row,
                center_col=center_col,
                row_translation=dr,
                col_translation=dc
            )

    best.trials = budget.trials
    return best


class MinutiaeMatcher:
    """
    Minutiae-based fingerprint matcher.

    This matcher compares fingerprints using their extracted minutiae
    sets, searching the alignment under which the most minutiae overlap.
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        """
        Initialize minutiae matcher.

        Args:
            config: Matching configuration (defaults if None)
        """
        self.config = config or MatchingConfig()

    @property
    def name(self) -> str:
        return "Minutiae"

    def is_match(
        self,
        minutiae1: Sequence[Minutia],
        minutiae2: Sequence[Minutia]
    ) -> bool:
        """Decide whether two minutiae sets match (early-exit search)."""
        return match(minutiae1, minutiae2, self.config)

    def match(
        self,
        minutiae1: Sequence[Minutia],
        minutiae2: Sequence[Minutia]
    ) -> MatchResult:
        """
        Match two minutiae sets and report the best alignment.

        Args:
            minutiae1: First minutiae set
            minutiae2: Second minutiae set

        Returns:
            MatchResult with the decision, a score in [0, 1] and the
            best alignment in details
        """
        if len(minutiae1) == 0 or len(minutiae2) == 0:
            return MatchResult(matched=False, score=0.0, details={'count': 0})

        best = find_best_alignment(minutiae1, minutiae2, self.config)
        score = best.count / min(len(minutiae1), len(minutiae2))

        return MatchResult(
            matched=best.count >= self.config.found_threshold,
            score=float(score),
            details={
                'num_minutiae1': len(minutiae1),
                'num_minutiae2': len(minutiae2),
                'found_threshold': self.config.found_threshold,
                **best.to_dict(),
            }
        )


class MinutiaeMatchingPipeline:
    """
    Complete pipeline for minutiae-based fingerprint matching.

    Combines:
    - Thinning
    - Minutiae extraction
    - Minutiae matching
    """

    def __init__(
        self,
        thinner: Optional[Thinner] = None,
        extractor: Optional[MinutiaeExtractor] = None,
        matcher: Optional[MinutiaeMatcher] = None
    ):
        """
        Initialize pipeline.

        Args:
            thinner: Thinner instance
            extractor: MinutiaeExtractor instance
            matcher: MinutiaeMatcher instance
        """
        self.thinner = thinner or Thinner()
        self.extractor = extractor or MinutiaeExtractor()
        self.matcher = matcher or MinutiaeMatcher()

    def extract_minutiae(self, image: np.ndarray) -> List[Minutia]:
        """
        Extract minutiae from a binary image.

        Args:
            image: Binary fingerprint image (ridges = True)

        Returns:
            List of extracted minutiae
        """
        skeleton = self.thinner.process(image)
        return self.extractor.extract(skeleton)

    def is_match(self, image1: np.ndarray, image2: np.ndarray) -> bool:
        """Decide whether two fingerprint images match."""
        minutiae1 = self.extract_minutiae(image1)
        minutiae2 = self.extract_minutiae(image2)
        return self.matcher.is_match(minutiae1, minutiae2)

    def match(self, image1: np.ndarray, image2: np.ndarray) -> MatchResult:
        """
        Match two fingerprint images.

        Args:
            image1: First fingerprint image
            image2: Second fingerprint image

        Returns:
            MatchResult for the two extracted minutiae sets
        """
        minutiae1 = self.extract_minutiae(image1)
        minutiae2 = self.extract_minutiae(image2)
        return self.matcher.match(minutiae1, minutiae2)
