"""
Minutiae-based fingerprint recognition modules.

This package provides classical minutiae extraction and matching:
- Neighborhood model (8-neighbors, transitions)
- Thinning (skeletonization)
- Connected region tracing and orientation estimation
- Minutiae extraction (crossing number method)
- Minutiae matching (rotation/translation search)
"""

from .neighborhood import (
    OutOfBoundsError,
    MalformedNeighborVectorError,
    neighbors,
    black_count,
    transitions,
    identical,
    is_black,
    is_white,
    neighbor_planes,
)
from .thinning import (
    thinning_step,
    skeletonize,
    binarize_image,
    SkeletonSnapshots,
    Thinner
)
from .connectivity import connected_pixels
from .orientation import (
    compute_slope,
    compute_angle,
    compute_orientation,
)
from .minutiae_extraction import (
    MinutiaeType,
    Minutia,
    classify,
    extract_minutiae,
    MinutiaeExtractor
)
from .minutiae_matching import (
    MatchBudget,
    AlignmentResult,
    MatchResult,
    apply_rotation,
    apply_translation,
    apply_transformation,
    angle_difference,
    matching_minutiae_count,
    match,
    find_best_alignment,
    MinutiaeMatcher,
    MinutiaeMatchingPipeline
)

__all__ = [
    # Neighborhood
    'OutOfBoundsError',
    'MalformedNeighborVectorError',
    'neighbors',
    'black_count',
    'transitions',
    'identical',
    'is_black',
    'is_white',
    'neighbor_planes',
    # Thinning
    'thinning_step',
    'skeletonize',
    'binarize_image',
    'SkeletonSnapshots',
    'Thinner',
    # Region and orientation
    'connected_pixels',
    'compute_slope',
    'compute_angle',
    'compute_orientation',
    # Minutiae extraction
    'MinutiaeType',
    'Minutia',
    'classify',
    'extract_minutiae',
    'MinutiaeExtractor',
    # Minutiae matching
    'MatchBudget',
    'AlignmentResult',
    'MatchResult',
    'apply_rotation',
    'apply_translation',
    'apply_transformation',
    'angle_difference',
    'matching_minutiae_count',
    'match',
    'find_best_alignment',
    'MinutiaeMatcher',
    'MinutiaeMatchingPipeline',
]
