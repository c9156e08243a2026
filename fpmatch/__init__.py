"""
fpmatch: fingerprint minutiae extraction and matching.

Typical use:

    skeleton = skeletonize(grid)
    signature = extract_minutiae(skeleton)
    same_finger = match_signatures(signature, other_signature)
"""

from typing import Optional, Sequence

from fpmatch.minutiae import (
    Minutia,
    extract_minutiae,
    match,
    skeletonize,
)
from fpmatch.utils.config import (
    Config,
    ExtractionConfig,
    MatchingConfig,
    DEFAULT_CONFIG,
)

__version__ = "0.1.0"


def match_signatures(
    minutiae1: Sequence[Minutia],
    minutiae2: Sequence[Minutia],
    config: Optional[MatchingConfig] = None
) -> bool:
    """Decide whether two minutiae signatures belong to the same finger."""
    return match(minutiae1, minutiae2, config)


__all__ = [
    'Minutia',
    'skeletonize',
    'extract_minutiae',
    'match_signatures',
    'Config',
    'ExtractionConfig',
    'MatchingConfig',
    'DEFAULT_CONFIG',
]
