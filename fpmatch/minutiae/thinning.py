"""
Image thinning (skeletonization) of binary fingerprint images.

This module reduces ridge images to single-pixel-wide skeletons, which
is a prerequisite for minutiae extraction.
"""

import logging
from typing import Callable, List, Optional, Tuple

import numpy as np

from fpmatch.minutiae.neighborhood import (
    as_grid,
    identical,
    neighbor_planes,
    transition_map,
)

logger = logging.getLogger(__name__)


# =============================================================================
# MATHEMATICAL BACKGROUND
# =============================================================================
#
# Thinning/Skeletonization:
# ------------------------
# Thinning reduces binary objects to 1-pixel-wide skeletons while
# preserving connectivity. Each iteration has two sub-steps; every
# sub-step decides all deletions against the grid as it stood before the
# sub-step, then clears them together.
#
# For a pixel P with neighbors indexed clockwise from the top:
#     7 0 1
#     6 P 2
#     5 4 3
#
# P is deleted in a sub-step if:
# - P is black
# - 2 <= B(P) <= 6    (B = number of black neighbors)
# - A(P) = 1          (A = number of white -> black transitions)
# - sub-step 0: at least one of {0, 2, 4} and one of {2, 4, 6} is white
# - sub-step 1: at least one of {0, 2, 6} and one of {0, 4, 6} is white
#
# Sub-steps only clear pixels, so the grid converges to a fixed point:
# the skeleton is the first grid a full iteration leaves unchanged.
#
# Reference:
# Zhang, T. Y., & Suen, C. Y. (1984).
# "A fast parallel algorithm for thinning digital patterns."
# Communications of the ACM, 27(3), 236-239.
# =============================================================================

# Neighbor triads that must each contain a white pixel, per sub-step
STEP_TRIADS = {
    0: ((0, 2, 4), (2, 4, 6)),
    1: ((0, 2, 6), (0, 4, 6)),
}

# Callback receiving (iteration, step, grid_before, grid_after)
SnapshotCollector = Callable[[int, int, np.ndarray, np.ndarray], None]


def deletion_mask(grid: np.ndarray, step: int) -> np.ndarray:
    """
    Mark the pixels removed by one thinning sub-step.

    Args:
        grid: Boolean pixel grid
        step: Sub-step number (0 or 1)

    Returns:
        Boolean array, True where the pixel is deleted
    """
    if step not in STEP_TRIADS:
        raise ValueError(f"Unknown thinning step: {step} (expected 0 or 1)")

    planes = neighbor_planes(grid)

    # Condition 1: 2 <= B(P) <= 6
    b = planes.sum(axis=0)
    candidates = grid & (b >= 2) & (b <= 6)

    # Condition 2: A(P) = 1
    candidates &= transition_map(planes) == 1

    # Conditions 3 and 4 depend on the sub-step
    for triad in STEP_TRIADS[step]:
        all_black = planes[triad[0]] & planes[triad[1]] & planes[triad[2]]
        candidates &= ~all_black

    return candidates


def thinning_step(grid: np.ndarray, step: int) -> np.ndarray:
    """
    Perform one sub-step of thinning.

    Args:
        grid: Boolean pixel grid (not modified)
        step: Sub-step number (0 or 1)

    Returns:
        New grid after this sub-step
    """
    grid = as_grid(grid)
    return grid & ~deletion_mask(grid, step)


def skeletonize(
    image,
    collector: Optional[SnapshotCollector] = None,
    max_iterations: Optional[int] = None
) -> np.ndarray:
    """
    Thin a binary ridge image until it reaches a fixed point.

    Args:
        image: Binary image (ridges = True / non-zero)
        collector: Optional callback called after every sub-step with
            (iteration, step, grid_before, grid_after)
        max_iterations: Optional cap on full iterations

    Returns:
        Skeleton as a new boolean grid
    """
    current = as_grid(image).copy()
    iteration = 0

    while True:
        if max_iterations is not None and iteration >= max_iterations:
            logger.warning(
                "Thinning stopped after %d iterations without converging",
                iteration
            )
            break

        previous = current
        for step in (0, 1):
            after = thinning_step(current, step)
            if collector is not None:
                collector(iteration, step, current, after)
            current = after

        iteration += 1
        if identical(previous, current):
            break

    logger.debug(
        "Skeleton reached after %d iterations (%d black pixels)",
        iteration, int(current.sum())
    )
    return current


class SkeletonSnapshots:
    """
    Collector keeping every thinning sub-step in memory.

    Pass an instance as the `collector` of `skeletonize()`, then render
    the snapshots with `to_strip()` for a debug image.
    """

    # BGR colour of pixels removed by a sub-step
    REMOVED_COLOR = (0, 0, 255)

    def __init__(self):
        self.snapshots: List[Tuple[int, int, np.ndarray, np.ndarray]] = []

    def __call__(
        self,
        iteration: int,
        step: int,
        before: np.ndarray,
        after: np.ndarray
    ) -> None:
        self.snapshots.append((iteration, step, before.copy(), after.copy()))

    def __len__(self) -> int:
        return len(self.snapshots)

    def removed_counts(self) -> List[int]:
        """Number of pixels removed by each recorded sub-step."""
        return [int((before & ~after).sum()) for _, _, before, after in self.snapshots]

    def to_strip(self) -> np.ndarray:
        """
        Render all sub-steps side by side.

        Each panel shows the grid before the sub-step, ridge pixels in
        black, with the pixels the sub-step removed highlighted.

        Returns:
            BGR uint8 image of shape (H, W * n, 3)
        """
        if not self.snapshots:
            raise ValueError("No thinning snapshots recorded")

        panels = []
        for _, _, before, after in self.snapshots:
            panel = np.full(before.shape + (3,), 255, dtype=np.uint8)
            panel[before] = 0
            panel[before & ~after] = self.REMOVED_COLOR
            panels.append(panel)

        return np.concatenate(panels, axis=1)


def binarize_image(
    image: np.ndarray,
    method: str = 'otsu',
    block_size: int = 15,
    offset: int = 10
) -> np.ndarray:
    """
    Binarize a grayscale fingerprint image.

    Ridges are dark in the input and become True in the output.

    Args:
        image: Grayscale fingerprint image
        method: 'global', 'adaptive', or 'otsu'
        block_size: Block size for adaptive method
        offset: Offset for adaptive thresholding

    Returns:
        Boolean grid (ridges = True, background = False)
    """
    import cv2

    # Convert to uint8 if needed
    if image.dtype in [np.float32, np.float64]:
        image = (image * 255).clip(0, 255).astype(np.uint8)
    elif image.dtype == bool:
        return image.copy()

    if method == 'global':
        threshold = np.mean(image)
        binary = image < threshold

    elif method == 'otsu':
        _, binary = cv2.threshold(image, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
        binary = binary > 0

    elif method == 'adaptive':
        binary = cv2.adaptiveThreshold(
            image, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY_INV, block_size, offset
        )
        binary = binary > 0

    else:
        raise ValueError(f"Unknown binarization method: {method}")

    return binary


class Thinner:
    """
    Configurable fingerprint thinning processor.
    """

    def __init__(
        self,
        binarize: bool = False,
        binarization_method: str = 'otsu',
        max_iterations: Optional[int] = None,
        collector: Optional[SnapshotCollector] = None
    ):
        """
        Initialize thinner.

        Args:
            binarize: Whether to binarize grayscale input first
            binarization_method: Binarization method
            max_iterations: Maximum thinning iterations (None = until converged)
            collector: Optional snapshot collector passed to skeletonize()
        """
        self.binarize = binarize
        self.binarization_method = binarization_method
        self.max_iterations = max_iterations
        self.collector = collector

    def process(self, image: np.ndarray) -> np.ndarray:
        """
        Optionally binarize, then thin a fingerprint image.

        Args:
            image: Input fingerprint image

        Returns:
            Skeleton grid
        """
        if self.binarize:
            image = binarize_image(image, self.binarization_method)

        return skeletonize(
            image,
            collector=self.collector,
            max_iterations=self.max_iterations
        )
