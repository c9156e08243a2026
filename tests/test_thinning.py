import numpy as np
import pytest

from fpmatch.minutiae.thinning import (
    SkeletonSnapshots,
    Thinner,
    skeletonize,
    thinning_step,
)


def grid_from(shape, pixels):
    grid = np.zeros(shape, dtype=bool)
    for row, col in pixels:
        grid[row, col] = True
    return grid


def test_blank_grid_is_its_own_skeleton(blank_grid):
    np.testing.assert_array_equal(skeletonize(blank_grid), blank_grid)


def test_first_step_peels_block(block_grid):
    after = thinning_step(block_grid, 0)
    np.testing.assert_array_equal(after, grid_from((5, 5), [(1, 2), (2, 1), (2, 2)]))


def test_second_step_uses_other_triads(block_grid):
    after = thinning_step(thinning_step(block_grid, 0), 1)
    np.testing.assert_array_equal(after, grid_from((5, 5), [(2, 2)]))


def test_step_does_not_modify_input(block_grid):
    original = block_grid.copy()
    thinning_step(block_grid, 0)
    np.testing.assert_array_equal(block_grid, original)


def test_unknown_step_rejected(block_grid):
    with pytest.raises(ValueError):
        thinning_step(block_grid, 2)


def test_block_thins_to_center(block_grid):
    np.testing.assert_array_equal(skeletonize(block_grid), grid_from((5, 5), [(2, 2)]))


def test_one_pixel_ridges_are_stable(segments_grid, t_junction_grid):
    np.testing.assert_array_equal(skeletonize(segments_grid), segments_grid)
    np.testing.assert_array_equal(skeletonize(t_junction_grid), t_junction_grid)


def test_thick_bar_reduces_to_thin_ridge():
    bar = np.zeros((20, 30), dtype=bool)
    bar[5:14, 5:25] = True

    skeleton = skeletonize(bar)

    assert 0 < skeleton.sum() < bar.sum()
    # The medial row of the bar survives
    assert skeleton[9].any()


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_skeletonize_is_idempotent(seed):
    grid = np.random.default_rng(seed).random((24, 24)) > 0.45
    skeleton = skeletonize(grid)
    np.testing.assert_array_equal(skeletonize(skeleton), skeleton)


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_skeletonize_only_erodes(seed):
    grid = np.random.default_rng(seed).random((24, 24)) > 0.45
    skeleton = skeletonize(grid)

    assert skeleton.sum() <= grid.sum()
    assert not (skeleton & ~grid).any()


def test_skeletonize_accepts_integer_images(block_grid):
    image = block_grid.astype(np.uint8) * 255
    np.testing.assert_array_equal(skeletonize(image), skeletonize(block_grid))


def test_snapshots_record_every_sub_step(block_grid):
    snapshots = SkeletonSnapshots()
    skeletonize(block_grid, collector=snapshots)

    # One iteration removes pixels, the next confirms the fixed point
    assert len(snapshots) == 4
    assert snapshots.removed_counts() == [6, 2, 0, 0]


def test_snapshot_strip_highlights_removed_pixels(block_grid):
    snapshots = SkeletonSnapshots()
    skeletonize(block_grid, collector=snapshots)
    strip = snapshots.to_strip()

    assert strip.shape == (5, 20, 3)
    assert strip.dtype == np.uint8
    # (1, 1) is removed by the first sub-step
    assert tuple(strip[1, 1]) == SkeletonSnapshots.REMOVED_COLOR
    # (2, 2) survives every sub-step
    assert tuple(strip[2, 2]) == (0, 0, 0)


def test_empty_snapshots_cannot_render():
    with pytest.raises(ValueError):
        SkeletonSnapshots().to_strip()


def test_iteration_cap(block_grid):
    capped = skeletonize(block_grid, max_iterations=1)
    np.testing.assert_array_equal(capped, grid_from((5, 5), [(2, 2)]))


def test_thinner_without_binarization(block_grid):
    np.testing.assert_array_equal(Thinner().process(block_grid), skeletonize(block_grid))
