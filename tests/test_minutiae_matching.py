import numpy as np
import pytest

from fpmatch import match_signatures
from fpmatch.minutiae.minutiae_extraction import Minutia, MinutiaeExtractor, extract_minutiae
from fpmatch.minutiae.minutiae_matching import (
    MatchBudget,
    MinutiaeMatcher,
    MinutiaeMatchingPipeline,
    angle_difference,
    apply_rotation,
    apply_transformation,
    apply_translation,
    find_best_alignment,
    match,
    matching_minutiae_count,
)
from fpmatch.minutiae.thinning import skeletonize
from fpmatch.utils.config import MatchingConfig


def test_rotation_quarter_turn():
    rotated = apply_rotation(Minutia(row=0, col=10, angle=0), 0, 0, 90)
    assert rotated == Minutia(row=-10, col=0, angle=90)


def test_rotation_about_own_position_only_turns():
    m = Minutia(row=12, col=34, angle=350)
    assert apply_rotation(m, 12, 34, 25) == Minutia(row=12, col=34, angle=15)


def test_rotation_round_trip():
    rng = np.random.default_rng(3)
    for _ in range(50):
        m = Minutia(
            row=int(rng.integers(0, 300)),
            col=int(rng.integers(0, 300)),
            angle=int(rng.integers(0, 360))
        )
        degrees = int(rng.integers(-180, 180))
        back = apply_rotation(apply_rotation(m, 150, 150, degrees), 150, 150, -degrees)

        assert abs(back.row - m.row) <= 1
        assert abs(back.col - m.col) <= 1
        assert back.angle == m.angle


def test_translation_subtracts():
    m = Minutia(row=10, col=10, angle=30)
    assert apply_translation(m, 5, -3) == Minutia(row=5, col=13, angle=30)


def test_transformation_rotates_then_translates():
    m = Minutia(row=0, col=10, angle=0)
    assert apply_transformation(m, 0, 0, 2, 3, 90) == Minutia(row=-12, col=-3, angle=90)
    assert apply_transformation([m, m], 0, 0, 2, 3, 90) == [Minutia(row=-12, col=-3, angle=90)] * 2


@pytest.mark.parametrize("a, b, expected", [
    (10, 30, 20),
    (350, 10, 20),
    (0, 180, 180),
    (90, 90, 0),
])
def test_angle_difference_is_circular(a, b, expected):
    assert angle_difference(a, b) == expected


def test_count_identical_sets(lattice_signature):
    assert matching_minutiae_count(lattice_signature, lattice_signature, 5, 20) == 25


def test_count_respects_tolerances():
    a = [Minutia(10, 10, 0)]
    assert matching_minutiae_count(a, [Minutia(13, 14, 20)], 5, 20) == 1
    assert matching_minutiae_count(a, [Minutia(14, 14, 0)], 5, 20) == 0
    assert matching_minutiae_count(a, [Minutia(10, 10, 21)], 5, 20) == 0


def test_count_pairs_each_minutia_once():
    a = [Minutia(10, 10, 0), Minutia(10, 11, 0)]
    b = [Minutia(10, 10, 0)]
    assert matching_minutiae_count(a, b, 5, 20) == 1


def test_count_stops_when_threshold_unreachable():
    hit = Minutia(0, 0, 0)
    miss = Minutia(100, 100, 0)
    a = [hit, miss, miss, Minutia(50, 50, 0), Minutia(70, 70, 0)]
    b = [hit, Minutia(50, 50, 0), Minutia(70, 70, 0)]

    assert matching_minutiae_count(a, b, 5, 20) == 3
    assert matching_minutiae_count(a, b, 5, 20, threshold=5) == 1


def test_moved_signature_matches(lattice_signature, moved_signature):
    assert match(lattice_signature, moved_signature)
    assert match_signatures(lattice_signature, moved_signature)


def test_correct_alignment_overlaps_everything(lattice_signature, moved_signature):
    a0, b0 = lattice_signature[0], moved_signature[0]
    aligned = apply_transformation(
        moved_signature,
        b0.row, b0.col,
        b0.row - a0.row, b0.col - a0.col,
        a0.angle - b0.angle
    )
    assert matching_minutiae_count(lattice_signature, aligned, 5, 20) == 25


def test_unrelated_signatures_do_not_match(lattice_signature):
    rng = np.random.default_rng(11)
    other = [
        Minutia(int(r), int(c), int(a))
        for r, c, a in zip(
            rng.integers(0, 400, 25), rng.integers(0, 400, 25), rng.integers(0, 360, 25)
        )
    ]
    assert not match(lattice_signature, other)


def test_small_signatures_cannot_reach_threshold():
    small = [Minutia(10, 10, 0), Minutia(20, 20, 90)]
    assert not match(small, small)
    assert match(small, small, MatchingConfig(found_threshold=2))


def test_empty_signatures_do_not_match(lattice_signature):
    assert not match([], lattice_signature)
    assert not match(lattice_signature, [])


def test_zero_rotation_slack_still_finds_exact_copy(lattice_signature):
    shifted = [apply_translation(m, -7, 4) for m in lattice_signature]
    assert match(lattice_signature, shifted, MatchingConfig(match_angle_offset=0))


def test_budget_stops_search(lattice_signature, moved_signature):
    reordered = moved_signature[::-1]
    budget = MatchBudget(max_trials=1)

    assert not match(lattice_signature, reordered, budget=budget)
    assert budget.trials == 1
    assert budget.exhausted
    assert match(lattice_signature, reordered)


def test_budget_from_config(lattice_signature, moved_signature):
    config = MatchingConfig(max_trials=0)
    assert not match(lattice_signature, moved_signature, config)


def test_best_alignment_on_identical_sets():
    sig = [Minutia(10 * i, 7 * i, 30 * i) for i in range(6)]
    best = find_best_alignment(sig, sig)

    assert best.count == 6
    assert best.trials == 6 * 6 * 5


@pytest.mark.parametrize("turn", [2, -2])
def test_rotation_window_reaches_both_edges(turn):
    # Same positions, every angle turned by `turn`: the anchor rotation is
    # off by `turn`, and only the window edge undoing it lines the far
    # corners up again
    sig = [Minutia(r, c, 0) for r in (0, 40, 80) for c in (0, 40, 80)]
    turned = [Minutia(m.row, m.col, turn) for m in sig]
    tight = dict(distance_threshold=0, orientation_threshold=2, found_threshold=9)

    best = find_best_alignment(sig, turned, MatchingConfig(match_angle_offset=2, **tight))
    assert best.count == 9
    assert best.rotation % 360 == 0
    assert match(sig, turned, MatchingConfig(match_angle_offset=2, **tight))

    narrow = find_best_alignment(sig, turned, MatchingConfig(match_angle_offset=1, **tight))
    assert narrow.count < 9
    assert not match(sig, turned, MatchingConfig(match_angle_offset=1, **tight))


def test_matcher_reports_score():
    sig = [Minutia(10 * i, 7 * i, 30 * i) for i in range(6)]
    matcher = MinutiaeMatcher(MatchingConfig(found_threshold=4))
    result = matcher.match(sig, sig[:4])

    assert result.matched
    assert result.score == pytest.approx(1.0)
    assert result.details['count'] == 4
    assert matcher.is_match(sig, sig[:4])


def test_matcher_with_empty_signature():
    result = MinutiaeMatcher().match([], [Minutia(1, 1, 1)])
    assert not result.matched
    assert result.score == 0.0


def test_self_match_from_image(segments_grid):
    signature = extract_minutiae(skeletonize(segments_grid))
    assert len(signature) >= 20
    assert match(signature, extract_minutiae(skeletonize(segments_grid)))


def test_pipeline_matches_translated_image(segments_grid):
    shifted = np.roll(segments_grid, (3, 2), axis=(0, 1))
    assert MinutiaeMatchingPipeline().is_match(segments_grid, shifted)


def test_pipeline_reports_result(t_junction_grid):
    pipeline = MinutiaeMatchingPipeline(
        matcher=MinutiaeMatcher(MatchingConfig(found_threshold=4))
    )
    result = pipeline.match(t_junction_grid, t_junction_grid)

    assert result.matched
    assert result.details['num_minutiae1'] == 4
    assert isinstance(pipeline.extractor, MinutiaeExtractor)
