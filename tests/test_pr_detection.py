import pytest

from litework.core.enums import PRType
from litework.services.pr_detection import (
    HistorySet,
    calculate_one_rm,
    compare_to_history,
    format_pr_message,
    pr_badge_tier,
)


def test_epley_one_rm():
    assert calculate_one_rm(100, 5) == 117
    assert calculate_one_rm(100, 10) == 133


def test_single_rep_is_the_one_rm():
    assert calculate_one_rm(142.5, 1) == 142.5


def test_first_set_ever_is_a_one_rm_pr():
    result = compare_to_history(100, 5, [])
    assert result.is_pr
    assert result.type is PRType.ONE_RM
    assert result.improvement == 100.0
    assert result.previous_best is None


def test_matching_the_best_is_not_a_pr():
    result = compare_to_history(100, 5, [HistorySet(100, 5)])
    assert not result.is_pr
    assert result.type is None
    assert result.previous_best.estimated_one_rm == 117


def test_one_rm_wins_over_weight():
    result = compare_to_history(110, 5, [HistorySet(100, 5)])
    assert result.type is PRType.ONE_RM
    assert result.improvement == pytest.approx((128 - 117) / 117 * 100)


def test_weight_pr_without_one_rm_pr():
    result = compare_to_history(110, 1, [HistorySet(100, 10)])
    assert result.type is PRType.WEIGHT
    assert result.improvement == pytest.approx(10.0)


def test_reps_pr_needs_ninety_percent_of_best_weight():
    result = compare_to_history(90, 11, [HistorySet(100, 10)])
    assert result.type is PRType.REPS
    assert result.improvement == pytest.approx(10.0)


def test_volume_pr_when_too_light_for_reps_pr():
    result = compare_to_history(80, 13, [HistorySet(100, 10)])
    assert result.type is PRType.VOLUME
    assert result.improvement == pytest.approx(4.0)


def test_improvement_against_zero_best_is_full():
    result = compare_to_history(50, 5, [HistorySet(0, 10)])
    assert result.is_pr
    assert result.improvement == 100.0


def test_badge_tiers():
    assert pr_badge_tier(2) == "bronze"
    assert pr_badge_tier(5) == "silver"
    assert pr_badge_tier(12) == "gold"
    assert pr_badge_tier(25) == "legendary"


def test_pr_messages():
    assert format_pr_message(compare_to_history(100, 5, [HistorySet(100, 5)])) == ""
    msg = format_pr_message(compare_to_history(110, 1, [HistorySet(100, 10)]), unit="kg")
    assert msg == "Weight PR! 110kg x 1 (10.0% heavier)"
    assert format_pr_message(compare_to_history(100, 5, [])).startswith("New 1RM PR! Est. 117lbs")
