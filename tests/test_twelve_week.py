"""Tests for twelve-week cycle scoring and redistribution."""

import logging
from datetime import date, datetime

import pytest

from lifescore.engine.twelve_week import (
    apply_week_review,
    calculate_end_date,
    generate_weekly_targets,
    get_current_week_number,
    get_goal_status,
    get_total_weeks,
    get_week_score,
    redistribute_targets,
)
from lifescore.models.cycle import GoalStatus, WeeklyTarget, WeekScore


def target(week, target_value=10, actual_value=0, score=None, is_overridden=False):
    return WeeklyTarget(
        goal_id="g1",
        week_number=week,
        target_value=target_value,
        actual_value=actual_value,
        score=score,
        is_overridden=is_overridden,
    )


class TestWeekScore:

    @pytest.mark.parametrize("actual,expected", [
        (110, WeekScore.EXCEEDED),
        (85, WeekScore.GOOD),
        (50, WeekScore.PARTIAL),
        (10, WeekScore.MISSED),
        (109, WeekScore.GOOD),
        (49, WeekScore.MISSED),
    ])
    def test_ratio_bands(self, actual, expected):
        assert get_week_score(actual, 100) == expected

    def test_non_positive_target(self):
        assert get_week_score(1, 0) == WeekScore.EXCEEDED
        assert get_week_score(0, 0) == WeekScore.MISSED


class TestRedistributeTargets:

    def test_deficit_split_over_open_weeks(self):
        """One past week missed by 10 with two open weeks adds 5 to each."""
        targets = [
            target(1, 20, 10, score=WeekScore.PARTIAL),
            target(2, 20),
            target(3, 20),
        ]
        adjustments = redistribute_targets(targets, current_week=2)
        assert [(a.week_number, a.target_value) for a in adjustments] == [(2, 25), (3, 25)]

    def test_skips_overridden_and_scored_weeks(self):
        targets = [
            target(1, 10, 0, score=WeekScore.MISSED),
            target(2, 10, is_overridden=True),
            target(3, 10, 10, score=WeekScore.GOOD),
            target(4, 10),
        ]
        adjustments = redistribute_targets(targets, current_week=2)
        assert [(a.week_number, a.target_value) for a in adjustments] == [(4, 20)]

    def test_unreviewed_past_weeks_do_not_count(self):
        targets = [target(1, 10, 0), target(2, 10)]
        assert redistribute_targets(targets, current_week=2) == []

    def test_surplus_is_not_a_deficit(self):
        targets = [target(1, 10, 15, score=WeekScore.EXCEEDED), target(2, 10)]
        assert redistribute_targets(targets, current_week=2) == []

    def test_deficit_without_open_weeks_is_dropped_with_warning(self, caplog):
        targets = [
            target(1, 10, 0, score=WeekScore.MISSED),
            target(2, 10, is_overridden=True),
        ]
        with caplog.at_level(logging.WARNING, logger="lifescore.engine.twelve_week"):
            assert redistribute_targets(targets, current_week=2) == []
        assert "Dropping deficit" in caplog.text


class TestCycleCalendar:

    def test_total_weeks(self):
        start = date(2024, 1, 1)
        assert get_total_weeks(start, calculate_end_date(start)) == 12
        assert get_total_weeks(start, start) == 1
        assert get_total_weeks("2024-01-01", "2024-01-09") == 2

    def test_end_date_is_84_days_inclusive(self):
        assert calculate_end_date("2024-01-01") == date(2024, 3, 24)

    def test_current_week_is_clamped(self):
        start, end = date(2024, 1, 1), date(2024, 3, 24)
        assert get_current_week_number(start, end, today=date(2023, 12, 1)) == 1
        assert get_current_week_number(start, end, today=date(2024, 1, 7)) == 1
        assert get_current_week_number(start, end, today=date(2024, 1, 8)) == 2
        assert get_current_week_number(start, end, today=date(2024, 6, 1)) == 12


class TestGoalStatus:

    def test_bands(self):
        # expected after 6 of 12 weeks = 50
        assert get_goal_status(55, 100, 6) == GoalStatus.AHEAD
        assert get_goal_status(45, 100, 6) == GoalStatus.ON_TRACK
        assert get_goal_status(40, 100, 6) == GoalStatus.BEHIND

    def test_guards(self):
        assert get_goal_status(10, 0, 6) == GoalStatus.ON_TRACK
        assert get_goal_status(10, 100, 6, total_weeks=0) == GoalStatus.ON_TRACK

    def test_nothing_expected_yet(self):
        assert get_goal_status(0, 100, 0) == GoalStatus.ON_TRACK
        assert get_goal_status(5, 100, 0) == GoalStatus.AHEAD


class TestWeeklyTargets:

    def test_generated_targets_sum_to_goal_target(self):
        targets = generate_weekly_targets("g1", 120, 12)
        assert [t.week_number for t in targets] == list(range(1, 13))
        assert sum(t.target_value for t in targets) == pytest.approx(120)
        assert all(t.score is None for t in targets)

    def test_apply_week_review_scores_against_new_target(self):
        reviewed = apply_week_review(target(1, 10), 9, target_value=8, reviewed_at=datetime(2024, 1, 7))
        assert reviewed.actual_value == 9
        assert reviewed.target_value == 8
        assert reviewed.score == WeekScore.EXCEEDED
        assert reviewed.reviewed_at == datetime(2024, 1, 7)

    def test_apply_week_review_keeps_existing_target(self):
        original = target(1, 10)
        reviewed = apply_week_review(original, 5)
        assert reviewed.score == WeekScore.PARTIAL
        assert original.score is None
