"""Tests for cycle pace and projection analytics."""

import pytest

from lifescore.engine.cycle_analytics import compute_cycle_analytics, pace_for_ratio
from lifescore.models.cycle import CycleGoal, Pace, WeeklyTarget, WeekScore


def goal(goal_id, target_value, current_value):
    return CycleGoal(
        id=goal_id,
        cycle_id="c1",
        user_id="u",
        name=goal_id.title(),
        target_value=target_value,
        current_value=current_value,
    )


def reviewed(goal_id, week, actual, score):
    return WeeklyTarget(goal_id=goal_id, week_number=week, target_value=10, actual_value=actual, score=score)


class TestPace:

    def test_bands(self):
        assert pace_for_ratio(1.1) == Pace.AHEAD
        assert pace_for_ratio(0.85) == Pace.ON_TRACK
        assert pace_for_ratio(0.84) == Pace.BEHIND


class TestComputeCycleAnalytics:

    def test_no_goals_is_neutral(self):
        analytics = compute_cycle_analytics([], [], current_week=5, total_weeks=12)
        assert analytics.overall_completion == 0
        assert analytics.pace == Pace.ON_TRACK
        assert analytics.goal_trends == []

    def test_completion_pace_and_projection(self):
        goals = [goal("run", 120, 30), goal("read", 120, 30)]
        # Week 4: 3 finished weeks, expected 3/12 * 240 = 60, actual 60
        analytics = compute_cycle_analytics(goals, [], current_week=4, total_weeks=12)
        assert analytics.overall_completion == pytest.approx(25)
        assert analytics.pace == Pace.ON_TRACK
        # 60 over 3 weeks -> 20/week -> 240 over 12 weeks -> 100%
        assert analytics.projected_completion == pytest.approx(100)

    def test_projection_is_capped(self):
        analytics = compute_cycle_analytics([goal("run", 12, 12)], [], current_week=2, total_weeks=12)
        assert analytics.projected_completion == 100
        assert analytics.pace == Pace.AHEAD

    def test_first_week_pace_is_on_track(self):
        analytics = compute_cycle_analytics([goal("run", 120, 0)], [], current_week=1, total_weeks=12)
        assert analytics.pace == Pace.ON_TRACK
        assert analytics.projected_completion == 0

    def test_consistency_only_counts_fully_reviewed_weeks(self):
        goals = [goal("run", 120, 0), goal("read", 120, 0)]
        targets = [
            reviewed("run", 1, 10, WeekScore.GOOD),
            reviewed("read", 1, 12, WeekScore.EXCEEDED),
            reviewed("run", 2, 10, WeekScore.GOOD),
            reviewed("read", 2, 2, WeekScore.MISSED),
            reviewed("run", 3, 10, WeekScore.GOOD),
            WeeklyTarget(goal_id="read", week_number=3, target_value=10),
        ]
        analytics = compute_cycle_analytics(goals, targets, current_week=4, total_weeks=12)
        assert analytics.total_reviewed_weeks == 2
        assert analytics.consistent_weeks == 1

    def test_goal_trends_fill_missing_weeks_with_zero(self):
        goals = [goal("run", 30, 0)]
        targets = [reviewed("run", 2, 7, WeekScore.PARTIAL)]
        analytics = compute_cycle_analytics(goals, targets, current_week=3, total_weeks=3)
        assert len(analytics.goal_trends) == 1
        assert analytics.goal_trends[0].goal_name == "Run"
        assert analytics.goal_trends[0].weekly_actuals == [0, 7, 0]
