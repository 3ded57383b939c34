"""Tests for goal and outcome progress."""

from datetime import datetime

import pytest

from lifescore.engine.goal_progress import (
    compute_goal_progress,
    current_outcome_value,
    default_direction,
    sum_goal_logs,
)
from lifescore.models.outcome import Direction, Goal, GoalLog, GoalType, MetricType, Outcome, OutcomeLog


@pytest.fixture
def goal_base(test_user_id):
    return {
        "id": "goal-1",
        "user_id": test_user_id,
        "title": "Read",
        "goal_type": GoalType.ACHIEVEMENT,
        "metric_type": MetricType.COUNT,
        "target_value": 10,
        "start_date": datetime(2024, 1, 1),
        "end_date": datetime(2024, 1, 31),
    }


def count_log(n, when, goal_id="goal-1"):
    return GoalLog(id=f"log-{when.isoformat()}-{n}", goal_id=goal_id, start_time=when, goal_count=n)


class TestSumGoalLogs:

    def test_count_logs_in_window(self, goal_base):
        goal = Goal(**goal_base)
        logs = [
            count_log(3, datetime(2024, 1, 1, 0, 0)),
            count_log(2, datetime(2024, 1, 31, 23, 59)),
            count_log(100, datetime(2024, 2, 1, 0, 0)),
            count_log(100, datetime(2023, 12, 31, 23, 59)),
            count_log(100, datetime(2024, 1, 15), goal_id="other"),
        ]
        assert sum_goal_logs(goal, logs) == 5

    def test_time_logs_sum_hours(self, goal_base):
        goal = Goal(**{**goal_base, "metric_type": MetricType.TIME})
        logs = [
            GoalLog(id="a", goal_id="goal-1", start_time=datetime(2024, 1, 2, 9), end_time=datetime(2024, 1, 2, 10, 30)),
            GoalLog(id="b", goal_id="goal-1", start_time=datetime(2024, 1, 3, 9), end_time=datetime(2024, 1, 3, 9, 30)),
            GoalLog(id="c", goal_id="goal-1", start_time=datetime(2024, 1, 4, 9)),
        ]
        assert sum_goal_logs(goal, logs) == pytest.approx(2.0)


class TestComputeGoalProgress:

    def test_achievement_completed_at_target_before_end(self, goal_base):
        goal = Goal(**goal_base)
        logs = [count_log(10, datetime(2024, 1, 5))]
        progress = compute_goal_progress(goal, logs, now=datetime(2024, 1, 10))
        assert progress.is_completed is True
        assert progress.is_overdue is False
        assert progress.percent_complete == pytest.approx(100)
        assert progress.daily_target == 0

    def test_achievement_overdue_after_end_when_short(self, goal_base):
        goal = Goal(**goal_base)
        progress = compute_goal_progress(goal, [count_log(4, datetime(2024, 1, 5))], now=datetime(2024, 2, 2))
        assert progress.is_completed is False
        assert progress.is_overdue is True
        assert progress.days_remaining == 0
        assert progress.percent_elapsed == 100

    def test_limiting_overdue_immediately_when_over(self, goal_base):
        goal = Goal(**{**goal_base, "goal_type": GoalType.LIMITING, "target_value": 5})
        progress = compute_goal_progress(goal, [count_log(6, datetime(2024, 1, 3))], now=datetime(2024, 1, 4))
        assert progress.is_overdue is True
        assert progress.is_completed is False

    def test_limiting_completed_only_after_window(self, goal_base):
        goal = Goal(**{**goal_base, "goal_type": GoalType.LIMITING, "target_value": 5})
        logs = [count_log(3, datetime(2024, 1, 3))]
        assert compute_goal_progress(goal, logs, now=datetime(2024, 1, 4)).is_completed is False
        assert compute_goal_progress(goal, logs, now=datetime(2024, 2, 1)).is_completed is True

    def test_pace_fields_mid_window(self, goal_base):
        goal = Goal(**goal_base)
        progress = compute_goal_progress(goal, [count_log(4, datetime(2024, 1, 2))], now=datetime(2024, 1, 16))
        # 15 of 30 days elapsed
        assert progress.percent_elapsed == pytest.approx(50)
        assert progress.percent_complete == pytest.approx(40)
        assert progress.days_remaining == 15
        assert progress.daily_target == pytest.approx(6 / 15)

    def test_before_start_elapsed_is_zero(self, goal_base):
        goal = Goal(**goal_base)
        progress = compute_goal_progress(goal, [], now=datetime(2023, 12, 1))
        assert progress.percent_elapsed == 0
        assert progress.current_value == 0

    def test_zero_target_is_guarded(self, goal_base):
        goal = Goal(**{**goal_base, "target_value": 0})
        progress = compute_goal_progress(goal, [], now=datetime(2024, 1, 10))
        assert progress.percent_complete == 0


class TestOutcomeValues:

    def _outcome(self, test_user_id):
        return Outcome(
            id="o1",
            user_id=test_user_id,
            name="Weight",
            unit="kg",
            start_value=90,
            target_value=80,
            current_value=90,
            direction=Direction.DECREASE,
        )

    def test_latest_log_wins(self, test_user_id):
        logs = [
            OutcomeLog(id="b", outcome_id="o1", value=86, logged_at=datetime(2024, 1, 9)),
            OutcomeLog(id="a", outcome_id="o1", value=88, logged_at=datetime(2024, 1, 2)),
        ]
        assert current_outcome_value(self._outcome(test_user_id), logs) == 86

    def test_no_logs_uses_start_value(self, test_user_id):
        assert current_outcome_value(self._outcome(test_user_id), []) == 90

    def test_default_direction(self):
        assert default_direction(90, 80) == Direction.DECREASE
        assert default_direction(0, 10) == Direction.INCREASE
        assert default_direction(5, 5) == Direction.INCREASE
