"""Tests for task scoring and daily score aggregation."""

import pytest
from datetime import date

from lifescore.engine.scoring import (
    calculate_daily_score,
    calculate_progress_score,
    round_half_up,
    score_task,
    task_max_points,
)
from lifescore.models.constants import UNASSIGNED_PILLAR
from lifescore.models.outcome import Outcome
from lifescore.models.task import Completion, CompletionType, FlexibilityRule, Importance, PillarWeight


DAY = date(2024, 1, 10)


def completion_for(task, completed=False, value=None):
    return Completion(task_id=task.id, date=DAY, completed=completed, value=value)


class TestRoundHalfUp:
    """Rounding mirrors half-up, not banker's rounding."""

    def test_halves_round_up(self):
        assert round_half_up(66.5) == 67
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3

    def test_negative_halves_round_toward_positive(self):
        assert round_half_up(-0.5) == 0
        assert round_half_up(-1.5) == -1

    def test_other_values(self):
        assert round_half_up(66.666) == 67
        assert round_half_up(66.4) == 66


class TestScoreTask:
    """Test score_task rules."""

    @pytest.mark.parametrize("importance,expected", [
        (Importance.HIGH, 30),
        (Importance.MEDIUM, 20),
        (Importance.LOW, 10),
    ])
    def test_checkbox_completed_earns_full_points(self, make_task, importance, expected):
        """Checkbox tasks earn base points times the importance multiplier."""
        task = make_task(importance=importance)
        assert score_task(task, completion_for(task, completed=True)) == expected

    def test_checkbox_not_completed_earns_nothing(self, make_task):
        task = make_task()
        assert score_task(task, completion_for(task, completed=False, value=5)) == 0

    def test_checkbox_never_fractional(self, make_task):
        """Checkbox ignores value entirely."""
        task = make_task(importance=Importance.HIGH, base_points=7)
        assert score_task(task, completion_for(task, completed=True, value=0.3)) == 21

    def test_limit_avoid_at_limit_is_full_points(self, make_task):
        task = make_task(
            completion_type=CompletionType.NUMERIC,
            flexibility_rule=FlexibilityRule.LIMIT_AVOID,
            limit_value=2,
        )
        assert score_task(task, completion_for(task, value=2)) == 20

    def test_limit_avoid_partially_over_is_negative(self, make_task):
        task = make_task(
            completion_type=CompletionType.NUMERIC,
            flexibility_rule=FlexibilityRule.LIMIT_AVOID,
            limit_value=4,
        )
        assert score_task(task, completion_for(task, value=5)) == pytest.approx(-5)

    def test_limit_avoid_double_limit_clamps_at_full_penalty(self, make_task):
        task = make_task(
            completion_type=CompletionType.COUNT,
            flexibility_rule=FlexibilityRule.LIMIT_AVOID,
            limit_value=3,
            importance=Importance.HIGH,
        )
        assert score_task(task, completion_for(task, value=6)) == -30
        assert score_task(task, completion_for(task, value=60)) == -30

    def test_limit_avoid_without_positive_limit_falls_through(self, make_task):
        """A zero limit does not enable limit scoring."""
        task = make_task(
            completion_type=CompletionType.NUMERIC,
            flexibility_rule=FlexibilityRule.LIMIT_AVOID,
            limit_value=0,
        )
        assert score_task(task, completion_for(task, value=3)) == 20

    def test_percentage_is_proportional_and_capped(self, make_task):
        task = make_task(completion_type=CompletionType.PERCENTAGE)
        assert score_task(task, completion_for(task, value=50)) == pytest.approx(10)
        assert score_task(task, completion_for(task, value=150)) == pytest.approx(20)

    def test_target_progress_is_capped_at_one(self, make_task):
        task = make_task(completion_type=CompletionType.DURATION, target=30)
        assert score_task(task, completion_for(task, value=15)) == pytest.approx(10)
        assert score_task(task, completion_for(task, value=90)) == pytest.approx(20)

    def test_no_target_any_positive_value_earns_full_points(self, make_task):
        task = make_task(completion_type=CompletionType.COUNT)
        assert score_task(task, completion_for(task, value=1)) == 20
        assert score_task(task, completion_for(task, value=0)) == 0
        assert score_task(task, completion_for(task, value=None)) == 0

    def test_unknown_importance_uses_multiplier_one(self, make_task):
        task = make_task()
        task = task.model_copy(update={"importance": "critical"})
        assert task_max_points(task) == 10


class TestCalculateDailyScore:
    """Test daily aggregation into pillar and action scores."""

    def test_end_to_end_single_pillar(self, make_task, health_pillar):
        """Three tasks in one pillar: 40 of 60 points gives 67."""
        done = make_task(pillar_id=health_pillar.id, importance=Importance.HIGH)
        half = make_task(
            pillar_id=health_pillar.id,
            completion_type=CompletionType.NUMERIC,
            target=100,
            importance=Importance.MEDIUM,
        )
        skipped = make_task(pillar_id=health_pillar.id, importance=Importance.LOW)
        completions = [
            completion_for(done, completed=True),
            completion_for(half, value=50),
            completion_for(skipped, completed=False),
        ]

        result = calculate_daily_score(
            completions, [done, half, skipped], [PillarWeight(pillar_id=health_pillar.id, weight=10)]
        )

        assert result.pillar_scores == {health_pillar.id: 67}
        assert result.action_score == 67

    def test_no_completions_scores_zero(self, make_task, health_pillar, work_pillar):
        tasks = [make_task(pillar_id=health_pillar.id), make_task(pillar_id=work_pillar.id)]
        weights = [
            PillarWeight(pillar_id=health_pillar.id, weight=10),
            PillarWeight(pillar_id=work_pillar.id, weight=20),
        ]

        result = calculate_daily_score([], tasks, weights)

        assert result.action_score == 0
        assert result.pillar_scores == {health_pillar.id: 0, work_pillar.id: 0}

    def test_empty_task_list(self):
        result = calculate_daily_score([], [], [])
        assert result.action_score == 0
        assert result.pillar_scores == {}

    def test_action_score_is_weighted_over_present_pillars(self, make_task, health_pillar, work_pillar, test_user_id):
        """Pillars without tasks that day are excluded, not zero-filled."""
        health_task = make_task(pillar_id=health_pillar.id)
        work_task = make_task(pillar_id=work_pillar.id)
        weights = [
            PillarWeight(pillar_id=health_pillar.id, weight=10),
            PillarWeight(pillar_id=work_pillar.id, weight=20),
            PillarWeight(pillar_id="idle-pillar", weight=100),
        ]

        result = calculate_daily_score(
            [completion_for(health_task, completed=True)], [health_task, work_task], weights
        )

        # (100 * 10 + 0 * 20) / 30 = 33.3
        assert result.action_score == 33
        assert "idle-pillar" not in result.pillar_scores

    def test_tasks_without_pillar_use_reserved_key(self, make_task, health_pillar):
        task = make_task(pillar_id=None)
        result = calculate_daily_score(
            [completion_for(task, completed=True)],
            [task],
            [PillarWeight(pillar_id=health_pillar.id, weight=10)],
        )
        assert result.pillar_scores == {UNASSIGNED_PILLAR: 100}
        # The unassigned group has no weight entry, so it weighs 0
        assert result.action_score == 0

    def test_limit_overrun_can_make_pillar_score_negative(self, make_task, health_pillar):
        task = make_task(
            pillar_id=health_pillar.id,
            completion_type=CompletionType.NUMERIC,
            flexibility_rule=FlexibilityRule.LIMIT_AVOID,
            limit_value=1,
        )
        result = calculate_daily_score(
            [completion_for(task, value=5)], [task], [PillarWeight(pillar_id=health_pillar.id, weight=10)]
        )
        assert result.pillar_scores[health_pillar.id] == -100
        assert result.action_score == -100

    def test_completions_for_unscheduled_tasks_are_ignored(self, make_task, health_pillar):
        scheduled = make_task(pillar_id=health_pillar.id)
        other = make_task(pillar_id=health_pillar.id)
        result = calculate_daily_score(
            [completion_for(other, completed=True)],
            [scheduled],
            [PillarWeight(pillar_id=health_pillar.id, weight=10)],
        )
        assert result.action_score == 0


class TestProgressScore:
    """Test outcome progress averaging."""

    def _outcome(self, start, target, current, test_user_id="u"):
        return Outcome(
            id=f"o-{start}-{target}-{current}",
            user_id=test_user_id,
            name="Weight",
            unit="kg",
            start_value=start,
            target_value=target,
            current_value=current,
        )

    def test_no_outcomes(self):
        assert calculate_progress_score([]) == 0

    def test_average_of_clamped_progress(self):
        outcomes = [
            self._outcome(90, 80, 85),   # 50%
            self._outcome(0, 10, 20),    # 200% -> 100%
        ]
        assert calculate_progress_score(outcomes) == 75

    def test_zero_range_counts_as_complete(self):
        assert calculate_progress_score([self._outcome(5, 5, 3)]) == 100
