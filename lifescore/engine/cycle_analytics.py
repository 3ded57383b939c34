"""Cycle-level pace and projection analytics for lifescore."""

from typing import Dict, List, Tuple

from lifescore.models.constants import AHEAD_RATIO, ON_TRACK_RATIO
from lifescore.models.cycle import CycleAnalytics, CycleGoal, GoalTrend, Pace, WeeklyTarget, WeekScore


CONSISTENT_SCORES = {WeekScore.GOOD, WeekScore.EXCEEDED}


def pace_for_ratio(ratio: float) -> Pace:
    if ratio >= AHEAD_RATIO:
        return Pace.AHEAD
    if ratio >= ON_TRACK_RATIO:
        return Pace.ON_TRACK
    return Pace.BEHIND


def compute_cycle_analytics(
    goals: List[CycleGoal],
    weekly_targets: List[WeeklyTarget],
    current_week: int,
    total_weeks: int,
) -> CycleAnalytics:
    """Summarize a cycle's completion, pace, consistency and projection.

    - overall_completion: sum of goal values over sum of goal targets (percent)
    - pace: actual vs the linear expectation for weeks already finished
    - consistent_weeks / total_reviewed_weeks: only weeks in which every goal
      was scored count; consistent ones have only good/exceeded scores
    - projected_completion: current weekly rate extrapolated to the full cycle,
      capped at 100

    A cycle without goals gets neutral analytics (on track, all zeros).
    """
    if not goals:
        return CycleAnalytics()

    total_current = sum(g.current_value for g in goals)
    total_target = sum(g.target_value for g in goals)
    overall_completion = total_current / total_target * 100 if total_target > 0 else 0.0

    expected = max(0, current_week - 1) / total_weeks * total_target if total_target > 0 else 0.0
    pace_ratio = total_current / expected if expected > 0 else 1.0
    pace = pace_for_ratio(pace_ratio)

    by_goal_week: Dict[Tuple[str, int], WeeklyTarget] = {
        (t.goal_id, t.week_number): t for t in weekly_targets
    }
    goal_trends = [
        GoalTrend(
            goal_id=goal.id,
            goal_name=goal.name,
            weekly_actuals=[
                by_goal_week[(goal.id, week)].actual_value if (goal.id, week) in by_goal_week else 0
                for week in range(1, total_weeks + 1)
            ],
        )
        for goal in goals
    ]

    consistent_weeks = 0
    total_reviewed_weeks = 0
    for week in range(1, total_weeks + 1):
        week_scores = [t.score for t in weekly_targets if t.week_number == week and t.score]
        if week_scores and len(week_scores) == len(goals):
            total_reviewed_weeks += 1
            if all(score in CONSISTENT_SCORES for score in week_scores):
                consistent_weeks += 1

    weeks_elapsed = max(1, current_week - 1)
    rate_per_week = total_current / weeks_elapsed
    projected_completion = (
        min(100.0, rate_per_week * total_weeks / total_target * 100) if total_target > 0 else 0.0
    )

    return CycleAnalytics(
        overall_completion=overall_completion,
        pace=pace,
        consistent_weeks=consistent_weeks,
        total_reviewed_weeks=total_reviewed_weeks,
        goal_trends=goal_trends,
        projected_completion=projected_completion,
    )
