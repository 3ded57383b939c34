"""Twelve-week cycle scoring for lifescore.

Scores each reviewed week against its target, spreads missed progress over
the remaining weeks, and classifies cumulative progress against a linear
expectation.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from lifescore.engine.schedule import parse_date
from lifescore.models.constants import (
    AHEAD_RATIO,
    CYCLE_LENGTH_DAYS,
    DEFAULT_TOTAL_WEEKS,
    ON_TRACK_RATIO,
    PARTIAL_RATIO,
)
from lifescore.models.cycle import GoalStatus, TargetAdjustment, WeeklyTarget, WeekScore

logger = logging.getLogger(__name__)


def get_week_score(actual: float, target: float) -> WeekScore:
    """Score a week's actual against its target.

    Ratio bands: >= 1.10 exceeded, >= 0.85 good, >= 0.50 partial, else missed.
    A non-positive target is exceeded by any positive actual.
    """
    if target <= 0:
        return WeekScore.EXCEEDED if actual > 0 else WeekScore.MISSED
    ratio = actual / target
    if ratio >= AHEAD_RATIO:
        return WeekScore.EXCEEDED
    if ratio >= ON_TRACK_RATIO:
        return WeekScore.GOOD
    if ratio >= PARTIAL_RATIO:
        return WeekScore.PARTIAL
    return WeekScore.MISSED


def redistribute_targets(targets: Iterable[WeeklyTarget], current_week: int) -> List[TargetAdjustment]:
    """Spread the shortfall of reviewed past weeks over eligible future weeks.

    The deficit is the sum of positive (target - actual) over weeks before
    `current_week` that have a score. It is split evenly across weeks at or
    after `current_week` that are neither overridden nor scored. When no such
    week exists the deficit is dropped.

    Args:
        targets: All weekly targets of one goal
        current_week: 1-indexed current week of the cycle

    Returns:
        New targets for the changed weeks only (empty when nothing changes)
    """
    targets = list(targets)

    deficit = 0.0
    for t in targets:
        if t.week_number < current_week and t.score:
            missed = t.target_value - t.actual_value
            if missed > 0:
                deficit += missed

    if deficit <= 0:
        return []

    future_weeks = [
        t for t in targets
        if t.week_number >= current_week and not t.is_overridden and not t.score
    ]
    if not future_weeks:
        logger.warning(f"Dropping deficit of {deficit:.2f}: no open weeks left from week {current_week}")
        return []

    extra_per_week = deficit / len(future_weeks)
    return [
        TargetAdjustment(week_number=t.week_number, target_value=t.target_value + extra_per_week)
        for t in future_weeks
    ]


def get_total_weeks(start_date: Union[date, str], end_date: Union[date, str]) -> int:
    """Number of weeks in a cycle (at least 1)."""
    diff_days = (parse_date(end_date) - parse_date(start_date)).days
    return max(1, math.ceil(diff_days / 7))


def get_current_week_number(
    start_date: Union[date, str],
    end_date: Union[date, str],
    today: Optional[date] = None,
) -> int:
    """1-indexed week of the cycle containing `today`, clamped to [1, total_weeks]."""
    if today is None:
        today = datetime.utcnow().date()
    diff_days = (parse_date(today) - parse_date(start_date)).days
    week = diff_days // 7 + 1
    total_weeks = get_total_weeks(start_date, end_date)
    return max(1, min(total_weeks, week))


def calculate_end_date(start_date: Union[date, str]) -> date:
    """Last day of a cycle starting on `start_date` (84 days inclusive)."""
    return parse_date(start_date) + timedelta(days=CYCLE_LENGTH_DAYS - 1)


def get_goal_status(
    current: float,
    target: float,
    weeks_passed: int,
    total_weeks: int = DEFAULT_TOTAL_WEEKS,
) -> GoalStatus:
    """Compare cumulative progress with where a linear pace would be."""
    if total_weeks <= 0 or target <= 0:
        return GoalStatus.ON_TRACK
    expected = weeks_passed / total_weeks * target
    if expected <= 0:
        return GoalStatus.AHEAD if current > 0 else GoalStatus.ON_TRACK
    ratio = current / expected
    if ratio >= AHEAD_RATIO:
        return GoalStatus.AHEAD
    if ratio >= ON_TRACK_RATIO:
        return GoalStatus.ON_TRACK
    return GoalStatus.BEHIND


def generate_weekly_targets(goal_id: str, target_value: float, total_weeks: int) -> List[WeeklyTarget]:
    """Initial targets for a new goal: the total split evenly across weeks."""
    weekly_value = target_value / total_weeks
    return [
        WeeklyTarget(goal_id=goal_id, week_number=week, target_value=weekly_value)
        for week in range(1, total_weeks + 1)
    ]


def apply_week_review(
    target: WeeklyTarget,
    actual_value: float,
    target_value: Optional[float] = None,
    reviewed_at: Optional[datetime] = None,
) -> WeeklyTarget:
    """Return a copy of `target` with its actual submitted and score assigned."""
    new_target = target.target_value if target_value is None else target_value
    return target.model_copy(update={
        "actual_value": actual_value,
        "target_value": new_target,
        "score": get_week_score(actual_value, new_target),
        "reviewed_at": reviewed_at or datetime.utcnow(),
    })
