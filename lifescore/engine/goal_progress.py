"""Progress of long-running goals and outcomes for lifescore.

Current values are always recomputed from logs rather than incremented in
place, so repeated evaluation never drifts.
"""

import math
from datetime import datetime, time
from typing import Iterable, List, Optional

from lifescore.models.outcome import Direction, Goal, GoalLog, GoalProgress, GoalType, MetricType, Outcome, OutcomeLog


SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def goal_window(goal: Goal):
    """Inclusive log window: start of the start day through end of the end day."""
    window_start = datetime.combine(goal.start_date.date(), time.min)
    window_end = datetime.combine(goal.end_date.date(), time.max)
    return window_start, window_end


def logs_in_window(goal: Goal, logs: Iterable[GoalLog]) -> List[GoalLog]:
    """Logs for this goal whose start falls inside the goal window."""
    window_start, window_end = goal_window(goal)
    return [
        log for log in logs
        if log.goal_id == goal.id and window_start <= log.start_time <= window_end
    ]


def sum_goal_logs(goal: Goal, logs: Iterable[GoalLog]) -> float:
    """Sum logs as hours spent (time goals) or count increments (count goals)."""
    relevant = logs_in_window(goal, logs)
    if goal.metric_type == MetricType.TIME:
        return sum(
            (log.end_time - log.start_time).total_seconds() / SECONDS_PER_HOUR
            for log in relevant
            if log.end_time is not None
        )
    return sum(log.goal_count or 0 for log in relevant)


def compute_goal_progress(goal: Goal, logs: Iterable[GoalLog], now: Optional[datetime] = None) -> GoalProgress:
    """Compute percent complete, pace and completion flags for a goal.

    Achievement goals are complete once the value reaches the target and are
    overdue only after the window ends short of it. Limiting goals are
    complete only after the window ends at or under the cap, and are overdue
    as soon as the value exceeds it.

    Args:
        goal: Goal to evaluate
        logs: Logs associated with the goal (filtered to the goal window here)
        now: Evaluation instant (defaults to now)

    Returns:
        GoalProgress for the goal at `now`
    """
    if now is None:
        now = datetime.utcnow()

    current_value = sum_goal_logs(goal, logs)
    target = goal.target_value

    total_seconds = (goal.end_date - goal.start_date).total_seconds()
    elapsed_seconds = (now - goal.start_date).total_seconds()
    if total_seconds > 0:
        percent_elapsed = min(max(elapsed_seconds / total_seconds * 100, 0.0), 100.0)
    else:
        percent_elapsed = 100.0 if elapsed_seconds >= 0 else 0.0

    percent_complete = current_value / target * 100 if target > 0 else 0.0

    remaining_seconds = (goal.end_date - now).total_seconds()
    days_remaining = max(0, math.ceil(remaining_seconds / SECONDS_PER_DAY))

    daily_target = 0.0
    if days_remaining > 0 and current_value < target:
        daily_target = (target - current_value) / days_remaining

    window_ended = now > goal.end_date
    if goal.goal_type == GoalType.LIMITING:
        is_completed = window_ended and current_value <= target
        is_overdue = current_value > target
    else:
        is_completed = current_value >= target
        is_overdue = window_ended and current_value < target

    return GoalProgress(
        goal_id=goal.id,
        current_value=current_value,
        percent_complete=percent_complete,
        percent_elapsed=percent_elapsed,
        days_remaining=days_remaining,
        daily_target=daily_target,
        is_completed=is_completed,
        is_overdue=is_overdue,
    )


def default_direction(start_value: float, target_value: float) -> Direction:
    """Outcomes increase unless the target is below the start."""
    return Direction.INCREASE if target_value >= start_value else Direction.DECREASE


def current_outcome_value(outcome: Outcome, logs: Iterable[OutcomeLog]) -> float:
    """Latest logged value of an outcome, or its start value without logs."""
    own_logs = [log for log in logs if log.outcome_id == outcome.id]
    if not own_logs:
        return outcome.start_value
    return max(own_logs, key=lambda log: log.logged_at).value
