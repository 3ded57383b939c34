"""Task scoring and daily score aggregation for lifescore.

Turns a day's completions into per-pillar scores and a single weighted
action score. Every function here is pure and deterministic - same inputs
always produce same outputs.
"""

import math
from typing import Dict, Iterable, List, Optional

from lifescore.models.constants import (
    DEFAULT_IMPORTANCE_MULTIPLIER,
    IMPORTANCE_MULTIPLIERS,
    UNASSIGNED_PILLAR,
)
from lifescore.models.outcome import Outcome
from lifescore.models.score import DailyScoreResult
from lifescore.models.task import Completion, CompletionType, FlexibilityRule, PillarWeight, Task


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (66.5 -> 67, -0.5 -> 0)."""
    return int(math.floor(value + 0.5))


def importance_multiplier(importance: Optional[str]) -> int:
    """Get the points multiplier for an importance level (unknown -> 1)."""
    return IMPORTANCE_MULTIPLIERS.get(importance, DEFAULT_IMPORTANCE_MULTIPLIER)


def task_max_points(task: Task) -> float:
    """Maximum points a task can earn in a day."""
    return task.base_points * importance_multiplier(task.importance)


def score_task(task: Task, completion: Completion) -> float:
    """Calculate the points earned by one completion of a task.

    Rules, checked in order:
    1. Checkbox: full points if completed, else 0
    2. Limit/avoid with a positive limit: full points at or under the limit,
       negative points scaled by how far over (capped at -full points)
    3. Percentage: proportional to the value (capped at 100%)
    4. Positive target: proportional progress toward the target (capped at 1)
    5. Otherwise: full points for any positive value

    Args:
        task: Task whose configuration drives scoring
        completion: The day's completion record for the task

    Returns:
        Points earned (may be negative for limit/avoid tasks)
    """
    points = task_max_points(task)

    if task.completion_type == CompletionType.CHECKBOX:
        return points if completion.completed else 0

    value = completion.value or 0

    if task.flexibility_rule == FlexibilityRule.LIMIT_AVOID and task.limit_value is not None and task.limit_value > 0:
        if value <= task.limit_value:
            return points
        over_ratio = (value - task.limit_value) / task.limit_value
        return -points * min(over_ratio, 1)

    if task.completion_type == CompletionType.PERCENTAGE:
        return points * min(value, 100) / 100

    if task.target and task.target > 0:
        return points * min(value / task.target, 1)

    return points if value > 0 else 0


def pillar_key(task: Task) -> str:
    """Grouping key for a task's pillar (tasks without one share a reserved key)."""
    return task.pillar_id if task.pillar_id is not None else UNASSIGNED_PILLAR


def calculate_daily_score(
    completions: Iterable[Completion],
    tasks_for_day: List[Task],
    pillar_weights: Iterable[PillarWeight],
) -> DailyScoreResult:
    """Combine a day's task scores into pillar scores and an action score.

    Every scheduled task counts toward its pillar's maximum, whether or not it
    has a completion, so an un-attempted task depresses the score exactly like
    a failed one. Pillars without scheduled tasks are left out of the weighted
    average instead of counting as zero. Pillars missing from `pillar_weights`
    weigh 0.

    Args:
        completions: Completion records for the day
        tasks_for_day: Tasks scheduled for the day
        pillar_weights: Relative pillar weights

    Returns:
        DailyScoreResult with action_score (0-100) and per-pillar scores
    """
    if not tasks_for_day:
        return DailyScoreResult(action_score=0, pillar_scores={})

    pillar_tasks: Dict[str, List[Task]] = {}
    for task in tasks_for_day:
        pillar_tasks.setdefault(pillar_key(task), []).append(task)

    completion_map = {c.task_id: c for c in completions}
    weight_map = {pw.pillar_id: pw.weight for pw in pillar_weights}

    pillar_scores: Dict[str, int] = {}
    for pid, tasks in pillar_tasks.items():
        max_possible = 0.0
        earned = 0.0
        for task in tasks:
            max_possible += task_max_points(task)
            completion = completion_map.get(task.id)
            if completion is not None:
                earned += score_task(task, completion)
        pillar_scores[pid] = round_half_up(earned / max_possible * 100) if max_possible > 0 else 0

    total_weighted = 0.0
    total_weight = 0.0
    for pid, score in pillar_scores.items():
        weight = weight_map.get(pid, 0) or 0
        total_weighted += score * weight
        total_weight += weight

    action_score = round_half_up(total_weighted / total_weight) if total_weight > 0 else 0
    return DailyScoreResult(action_score=action_score, pillar_scores=pillar_scores)


def calculate_progress_score(outcomes: List[Outcome]) -> int:
    """Average progress (0-100) of outcomes from their start toward their target.

    An outcome whose target equals its start counts as fully complete.
    """
    if not outcomes:
        return 0

    total_progress = 0.0
    for outcome in outcomes:
        span = abs(outcome.target_value - outcome.start_value)
        if span == 0:
            total_progress += 100
            continue
        progress = abs(outcome.current_value - outcome.start_value) / span * 100
        total_progress += max(0.0, min(progress, 100.0))

    return round_half_up(total_progress / len(outcomes))
