"""Scoring engine for lifescore."""

from lifescore.engine.scoring import score_task, calculate_daily_score, calculate_progress_score, round_half_up
from lifescore.engine.schedule import is_task_scheduled, tasks_for_day
from lifescore.engine.leveling import get_score_tier, calculate_xp, get_level_info, calculate_streaks, build_user_stats
from lifescore.engine.goal_progress import compute_goal_progress
from lifescore.engine.twelve_week import (
    get_week_score,
    redistribute_targets,
    get_total_weeks,
    get_current_week_number,
    calculate_end_date,
    get_goal_status,
)
from lifescore.engine.cycle_analytics import compute_cycle_analytics
from lifescore.engine.reports import compute_report

__all__ = [
    "score_task",
    "calculate_daily_score",
    "calculate_progress_score",
    "round_half_up",
    "is_task_scheduled",
    "tasks_for_day",
    "get_score_tier",
    "calculate_xp",
    "get_level_info",
    "calculate_streaks",
    "build_user_stats",
    "compute_goal_progress",
    "get_week_score",
    "redistribute_targets",
    "get_total_weeks",
    "get_current_week_number",
    "calculate_end_date",
    "get_goal_status",
    "compute_cycle_analytics",
    "compute_report",
]
