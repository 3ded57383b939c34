"""Data models for lifescore."""

from lifescore.models.task import Task, Completion, Pillar, PillarWeight, CompletionType, Importance, FlexibilityRule, Frequency
from lifescore.models.score import DailyScore, DailyScoreResult, ScoreTier, XpAward, LevelInfo, UserStats, UserPreferences
from lifescore.models.outcome import Outcome, OutcomeLog, Goal, GoalLog, GoalProgress, GoalType, MetricType, Direction
from lifescore.models.cycle import Cycle, CycleGoal, WeeklyTarget, WeeklyUpdate, WeekScore, GoalStatus, Pace, TargetAdjustment, GoalTrend, CycleAnalytics
from lifescore.models.report import ReportResult
from lifescore.models.user import User

__all__ = [
    "Task",
    "Completion",
    "Pillar",
    "PillarWeight",
    "CompletionType",
    "Importance",
    "FlexibilityRule",
    "Frequency",
    "DailyScore",
    "DailyScoreResult",
    "ScoreTier",
    "XpAward",
    "LevelInfo",
    "UserStats",
    "UserPreferences",
    "Outcome",
    "OutcomeLog",
    "Goal",
    "GoalLog",
    "GoalProgress",
    "GoalType",
    "MetricType",
    "Direction",
    "Cycle",
    "CycleGoal",
    "WeeklyTarget",
    "WeeklyUpdate",
    "WeekScore",
    "GoalStatus",
    "Pace",
    "TargetAdjustment",
    "GoalTrend",
    "CycleAnalytics",
    "ReportResult",
    "User",
]
