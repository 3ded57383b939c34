"""Task, completion and pillar data models for lifescore."""

import datetime
from enum import Enum
from typing import Optional, Set
from pydantic import BaseModel, Field


class CompletionType(str, Enum):
    """How a task's daily completion is measured."""
    CHECKBOX = "checkbox"
    NUMERIC = "numeric"
    PERCENTAGE = "percentage"
    COUNT = "count"
    DURATION = "duration"


class Importance(str, Enum):
    """Task importance (drives the points multiplier)."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FlexibilityRule(str, Enum):
    """Flexibility rule enumeration."""
    MUST_TODAY = "must_today"
    WINDOW = "window"
    LIMIT_AVOID = "limit_avoid"
    CARRYOVER = "carryover"
    WEEKLY_TARGET = "weekly_target"


class Frequency(str, Enum):
    """Task recurrence frequency."""
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class Task(BaseModel):
    """Recurring task with its scoring configuration."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this task")
    name: str = Field(..., description="Task name")
    pillar_id: Optional[str] = Field(None, description="Pillar this task belongs to (null if none)")
    completion_type: CompletionType = Field(CompletionType.CHECKBOX, description="Completion measurement")
    target: Optional[float] = Field(None, description="Target value for numeric-like completions")
    importance: Importance = Field(Importance.MEDIUM, description="Importance level")
    base_points: float = Field(10, description="Points before the importance multiplier")
    flexibility_rule: Optional[FlexibilityRule] = Field(FlexibilityRule.MUST_TODAY, description="Flexibility rule")
    limit_value: Optional[float] = Field(None, description="Cap for limit/avoid tasks")
    frequency: Frequency = Field(Frequency.DAILY, description="How often the task applies")
    custom_days: Optional[Set[int]] = Field(
        None,
        description="Weekdays (Monday=0 ... Sunday=6) for custom frequency (None means every day)",
    )
    is_weekend_task: bool = Field(False, description="Whether the task only applies on weekends")
    is_active: bool = Field(True, description="Inactive tasks are never scheduled")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class Completion(BaseModel):
    """A user's record of how much of a task was done on a date."""

    task_id: str = Field(..., description="Task this completion belongs to")
    date: datetime.date = Field(..., description="Calendar date (no timezone)")
    completed: bool = Field(False, description="Whether the task was marked complete")
    value: Optional[float] = Field(None, description="Measured value (meaning depends on completion type)")
    points_earned: float = Field(0, description="Points stored at completion time")


class Pillar(BaseModel):
    """Weighted life category grouping related tasks."""

    id: str = Field(..., description="Unique pillar identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this pillar")
    name: str = Field(..., description="Pillar name")
    emoji: str = Field("📌", description="Display emoji")
    color: Optional[str] = Field(None, description="Display color")
    weight: float = Field(10, ge=0, description="Relative weight in the action score")
    is_archived: bool = Field(False, description="Archived pillars are excluded from scoring")


class PillarWeight(BaseModel):
    """Scoring input: a pillar id and its relative weight."""

    pillar_id: str
    weight: float
