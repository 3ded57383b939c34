"""Twelve-week cycle data models for lifescore."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class WeekScore(str, Enum):
    """Quality of one reviewed week (actual vs target)."""
    EXCEEDED = "exceeded"
    GOOD = "good"
    PARTIAL = "partial"
    MISSED = "missed"


class GoalStatus(str, Enum):
    """Cumulative progress compared with linear expectation."""
    AHEAD = "Ahead"
    ON_TRACK = "On Track"
    BEHIND = "Behind"


class Pace(str, Enum):
    """Cycle-wide pace indicator."""
    AHEAD = "ahead"
    ON_TRACK = "on_track"
    BEHIND = "behind"


class Cycle(BaseModel):
    """A fixed-length (twelve-week) planning period."""

    id: str = Field(..., description="Unique cycle identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this cycle")
    name: str = Field(..., description="Cycle name")
    start_date: date = Field(..., description="First day of the cycle")
    end_date: date = Field(..., description="Last day of the cycle (inclusive)")
    is_active: bool = Field(True, description="Only one cycle is active per user")


class CycleGoal(BaseModel):
    """A numeric goal pursued during a cycle."""

    id: str = Field(..., description="Unique goal identifier (UUID v4)")
    cycle_id: str = Field(..., description="Cycle this goal belongs to")
    user_id: str = Field(..., description="User ID who owns this goal")
    name: str = Field(..., description="Goal name")
    unit: str = Field("", description="Unit of measurement")
    target_value: float = Field(..., description="Total to reach over the cycle")
    current_value: float = Field(0, description="Sum of weekly actuals")
    linked_outcome_id: Optional[str] = Field(None, description="Optional related outcome")


class WeeklyTarget(BaseModel):
    """Per-goal, per-week target and actual."""

    goal_id: str = Field(..., description="Goal this target belongs to")
    week_number: int = Field(..., ge=1, description="1-indexed week of the cycle")
    target_value: float = Field(0, description="Target for this week")
    actual_value: float = Field(0, description="Actual submitted for this week")
    is_overridden: bool = Field(False, description="Manually pinned; exempt from redistribution")
    score: Optional[WeekScore] = Field(None, description="Set once the week is reviewed")
    reviewed_at: Optional[datetime] = Field(None, description="When the week was reviewed")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class WeeklyUpdate(BaseModel):
    """A submitted change to one goal's target row for one week.

    Omitted fields leave the stored row unchanged; an actual value marks the
    week as reviewed.
    """

    goal_id: str
    week_number: int = Field(..., ge=1)
    actual_value: Optional[float] = None
    target_value: Optional[float] = None
    is_overridden: Optional[bool] = None


class TargetAdjustment(BaseModel):
    """A redistributed weekly target."""

    week_number: int
    target_value: float


class GoalTrend(BaseModel):
    """Weekly actuals of one goal across the cycle."""

    goal_id: str
    goal_name: str
    weekly_actuals: List[float] = Field(default_factory=list)


class CycleAnalytics(BaseModel):
    """Pace and projection analytics for a cycle."""

    overall_completion: float = 0
    pace: Pace = Pace.ON_TRACK
    consistent_weeks: int = 0
    total_reviewed_weeks: int = 0
    goal_trends: List[GoalTrend] = Field(default_factory=list)
    projected_completion: float = 0

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
