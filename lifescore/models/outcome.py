"""Outcome and goal data models for lifescore."""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Direction(str, Enum):
    """Which way an outcome should move."""
    INCREASE = "increase"
    DECREASE = "decrease"


class GoalType(str, Enum):
    """Achievement goals reach a target; limiting goals stay under a cap."""
    ACHIEVEMENT = "achievement"
    LIMITING = "limiting"


class MetricType(str, Enum):
    """How goal logs are summed."""
    TIME = "time"
    COUNT = "count"


class Outcome(BaseModel):
    """Long-horizon numeric outcome tracked via logged values."""

    id: str = Field(..., description="Unique outcome identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this outcome")
    name: str = Field(..., description="Outcome name")
    unit: str = Field(..., description="Unit of measurement")
    start_value: float = Field(..., description="Value when the outcome was created")
    target_value: float = Field(..., description="Value to reach")
    current_value: float = Field(..., description="Latest logged value")
    direction: Direction = Field(Direction.INCREASE, description="Desired direction of change")
    pillar_id: Optional[str] = Field(None, description="Related pillar")
    target_date: Optional[date] = Field(None, description="Optional target date")
    is_archived: bool = Field(False, description="Archived outcomes are excluded from reports")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class OutcomeLog(BaseModel):
    """A measured value for an outcome at an instant."""

    id: str
    outcome_id: str
    value: float
    logged_at: datetime
    note: Optional[str] = None


class Goal(BaseModel):
    """Time or count goal over a fixed window."""

    id: str = Field(..., description="Unique goal identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this goal")
    title: str = Field(..., description="Goal title")
    goal_type: GoalType = Field(GoalType.ACHIEVEMENT, description="Achievement or limiting")
    metric_type: MetricType = Field(MetricType.COUNT, description="Time (hours) or count")
    target_value: float = Field(..., description="Hours or count to reach (or stay under)")
    start_date: datetime = Field(..., description="Window start")
    end_date: datetime = Field(..., description="Window end")
    is_active: bool = Field(True, description="Whether the goal is active")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class GoalLog(BaseModel):
    """Activity log counted toward a goal."""

    id: str
    goal_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    goal_count: Optional[float] = None


class GoalProgress(BaseModel):
    """Derived progress of a goal at an instant."""

    goal_id: str
    current_value: float
    percent_complete: float
    percent_elapsed: float
    days_remaining: int
    daily_target: float
    is_completed: bool
    is_overdue: bool
