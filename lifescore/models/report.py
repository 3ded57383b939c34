"""Report data models for lifescore."""

import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class DateRange(BaseModel):
    start: datetime.date
    end: datetime.date


class DayScore(BaseModel):
    """A day's date and action score (best/worst day)."""

    date: Optional[datetime.date] = None
    score: int = 0


class ReportSummary(BaseModel):
    avg_score: int = 0
    passing_days: int = 0
    total_days: int = 0
    best_day: DayScore = Field(default_factory=DayScore)
    worst_day: DayScore = Field(default_factory=DayScore)
    total_xp_earned: int = 0
    current_streak: int = 0
    best_streak: int = 0


class PillarAverage(BaseModel):
    id: str
    name: str
    emoji: str
    color: Optional[str] = None
    avg_score: int = 0


class DailyScoreEntry(BaseModel):
    date: datetime.date
    action_score: int
    is_passing: bool


class TaskCompletionRate(BaseModel):
    name: str
    completion_rate: int
    pillar_emoji: str


class OutcomeDelta(BaseModel):
    name: str
    unit: str
    direction: str
    start_of_period: float
    end_of_period: float
    change: float
    pillar_color: Optional[str] = None


class ReportResult(BaseModel):
    """Weekly or monthly roll-up of scores, tasks and outcomes."""

    type: str
    date_range: DateRange
    summary: ReportSummary
    pillar_breakdown: List[PillarAverage] = Field(default_factory=list)
    daily_scores: List[DailyScoreEntry] = Field(default_factory=list)
    top_tasks: List[TaskCompletionRate] = Field(default_factory=list)
    skipped_tasks: List[TaskCompletionRate] = Field(default_factory=list)
    outcome_progress: List[OutcomeDelta] = Field(default_factory=list)
