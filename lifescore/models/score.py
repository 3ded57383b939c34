"""Daily score, XP and level data models for lifescore."""

import datetime
from enum import Enum
from typing import Dict
from pydantic import BaseModel, Field

from lifescore.models.constants import DEFAULT_WEEKDAY_PASS_THRESHOLD, DEFAULT_WEEKEND_PASS_THRESHOLD


class ScoreTier(str, Enum):
    """User-facing tier for a 0-100 score."""
    LEGENDARY = "LEGENDARY"
    EXCELLENT = "Excellent"
    GOOD = "Good"
    DECENT = "Decent"
    NEEDS_WORK = "Needs Work"
    POOR = "Poor"


class DailyScoreResult(BaseModel):
    """Output of the daily score aggregation for one day."""

    action_score: int = 0
    pillar_scores: Dict[str, int] = Field(default_factory=dict)


class DailyScore(BaseModel):
    """Persisted daily score row (derived from completions)."""

    user_id: str = Field(..., description="User ID who owns this score")
    date: datetime.date = Field(..., description="Scored calendar date")
    action_score: int = Field(0, description="Weighted 0-100 action score")
    pillar_scores: Dict[str, int] = Field(default_factory=dict, description="Pillar id to pillar score")
    is_passing: bool = Field(False, description="Whether the day met the pass threshold")
    xp_earned: int = Field(0, description="XP earned that day (score plus streak bonus)")


class XpAward(BaseModel):
    """XP earned for a day."""

    xp: int
    streak_bonus: int


class LevelInfo(BaseModel):
    """Level position derived from total XP."""

    level: int
    title: str
    current_xp: int
    xp_for_next_level: int
    xp_progress: int


class UserStats(BaseModel):
    """Gamification totals for a user (all re-derivable from daily scores)."""

    user_id: str
    total_xp: int = 0
    level: int = 1
    level_title: str = "Beginner"
    current_streak: int = 0
    best_streak: int = 0


class UserPreferences(BaseModel):
    """Per-user scoring preferences."""

    user_id: str
    weekday_pass_threshold: int = Field(DEFAULT_WEEKDAY_PASS_THRESHOLD, ge=0, le=100)
    weekend_pass_threshold: int = Field(DEFAULT_WEEKEND_PASS_THRESHOLD, ge=0, le=100)
