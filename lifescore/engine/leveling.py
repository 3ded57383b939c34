"""Score tiers, XP, levels and streaks for lifescore.

Level and streak state are pure functions of the stored daily scores, so
user stats can always be rebuilt instead of incremented in place.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Tuple

from lifescore.engine.schedule import is_weekend
from lifescore.engine.scoring import round_half_up
from lifescore.models.constants import (
    LEVEL_TITLES,
    MAX_LEVEL,
    STREAK_BONUS_MIN_DAYS,
    STREAK_BONUS_PER_DAY,
    XP_PER_LEVEL_STEP,
)
from lifescore.models.score import DailyScore, LevelInfo, ScoreTier, UserPreferences, UserStats, XpAward


# (inclusive lower bound, tier), checked top-down
TIER_THRESHOLDS = [
    (95, ScoreTier.LEGENDARY),
    (85, ScoreTier.EXCELLENT),
    (70, ScoreTier.GOOD),
    (50, ScoreTier.DECENT),
    (30, ScoreTier.NEEDS_WORK),
]

TIER_COLORS = {
    ScoreTier.LEGENDARY: "#FFD700",
    ScoreTier.EXCELLENT: "#22C55E",
    ScoreTier.GOOD: "#3B82F6",
    ScoreTier.DECENT: "#F59E0B",
    ScoreTier.NEEDS_WORK: "#F97316",
    ScoreTier.POOR: "#EF4444",
}


def get_score_tier(score: float) -> ScoreTier:
    """Map a 0-100 score to its tier (first matching lower bound wins)."""
    for lower_bound, tier in TIER_THRESHOLDS:
        if score >= lower_bound:
            return tier
    return ScoreTier.POOR


def get_tier_color(tier: ScoreTier) -> str:
    """Display color for a tier."""
    return TIER_COLORS[ScoreTier(tier)]


def calculate_xp(action_score: int, streak_days: int) -> XpAward:
    """XP for a day: one point per action score point plus a streak bonus.

    The bonus (two XP per streak day) only starts at a three-day streak.
    """
    streak_bonus = int(streak_days * STREAK_BONUS_PER_DAY) if streak_days >= STREAK_BONUS_MIN_DAYS else 0
    return XpAward(xp=action_score + streak_bonus, streak_bonus=streak_bonus)


def get_level_title(level: int) -> str:
    """Display title for a level ("Level N" past the named ones)."""
    return LEVEL_TITLES.get(level, f"Level {level}")


def get_level_info(total_xp: int) -> LevelInfo:
    """Derive level position from total XP.

    Clearing level n costs n * 100 XP (level 1 -> 100, level 2 -> 200, ...),
    capped at level 99.
    """
    xp_remaining = total_xp
    level = 1
    while xp_remaining >= level * XP_PER_LEVEL_STEP and level < MAX_LEVEL:
        xp_remaining -= level * XP_PER_LEVEL_STEP
        level += 1

    xp_for_next_level = level * XP_PER_LEVEL_STEP
    return LevelInfo(
        level=level,
        title=get_level_title(level),
        current_xp=xp_remaining,
        xp_for_next_level=xp_for_next_level,
        xp_progress=round_half_up(xp_remaining / xp_for_next_level * 100),
    )


def is_passing(action_score: int, day: date, preferences: Optional[UserPreferences] = None) -> bool:
    """Whether a day's score meets the weekday or weekend pass threshold."""
    if preferences is None:
        preferences = UserPreferences(user_id="")
    threshold = preferences.weekend_pass_threshold if is_weekend(day) else preferences.weekday_pass_threshold
    return action_score >= threshold


def calculate_streaks(daily_scores: Iterable[DailyScore], as_of: date) -> Tuple[int, int]:
    """Compute (current_streak, best_streak) in consecutive passing days.

    The current streak ends at `as_of`; when `as_of` is not (yet) passing it
    ends the day before, so an unscored today does not break the streak.
    Scores after `as_of` are ignored.
    """
    passing: Dict[date, bool] = {s.date: s.is_passing for s in daily_scores if s.date <= as_of}

    best = 0
    run = 0
    previous: Optional[date] = None
    for day in sorted(passing):
        if not passing[day]:
            run = 0
        elif previous is not None and run > 0 and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day

    cursor = as_of if passing.get(as_of) else as_of - timedelta(days=1)
    current = 0
    while passing.get(cursor):
        current += 1
        cursor -= timedelta(days=1)

    return current, best


def build_user_stats(user_id: str, daily_scores: Iterable[DailyScore], as_of: date) -> UserStats:
    """Rebuild a user's XP, level and streak totals from their daily scores."""
    scores = list(daily_scores)
    total_xp = sum(s.xp_earned for s in scores)
    current, best = calculate_streaks(scores, as_of)
    level_info = get_level_info(total_xp)
    return UserStats(
        user_id=user_id,
        total_xp=total_xp,
        level=level_info.level,
        level_title=level_info.title,
        current_streak=current,
        best_streak=best,
    )
