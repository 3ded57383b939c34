"""Daily score service: score a day and keep user stats in step."""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from lifescore.database.pillar_repository import PillarRepository
from lifescore.database.score_repository import ScoreRepository
from lifescore.database.task_repository import TaskRepository
from lifescore.engine.leveling import build_user_stats, calculate_streaks, calculate_xp, is_passing
from lifescore.engine.schedule import parse_date, tasks_for_day
from lifescore.engine.scoring import calculate_daily_score
from lifescore.models.score import DailyScore, UserPreferences, UserStats

logger = logging.getLogger(__name__)

MIN_HISTORY_DAYS = 1
MAX_HISTORY_DAYS = 365


class DailyScoreService:
    """Computes and stores daily scores, then rebuilds user stats from them."""

    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskRepository(db)
        self.pillars = PillarRepository(db)
        self.scores = ScoreRepository(db)

    def compute_day(self, user_id: str, day: Union[date, str]) -> DailyScore:
        """Score one calendar day for a user without storing anything.

        XP for the day includes the streak bonus of the streak ending on that
        day (zero when the day is not passing).
        """
        day = parse_date(day)

        scheduled = tasks_for_day(self.tasks.get_active(user_id), day)
        completions = self.tasks.get_completions_for_date(user_id, day)
        weights = self.pillars.get_weights(user_id)
        preferences = self.scores.get_preferences(user_id)

        result = calculate_daily_score(completions, scheduled, weights)
        passing = is_passing(result.action_score, day, preferences)

        history = [s for s in self.scores.get_all_daily_scores(user_id) if s.date != day]
        provisional = DailyScore(
            user_id=user_id,
            date=day,
            action_score=result.action_score,
            pillar_scores=result.pillar_scores,
            is_passing=passing,
        )
        streak_days = calculate_streaks(history + [provisional], day)[0] if passing else 0
        award = calculate_xp(result.action_score, streak_days)
        logger.debug(f"Computed {day} for user {user_id}: {result.action_score} ({len(scheduled)} tasks)")
        return provisional.model_copy(update={"xp_earned": award.xp})

    def score_day(self, user_id: str, day: Union[date, str], today: Optional[date] = None) -> DailyScore:
        """Score one calendar day for a user and persist the result.

        User stats are rebuilt from all stored daily scores afterwards, as of
        `today`. Scores stored for later days do not count toward the current
        streak.

        Args:
            user_id: User to score
            day: Calendar date to score
            today: Reference date for the current streak (defaults to the
                current UTC date)

        Returns:
            The stored DailyScore
        """
        stored = self.scores.upsert_daily_score(self.compute_day(user_id, day))
        logger.info(
            f"Scored {stored.date} for user {user_id}: {stored.action_score} "
            f"(passing={stored.is_passing}, xp={stored.xp_earned})"
        )

        self.rebuild_stats(user_id, today or datetime.utcnow().date())
        return stored

    def rebuild_stats(self, user_id: str, as_of: date) -> UserStats:
        """Recompute XP, level and streaks from stored daily scores."""
        stats = build_user_stats(user_id, self.scores.get_all_daily_scores(user_id), as_of)
        return self.scores.save_stats(stats)

    def get_stats(self, user_id: str) -> UserStats:
        """Stored stats for a user (fresh defaults before the first scored day)."""
        return self.scores.get_stats(user_id) or UserStats(user_id=user_id)

    def history(self, user_id: str, days: int = 30, today: Optional[date] = None) -> List[DailyScore]:
        """Stored daily scores of the last `days` days (1 to 365), newest first."""
        days = min(max(days, MIN_HISTORY_DAYS), MAX_HISTORY_DAYS)
        end = today or datetime.utcnow().date()
        scores = self.scores.get_daily_scores_between(user_id, end - timedelta(days=days), end)
        return list(reversed(scores))

    def get_preferences(self, user_id: str) -> UserPreferences:
        return self.scores.get_preferences(user_id)

    def update_preferences(
        self,
        user_id: str,
        weekday_pass_threshold: Optional[int] = None,
        weekend_pass_threshold: Optional[int] = None,
    ) -> UserPreferences:
        """Change pass thresholds; days already scored keep their stored result."""
        changes = {}
        if weekday_pass_threshold is not None:
            changes["weekday_pass_threshold"] = weekday_pass_threshold
        if weekend_pass_threshold is not None:
            changes["weekend_pass_threshold"] = weekend_pass_threshold
        preferences = self.scores.get_preferences(user_id).model_copy(update=changes)
        return self.scores.save_preferences(preferences)
