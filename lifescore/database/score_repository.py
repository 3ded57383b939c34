"""Repository for derived daily scores, user stats and scoring preferences."""

import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from lifescore.models.score import DailyScore, UserPreferences, UserStats
from lifescore.database.models import DailyScoreDB, UserPreferencesDB, UserStatsDB

logger = logging.getLogger(__name__)


class ScoreRepository:
    """Repository for DailyScore, UserStats and UserPreferences rows."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, row, description: str) -> None:
        try:
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Stored {description}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store {description}: {type(e).__name__}: {str(e)}")
            raise

    # Daily scores

    def get_daily_score(self, user_id: str, day: date) -> Optional[DailyScore]:
        row = self.db.query(DailyScoreDB).filter(
            DailyScoreDB.user_id == user_id,
            DailyScoreDB.date == day,
        ).first()
        return row.to_pydantic() if row else None

    def get_all_daily_scores(self, user_id: str) -> List[DailyScore]:
        """All stored daily scores for a user, oldest first."""
        rows = self.db.query(DailyScoreDB).filter(
            DailyScoreDB.user_id == user_id,
        ).order_by(DailyScoreDB.date).all()
        return [row.to_pydantic() for row in rows]

    def get_daily_scores_between(self, user_id: str, start: date, end: date) -> List[DailyScore]:
        """Daily scores with start <= date <= end, oldest first."""
        rows = self.db.query(DailyScoreDB).filter(
            DailyScoreDB.user_id == user_id,
            DailyScoreDB.date >= start,
            DailyScoreDB.date <= end,
        ).order_by(DailyScoreDB.date).all()
        return [row.to_pydantic() for row in rows]

    def upsert_daily_score(self, score: DailyScore) -> DailyScore:
        """Store the score of a day, replacing any earlier score for that date."""
        row = self.db.query(DailyScoreDB).filter(
            DailyScoreDB.user_id == score.user_id,
            DailyScoreDB.date == score.date,
        ).first()
        if row is None:
            row = DailyScoreDB(user_id=score.user_id, date=score.date)
            self.db.add(row)

        row.action_score = score.action_score
        row.pillar_scores = dict(score.pillar_scores)
        row.is_passing = score.is_passing
        row.xp_earned = score.xp_earned

        self._commit(row, f"daily score {score.action_score} for user {score.user_id} on {score.date}")
        return row.to_pydantic()

    # User stats

    def get_stats(self, user_id: str) -> Optional[UserStats]:
        row = self.db.query(UserStatsDB).filter(UserStatsDB.user_id == user_id).first()
        return row.to_pydantic() if row else None

    def save_stats(self, stats: UserStats) -> UserStats:
        """Create or overwrite the stats row of a user."""
        row = self.db.query(UserStatsDB).filter(UserStatsDB.user_id == stats.user_id).first()
        if row is None:
            row = UserStatsDB(user_id=stats.user_id)
            self.db.add(row)

        row.total_xp = stats.total_xp
        row.level = stats.level
        row.level_title = stats.level_title
        row.current_streak = stats.current_streak
        row.best_streak = stats.best_streak

        self._commit(row, f"stats for user {stats.user_id} (level {stats.level})")
        return row.to_pydantic()

    # Preferences

    def get_preferences(self, user_id: str) -> UserPreferences:
        """Scoring preferences of a user (defaults when none are stored)."""
        row = self.db.query(UserPreferencesDB).filter(UserPreferencesDB.user_id == user_id).first()
        return row.to_pydantic() if row else UserPreferences(user_id=user_id)

    def save_preferences(self, preferences: UserPreferences) -> UserPreferences:
        row = self.db.query(UserPreferencesDB).filter(
            UserPreferencesDB.user_id == preferences.user_id,
        ).first()
        if row is None:
            row = UserPreferencesDB(user_id=preferences.user_id)
            self.db.add(row)

        row.weekday_pass_threshold = preferences.weekday_pass_threshold
        row.weekend_pass_threshold = preferences.weekend_pass_threshold

        self._commit(row, f"preferences for user {preferences.user_id}")
        return row.to_pydantic()
