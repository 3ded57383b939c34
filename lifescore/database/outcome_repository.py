"""Repository for outcomes, goals and their logs."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from lifescore.models.outcome import Goal, GoalLog, Outcome, OutcomeLog
from lifescore.database.models import GoalDB, GoalLogDB, OutcomeDB, OutcomeLogDB

logger = logging.getLogger(__name__)


class OutcomeRepository:
    """Repository for Outcome, OutcomeLog, Goal and GoalLog database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, row, description: str):
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created {description}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create {description}: {type(e).__name__}: {str(e)}")
            raise

    # Outcomes

    def create_outcome(self, outcome: Outcome) -> Outcome:
        return self._add(OutcomeDB.from_pydantic(outcome), f"outcome {outcome.id}: {outcome.name}")

    def get_outcome(self, user_id: str, outcome_id: str) -> Optional[Outcome]:
        row = self.db.query(OutcomeDB).filter(
            OutcomeDB.id == outcome_id,
            OutcomeDB.user_id == user_id,
        ).first()
        return row.to_pydantic() if row else None

    def get_outcomes(self, user_id: str, include_archived: bool = False) -> List[Outcome]:
        query = self.db.query(OutcomeDB).filter(OutcomeDB.user_id == user_id)
        if not include_archived:
            query = query.filter(OutcomeDB.is_archived.is_(False))
        return [row.to_pydantic() for row in query.all()]

    def get_outcome_logs(self, user_id: str, outcome_id: str) -> List[OutcomeLog]:
        """All logs of one outcome, oldest first."""
        rows = self.db.query(OutcomeLogDB).filter(
            OutcomeLogDB.outcome_id == outcome_id,
            OutcomeLogDB.user_id == user_id,
        ).order_by(OutcomeLogDB.logged_at).all()
        return [row.to_pydantic() for row in rows]

    def log_outcome(self, user_id: str, log: OutcomeLog, current_value: float) -> OutcomeLog:
        """Record a measured value and set the outcome's current value in one commit."""
        outcome_db = self.db.query(OutcomeDB).filter(
            OutcomeDB.id == log.outcome_id,
            OutcomeDB.user_id == user_id,
        ).first()
        if not outcome_db:
            raise ValueError(f"Outcome {log.outcome_id} not found")

        outcome_db.current_value = current_value
        return self._add(
            OutcomeLogDB(
                id=log.id,
                outcome_id=log.outcome_id,
                user_id=user_id,
                value=log.value,
                note=log.note,
                logged_at=log.logged_at,
            ),
            f"log {log.value} for outcome {log.outcome_id}",
        )

    def get_outcome_logs_between(self, user_id: str, start: datetime, end: datetime) -> List[OutcomeLog]:
        """Outcome logs with start <= logged_at <= end, oldest first."""
        rows = self.db.query(OutcomeLogDB).filter(
            OutcomeLogDB.user_id == user_id,
            OutcomeLogDB.logged_at >= start,
            OutcomeLogDB.logged_at <= end,
        ).order_by(OutcomeLogDB.logged_at).all()
        return [row.to_pydantic() for row in rows]

    # Goals

    def create_goal(self, goal: Goal) -> Goal:
        return self._add(GoalDB.from_pydantic(goal), f"goal {goal.id}: {goal.title}")

    def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        row = self.db.query(GoalDB).filter(
            GoalDB.id == goal_id,
            GoalDB.user_id == user_id,
        ).first()
        return row.to_pydantic() if row else None

    def add_goal_log(self, log: GoalLog) -> GoalLog:
        return self._add(
            GoalLogDB(
                id=log.id,
                goal_id=log.goal_id,
                start_time=log.start_time,
                end_time=log.end_time,
                goal_count=log.goal_count,
            ),
            f"log for goal {log.goal_id}",
        )

    def get_goal_logs(self, goal_id: str) -> List[GoalLog]:
        rows = self.db.query(GoalLogDB).filter(
            GoalLogDB.goal_id == goal_id,
        ).order_by(GoalLogDB.start_time).all()
        return [row.to_pydantic() for row in rows]
