"""Goal and outcome progress service."""

import logging
import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from lifescore.database.outcome_repository import OutcomeRepository
from lifescore.database.pillar_repository import PillarRepository
from lifescore.engine.goal_progress import compute_goal_progress, current_outcome_value, default_direction
from lifescore.models.outcome import (
    Direction,
    Goal,
    GoalLog,
    GoalProgress,
    GoalType,
    MetricType,
    Outcome,
    OutcomeLog,
)
from lifescore.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class GoalService:
    """Progress of windowed goals and logging of outcome values."""

    def __init__(self, db: Session):
        self.db = db
        self.outcomes = OutcomeRepository(db)

    # Outcomes

    def list_outcomes(self, user_id: str) -> List[Outcome]:
        return self.outcomes.get_outcomes(user_id)

    def create_outcome(
        self,
        user_id: str,
        name: str,
        unit: str,
        start_value: float,
        target_value: float,
        direction: Optional[Direction] = None,
        pillar_id: Optional[str] = None,
        target_date: Optional[date] = None,
    ) -> Outcome:
        """Create an outcome starting at its start value.

        Without an explicit direction, the outcome increases unless its
        target is below its start.

        Raises:
            NotFoundError: If the outcome names a pillar the user does not own
        """
        if pillar_id is not None and PillarRepository(self.db).get(user_id, pillar_id) is None:
            raise NotFoundError(f"Pillar {pillar_id} not found")
        outcome = Outcome(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            unit=unit,
            start_value=start_value,
            target_value=target_value,
            current_value=start_value,
            direction=direction or default_direction(start_value, target_value),
            pillar_id=pillar_id,
            target_date=target_date,
        )
        created = self.outcomes.create_outcome(outcome)
        logger.info(f"Created outcome {created.id} ({created.direction}) for user {user_id}")
        return created

    def log_outcome(
        self,
        user_id: str,
        outcome_id: str,
        value: float,
        note: Optional[str] = None,
        logged_at: Optional[datetime] = None,
    ) -> OutcomeLog:
        """Log a measured outcome value.

        The outcome's current value becomes its latest logged value, so a
        back-dated log does not replace a newer one.

        Raises:
            NotFoundError: If the outcome does not exist for this user
        """
        outcome = self.outcomes.get_outcome(user_id, outcome_id)
        if outcome is None:
            raise NotFoundError(f"Outcome {outcome_id} not found")
        log = OutcomeLog(
            id=str(uuid.uuid4()),
            outcome_id=outcome_id,
            value=value,
            note=note,
            logged_at=logged_at or datetime.utcnow(),
        )
        # The new log comes first so it wins a tie on logged_at
        current = current_outcome_value(outcome, [log] + self.outcomes.get_outcome_logs(user_id, outcome_id))
        return self.outcomes.log_outcome(user_id, log, current)

    # Goals

    def create_goal(
        self,
        user_id: str,
        title: str,
        target_value: float,
        start_date: datetime,
        end_date: datetime,
        goal_type: GoalType = GoalType.ACHIEVEMENT,
        metric_type: MetricType = MetricType.COUNT,
    ) -> Goal:
        """Create a goal over a fixed window.

        Raises:
            ValueError: If the window ends before it starts
        """
        if end_date < start_date:
            raise ValueError("Goal end date must not be before its start date")
        goal = Goal(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            goal_type=goal_type,
            metric_type=metric_type,
            target_value=target_value,
            start_date=start_date,
            end_date=end_date,
        )
        return self.outcomes.create_goal(goal)

    def log_goal(
        self,
        user_id: str,
        goal_id: str,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        goal_count: Optional[float] = None,
    ) -> GoalLog:
        """Record an activity counted toward a goal.

        Raises:
            NotFoundError: If the goal does not exist for this user
            ValueError: If the activity ends before it starts
        """
        if self.outcomes.get_goal(user_id, goal_id) is None:
            raise NotFoundError(f"Goal {goal_id} not found")
        if end_time is not None and end_time < start_time:
            raise ValueError("Activity end time must not be before its start time")
        log = GoalLog(
            id=str(uuid.uuid4()),
            goal_id=goal_id,
            start_time=start_time,
            end_time=end_time,
            goal_count=goal_count,
        )
        return self.outcomes.add_goal_log(log)

    def progress(self, user_id: str, goal_id: str, now: Optional[datetime] = None) -> GoalProgress:
        """Current progress of a goal, recomputed from its logs.

        Raises:
            NotFoundError: If the goal does not exist for this user
        """
        goal = self.outcomes.get_goal(user_id, goal_id)
        if goal is None:
            raise NotFoundError(f"Goal {goal_id} not found")
        return compute_goal_progress(goal, self.outcomes.get_goal_logs(goal_id), now)
