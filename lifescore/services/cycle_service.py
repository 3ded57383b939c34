"""Twelve-week cycle service: goals, weekly reviews and analytics."""

import logging
import uuid
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from lifescore.database.cycle_repository import CycleRepository
from lifescore.engine.cycle_analytics import compute_cycle_analytics
from lifescore.engine.schedule import parse_date
from lifescore.engine.twelve_week import (
    apply_week_review,
    calculate_end_date,
    generate_weekly_targets,
    get_current_week_number,
    get_total_weeks,
    redistribute_targets,
)
from lifescore.models.cycle import Cycle, CycleAnalytics, CycleGoal, WeeklyTarget, WeeklyUpdate
from lifescore.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class CycleService:
    """Operations on a user's twelve-week cycles."""

    def __init__(self, db: Session):
        self.db = db
        self.cycles = CycleRepository(db)

    def _get_cycle(self, user_id: str, cycle_id: str) -> Cycle:
        cycle = self.cycles.get_cycle(user_id, cycle_id)
        if cycle is None:
            raise NotFoundError(f"Cycle {cycle_id} not found")
        return cycle

    def create_cycle(
        self,
        user_id: str,
        name: str,
        start_date: Union[date, str],
        end_date: Optional[Union[date, str]] = None,
    ) -> Cycle:
        """Create a new active cycle (84 days unless an end date is given).

        Raises:
            ValueError: If the end date is before the start date
        """
        start = parse_date(start_date)
        end = parse_date(end_date) if end_date is not None else calculate_end_date(start)
        if end < start:
            raise ValueError("Cycle end date must not be before its start date")

        cycle = Cycle(id=str(uuid.uuid4()), user_id=user_id, name=name, start_date=start, end_date=end)
        created = self.cycles.create_cycle(cycle)
        logger.info(f"Created cycle {created.id} ({start} to {end}) for user {user_id}")
        return created

    def add_goal(
        self,
        user_id: str,
        cycle_id: str,
        name: str,
        target_value: float,
        unit: str = "",
        linked_outcome_id: Optional[str] = None,
    ) -> CycleGoal:
        """Add a goal to a cycle with its target split evenly across the cycle's weeks."""
        cycle = self._get_cycle(user_id, cycle_id)
        goal = CycleGoal(
            id=str(uuid.uuid4()),
            cycle_id=cycle.id,
            user_id=user_id,
            name=name,
            unit=unit,
            target_value=target_value,
            linked_outcome_id=linked_outcome_id,
        )
        total_weeks = get_total_weeks(cycle.start_date, cycle.end_date)
        return self.cycles.create_goal(goal, generate_weekly_targets(goal.id, target_value, total_weeks))

    def get_goals(self, user_id: str, cycle_id: str) -> List[CycleGoal]:
        self._get_cycle(user_id, cycle_id)
        return self.cycles.get_goals(user_id, cycle_id)

    def submit_weekly_updates(
        self,
        user_id: str,
        cycle_id: str,
        updates: List[WeeklyUpdate],
        today: Optional[date] = None,
    ) -> List[WeeklyTarget]:
        """Apply weekly reviews, then redistribute each affected goal's shortfall.

        An update with an actual value scores its week against the (possibly
        updated) target. Afterwards every affected goal gets its missed
        progress spread over open future weeks, and its current value reset
        to the sum of its weekly actuals.

        Args:
            user_id: Owner of the cycle
            cycle_id: Cycle being reviewed
            updates: Per goal and week changes
            today: Reference date for the current week (defaults to today)

        Returns:
            All weekly targets of the cycle after the update

        Raises:
            NotFoundError: If the cycle or a referenced week row does not exist
        """
        cycle = self._get_cycle(user_id, cycle_id)
        current_week = get_current_week_number(cycle.start_date, cycle.end_date, today)

        targets: Dict[tuple, WeeklyTarget] = {
            (t.goal_id, t.week_number): t for t in self.cycles.get_weekly_targets(user_id, cycle_id)
        }
        reviewed_at = datetime.utcnow()
        changed: Dict[tuple, WeeklyTarget] = {}
        goal_values: Dict[str, float] = {}

        for update in updates:
            key = (update.goal_id, update.week_number)
            target = targets.get(key)
            if target is None:
                raise NotFoundError(f"No week {update.week_number} target for goal {update.goal_id}")

            if update.is_overridden is not None:
                target = target.model_copy(update={"is_overridden": update.is_overridden})
            if update.actual_value is not None:
                target = apply_week_review(target, update.actual_value, update.target_value, reviewed_at)
            elif update.target_value is not None:
                target = target.model_copy(update={"target_value": update.target_value})

            targets[key] = target
            changed[key] = target

        for goal_id in dict.fromkeys(goal_id for goal_id, _ in changed):
            goal_targets = sorted(
                (t for (g, _), t in targets.items() if g == goal_id),
                key=lambda t: t.week_number,
            )
            for adjustment in redistribute_targets(goal_targets, current_week):
                key = (goal_id, adjustment.week_number)
                targets[key] = targets[key].model_copy(update={"target_value": adjustment.target_value})
                changed[key] = targets[key]

            goal_values[goal_id] = sum(t.actual_value for t in goal_targets)

        self.cycles.save_weekly_review(user_id, cycle_id, list(changed.values()), goal_values)
        logger.info(
            f"Applied {len(updates)} weekly updates to cycle {cycle_id} "
            f"(week {current_week}, {len(changed)} rows changed)"
        )
        return self.cycles.get_weekly_targets(user_id, cycle_id)

    def analytics(self, user_id: str, cycle_id: str, today: Optional[date] = None) -> CycleAnalytics:
        """Pace, consistency and projection analytics for a cycle."""
        cycle = self._get_cycle(user_id, cycle_id)
        total_weeks = get_total_weeks(cycle.start_date, cycle.end_date)
        current_week = get_current_week_number(cycle.start_date, cycle.end_date, today)
        return compute_cycle_analytics(
            self.cycles.get_goals(user_id, cycle_id),
            self.cycles.get_weekly_targets(user_id, cycle_id),
            current_week,
            total_weeks,
        )
