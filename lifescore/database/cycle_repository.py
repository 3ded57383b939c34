"""Repository for twelve-week cycles, cycle goals and weekly targets."""

import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from lifescore.models.cycle import Cycle, CycleGoal, WeeklyTarget
from lifescore.database.models import CycleDB, CycleGoalDB, WeeklyTargetDB, enum_to_value

logger = logging.getLogger(__name__)


class CycleRepository:
    """Repository for Cycle, CycleGoal and WeeklyTarget database operations."""

    def __init__(self, db: Session):
        self.db = db

    # Cycles

    def create_cycle(self, cycle: Cycle) -> Cycle:
        """Create a cycle. An active cycle deactivates the user's other cycles."""
        try:
            if cycle.is_active:
                self.db.query(CycleDB).filter(
                    CycleDB.user_id == cycle.user_id,
                    CycleDB.is_active.is_(True),
                ).update({CycleDB.is_active: False}, synchronize_session=False)
            cycle_db = CycleDB(
                id=cycle.id,
                user_id=cycle.user_id,
                name=cycle.name,
                start_date=cycle.start_date,
                end_date=cycle.end_date,
                is_active=cycle.is_active,
            )
            self.db.add(cycle_db)
            self.db.commit()
            self.db.refresh(cycle_db)
            logger.debug(f"Created cycle {cycle.id}: {cycle.name}")
            return cycle_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create cycle {cycle.id}: {type(e).__name__}: {str(e)}")
            raise

    def get_cycle(self, user_id: str, cycle_id: str) -> Optional[Cycle]:
        row = self.db.query(CycleDB).filter(
            CycleDB.id == cycle_id,
            CycleDB.user_id == user_id,
        ).first()
        return row.to_pydantic() if row else None

    def get_active_cycle(self, user_id: str) -> Optional[Cycle]:
        row = self.db.query(CycleDB).filter(
            CycleDB.user_id == user_id,
            CycleDB.is_active.is_(True),
        ).first()
        return row.to_pydantic() if row else None

    # Goals

    def create_goal(self, goal: CycleGoal, weekly_targets: List[WeeklyTarget]) -> CycleGoal:
        """Create a cycle goal together with its initial weekly targets."""
        try:
            goal_db = CycleGoalDB(
                id=goal.id,
                cycle_id=goal.cycle_id,
                user_id=goal.user_id,
                name=goal.name,
                unit=goal.unit,
                target_value=goal.target_value,
                current_value=goal.current_value,
                linked_outcome_id=goal.linked_outcome_id,
            )
            self.db.add(goal_db)
            for target in weekly_targets:
                self.db.add(WeeklyTargetDB.from_pydantic(target, goal.cycle_id, goal.user_id))
            self.db.commit()
            self.db.refresh(goal_db)
            logger.debug(f"Created cycle goal {goal.id} with {len(weekly_targets)} weekly targets")
            return goal_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create cycle goal {goal.id}: {type(e).__name__}: {str(e)}")
            raise

    def get_goals(self, user_id: str, cycle_id: str) -> List[CycleGoal]:
        rows = self.db.query(CycleGoalDB).filter(
            CycleGoalDB.cycle_id == cycle_id,
            CycleGoalDB.user_id == user_id,
        ).all()
        return [row.to_pydantic() for row in rows]

    # Weekly targets

    def get_weekly_targets(self, user_id: str, cycle_id: str, goal_id: Optional[str] = None) -> List[WeeklyTarget]:
        """Weekly targets of a cycle (or of one of its goals), ordered by week."""
        query = self.db.query(WeeklyTargetDB).filter(
            WeeklyTargetDB.cycle_id == cycle_id,
            WeeklyTargetDB.user_id == user_id,
        )
        if goal_id is not None:
            query = query.filter(WeeklyTargetDB.goal_id == goal_id)
        rows = query.order_by(WeeklyTargetDB.goal_id, WeeklyTargetDB.week_number).all()
        return [row.to_pydantic() for row in rows]

    def save_weekly_review(
        self,
        user_id: str,
        cycle_id: str,
        targets: List[WeeklyTarget],
        goal_values: Optional[Dict[str, float]] = None,
    ) -> None:
        """Write back changed weekly targets and goal current values in one commit.

        Targets are matched by goal and week. `goal_values` maps a cycle goal
        id to its new current value. Nothing is written when any part fails.

        Raises:
            ValueError: If a goal in `goal_values` does not exist for the user
        """
        goal_values = goal_values or {}
        if not targets and not goal_values:
            return

        try:
            if goal_values:
                goals = self.db.query(CycleGoalDB).filter(
                    CycleGoalDB.id.in_(list(goal_values)),
                    CycleGoalDB.user_id == user_id,
                    CycleGoalDB.cycle_id == cycle_id,
                ).all()
                goals_by_id = {goal_db.id: goal_db for goal_db in goals}
                for goal_id, current_value in goal_values.items():
                    if goal_id not in goals_by_id:
                        raise ValueError(f"Cycle goal {goal_id} not found")
                    goals_by_id[goal_id].current_value = current_value

            rows = self.db.query(WeeklyTargetDB).filter(
                WeeklyTargetDB.cycle_id == cycle_id,
                WeeklyTargetDB.user_id == user_id,
            ).all()
            by_key: Dict[tuple, WeeklyTargetDB] = {(r.goal_id, r.week_number): r for r in rows}
            for target in targets:
                row = by_key.get((target.goal_id, target.week_number))
                if row is None:
                    self.db.add(WeeklyTargetDB.from_pydantic(target, cycle_id, user_id))
                    continue
                row.target_value = target.target_value
                row.actual_value = target.actual_value
                row.is_overridden = target.is_overridden
                row.score = enum_to_value(target.score) if target.score else None
                row.reviewed_at = target.reviewed_at

            self.db.commit()
            logger.debug(
                f"Saved {len(targets)} weekly targets and {len(goal_values)} goal values for cycle {cycle_id}"
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save weekly review for cycle {cycle_id}: {type(e).__name__}: {str(e)}")
            raise
