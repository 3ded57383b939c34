"""Repository for tasks and their daily completions."""

import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from lifescore.models.task import Completion, Task
from lifescore.database.models import TaskCompletionDB, TaskDB, enum_to_value

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task and task completion database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, task: Task) -> Task:
        """Create a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.name[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str, task_id: str) -> Optional[Task]:
        """Get task by ID for a specific user."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task_id,
            TaskDB.user_id == user_id,
        ).first()
        return task_db.to_pydantic() if task_db else None

    def get_all(self, user_id: str) -> List[Task]:
        """Get all tasks for a user (newest first)."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
        ).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_active(self, user_id: str) -> List[Task]:
        """Get active tasks for a user."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
            TaskDB.is_active.is_(True),
        ).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update(self, task: Task) -> Task:
        """Update an existing task (user_id must match task.user_id)."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task.id,
            TaskDB.user_id == task.user_id,
        ).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")

        task_db.name = task.name
        task_db.pillar_id = task.pillar_id
        task_db.completion_type = enum_to_value(task.completion_type)
        task_db.target = task.target
        task_db.importance = enum_to_value(task.importance)
        task_db.base_points = task.base_points
        task_db.flexibility_rule = enum_to_value(task.flexibility_rule) if task.flexibility_rule else None
        task_db.limit_value = task.limit_value
        task_db.frequency = enum_to_value(task.frequency)
        task_db.custom_days = sorted(task.custom_days) if task.custom_days is not None else None
        task_db.is_weekend_task = task.is_weekend_task
        task_db.is_active = task.is_active

        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task.id}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    # Completions

    def get_completion(self, user_id: str, task_id: str, day: date) -> Optional[Completion]:
        completion_db = self.db.query(TaskCompletionDB).filter(
            TaskCompletionDB.user_id == user_id,
            TaskCompletionDB.task_id == task_id,
            TaskCompletionDB.date == day,
        ).first()
        return completion_db.to_pydantic() if completion_db else None

    def get_completions_for_date(self, user_id: str, day: date) -> List[Completion]:
        """All completions a user recorded on one date."""
        rows = self.db.query(TaskCompletionDB).filter(
            TaskCompletionDB.user_id == user_id,
            TaskCompletionDB.date == day,
        ).all()
        return [row.to_pydantic() for row in rows]

    def get_completions_between(self, user_id: str, start: date, end: date) -> List[Completion]:
        """Completions with start <= date <= end, oldest first."""
        rows = self.db.query(TaskCompletionDB).filter(
            TaskCompletionDB.user_id == user_id,
            TaskCompletionDB.date >= start,
            TaskCompletionDB.date <= end,
        ).order_by(TaskCompletionDB.date).all()
        return [row.to_pydantic() for row in rows]

    def upsert_completion(self, user_id: str, completion: Completion) -> Completion:
        """Create or replace the completion of a task on a date.

        Args:
            user_id: Owner of the task
            completion: Completion to store (at most one per task and date)

        Returns:
            Stored Completion
        """
        completion_db = self.db.query(TaskCompletionDB).filter(
            TaskCompletionDB.task_id == completion.task_id,
            TaskCompletionDB.date == completion.date,
        ).first()

        if completion_db is None:
            completion_db = TaskCompletionDB(
                task_id=completion.task_id,
                user_id=user_id,
                date=completion.date,
            )
            self.db.add(completion_db)

        completion_db.completed = completion.completed
        completion_db.value = completion.value
        completion_db.points_earned = completion.points_earned
        completion_db.completed_at = datetime.utcnow() if completion.completed else None

        try:
            self.db.commit()
            self.db.refresh(completion_db)
            logger.debug(f"Stored completion for task {completion.task_id} on {completion.date}")
            return completion_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to store completion for task {completion.task_id}: {type(e).__name__}: {str(e)}"
            )
            raise
