"""Task completion service."""

import logging
from datetime import date
from typing import Optional, Union

from sqlalchemy.orm import Session

from lifescore.database.task_repository import TaskRepository
from lifescore.engine.schedule import parse_date
from lifescore.engine.scoring import score_task
from lifescore.models.task import Completion, CompletionType
from lifescore.services.daily_score_service import DailyScoreService
from lifescore.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class TaskCompletionService:
    """Records task completions and re-scores the affected day."""

    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskRepository(db)
        self.daily_scores = DailyScoreService(db)

    def complete(
        self,
        user_id: str,
        task_id: str,
        day: Union[date, str],
        value: Optional[float] = None,
        completed: Optional[bool] = None,
    ) -> Completion:
        """Record (or replace) a task's completion for a day.

        When `completed` is omitted, checkbox tasks count as completed and
        other tasks are completed when `value` is positive. When `value` is
        omitted, checkbox tasks store 1/0 and other tasks store 0.

        Args:
            user_id: Owner of the task
            task_id: Task being completed
            day: Calendar date of the completion
            value: Measured value (meaning depends on completion type)
            completed: Explicit completed flag

        Returns:
            The stored Completion, with its points

        Raises:
            NotFoundError: If the task does not exist for this user
        """
        day = parse_date(day)
        task = self.tasks.get(user_id, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

        is_checkbox = task.completion_type == CompletionType.CHECKBOX
        if completed is None:
            completed = True if is_checkbox else (value or 0) > 0
        if value is None:
            value = (1 if completed else 0) if is_checkbox else 0

        completion = Completion(task_id=task.id, date=day, completed=completed, value=value)
        completion = completion.model_copy(update={"points_earned": score_task(task, completion)})

        stored = self.tasks.upsert_completion(user_id, completion)
        logger.info(f"Completed task {task_id} on {day}: value={value}, points={stored.points_earned}")

        self.daily_scores.score_day(user_id, day)
        return stored

    def undo(self, user_id: str, task_id: str, day: Union[date, str]) -> Completion:
        """Reset a completed task back to not done for a day.

        Raises:
            NotFoundError: If the task does not exist
            ValueError: If there is no completion to undo
        """
        day = parse_date(day)
        if self.tasks.get(user_id, task_id) is None:
            raise NotFoundError(f"Task {task_id} not found")

        existing = self.tasks.get_completion(user_id, task_id, day)
        if existing is None or not existing.completed:
            raise ValueError(f"No completion to undo for task {task_id} on {day}")

        stored = self.tasks.upsert_completion(
            user_id,
            existing.model_copy(update={"completed": False, "value": 0, "points_earned": 0}),
        )
        logger.info(f"Undid completion of task {task_id} on {day}")

        self.daily_scores.score_day(user_id, day)
        return stored
