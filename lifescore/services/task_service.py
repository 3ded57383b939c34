"""Task and pillar management service."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from lifescore.database.pillar_repository import PillarRepository
from lifescore.database.task_repository import TaskRepository
from lifescore.engine.scoring import round_half_up
from lifescore.models.task import Pillar, Task
from lifescore.services.errors import NotFoundError

logger = logging.getLogger(__name__)

# Weight of a user's first pillar when none is given
FIRST_PILLAR_WEIGHT = 100


def default_pillar_weight(existing_count: int) -> float:
    """Even share of 100 across the existing pillars plus the new one."""
    if existing_count <= 0:
        return FIRST_PILLAR_WEIGHT
    return round_half_up(100 / (existing_count + 1))


class TaskService:
    """Creates, edits and retires a user's tasks and pillars."""

    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskRepository(db)
        self.pillars = PillarRepository(db)

    # Pillars

    def list_pillars(self, user_id: str) -> List[Pillar]:
        return self.pillars.get_all(user_id)

    def create_pillar(
        self,
        user_id: str,
        name: str,
        emoji: Optional[str] = None,
        color: Optional[str] = None,
        weight: Optional[float] = None,
    ) -> Pillar:
        """Create a pillar; without a weight it gets an even share of 100.

        Raises:
            ValueError: If the name is blank
        """
        if not name.strip():
            raise ValueError("Pillar name is required")
        if weight is None:
            weight = default_pillar_weight(len(self.pillars.get_all(user_id, include_archived=True)))

        pillar = Pillar(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            emoji=emoji or "📌",
            color=color or "#3B82F6",
            weight=weight,
        )
        created = self.pillars.create(pillar)
        logger.info(f"Created pillar {created.id} ({created.name}, weight {created.weight}) for user {user_id}")
        return created

    def update_pillar(self, user_id: str, pillar_id: str, changes: Dict[str, Any]) -> Pillar:
        """Apply a partial update to a pillar.

        Raises:
            NotFoundError: If the pillar does not exist for this user
        """
        pillar = self.pillars.get(user_id, pillar_id)
        if pillar is None:
            raise NotFoundError(f"Pillar {pillar_id} not found")
        return self.pillars.update(pillar.model_copy(update=changes))

    def archive_pillar(self, user_id: str, pillar_id: str) -> None:
        if not self.pillars.archive(user_id, pillar_id):
            raise NotFoundError(f"Pillar {pillar_id} not found")
        logger.info(f"Archived pillar {pillar_id} for user {user_id}")

    # Tasks

    def list_tasks(self, user_id: str) -> List[Task]:
        return self.tasks.get_all(user_id)

    def _check_pillar(self, user_id: str, pillar_id: Optional[str]) -> None:
        if pillar_id is not None and self.pillars.get(user_id, pillar_id) is None:
            raise NotFoundError(f"Pillar {pillar_id} not found")

    def create_task(self, user_id: str, fields: Dict[str, Any]) -> Task:
        """Create a task from request fields.

        Raises:
            NotFoundError: If the task names a pillar the user does not own
            ValueError: If the name is blank
        """
        if not str(fields.get("name", "")).strip():
            raise ValueError("Task name is required")
        self._check_pillar(user_id, fields.get("pillar_id"))

        task = Task(**{**fields, "id": str(uuid.uuid4()), "user_id": user_id})
        created = self.tasks.create(task)
        logger.info(f"Created task {created.id} for user {user_id}")
        return created

    def update_task(self, user_id: str, task_id: str, changes: Dict[str, Any]) -> Task:
        """Apply a partial update to a task.

        Raises:
            NotFoundError: If the task, or a newly named pillar, does not exist
        """
        task = self.tasks.get(user_id, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        if "pillar_id" in changes:
            self._check_pillar(user_id, changes["pillar_id"])
        return self.tasks.update(task.model_copy(update=changes))

    def deactivate_task(self, user_id: str, task_id: str) -> Task:
        """Retire a task; its completion history is kept for reports."""
        return self.update_task(user_id, task_id, {"is_active": False})
