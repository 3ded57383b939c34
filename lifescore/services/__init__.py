"""Services that load rows, run the scoring engine and persist results."""

from lifescore.services.errors import NotFoundError
from lifescore.services.daily_score_service import DailyScoreService
from lifescore.services.task_completion_service import TaskCompletionService
from lifescore.services.cycle_service import CycleService
from lifescore.services.report_service import ReportService
from lifescore.services.goal_service import GoalService
from lifescore.services.task_service import TaskService

__all__ = [
    "NotFoundError",
    "DailyScoreService",
    "TaskCompletionService",
    "CycleService",
    "ReportService",
    "GoalService",
    "TaskService",
]
