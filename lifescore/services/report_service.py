"""Report service: loads a period's rows and aggregates them."""

import logging
from datetime import date, datetime, time
from typing import Optional, Union

from sqlalchemy.orm import Session

from lifescore.database.outcome_repository import OutcomeRepository
from lifescore.database.pillar_repository import PillarRepository
from lifescore.database.score_repository import ScoreRepository
from lifescore.database.task_repository import TaskRepository
from lifescore.engine.reports import compute_report, report_date_range
from lifescore.models.constants import REPORT_DAYS
from lifescore.models.report import ReportResult

logger = logging.getLogger(__name__)


class ReportService:
    """Builds weekly and monthly reports."""

    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskRepository(db)
        self.pillars = PillarRepository(db)
        self.scores = ScoreRepository(db)
        self.outcomes = OutcomeRepository(db)

    def build(self, user_id: str, report_type: str, end_date: Optional[Union[date, str]] = None) -> ReportResult:
        """Build a report for the period ending on `end_date` (default today).

        Raises:
            ValueError: If the report type is unknown
        """
        if report_type not in REPORT_DAYS:
            raise ValueError(f"Unknown report type: {report_type}")

        start, end = report_date_range(report_type, end_date or datetime.utcnow().date())
        report = compute_report(
            report_type,
            end,
            daily_scores=self.scores.get_daily_scores_between(user_id, start, end),
            tasks=self.tasks.get_all(user_id),
            completions=self.tasks.get_completions_between(user_id, start, end),
            pillars=self.pillars.get_all(user_id),
            outcomes=self.outcomes.get_outcomes(user_id),
            outcome_logs=self.outcomes.get_outcome_logs_between(
                user_id, datetime.combine(start, time.min), datetime.combine(end, time.max)
            ),
            stats=self.scores.get_stats(user_id),
        )
        logger.debug(f"Built {report_type} report {start} to {end} for user {user_id}")
        return report
