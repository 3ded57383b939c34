"""Task applicability: which tasks count toward a given calendar day."""

from datetime import date, datetime
from typing import List, Union

from lifescore.models.task import Frequency, Task


MONDAY = 0
SATURDAY = 5


def parse_date(value: Union[date, str]) -> date:
    """Parse a YYYY-MM-DD string (or pass through a date) as a naive calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def is_weekend(day: date) -> bool:
    """Saturday or Sunday."""
    return day.weekday() >= SATURDAY


def is_task_scheduled(task: Task, day: date) -> bool:
    """Check whether a task applies on a given day.

    - Inactive tasks never apply
    - Weekend tasks never apply on weekdays
    - Weekly tasks apply on Monday, or Saturday when weekend-flagged
    - Custom tasks apply on their listed weekdays (every day when the list is unset)
    - Daily tasks apply every day
    """
    if not task.is_active:
        return False

    weekday = day.weekday()
    if task.is_weekend_task and not is_weekend(day):
        return False

    if task.frequency == Frequency.WEEKLY:
        return weekday == (SATURDAY if task.is_weekend_task else MONDAY)

    if task.frequency == Frequency.CUSTOM and task.custom_days is not None:
        return weekday in task.custom_days

    return True


def tasks_for_day(tasks: List[Task], day: Union[date, str]) -> List[Task]:
    """Filter tasks down to those scheduled on `day`, preserving order."""
    day = parse_date(day)
    return [task for task in tasks if is_task_scheduled(task, day)]
