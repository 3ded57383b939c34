"""Weekly and monthly report aggregation for lifescore.

Rolls stored daily scores, task completions and outcome logs up over a
date range. Inputs are plain rows already loaded by the caller; rows outside
the range are ignored so callers may over-fetch.
"""

from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple, Union

from lifescore.engine.schedule import parse_date
from lifescore.engine.scoring import round_half_up
from lifescore.models.constants import REPORT_DAYS, REPORT_RANKING_SIZE
from lifescore.models.outcome import Outcome, OutcomeLog
from lifescore.models.report import (
    DailyScoreEntry,
    DateRange,
    DayScore,
    OutcomeDelta,
    PillarAverage,
    ReportResult,
    ReportSummary,
    TaskCompletionRate,
)
from lifescore.models.score import DailyScore, UserStats
from lifescore.models.task import Completion, Pillar, Task


DEFAULT_TASK_EMOJI = "📌"


def report_date_range(report_type: str, end_date: Union[date, str]) -> Tuple[date, date]:
    """(start, end) of a report period ending on `end_date` (weekly unless monthly)."""
    end = parse_date(end_date)
    total_days = REPORT_DAYS.get(report_type, REPORT_DAYS["weekly"])
    return end - timedelta(days=total_days - 1), end


def _summarize_scores(scores: List[DailyScore]) -> Tuple[DayScore, DayScore]:
    """Best and worst days of the period (ties go to the later day)."""
    if not scores:
        return DayScore(), DayScore()

    best = DayScore(date=None, score=0)
    worst = DayScore(date=None, score=100)
    for s in scores:
        if s.action_score >= best.score:
            best = DayScore(date=s.date, score=s.action_score)
        if s.action_score <= worst.score:
            worst = DayScore(date=s.date, score=s.action_score)
    return best, worst


def _pillar_breakdown(pillars: List[Pillar], scores: List[DailyScore]) -> List[PillarAverage]:
    breakdown = []
    for pillar in pillars:
        recorded = [s.pillar_scores[pillar.id] for s in scores if pillar.id in s.pillar_scores]
        avg = round_half_up(sum(recorded) / len(recorded)) if recorded else 0
        breakdown.append(PillarAverage(
            id=pillar.id,
            name=pillar.name,
            emoji=pillar.emoji,
            color=pillar.color,
            avg_score=avg,
        ))
    return breakdown


def _task_rankings(
    tasks: List[Task],
    pillars: List[Pillar],
    completions: List[Completion],
) -> Tuple[List[TaskCompletionRate], List[TaskCompletionRate]]:
    """Top and bottom task completion rates over the period."""
    task_map = {t.id: t for t in tasks}
    pillar_emoji = {p.id: p.emoji for p in pillars}

    counts: Dict[str, List[int]] = {}
    for c in completions:
        completed_total = counts.setdefault(c.task_id, [0, 0])
        completed_total[1] += 1
        if c.completed:
            completed_total[0] += 1

    rates = []
    for task_id, (completed, total) in counts.items():
        task = task_map.get(task_id)
        emoji = pillar_emoji.get(task.pillar_id) if task and task.pillar_id else None
        rates.append(TaskCompletionRate(
            name=task.name if task else "Unknown",
            completion_rate=round_half_up(completed / total * 100) if total > 0 else 0,
            pillar_emoji=emoji or DEFAULT_TASK_EMOJI,
        ))
    rates.sort(key=lambda r: r.completion_rate, reverse=True)

    top = rates[:REPORT_RANKING_SIZE]
    if len(rates) > REPORT_RANKING_SIZE:
        skipped = sorted(rates[-REPORT_RANKING_SIZE:], key=lambda r: r.completion_rate)
    else:
        skipped = sorted(rates, key=lambda r: r.completion_rate)[:REPORT_RANKING_SIZE]
    return top, skipped


def _outcome_progress(
    outcomes: List[Outcome],
    pillars: List[Pillar],
    logs: List[OutcomeLog],
) -> List[OutcomeDelta]:
    pillar_color = {p.id: p.color for p in pillars}
    progress = []
    for outcome in outcomes:
        own_logs = sorted(
            (log for log in logs if log.outcome_id == outcome.id),
            key=lambda log: log.logged_at,
        )
        start_of_period = own_logs[0].value if own_logs else 0
        end_of_period = own_logs[-1].value if own_logs else 0
        progress.append(OutcomeDelta(
            name=outcome.name,
            unit=outcome.unit,
            direction=outcome.direction,
            start_of_period=start_of_period,
            end_of_period=end_of_period,
            change=end_of_period - start_of_period,
            pillar_color=pillar_color.get(outcome.pillar_id) if outcome.pillar_id else None,
        ))
    return progress


def compute_report(
    report_type: str,
    end_date: Union[date, str],
    daily_scores: List[DailyScore],
    tasks: List[Task],
    completions: List[Completion],
    pillars: List[Pillar],
    outcomes: List[Outcome],
    outcome_logs: List[OutcomeLog],
    stats: Optional[UserStats] = None,
) -> ReportResult:
    """Build a weekly or monthly report for one user.

    Args:
        report_type: "weekly" (7 days) or "monthly" (30 days)
        end_date: Last day of the period (inclusive)
        daily_scores: Stored daily scores
        tasks: The user's tasks (for names and pillars)
        completions: Task completions
        pillars: The user's pillars (archived ones are skipped)
        outcomes: The user's outcomes (archived ones are skipped)
        outcome_logs: Outcome logs
        stats: Current user stats (for streaks)

    Returns:
        ReportResult for the period
    """
    start, end = report_date_range(report_type, end_date)
    window_start = datetime.combine(start, time.min)
    window_end = datetime.combine(end, time.max)

    scores = sorted((s for s in daily_scores if start <= s.date <= end), key=lambda s: s.date)
    period_completions = [c for c in completions if start <= c.date <= end]
    period_logs = [log for log in outcome_logs if window_start <= log.logged_at <= window_end]
    active_pillars = [p for p in pillars if not p.is_archived]
    active_outcomes = [o for o in outcomes if not o.is_archived]

    avg_score = round_half_up(sum(s.action_score for s in scores) / len(scores)) if scores else 0
    best_day, worst_day = _summarize_scores(scores)
    top_tasks, skipped_tasks = _task_rankings(tasks, active_pillars, period_completions)

    summary = ReportSummary(
        avg_score=avg_score,
        passing_days=sum(1 for s in scores if s.is_passing),
        total_days=(end - start).days + 1,
        best_day=best_day,
        worst_day=worst_day,
        total_xp_earned=round_half_up(sum(s.xp_earned for s in scores)),
        current_streak=stats.current_streak if stats else 0,
        best_streak=stats.best_streak if stats else 0,
    )

    return ReportResult(
        type=report_type,
        date_range=DateRange(start=start, end=end),
        summary=summary,
        pillar_breakdown=_pillar_breakdown(active_pillars, scores),
        daily_scores=[
            DailyScoreEntry(date=s.date, action_score=s.action_score, is_passing=s.is_passing)
            for s in scores
        ],
        top_tasks=top_tasks,
        skipped_tasks=skipped_tasks,
        outcome_progress=_outcome_progress(active_outcomes, active_pillars, period_logs),
    )
