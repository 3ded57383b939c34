"""FastAPI web application for lifescore."""

import datetime
from contextlib import asynccontextmanager
from typing import List, Optional, Set
from fastapi import Depends, FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from lifescore.auth.dependencies import get_current_user
from lifescore.database.database import get_db, init_db
from lifescore.database.pillar_repository import PillarRepository
from lifescore.engine.leveling import get_level_info, get_score_tier, get_tier_color
from lifescore.models.cycle import Cycle, CycleAnalytics, CycleGoal, WeeklyTarget, WeeklyUpdate
from lifescore.models.outcome import Direction, Goal, GoalLog, GoalProgress, GoalType, MetricType, Outcome, OutcomeLog
from lifescore.models.report import ReportResult
from lifescore.models.score import DailyScore, LevelInfo, UserPreferences, UserStats
from lifescore.models.task import Completion, CompletionType, FlexibilityRule, Frequency, Importance, Pillar, Task
from lifescore.models.user import User
from lifescore.services import (
    CycleService,
    DailyScoreService,
    GoalService,
    NotFoundError,
    ReportService,
    TaskCompletionService,
    TaskService,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="lifescore API",
    description="Scores your days, levels and twelve-week cycles",
    version="0.1.0",
    lifespan=lifespan,
)


def _http_error(e: ValueError) -> HTTPException:
    """Map a service error to an HTTP error (missing rows are 404, bad input 400)."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# Request / response models
class PillarScoreEntry(BaseModel):
    """One pillar's score within a day."""
    id: str
    name: str
    emoji: str
    color: Optional[str] = None
    weight: float
    score: int


class DailyScoreResponse(BaseModel):
    """Response for a scored day."""
    date: datetime.date
    action_score: int
    score_tier: str
    tier_color: str
    is_passing: bool
    xp_earned: int
    pillar_scores: List[PillarScoreEntry] = Field(default_factory=list)


class CompleteTaskRequest(BaseModel):
    """Request body for completing a task."""
    task_id: str
    date: datetime.date
    value: Optional[float] = None
    completed: Optional[bool] = None


class UndoCompletionRequest(BaseModel):
    """Request body for undoing a completion."""
    task_id: str
    date: datetime.date


class UserStatsResponse(BaseModel):
    """Response for user stats with level details."""
    stats: UserStats
    level_info: LevelInfo


class PillarCreateRequest(BaseModel):
    """Request body for creating a pillar."""
    name: str
    emoji: Optional[str] = None
    color: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0, description="Defaults to an even share of 100")


class PillarUpdateRequest(BaseModel):
    """Request body for a partial pillar update."""
    name: Optional[str] = None
    emoji: Optional[str] = None
    color: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)
    is_archived: Optional[bool] = None


class TaskCreateRequest(BaseModel):
    """Request body for creating a task."""
    name: str
    pillar_id: Optional[str] = None
    completion_type: CompletionType = CompletionType.CHECKBOX
    target: Optional[float] = None
    importance: Importance = Importance.MEDIUM
    base_points: float = 10
    flexibility_rule: Optional[FlexibilityRule] = FlexibilityRule.MUST_TODAY
    limit_value: Optional[float] = None
    frequency: Frequency = Frequency.DAILY
    custom_days: Optional[Set[int]] = None
    is_weekend_task: bool = False


class TaskUpdateRequest(BaseModel):
    """Request body for a partial task update (only fields sent are changed)."""
    name: Optional[str] = None
    pillar_id: Optional[str] = None
    completion_type: Optional[CompletionType] = None
    target: Optional[float] = None
    importance: Optional[Importance] = None
    base_points: Optional[float] = None
    flexibility_rule: Optional[FlexibilityRule] = None
    limit_value: Optional[float] = None
    frequency: Optional[Frequency] = None
    custom_days: Optional[Set[int]] = None
    is_weekend_task: Optional[bool] = None
    is_active: Optional[bool] = None


class DailyScoreHistoryResponse(BaseModel):
    """Stored daily scores (newest first) with the pillars they refer to."""
    scores: List[DailyScore]
    pillars: List[Pillar]


class PreferencesUpdateRequest(BaseModel):
    """Request body for changing pass thresholds."""
    weekday_pass_threshold: Optional[int] = Field(None, ge=0, le=100)
    weekend_pass_threshold: Optional[int] = Field(None, ge=0, le=100)


class OutcomeCreateRequest(BaseModel):
    """Request body for creating an outcome."""
    name: str
    unit: str
    start_value: float
    target_value: float
    direction: Optional[Direction] = None
    pillar_id: Optional[str] = None
    target_date: Optional[datetime.date] = None


class GoalCreateRequest(BaseModel):
    """Request body for creating a goal."""
    title: str
    target_value: float
    start_date: datetime.datetime
    end_date: datetime.datetime
    goal_type: GoalType = GoalType.ACHIEVEMENT
    metric_type: MetricType = MetricType.COUNT


class GoalLogRequest(BaseModel):
    """Request body for logging goal activity."""
    start_time: datetime.datetime
    end_time: Optional[datetime.datetime] = None
    goal_count: Optional[float] = None


class LogOutcomeRequest(BaseModel):
    """Request body for logging an outcome value."""
    value: float
    note: Optional[str] = None
    logged_at: Optional[datetime.datetime] = None


class CreateCycleRequest(BaseModel):
    """Request body for creating a cycle."""
    name: str
    start_date: datetime.date
    end_date: Optional[datetime.date] = None


class CreateCycleGoalRequest(BaseModel):
    """Request body for adding a goal to a cycle."""
    name: str
    target_value: float
    unit: str = ""
    linked_outcome_id: Optional[str] = None


class CycleGoalResponse(BaseModel):
    """Response for a new cycle goal and its generated weekly targets."""
    goal: CycleGoal
    weekly_targets: List[WeeklyTarget]


class WeeklyUpdatesRequest(BaseModel):
    """Request body for weekly reviews."""
    updates: List[WeeklyUpdate]


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/daily-score", response_model=DailyScoreResponse)
def daily_score(
    date: datetime.date = Query(..., description="Day to score (YYYY-MM-DD)"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Score a day from its current completions (nothing is stored)."""
    score = DailyScoreService(db).compute_day(current_user.id, date)
    tier = get_score_tier(score.action_score)
    pillars = PillarRepository(db).get_all(current_user.id)
    return DailyScoreResponse(
        date=score.date,
        action_score=score.action_score,
        score_tier=tier.value,
        tier_color=get_tier_color(tier),
        is_passing=score.is_passing,
        xp_earned=score.xp_earned,
        pillar_scores=[
            PillarScoreEntry(
                id=p.id,
                name=p.name,
                emoji=p.emoji,
                color=p.color,
                weight=p.weight,
                score=score.pillar_scores[p.id],
            )
            for p in pillars
            if p.id in score.pillar_scores
        ],
    )


@app.post("/tasks/complete", response_model=Completion)
def complete_task(
    request: CompleteTaskRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record a task completion for a day."""
    try:
        return TaskCompletionService(db).complete(
            current_user.id, request.task_id, request.date, request.value, request.completed
        )
    except ValueError as e:
        raise _http_error(e)


@app.post("/tasks/complete/undo", response_model=Completion)
def undo_task_completion(
    request: UndoCompletionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Reset a completed task for a day."""
    try:
        return TaskCompletionService(db).undo(current_user.id, request.task_id, request.date)
    except ValueError as e:
        raise _http_error(e)


@app.get("/user-stats", response_model=UserStatsResponse)
def user_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """XP, level and streaks for the current user."""
    stats = DailyScoreService(db).get_stats(current_user.id)
    return UserStatsResponse(stats=stats, level_info=get_level_info(stats.total_xp))


@app.get("/reports", response_model=ReportResult)
def report(
    type: str = Query("weekly", description="weekly or monthly"),
    date: Optional[datetime.date] = Query(None, description="Last day of the period (default today)"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Weekly or monthly report."""
    try:
        return ReportService(db).build(current_user.id, type, date)
    except ValueError as e:
        raise _http_error(e)


@app.get("/goals/{goal_id}/progress", response_model=GoalProgress)
def goal_progress(
    goal_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Current progress of a goal."""
    try:
        return GoalService(db).progress(current_user.id, goal_id)
    except ValueError as e:
        raise _http_error(e)


@app.post("/outcomes/{outcome_id}/log", response_model=OutcomeLog, status_code=status.HTTP_201_CREATED)
def log_outcome(
    outcome_id: str,
    request: LogOutcomeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Log a measured value for an outcome."""
    try:
        return GoalService(db).log_outcome(
            current_user.id, outcome_id, request.value, request.note, request.logged_at
        )
    except ValueError as e:
        raise _http_error(e)


@app.post("/cycles", response_model=Cycle, status_code=status.HTTP_201_CREATED)
def create_cycle(
    request: CreateCycleRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Start a new twelve-week cycle."""
    try:
        return CycleService(db).create_cycle(
            current_user.id, request.name, request.start_date, request.end_date
        )
    except ValueError as e:
        raise _http_error(e)


@app.post("/cycles/{cycle_id}/goals", response_model=CycleGoalResponse, status_code=status.HTTP_201_CREATED)
def add_cycle_goal(
    cycle_id: str,
    request: CreateCycleGoalRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a goal to a cycle (weekly targets are generated)."""
    service = CycleService(db)
    try:
        goal = service.add_goal(
            current_user.id,
            cycle_id,
            request.name,
            request.target_value,
            request.unit,
            request.linked_outcome_id,
        )
    except ValueError as e:
        raise _http_error(e)
    targets = service.cycles.get_weekly_targets(current_user.id, cycle_id, goal.id)
    return CycleGoalResponse(goal=goal, weekly_targets=targets)


@app.put("/cycles/{cycle_id}/weekly", response_model=List[WeeklyTarget])
def submit_weekly_updates(
    cycle_id: str,
    request: WeeklyUpdatesRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Submit weekly actuals/targets; shortfalls are redistributed."""
    try:
        return CycleService(db).submit_weekly_updates(current_user.id, cycle_id, request.updates)
    except ValueError as e:
        raise _http_error(e)


@app.get("/cycles/{cycle_id}/analytics", response_model=CycleAnalytics)
def cycle_analytics(
    cycle_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Pace and projection analytics for a cycle."""
    try:
        return CycleService(db).analytics(current_user.id, cycle_id)
    except ValueError as e:
        raise _http_error(e)


@app.get("/daily-score/history", response_model=DailyScoreHistoryResponse)
def daily_score_history(
    days: int = Query(30, description="How many days back (clamped to 1-365)"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Stored daily scores, newest first."""
    return DailyScoreHistoryResponse(
        scores=DailyScoreService(db).history(current_user.id, days),
        pillars=PillarRepository(db).get_all(current_user.id),
    )


@app.get("/preferences", response_model=UserPreferences)
def get_preferences(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Scoring preferences (defaults until changed)."""
    return DailyScoreService(db).get_preferences(current_user.id)


@app.put("/preferences", response_model=UserPreferences)
def update_preferences(
    request: PreferencesUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change pass thresholds."""
    return DailyScoreService(db).update_preferences(
        current_user.id, request.weekday_pass_threshold, request.weekend_pass_threshold
    )


# Pillars

@app.get("/pillars", response_model=List[Pillar])
def list_pillars(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Non-archived pillars in creation order."""
    return TaskService(db).list_pillars(current_user.id)


@app.post("/pillars", response_model=Pillar, status_code=status.HTTP_201_CREATED)
def create_pillar(
    request: PillarCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a pillar."""
    try:
        return TaskService(db).create_pillar(
            current_user.id, request.name, request.emoji, request.color, request.weight
        )
    except ValueError as e:
        raise _http_error(e)


@app.put("/pillars/{pillar_id}", response_model=Pillar)
def update_pillar(
    pillar_id: str,
    request: PillarUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the fields sent for a pillar."""
    try:
        return TaskService(db).update_pillar(current_user.id, pillar_id, request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise _http_error(e)


@app.delete("/pillars/{pillar_id}")
def archive_pillar(
    pillar_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Archive a pillar (it stops counting toward scores)."""
    try:
        TaskService(db).archive_pillar(current_user.id, pillar_id)
    except ValueError as e:
        raise _http_error(e)
    return {"success": True}


# Tasks

@app.get("/tasks", response_model=List[Task])
def list_tasks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """All tasks, newest first (inactive ones included)."""
    return TaskService(db).list_tasks(current_user.id)


@app.post("/tasks", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    request: TaskCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a task."""
    try:
        return TaskService(db).create_task(current_user.id, request.model_dump())
    except ValueError as e:
        raise _http_error(e)


@app.put("/tasks/{task_id}", response_model=Task)
def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the fields sent for a task."""
    try:
        return TaskService(db).update_task(current_user.id, task_id, request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise _http_error(e)


@app.delete("/tasks/{task_id}")
def delete_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Deactivate a task; its completions stay in reports."""
    try:
        TaskService(db).deactivate_task(current_user.id, task_id)
    except ValueError as e:
        raise _http_error(e)
    return {"success": True}


# Outcomes and goals

@app.get("/outcomes", response_model=List[Outcome])
def list_outcomes(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Non-archived outcomes."""
    return GoalService(db).list_outcomes(current_user.id)


@app.post("/outcomes", response_model=Outcome, status_code=status.HTTP_201_CREATED)
def create_outcome(
    request: OutcomeCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create an outcome."""
    try:
        return GoalService(db).create_outcome(
            current_user.id,
            request.name,
            request.unit,
            request.start_value,
            request.target_value,
            request.direction,
            request.pillar_id,
            request.target_date,
        )
    except ValueError as e:
        raise _http_error(e)


@app.post("/goals", response_model=Goal, status_code=status.HTTP_201_CREATED)
def create_goal(
    request: GoalCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a time or count goal over a window."""
    try:
        return GoalService(db).create_goal(
            current_user.id,
            request.title,
            request.target_value,
            request.start_date,
            request.end_date,
            request.goal_type,
            request.metric_type,
        )
    except ValueError as e:
        raise _http_error(e)


@app.post("/goals/{goal_id}/logs", response_model=GoalLog, status_code=status.HTTP_201_CREATED)
def log_goal_activity(
    goal_id: str,
    request: GoalLogRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record activity toward a goal."""
    try:
        return GoalService(db).log_goal(
            current_user.id, goal_id, request.start_time, request.end_time, request.goal_count
        )
    except ValueError as e:
        raise _http_error(e)
